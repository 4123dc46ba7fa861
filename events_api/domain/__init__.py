from events_api.domain.events import CLIENT_FIELDS, EventRecord, derive_status_flags
from events_api.domain.validation import FieldError, validate_event

__all__ = [
    "CLIENT_FIELDS",
    "EventRecord",
    "derive_status_flags",
    "FieldError",
    "validate_event",
]
