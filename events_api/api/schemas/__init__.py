from events_api.api.schemas.events import EventIn, EventOut

__all__ = [
    "EventIn",
    "EventOut",
]
