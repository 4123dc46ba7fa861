"""Cross-field domain rules for events.

Runs after structural (schema) validation has accepted the input. Rule
violations are reported, never raised.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from events_api.domain.events import EventRecord

EVENT_OBJECT_NAME = "event"


@dataclass(frozen=True)
class FieldError:
    """A rule violation scoped to a field of the event object."""

    field: str
    code: str
    message: str
    object_name: str = EVENT_OBJECT_NAME


WRONG_PRICE = FieldError(field="basePrice", code="wrongPrice", message="basePrice is wrong")
WRONG_END_EVENT = FieldError(
    field="endEventDateTime", code="wrongValue", message="endEventDateTime is wrong"
)


def _before(value: datetime | None, other: datetime | None) -> bool:
    if value is None or other is None:
        return False
    return value < other


def _check_price(event: EventRecord, errors: list[FieldError]) -> None:
    # max_price == 0 means "no ceiling"
    if event.max_price > 0 and event.base_price > event.max_price:
        errors.append(WRONG_PRICE)


def _check_end_event(event: EventRecord, errors: list[FieldError]) -> None:
    end = event.end_event_at
    if (
        _before(end, event.begin_event_at)
        or _before(end, event.close_enrollment_at)
        or _before(end, event.begin_enrollment_at)
    ):
        errors.append(WRONG_END_EVENT)


_RULES = (_check_price, _check_end_event)


def validate_event(event: EventRecord) -> list[FieldError]:
    """Return the ordered rule violations for ``event``; empty means valid."""
    errors: list[FieldError] = []
    for rule in _RULES:
        rule(event, errors)
    return errors
