"""Domain representation of an event.

Plain frozen dataclasses with no persistence or HTTP concerns.
SQLAlchemy models are in events_api/models (persistence layer).
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from events_api.models.event import EventStatus

# Fields a client may set on create and on full-replace update.
CLIENT_FIELDS = (
    "name",
    "description",
    "begin_enrollment_at",
    "close_enrollment_at",
    "begin_event_at",
    "end_event_at",
    "location",
    "base_price",
    "max_price",
    "limit_of_enrollment",
)


@dataclass(frozen=True)
class EventRecord:
    """One schedulable, possibly paid, possibly in-person event."""

    name: str | None = None
    description: str | None = None
    begin_enrollment_at: datetime | None = None
    close_enrollment_at: datetime | None = None
    begin_event_at: datetime | None = None
    end_event_at: datetime | None = None
    location: str | None = None
    base_price: int = 0
    max_price: int = 0
    limit_of_enrollment: int = 0
    free: bool = False
    offline: bool = False
    status: EventStatus = EventStatus.DRAFT
    id: int | None = None
    manager_id: int | None = None

    @classmethod
    def from_client_fields(cls, fields: dict, manager_id: int | None = None) -> EventRecord:
        """Build a new, unsaved DRAFT record from client-settable fields only."""
        values = {name: fields[name] for name in CLIENT_FIELDS if name in fields}
        return cls(manager_id=manager_id, **values)

    def replace_client_fields(self, fields: dict) -> EventRecord:
        """Full-replace update: every client field comes from ``fields``.

        System-assigned attributes (id, status, manager) are kept. Flags are
        not recomputed here; callers derive them after validation.
        """
        defaults = EventRecord()
        values = {name: fields.get(name, getattr(defaults, name)) for name in CLIENT_FIELDS}
        return replace(self, **values)

    @property
    def is_new(self) -> bool:
        return self.id is None


def is_free(base_price: int, max_price: int) -> bool:
    return base_price == 0 and max_price == 0


def is_offline(location: str | None) -> bool:
    return location is not None and location.strip() != ""


def derive_status_flags(record: EventRecord) -> EventRecord:
    """Return a copy of ``record`` with ``free`` and ``offline`` recomputed."""
    return replace(
        record,
        free=is_free(record.base_price, record.max_price),
        offline=is_offline(record.location),
    )
