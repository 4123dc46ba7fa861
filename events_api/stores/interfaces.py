"""Store interfaces (repository pattern).

Stores are swappable and speak domain records, never ORM rows.
"""

from abc import ABC, abstractmethod

from events_api.domain.events import EventRecord
from events_api.domain.paging import Page, PageRequest

# Wire property name -> EventRecord attribute, for sorting.
SORTABLE_PROPERTIES = {
    "id": "id",
    "name": "name",
    "description": "description",
    "beginEnrollmentDateTime": "begin_enrollment_at",
    "closeEnrollmentDateTime": "close_enrollment_at",
    "beginEventDateTime": "begin_event_at",
    "endEventDateTime": "end_event_at",
    "location": "location",
    "basePrice": "base_price",
    "maxPrice": "max_price",
    "limitOfEnrollment": "limit_of_enrollment",
    "free": "free",
    "offline": "offline",
    "eventStatus": "status",
}


class EventStore(ABC):
    """Interface for event persistence operations."""

    @abstractmethod
    def save(self, record: EventRecord) -> EventRecord:
        """Insert a new record or replace an existing one; return it with its id."""
        ...

    @abstractmethod
    def get(self, event_id: int) -> EventRecord | None:
        """Return an event by id, or None if not found."""
        ...

    @abstractmethod
    def page(self, request: PageRequest) -> Page[EventRecord]:
        """Return one page of events ordered by ``request.sort``."""
        ...
