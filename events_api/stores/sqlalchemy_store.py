from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from events_api.domain.events import EventRecord
from events_api.domain.paging import Page, PageRequest
from events_api.models import Event
from events_api.stores.interfaces import SORTABLE_PROPERTIES, EventStore

_COLUMNS = (
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
    "free",
    "offline",
    "status",
    "manager_id",
)


def _to_record(row: Event) -> EventRecord:
    return EventRecord(id=row.id, **{name: getattr(row, name) for name in _COLUMNS})


def _apply(row: Event, record: EventRecord) -> None:
    for name in _COLUMNS:
        setattr(row, name, getattr(record, name))


class SqlAlchemyEventStore(EventStore):
    def __init__(self, db: Session) -> None:
        self._db = db

    def save(self, record: EventRecord) -> EventRecord:
        if record.is_new:
            row = Event()
        else:
            row = self._db.get(Event, record.id)
            if row is None:
                row = Event(id=record.id)

        _apply(row, record)
        self._db.add(row)
        try:
            self._db.commit()
        except SQLAlchemyError:
            self._db.rollback()
            raise

        self._db.refresh(row)
        return _to_record(row)

    def get(self, event_id: int) -> EventRecord | None:
        row = self._db.get(Event, event_id)
        return _to_record(row) if row is not None else None

    def page(self, request: PageRequest) -> Page[EventRecord]:
        total = int(self._db.scalar(select(func.count()).select_from(Event)) or 0)

        stmt = select(Event)
        for order in request.sort:
            column = getattr(Event, SORTABLE_PROPERTIES[order.prop])
            stmt = stmt.order_by(column.desc() if order.descending else column.asc())
        # Stable paging when sort keys tie
        stmt = stmt.order_by(Event.id.asc()).offset(request.offset).limit(request.size)

        rows = self._db.scalars(stmt).unique().all()
        return Page(items=[_to_record(r) for r in rows], request=request, total_elements=total)
