"""Event service: validate, derive, persist.

Every write runs the same three steps in order on a single record:
domain validation, flag derivation, then a single store save.
"""

from __future__ import annotations

from typing import Any

import structlog

from events_api.domain.events import EventRecord, derive_status_flags
from events_api.domain.paging import Page, PageRequest
from events_api.domain.validation import validate_event
from events_api.models import Account
from events_api.services.error_codes import ErrorCode
from events_api.services.exceptions import (
    EventValidationError,
    NotFoundError,
    PermissionDeniedError,
)
from events_api.stores.interfaces import EventStore

logger = structlog.get_logger(__name__)


def can_manage(account: Account | None, record: EventRecord) -> bool:
    if account is None:
        return False
    return record.manager_id is not None and record.manager_id == account.id


def _require_manager(account: Account, record: EventRecord) -> None:
    if not can_manage(account, record):
        raise PermissionDeniedError(
            ErrorCode.NOT_EVENT_MANAGER.value, "not manager of this event"
        )


class EventService:
    """Event catalog operations over an injected EventStore."""

    def __init__(self, store: EventStore) -> None:
        self._store = store

    def _validated(self, candidate: EventRecord) -> EventRecord:
        errors = validate_event(candidate)
        if errors:
            logger.info(
                "event_rejected",
                event_id=candidate.id,
                codes=[e.code for e in errors],
            )
            raise EventValidationError(errors)
        return derive_status_flags(candidate)

    def create_event(self, fields: dict[str, Any], manager: Account | None) -> EventRecord:
        """Create a DRAFT event from client-settable ``fields``.

        Raises:
            EventValidationError: If a domain rule is violated.
        """
        candidate = EventRecord.from_client_fields(
            fields, manager_id=manager.id if manager is not None else None
        )
        saved = self._store.save(self._validated(candidate))
        logger.info("event_created", event_id=saved.id, manager_id=saved.manager_id)
        return saved

    def get_event(self, event_id: int) -> EventRecord:
        record = self._store.get(event_id)
        if record is None:
            raise NotFoundError(ErrorCode.EVENT_NOT_FOUND.value, "event not found")
        return record

    def list_events(self, request: PageRequest) -> Page[EventRecord]:
        return self._store.page(request)

    def update_event(
        self, event_id: int, fields: dict[str, Any], account: Account
    ) -> EventRecord:
        """Replace every client-settable field of an existing event.

        Raises:
            NotFoundError: If the event does not exist.
            PermissionDeniedError: If ``account`` does not manage the event.
            EventValidationError: If a domain rule is violated.
        """
        existing = self.get_event(event_id)
        _require_manager(account, existing)

        candidate = existing.replace_client_fields(fields)
        saved = self._store.save(self._validated(candidate))
        logger.info("event_updated", event_id=saved.id)
        return saved
