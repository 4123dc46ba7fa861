from events_api.services.accounts_service import AccountService
from events_api.services.events_service import EventService, can_manage

__all__ = [
    "AccountService",
    "EventService",
    "can_manage",
]
