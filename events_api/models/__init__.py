from events_api.models.base import Base
from events_api.models.account import Account, AccountRole
from events_api.models.event import Event, EventStatus

__all__ = ["Base", "Account", "AccountRole", "Event", "EventStatus"]
