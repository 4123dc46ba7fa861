from enum import Enum


class ErrorCode(str, Enum):
    EVENT_NOT_FOUND = "EVENT_NOT_FOUND"
    NOT_EVENT_MANAGER = "NOT_EVENT_MANAGER"
    ACCOUNT_EXISTS = "ACCOUNT_EXISTS"
    BAD_CREDENTIALS = "BAD_CREDENTIALS"
