from events_api.domain.validation import FieldError


class ServiceError(Exception):
    def __init__(self, code: str, message: str | None = None) -> None:
        self.code = code
        self.message = message or code
        super().__init__(self.message)


class NotFoundError(ServiceError):
    pass


class PermissionDeniedError(ServiceError):
    pass


class AuthenticationError(ServiceError):
    pass


class ConflictError(ServiceError):
    pass


class ValidationError(ServiceError):
    pass


class EventValidationError(ValidationError):
    """Domain rules rejected an event; carries every violation in rule order."""

    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__("EVENT_INVALID", "event violates domain rules")
        self.errors = list(errors)
