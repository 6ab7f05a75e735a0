"""Exception types raised at the service boundary."""


class HanziSrsError(Exception):
    """Base class for all application errors."""


class ValidationError(HanziSrsError, ValueError):
    """Caller input was rejected before reaching the scheduling core."""


class ReviewValidationError(ValidationError):
    """Review payload had a bad word id or quality value."""


class RangeValidationError(ValidationError):
    """Study range payload was missing, malformed or out of bounds."""


class AuthenticationError(HanziSrsError):
    """An operation that needs a user was called without one."""


class StorageError(HanziSrsError):
    """The storage collaborator failed; nothing was persisted."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"{operation} failed: {message}")
        self.operation = operation
