"""Custom application exceptions."""


class AppException(Exception):
    """Base application exception."""

    def __init__(self, message: str):
        """Initialize exception with a user-facing message."""
        self.message = message
        super().__init__(self.message)


class ValidationError(AppException):
    """Malformed input, such as a missing required field."""

    def __init__(self, message: str = "Validation error", fields: list[str] | None = None):
        """Initialize with the offending field names."""
        self.fields = fields or []
        super().__init__(message)


class NotFoundError(AppException):
    """Referenced record is absent from its collection."""

    def __init__(self, message: str = "Resource not found"):
        """Initialize with default message."""
        super().__init__(message)


class InvalidTransitionError(AppException):
    """Status change from a terminal state or to an illegal target."""

    def __init__(
        self,
        message: str = "Invalid status transition",
        current_status: str | None = None,
        target_status: str | None = None,
    ):
        """Initialize with the attempted transition."""
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(message)


class ForbiddenError(AppException):
    """Caller role is not allowed to use the requested view."""

    def __init__(self, message: str = "Forbidden"):
        """Initialize with default message."""
        super().__init__(message)


class StoreError(AppException):
    """Underlying record store read or write failed."""

    def __init__(self, message: str = "Record store failure", key: str | None = None):
        """Initialize with the storage key involved."""
        self.key = key
        super().__init__(message)
