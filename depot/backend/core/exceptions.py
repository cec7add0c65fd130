"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
An absent notification is never an error: lookups return None and
deletes are no-ops, so there is no not-found exception here.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ValidationError(ApplicationError):
    """
    Raised when event content fails validation.

    Reserved for the service's validation hook, which currently accepts
    every event.
    """

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class StoreUnavailableError(ApplicationError):
    """
    Raised when the notification store cannot be reached or a read/write fails.

    Recoverable: writes are idempotent upserts keyed by event id, so the
    caller may retry the same request.
    """

    def __init__(self, message: str = "Notification store unavailable") -> None:
        super().__init__(message, code="SYS_STORE_UNAVAILABLE")
