"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.

Expected absence (a note or tag that does not exist) is reported through
return values by the store and services. NotFoundError is for callers that
treat absence as a failure, such as a CLI command given a bad id.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class NotFoundError(ApplicationError):
    """Raised when a resource cannot be found."""

    def __init__(self, message: str = "Resource not found") -> None:
        super().__init__(message, code="RES_NOT_FOUND")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ConflictError(ApplicationError):
    """Raised when a uniqueness constraint (id, storage key, tag name) is violated."""

    def __init__(self, message: str = "Resource conflict") -> None:
        super().__init__(message, code="RES_CONFLICT")


class StorageUnavailableError(ApplicationError):
    """Raised when the backing medium cannot be read or written."""

    def __init__(
        self,
        message: str = "Storage unavailable",
        operation: str | None = None,
        target: str | None = None,
    ) -> None:
        self.operation = operation
        self.target = target
        super().__init__(message, code="SYS_STORAGE_UNAVAILABLE")
