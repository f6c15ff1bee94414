"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.
Not-found is soft throughout the core: lookups return None and mutations
return an affected-row count of zero, so there is no NotFoundError.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class DeserializationError(ApplicationError):
    """Raised when a stored row is missing a required field or has a malformed timestamp."""

    def __init__(self, message: str = "Stored record could not be deserialized") -> None:
        super().__init__(message, code="DATA_DESERIALIZATION_ERROR")


class StorageUnavailableError(ApplicationError):
    """Raised when the note store is closed or cannot be reached."""

    def __init__(self, message: str = "Storage unavailable") -> None:
        super().__init__(message, code="SYS_STORAGE_UNAVAILABLE")


class ValidationError(ApplicationError):
    """Raised when validation fails."""

    def __init__(self, message: str = "Validation failed", details: dict | None = None) -> None:
        self.details = details or {}
        super().__init__(message, code="VAL_VALIDATION_ERROR")


class ExternalServiceError(ApplicationError):
    """Raised when an external tool cannot be launched."""

    def __init__(self, message: str = "External service error") -> None:
        super().__init__(message, code="SYS_EXTERNAL_SERVICE_ERROR")


class UnsupportedPlatformError(ApplicationError):
    """Raised when a platform-specific integration is used on another platform."""

    def __init__(self, message: str = "Unsupported platform") -> None:
        super().__init__(message, code="SYS_UNSUPPORTED_PLATFORM")
