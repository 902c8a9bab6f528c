"""Domain exceptions for the monocloud application.

Defines exceptions that represent caller mistakes (bad keys, bad TTLs,
bad credentials). Cache-store faults never surface as exceptions; they
are absorbed by the tiered cache. Presentation layer maps these to HTTP
responses in exception handlers.
"""

from typing import Any


class MonocloudException(Exception):
    """Base exception for all monocloud application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, key).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Return JSON-serializable representation for API responses."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationException(MonocloudException):
    """Raised when input validation fails (e.g. empty text or key)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class InvalidCacheKeyException(ValidationException):
    """Raised when a cache key is missing, empty or not a string."""

    def __init__(self, key: Any) -> None:
        super().__init__(f"Cache key must be a non-empty string, got: {key!r}", field="key")


class InvalidTtlException(ValidationException):
    """Raised when a cache TTL is not a positive number of seconds."""

    def __init__(self, ttl: Any) -> None:
        super().__init__(f"Cache TTL must be a positive number of seconds, got: {ttl!r}", field="ttl")


class AuthenticationException(MonocloudException):
    """Raised when an admin request carries missing or wrong credentials."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")


class AdminNotConfiguredException(MonocloudException):
    """Raised when the admin surface is used but no admin key is configured."""

    def __init__(self) -> None:
        super().__init__(
            "Cache administration is not configured (ADMIN_API_KEY is not set).",
            "ADMIN_NOT_CONFIGURED",
        )


class CacheReadOnlyException(MonocloudException):
    """Raised by the admin surface when a destructive operation hits a read-only store.

    The memory tier has already been cleared when this is raised.
    """

    def __init__(self) -> None:
        super().__init__(
            "Cannot clear Redis cache in read-only mode. Memory cache was cleared.",
            "CACHE_READ_ONLY",
        )
