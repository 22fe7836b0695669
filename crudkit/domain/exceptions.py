"""Domain exceptions for crudkit.

Every failure a request can end in, other than an unhandled fault, is one
of these classes. They are independent of infrastructure concerns; the
presentation layer maps them to HTTP responses in exception handlers.
"""

from typing import Any


class CrudKitException(Exception):
    """Base exception for all crudkit application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
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


class ValidationException(CrudKitException):
    """Raised when input validation fails (e.g. invalid format or range)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class BusinessRuleException(CrudKitException):
    """Raised when an operation violates a domain rule (e.g. duplicate email).

    Carries the status the translation boundary should answer with.
    """

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize with a caller-facing message and suggested status.

        Args:
            message: Message returned to the caller as-is.
            status_code: HTTP status for the response (default 400).
            details: Optional extra context (logged, not returned).
        """
        self.status_code = status_code
        super().__init__(message, "BUSINESS_RULE_VIOLATION", details)


class ResourceNotFoundException(CrudKitException):
    """Raised when a requested resource is not found."""

    def __init__(self, resource_type: str, resource_id: Any) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'User').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": str(resource_id)},
        )


class PersistenceException(CrudKitException):
    """Raised when the relational store fails (unreachable, constraint, corruption).

    The original driver error is chained as __cause__. The message is for logs;
    the boundary never returns it to callers.
    """

    def __init__(self, operation: str, reason: str) -> None:
        super().__init__(
            f"Persistence failure during {operation}: {reason}",
            "PERSISTENCE_ERROR",
            {"operation": operation},
        )


class CacheException(CrudKitException):
    """Cache backend failure. Logged and degraded to a miss inside the cache layer."""

    def __init__(self, operation: str, key: str, reason: str) -> None:
        super().__init__(
            f"Cache {operation} failed for key {key}: {reason}",
            "CACHE_ERROR",
            {"operation": operation, "key": key},
        )
