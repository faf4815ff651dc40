"""
Exception hierarchy for the admin service.

This module provides a structured exception hierarchy that:
- Maps to HTTP status codes
- Includes error codes for programmatic handling
- Supports localized, user-facing messages
- Provides context for error handling and logging

Storage-level failures (``RecordNotFound``, SQLAlchemy ``IntegrityError``)
are raised by the data-access layer unchanged; resource services translate
them into the domain errors defined here.

Usage:
    from admin_service.domain.exceptions import NotFound, AlreadyExists

    raise NotFound.for_resource("church")
    raise AlreadyExists("E-mail already in use", details={"field": "email"})
"""

from typing import Any, Optional
from admin_service.api.schemas.errors import ErrorCode
from admin_service.domain import messages


class AppError(Exception):
    """
    Base exception for all application errors.

    Attributes:
        error_code: Machine-readable error code (from ErrorCode enum)
        status_code: HTTP status code (default: 500)
        message: Human-readable error message
        details: Optional dictionary with additional error context
    """

    error_code: ErrorCode = ErrorCode.INTERNAL_ERROR
    status_code: int = 500
    default_message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"error_code={self.error_code.value}, "
            f"status_code={self.status_code}, "
            f"message={self.message!r}, "
            f"details={self.details!r})"
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        result = {
            "error_code": self.error_code.value,
            "message": self.message,
        }

        if self.details:
            result["details"] = self.details

        return result


# ========================================
# Validation Errors (400, 422)
# ========================================


class ValidationError(AppError):
    """Request validation failed."""

    status_code = 422
    error_code = ErrorCode.VALIDATION_ERROR
    default_message = "Request validation failed"

    @classmethod
    def for_resource(cls, resource: str, **details: Any) -> "ValidationError":
        return cls(messages.invalid(resource), details={"resource": resource, **details})


class InvalidParameter(AppError):
    """Invalid query or path parameter."""

    status_code = 400
    error_code = ErrorCode.INVALID_PARAMETER
    default_message = "Invalid parameter provided"


# ========================================
# Resource Errors (404, 409)
# ========================================


class ResourceError(AppError):
    """Base class for resource-related errors."""

    pass


class NotFound(ResourceError):
    """Resource not found or not visible (soft-deleted)."""

    status_code = 404
    error_code = ErrorCode.NOT_FOUND
    default_message = "Resource not found"

    @classmethod
    def for_resource(cls, resource: str, **details: Any) -> "NotFound":
        return cls(messages.not_found(resource), details={"resource": resource, **details})


class AlreadyExists(ResourceError):
    """Uniqueness constraint violated."""

    status_code = 409
    error_code = ErrorCode.DUPLICATE_RESOURCE
    default_message = "Resource already exists"

    @classmethod
    def for_resource(cls, resource: str, **details: Any) -> "AlreadyExists":
        return cls(messages.conflict(resource), details={"resource": resource, **details})


# ========================================
# Infrastructure Errors
# ========================================


class DatabaseError(AppError):
    """Database operation failed."""

    status_code = 503
    error_code = ErrorCode.DATABASE_UNAVAILABLE
    default_message = "Database operation failed"


class CacheError(AppError):
    """Cache operation failed. Never escalated past the cache layer."""

    status_code = 503
    error_code = ErrorCode.SERVICE_UNAVAILABLE
    default_message = "Cache service error"
