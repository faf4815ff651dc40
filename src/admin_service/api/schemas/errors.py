"""Error response schemas and error codes."""

from enum import Enum
from typing import Any
from pydantic import BaseModel, Field


class ErrorCode(str, Enum):
    """
    Standard error codes for API responses.

    Error codes are categorized by HTTP status code ranges:
    - 4xx: Client errors
    - 5xx: Server errors
    """

    # ===== Validation Errors (400, 422) =====
    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed (422)"""

    INVALID_PARAMETER = "INVALID_PARAMETER"
    """Invalid query parameter or path parameter (400)"""

    # ===== Not Found Errors (404) =====
    NOT_FOUND = "NOT_FOUND"
    """Resource not found (404)"""

    # ===== Conflict Errors (409) =====
    CONFLICT = "CONFLICT"
    """Resource conflict (409)"""

    DUPLICATE_RESOURCE = "DUPLICATE_RESOURCE"
    """Resource already exists (409)"""

    # ===== Server Errors (500) =====
    INTERNAL_ERROR = "INTERNAL_ERROR"
    """Internal server error (500)"""

    DATABASE_ERROR = "DATABASE_ERROR"
    """Database operation failed (500)"""

    # ===== Service Unavailable (503) =====
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    """Service temporarily unavailable (503)"""

    DATABASE_UNAVAILABLE = "DATABASE_UNAVAILABLE"
    """Database unavailable (503)"""


class FieldError(BaseModel):
    """Error information for a single request field."""

    field: str = Field(..., description="Field name or path", examples=["ids", "itemsPerPage"])
    message: str = Field(..., description="Human-readable error message for this field")
    code: str | None = Field(default=None, description="Machine-readable error code")


class ErrorDetail(BaseModel):
    """
    Detailed error information.

    Provides structured error details including:
    - Error code for programmatic handling
    - Human-readable message
    - Optional field-level validation errors
    - Optional additional context
    """

    code: ErrorCode = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: list[FieldError] | None = Field(
        default=None,
        description="Field-level error details (primarily for validation errors)",
    )
    context: dict[str, Any] | None = Field(
        default=None,
        description="Additional error context (e.g., resource name, ids)",
    )

    @classmethod
    def from_validation_error(cls, validation_errors: list[dict[str, Any]]) -> "ErrorDetail":
        """Create ErrorDetail from Pydantic validation errors."""
        field_errors = [
            FieldError(
                field=".".join(str(loc) for loc in err.get("loc", [])),
                message=err.get("msg", "Validation error"),
                code=err.get("type"),
            )
            for err in validation_errors
        ]
        return cls(
            code=ErrorCode.VALIDATION_ERROR,
            message="Request validation failed",
            details=field_errors,
        )
