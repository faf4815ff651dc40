"""Domain errors and user-facing messages."""

from admin_service.domain.exceptions import (
    AppError,
    ValidationError,
    InvalidParameter,
    ResourceError,
    NotFound,
    AlreadyExists,
    DatabaseError,
    CacheError,
)

__all__ = [
    "AppError",
    "ValidationError",
    "InvalidParameter",
    "ResourceError",
    "NotFound",
    "AlreadyExists",
    "DatabaseError",
    "CacheError",
]
