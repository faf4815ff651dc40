"""Standard API response schemas and models."""

from admin_service.api.schemas.base import Envelope
from admin_service.api.schemas.pagination import (
    BatchResult,
    BulkIdsRequest,
    PaginatedResponse,
    PaginationParams,
    pagination_params,
)
from admin_service.api.schemas.errors import (
    ErrorCode,
    ErrorDetail,
    FieldError,
)

__all__ = [
    "Envelope",
    # Pagination schemas
    "PaginationParams",
    "PaginatedResponse",
    "pagination_params",
    "BulkIdsRequest",
    "BatchResult",
    # Error schemas
    "ErrorCode",
    "ErrorDetail",
    "FieldError",
]
