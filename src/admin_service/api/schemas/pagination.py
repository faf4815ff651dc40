"""Pagination schemas for API requests and responses."""

from typing import Any, Generic, Literal, TypeVar
from uuid import UUID

from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_snake

from admin_service.config.settings import get_settings


T = TypeVar("T")

DEFAULT_PAGE = 1
DEFAULT_ORDER_KEY = "created_at"
DEFAULT_ORDER_VALUE = "desc"


def _as_int(value: Any) -> int | None:
    """Coerce a query value to int, ``None`` when it is not a number."""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


class PaginationParams(BaseModel):
    """
    Query parameters for paginated listings.

    Invalid values never raise: non-numeric or non-positive ``page`` and
    ``itemsPerPage`` fall back to their defaults, ``itemsPerPage`` above the
    configured maximum is clamped, and an unknown ``orderValue`` becomes
    ``desc``. Accepts both the camelCase query names and the field names.

    Query Parameters:
        - page: Page number (1-indexed)
        - itemsPerPage: Items per page
        - orderKey: Field to order by (``createdAt`` or ``created_at``)
        - orderValue: ``asc`` or ``desc``
        - deleted: ``true`` to include soft-deleted rows
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    page: int = Field(default=DEFAULT_PAGE, description="Page number (1-indexed)")
    items_per_page: int = Field(
        default_factory=lambda: get_settings().items_per_page,
        alias="itemsPerPage",
        description="Number of items per page",
    )
    order_key: str = Field(default=DEFAULT_ORDER_KEY, alias="orderKey")
    order_value: Literal["asc", "desc"] = Field(default=DEFAULT_ORDER_VALUE, alias="orderValue")
    deleted: bool = Field(default=False, description="Include soft-deleted rows")

    @field_validator("page", mode="before")
    @classmethod
    def normalize_page(cls, v: Any) -> int:
        page = _as_int(v)
        if page is None or page < 1:
            return DEFAULT_PAGE
        return page

    @field_validator("items_per_page", mode="before")
    @classmethod
    def normalize_items_per_page(cls, v: Any) -> int:
        settings = get_settings()
        items = _as_int(v)
        if items is None or items < 1:
            return settings.items_per_page
        return min(items, settings.pagination_max_items_per_page)

    @field_validator("order_key", mode="before")
    @classmethod
    def normalize_order_key(cls, v: Any) -> str:
        if not isinstance(v, str) or not v.strip():
            return DEFAULT_ORDER_KEY
        return to_snake(v.strip())

    @field_validator("order_value", mode="before")
    @classmethod
    def normalize_order_value(cls, v: Any) -> str:
        if isinstance(v, str) and v.strip().lower() in ("asc", "desc"):
            return v.strip().lower()
        return DEFAULT_ORDER_VALUE

    @field_validator("deleted", mode="before")
    @classmethod
    def normalize_deleted(cls, v: Any) -> bool:
        if isinstance(v, bool):
            return v
        return isinstance(v, str) and v.strip().lower() in ("true", "1")

    @property
    def skip(self) -> int:
        """Rows to skip for this page."""
        if self.page == DEFAULT_PAGE:
            return 0
        return (self.page - 1) * self.items_per_page

    @property
    def take(self) -> int:
        """Rows to return for this page (alias for items_per_page)."""
        return self.items_per_page


def pagination_params(
    page: str | None = Query(default=None),
    items_per_page: str | None = Query(default=None, alias="itemsPerPage"),
    order_key: str | None = Query(default=None, alias="orderKey"),
    order_value: str | None = Query(default=None, alias="orderValue"),
    deleted: str | None = Query(default=None),
) -> PaginationParams:
    """
    FastAPI dependency reading raw query strings into ``PaginationParams``.

    Raw strings are accepted so malformed values are normalized instead of
    being rejected with a 422.
    """
    raw = {
        "page": page,
        "itemsPerPage": items_per_page,
        "orderKey": order_key,
        "orderValue": order_value,
        "deleted": deleted,
    }
    return PaginationParams.model_validate({k: v for k, v in raw.items() if v is not None})


class PaginatedResponse(BaseModel, Generic[T]):
    """
    Listing response body.

    Example Response:
        ```json
        {"data": [...], "totalCount": 25, "totalPages": 2}
        ```
    """

    model_config = ConfigDict(populate_by_name=True)

    data: list[T]
    total_count: int = Field(..., ge=0, alias="totalCount")
    total_pages: int = Field(..., ge=0, alias="totalPages")


class BulkIdsRequest(BaseModel):
    """Body of the restore and hard-remove endpoints."""

    ids: list[UUID] = Field(..., min_length=1, description="Entity ids")


class BatchResult(BaseModel):
    """Result of a bulk operation."""

    count: int = Field(..., ge=0, description="Number of affected rows")
