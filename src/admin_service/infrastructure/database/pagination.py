# src/admin_service/infrastructure/database/pagination.py
"""
Paginated listings with a consistent total.

``paginated_query`` builds a bounded, ordered ``find_many`` and an unbounded
``count`` sharing the same visibility filter, runs both in one transaction
and derives the page count:

    page = await paginated_query(store, Church, PaginationParams(page=2))
    page.data, page.total_count, page.total_pages

An empty result has ``total_pages == 0``; a page past the end returns no data
but the real totals.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, NamedTuple, Sequence

from sqlmodel import SQLModel

from admin_service.api.schemas.pagination import DEFAULT_ORDER_KEY, PaginationParams
from admin_service.infrastructure.database.records import exclude_keys as drop_keys
from admin_service.infrastructure.database.soft_delete import DELETED_FIELD, SoftDeleteStore
from admin_service.infrastructure.database.store import Action, Operation, has_condition_on

logger = logging.getLogger(__name__)


class Page(NamedTuple):
    """Result of a paginated query."""
    data: Sequence[Any]
    total_count: int
    total_pages: int


@dataclass(frozen=True)
class PaginatedQueryOptions:
    """
    Per-call listing options.

    Attributes:
        include: Relationship names to eager-load
        exclude_keys: Keys dropped from every returned record (records become dicts)
        where: Extra filter applied to both the data and the count query
    """
    include: tuple[str, ...] = ()
    exclude_keys: tuple[str, ...] = ()
    where: dict[str, Any] | None = None


@dataclass(frozen=True)
class PageWindow:
    """Bounds, ordering and filter derived from pagination parameters."""
    skip: int
    take: int
    where: dict[str, Any] = field(default_factory=dict)
    order_by: tuple[tuple[str, str], ...] = ()
    include_deleted: bool = False


def get_pagination_window(
    model: type[SQLModel],
    params: PaginationParams | None = None,
    where: dict[str, Any] | None = None,
) -> PageWindow:
    """
    Translate pagination parameters into a ``PageWindow``.

    Unknown order keys fall back to ``created_at``. Unless deleted rows were
    requested (or ``where`` already names ``deleted``), the filter carries
    ``deleted IS NULL``.
    """
    params = params or PaginationParams()

    order_key = params.order_key
    if order_key not in model.model_fields:
        logger.debug("Unknown order key %r for %s, using %s", order_key, model.__name__, DEFAULT_ORDER_KEY)
        order_key = DEFAULT_ORDER_KEY

    where = dict(where or {})
    if not params.deleted and not has_condition_on(where, DELETED_FIELD):
        where[DELETED_FIELD] = None

    return PageWindow(
        skip=params.skip,
        take=params.take,
        where=where,
        order_by=((order_key, params.order_value),),
        include_deleted=params.deleted,
    )


def total_pages_for(total_count: int, items_per_page: int) -> int:
    return math.ceil(total_count / items_per_page)


async def paginated_query(
    store: SoftDeleteStore,
    model: type[SQLModel],
    params: PaginationParams | None = None,
    options: PaginatedQueryOptions | None = None,
) -> Page:
    """
    Run a paginated listing of ``model``.

    The data query and the count query are executed in a single transaction
    so both numbers come from the same unit of work. When deleted rows are
    requested, the transaction bypasses soft-delete rewriting.

    Returns:
        Page(data, total_count, total_pages)
    """
    options = options or PaginatedQueryOptions()
    window = get_pagination_window(model, params, options.where)

    find_all = Operation(
        model,
        Action.FIND_MANY,
        where=window.where,
        skip=window.skip,
        take=window.take,
        order_by=window.order_by,
        include=tuple(options.include),
    )
    total = Operation(model, Action.COUNT, where=window.where)

    data, total_count = await store.transaction(
        [find_all, total],
        run_in_transaction=window.include_deleted,
    )

    if options.exclude_keys:
        data = drop_keys(data, options.exclude_keys, include=options.include)

    return Page(
        data=data,
        total_count=total_count,
        total_pages=total_pages_for(total_count, window.take),
    )
