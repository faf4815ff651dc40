"""
Paginated listings over a real database.

The ``churches`` fixture commits 25 active churches in one mission field.
"""

import pytest

from admin_service.api.schemas.pagination import PaginationParams
from admin_service.infrastructure.database.models import Church
from admin_service.infrastructure.database.pagination import PaginatedQueryOptions, paginated_query
from admin_service.infrastructure.database.soft_delete import SoftDeleteStore
from admin_service.infrastructure.database.store import Action, Operation, StorageAdapter

pytestmark = pytest.mark.integration


@pytest.fixture
def store(db_session) -> SoftDeleteStore:
    return SoftDeleteStore(StorageAdapter(db_session))


async def test_first_page_has_totals(store, churches):
    page = await paginated_query(store, Church)

    assert len(page.data) == 20
    assert page.total_count == 25
    assert page.total_pages == 2


async def test_second_page_has_remainder(store, churches):
    first = await paginated_query(store, Church, PaginationParams(page=1))
    second = await paginated_query(store, Church, PaginationParams(page=2))

    assert len(second.data) == 5
    assert second.total_count == 25
    assert {c.id for c in first.data}.isdisjoint({c.id for c in second.data})


async def test_empty_table(store):
    page = await paginated_query(store, Church)

    assert page.data == []
    assert page.total_count == 0
    assert page.total_pages == 0


async def test_page_past_the_end(store, churches):
    page = await paginated_query(store, Church, PaginationParams(page=10))

    assert page.data == []
    assert page.total_count == 25
    assert page.total_pages == 2


async def test_items_per_page_and_order(store, churches):
    params = PaginationParams.model_validate({"itemsPerPage": "5", "orderKey": "name", "orderValue": "asc"})

    page = await paginated_query(store, Church, params)

    names = [c.name for c in page.data]
    assert names == sorted(c.name for c in churches)[:5]
    assert page.total_pages == 5


async def test_unknown_order_key_falls_back(store, churches):
    page = await paginated_query(store, Church, PaginationParams(order_key="nope"))

    assert page.total_count == 25


async def test_deleted_rows_hidden_unless_requested(store, churches):
    await store.execute(Operation(Church, Action.DELETE, where={"id": churches[0].id}))

    default = await paginated_query(store, Church)
    with_deleted = await paginated_query(store, Church, PaginationParams(deleted=True))

    assert default.total_count == 24
    assert churches[0].id not in {c.id for c in default.data}
    assert with_deleted.total_count == 25


async def test_exclude_keys_and_include(store, churches, mission_field):
    options = PaginatedQueryOptions(include=("field",), exclude_keys=("deleted",))

    page = await paginated_query(store, Church, PaginationParams(items_per_page=3), options)

    assert len(page.data) == 3
    for record in page.data:
        assert "deleted" not in record
        assert record["field"]["id"] == mission_field.id


async def test_extra_where_applies_to_data_and_count(store, churches):
    target = churches[3]
    options = PaginatedQueryOptions(where={"name": target.name})

    page = await paginated_query(store, Church, options=options)

    assert [c.id for c in page.data] == [target.id]
    assert page.total_count == 1
    assert page.total_pages == 1
