"""
End-to-end tests for the response cache and the persisted request log.
"""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlmodel import select

from admin_service.infrastructure.database.models import Log

pytestmark = pytest.mark.e2e


@pytest.fixture
async def scan_client(scan_strategy, app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Client whose middleware stack is built under the ``scan`` strategy."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


async def create_church(client: AsyncClient, name: str = "Igreja Central") -> dict:
    response = await client.post("/church", json={"name": name})
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def assert_update_visible(client: AsyncClient) -> None:
    church = await create_church(client, name="Antiga")

    first = await client.get("/church", params={"page": "1"})
    cached = await client.get("/church", params={"page": "1"})
    assert first.headers["X-Cache"] == "MISS"
    assert cached.headers["X-Cache"] == "HIT"
    assert cached.json() == first.json()
    assert cached.headers["X-Total-Count"] == "1"

    response = await client.put(f"/church/{church['id']}", json={"name": "Nova"})
    assert response.status_code == 200

    fresh = await client.get("/church", params={"page": "1"})
    assert fresh.headers["X-Cache"] == "MISS"
    assert fresh.json()["data"][0]["name"] == "Nova"


class TestResponseCache:
    async def test_update_invalidates_listing(self, async_client):
        await assert_update_visible(async_client)

    async def test_update_invalidates_listing_with_key_scan(self, scan_client, memory_cache):
        await assert_update_visible(scan_client)

        assert "/church?page=1" in await memory_cache.keys("*")

    async def test_query_order_shares_key(self, async_client):
        await create_church(async_client)

        await async_client.get("/church", params=[("page", "1"), ("itemsPerPage", "5")])
        response = await async_client.get("/church", params=[("itemsPerPage", "5"), ("page", "1")])

        assert response.headers["X-Cache"] == "HIT"

    async def test_other_family_unaffected(self, async_client):
        await async_client.post("/testimonial", json={"name": "Ana", "text": "Amém"})
        await async_client.get("/testimonial")

        await create_church(async_client)
        response = await async_client.get("/testimonial")

        assert response.headers["X-Cache"] == "HIT"

    async def test_failed_mutation_keeps_cache(self, async_client):
        await create_church(async_client)
        await async_client.get("/church")

        response = await async_client.post("/church", json={})
        assert response.status_code == 422

        assert (await async_client.get("/church")).headers["X-Cache"] == "HIT"

    async def test_errors_are_not_cached(self, async_client):
        path = "/church/00000000-0000-4000-8000-000000000000"

        await async_client.get(path)
        response = await async_client.get(path)

        assert response.status_code == 404
        assert response.headers.get("X-Cache") is None

    async def test_health_is_not_cached(self, async_client):
        await async_client.get("/health/live")
        response = await async_client.get("/health/live")

        assert "X-Cache" not in response.headers


class TestRequestLog:
    async def test_mutation_is_persisted_with_masked_body(self, async_client, db_manager):
        response = await async_client.post(
            "/church?source=admin",
            json={"name": "Igreja Central", "password": "segredo"},
        )
        assert response.status_code == 201

        async with db_manager.session() as session:
            logs = (await session.execute(select(Log))).scalars().all()

        assert len(logs) == 1
        log = logs[0]
        assert log.method == "POST"
        assert log.url == "/church"
        assert log.query == "source=admin"
        assert log.status_code == "201"
        assert log.body == {"name": "Igreja Central", "password": "***"}
        assert log.deleted is None

    async def test_reads_are_not_persisted(self, async_client, db_manager):
        await async_client.get("/church")

        async with db_manager.session() as session:
            logs = (await session.execute(select(Log))).scalars().all()

        assert logs == []

    async def test_failed_mutation_is_persisted(self, async_client, db_manager):
        await async_client.post("/church", json={})

        async with db_manager.session() as session:
            [log] = (await session.execute(select(Log))).scalars().all()

        assert log.status_code == "422"
