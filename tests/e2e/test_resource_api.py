"""
End-to-end tests for the generic resource endpoints.

Requests go through the full middleware stack against an in-memory SQLite
database; data is seeded through the API itself.
"""

from uuid import UUID, uuid4

import pytest
from httpx import AsyncClient
from sqlmodel import select

from admin_service.infrastructure.database.models import Church

pytestmark = pytest.mark.e2e


async def create_church(client: AsyncClient, **overrides) -> dict:
    payload = {"name": "Igreja Central", "description": "Sede"}
    payload.update(overrides)
    response = await client.post("/church", json=payload)
    assert response.status_code == 201, response.text
    return response.json()["data"]


async def create_churches(client: AsyncClient, count: int) -> list[dict]:
    return [await create_church(client, name=f"Igreja {n:02d}") for n in range(count)]


async def fetch_raw(db_manager, id: str) -> Church | None:
    """Read a row directly, ignoring the soft-delete convention."""
    async with db_manager.session() as session:
        result = await session.execute(select(Church).where(Church.id == UUID(id)))
        return result.scalars().first()


class TestEnvelope:
    async def test_create_envelope(self, async_client):
        response = await async_client.post("/church", json={"name": "Igreja Central"})

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Igreja criada com sucesso!"
        assert body["timestamp"]
        data = body["data"]
        assert data["name"] == "Igreja Central"
        assert "createdAt" in data
        assert "created_at" not in data
        assert "deleted" not in data

    async def test_camel_case_request_body(self, async_client):
        field = (
            await async_client.post(
                "/field",
                json={
                    "continent": "América",
                    "country": "Brasil",
                    "state": "Rio de Janeiro",
                    "abbreviation": "AMEBRRJ01",
                    "designation": "Rio de Janeiro",
                },
            )
        ).json()["data"]

        church = await create_church(async_client, fieldId=field["id"])

        assert church["fieldId"] == field["id"]
        assert church["field"]["abbreviation"] == "AMEBRRJ01"

    async def test_listing_message_and_headers(self, async_client):
        await create_churches(async_client, 3)

        response = await async_client.get("/church")

        assert response.status_code == 200
        assert response.json()["message"] == "Igrejas recuperadas com sucesso!"
        assert response.headers["X-Total-Count"] == "3"
        assert response.headers["X-Total-Pages"] == "1"

    async def test_request_id_header(self, async_client):
        response = await async_client.get("/church")

        assert response.headers.get("X-Request-ID")


class TestPagination:
    async def test_default_page_size(self, async_client):
        await create_churches(async_client, 25)

        response = await async_client.get("/church")

        assert len(response.json()["data"]) == 20
        assert response.headers["X-Total-Count"] == "25"
        assert response.headers["X-Total-Pages"] == "2"

    async def test_second_page(self, async_client):
        await create_churches(async_client, 25)

        response = await async_client.get("/church", params={"page": "2"})

        assert len(response.json()["data"]) == 5
        assert response.headers["X-Total-Count"] == "25"

    async def test_empty_listing(self, async_client):
        response = await async_client.get("/volunteer")

        assert response.json()["data"] == []
        assert response.headers["X-Total-Count"] == "0"
        assert response.headers["X-Total-Pages"] == "0"

    async def test_malformed_params_fall_back(self, async_client):
        await create_churches(async_client, 3)

        response = await async_client.get(
            "/church",
            params={"page": "abc", "itemsPerPage": "-4", "orderValue": "sideways"},
        )

        assert response.status_code == 200
        assert len(response.json()["data"]) == 3

    async def test_order_by_camel_case_key(self, async_client):
        await create_churches(async_client, 3)

        response = await async_client.get(
            "/church",
            params={"orderKey": "name", "orderValue": "asc", "itemsPerPage": "2"},
        )

        assert [c["name"] for c in response.json()["data"]] == ["Igreja 00", "Igreja 01"]
        assert response.headers["X-Total-Pages"] == "2"


class TestLifecycle:
    async def test_delete_restore_hard_remove(self, async_client, db_manager):
        church = await create_church(async_client)
        id = church["id"]

        # Soft delete: row kept with a timestamp, invisible to default reads
        response = await async_client.delete(f"/church/{id}")
        assert response.status_code == 200
        assert response.json()["message"] == "Igreja removida com sucesso!"

        raw = await fetch_raw(db_manager, id)
        assert raw is not None
        assert raw.deleted is not None
        assert (await async_client.get(f"/church/{id}")).status_code == 404

        listing = await async_client.get("/church", params={"deleted": "true"})
        assert listing.headers["X-Total-Count"] == "1"
        assert listing.json()["data"][0]["deleted"] is not None

        # Restore: visible again with the same identity and values
        response = await async_client.put("/church/restore", json={"ids": [id]})
        assert response.status_code == 200
        assert response.json()["data"] == {"count": 1}
        assert response.json()["message"] == "Igrejas restauradas com sucesso!"

        restored = (await async_client.get(f"/church/{id}")).json()["data"]
        assert restored["id"] == id
        assert restored["createdAt"] == church["createdAt"]
        assert restored["name"] == church["name"]

        # Hard remove: row physically gone
        response = await async_client.request("DELETE", "/church/hard-remove", json={"ids": [id]})
        assert response.status_code == 200
        assert response.json()["data"] == {"count": 1}
        assert await fetch_raw(db_manager, id) is None

    async def test_restore_is_idempotent(self, async_client):
        church = await create_church(async_client)
        await async_client.delete(f"/church/{church['id']}")

        first = await async_client.put("/church/restore", json={"ids": [church["id"]]})
        second = await async_client.put("/church/restore", json={"ids": [church["id"]]})

        assert first.status_code == second.status_code == 200
        assert (await async_client.get(f"/church/{church['id']}")).status_code == 200

    async def test_hard_remove_twice_affects_nothing(self, async_client):
        church = await create_church(async_client)
        await async_client.request("DELETE", "/church/hard-remove", json={"ids": [church["id"]]})

        response = await async_client.request("DELETE", "/church/hard-remove", json={"ids": [church["id"]]})

        assert response.status_code == 200
        assert response.json()["data"] == {"count": 0}

    async def test_update(self, async_client):
        church = await create_church(async_client, name="Antiga")

        response = await async_client.put(f"/church/{church['id']}", json={"name": "Nova"})

        assert response.status_code == 200
        assert response.json()["message"] == "Igreja atualizada com sucesso!"
        assert response.json()["data"]["name"] == "Nova"
        assert response.json()["data"]["description"] == church["description"]


class TestErrors:
    async def test_not_found(self, async_client):
        response = await async_client.get(f"/church/{uuid4()}")

        assert response.status_code == 404
        error = response.json()["error"]
        assert error["code"] == "NOT_FOUND"
        assert error["message"] == "A igreja não foi encontrada."
        assert response.json()["request_id"]

    async def test_update_missing(self, async_client):
        response = await async_client.put(f"/volunteer/{uuid4()}", json={"firstName": "Ana"})

        assert response.status_code == 404
        assert response.json()["error"]["message"] == "O voluntário não foi encontrado."

    async def test_conflict(self, async_client):
        payload = {"firstName": "Ana", "lastName": "Souza", "email": "ana@example.com"}
        assert (await async_client.post("/volunteer", json=payload)).status_code == 201

        response = await async_client.post("/volunteer", json=payload)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_RESOURCE"
        assert response.json()["error"]["message"] == "O voluntário já está sendo utilizado."

    async def test_null_on_required_field(self, async_client):
        church = await create_church(async_client, name="Sede")

        response = await async_client.put(f"/church/{church['id']}", json={"name": None})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert error["message"] == "A igreja possui dados inválidos."
        assert error["context"]["fields"] == ["name"]
        assert (await async_client.get(f"/church/{church['id']}")).json()["data"]["name"] == "Sede"

    @pytest.mark.parametrize("name", ["../outside.txt", "/etc/passwd", "..", "dir\\file.txt"])
    async def test_file_name_with_path_components(self, async_client, name):
        payload = {"name": name, "originalName": "foto.png", "mimetype": "image/png", "size": 10}

        response = await async_client.post("/file", json=payload)

        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    async def test_validation_error(self, async_client):
        response = await async_client.post("/church", json={"description": "sem nome"})

        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert any(detail["field"].endswith("name") for detail in error["details"])

    async def test_invalid_id(self, async_client):
        response = await async_client.get("/church/not-a-uuid")

        assert response.status_code == 422

    @pytest.mark.parametrize("path", ["/church/restore", "/church/hard-remove"])
    async def test_bulk_requires_ids(self, async_client, path):
        method = "PUT" if path.endswith("restore") else "DELETE"

        response = await async_client.request(method, path, json={"ids": []})

        assert response.status_code == 422


class TestHealth:
    async def test_liveness(self, async_client):
        response = await async_client.get("/health/live")

        assert response.status_code == 200
        assert response.json()["status"] == "alive"

    async def test_readiness_without_redis_is_degraded(self, async_client):
        response = await async_client.get("/health/ready")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "degraded"
        assert {c["name"] for c in body["components"]} == {"database", "redis"}
