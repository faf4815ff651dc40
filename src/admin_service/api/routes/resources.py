# src/admin_service/api/routes/resources.py
"""
Generic resource routes.

``build_resource_router`` produces the same seven endpoints for every
registered entity kind:

    POST   /                 create
    GET    /                 paginated listing (X-Total-Count, X-Total-Pages)
    GET    /{id}             find one
    PUT    /restore          restore soft-deleted rows ({"ids": [...]})
    DELETE /hard-remove      physically delete rows ({"ids": [...]})
    PUT    /{id}             update
    DELETE /{id}             soft delete

The literal paths are registered before the ``/{id}`` ones.
"""
from uuid import UUID

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from admin_service.api.dependencies import DbSession, Pagination
from admin_service.api.responses import envelope_response
from admin_service.api.schemas.pagination import BulkIdsRequest
from admin_service.domain import messages
from admin_service.infrastructure.database.registry import ENTITY_REGISTRY, EntityKind
from admin_service.services.resource import build_service


def build_resource_router(kind: EntityKind) -> APIRouter:
    """Router for one entity kind, mounted at ``/<kind.name>``."""
    resource = kind.name
    router = APIRouter(prefix=f"/{resource}", tags=[kind.label.plural])
    CreateSchema = kind.create_schema
    UpdateSchema = kind.update_schema

    @router.post("", status_code=status.HTTP_201_CREATED, summary=f"Create {resource}")
    async def create(body: CreateSchema, session: DbSession) -> JSONResponse:
        record = await build_service(resource, session).create(body.model_dump())
        return envelope_response(
            messages.for_handler(resource, "create"),
            record,
            status_code=status.HTTP_201_CREATED,
        )

    @router.get("", summary=f"List {resource}")
    async def find_all(params: Pagination, session: DbSession) -> JSONResponse:
        page = await build_service(resource, session).find_all(params)
        return envelope_response(
            messages.for_handler(resource, "find_all"),
            page.data,
            total_count=page.total_count,
            total_pages=page.total_pages,
        )

    @router.put("/restore", summary=f"Restore deleted {resource}")
    async def restore(body: BulkIdsRequest, session: DbSession) -> JSONResponse:
        result = await build_service(resource, session).restore(body.ids)
        return envelope_response(messages.for_handler(resource, "restore"), result)

    @router.delete("/hard-remove", summary=f"Permanently delete {resource}")
    async def hard_remove(body: BulkIdsRequest, session: DbSession) -> JSONResponse:
        result = await build_service(resource, session).hard_remove(body.ids)
        return envelope_response(messages.for_handler(resource, "hard_remove"), result)

    @router.get("/{id}", summary=f"Get {resource}")
    async def find_one(id: UUID, session: DbSession) -> JSONResponse:
        record = await build_service(resource, session).find_one(id)
        return envelope_response(messages.for_handler(resource, "find_one"), record)

    @router.put("/{id}", summary=f"Update {resource}")
    async def update(id: UUID, body: UpdateSchema, session: DbSession) -> JSONResponse:
        record = await build_service(resource, session).update(id, body.model_dump(exclude_unset=True))
        return envelope_response(messages.for_handler(resource, "update"), record)

    @router.delete("/{id}", summary=f"Delete {resource}")
    async def remove(id: UUID, session: DbSession) -> JSONResponse:
        record = await build_service(resource, session).remove(id)
        return envelope_response(messages.for_handler(resource, "remove"), record)

    return router


def build_resource_routers() -> list[APIRouter]:
    return [build_resource_router(kind) for kind in ENTITY_REGISTRY.values()]
