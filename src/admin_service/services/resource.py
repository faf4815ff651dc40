# src/admin_service/services/resource.py
"""
Generic resource service.

One ``ResourceService`` is built per registered entity kind; it runs every
operation through a ``SoftDeleteStore`` so deletes are soft, reads only see
active rows, and only ``restore``/``hard_remove`` reach deleted ones.

Storage errors are translated here:

- no visible row / ``RecordNotFound`` -> ``NotFound`` (404)
- unique-constraint ``IntegrityError`` -> ``AlreadyExists`` (409)
- any other ``IntegrityError``, or ``None`` for a NOT NULL column -> ``ValidationError`` (422)

Results are plain records (dicts) with ``deleted`` stripped, except in
listings that explicitly asked for deleted rows.
"""
from pathlib import Path
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar
from uuid import UUID
from datetime import datetime

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from admin_service.api.schemas.pagination import PaginationParams
from admin_service.config.settings import get_settings
from admin_service.domain.exceptions import AlreadyExists, NotFound, ValidationError
from admin_service.infrastructure.database.base_model import utcnow
from admin_service.infrastructure.database.pagination import Page, PaginatedQueryOptions, paginated_query
from admin_service.infrastructure.database.records import to_record
from admin_service.infrastructure.database.registry import EntityKind, get_entity_kind
from admin_service.infrastructure.database.soft_delete import DELETED_FIELD, SoftDeleteStore
from admin_service.infrastructure.database.store import (
    Action,
    Operation,
    RecordNotFound,
    StorageAdapter,
    is_unique_violation,
    transactional,
)
from admin_service.infrastructure.observability.logging import get_logger

T = TypeVar("T", bound=SQLModel)

logger = get_logger(__name__)


class ResourceService(Generic[T]):
    """
    CRUD plus restore and hard-remove for one entity kind.

    Example:
        service = ResourceService(get_entity_kind("church"), session)
        church = await service.create({"name": "Igreja Central"})
        await service.remove(church["id"])
        await service.find_one(church["id"])        # raises NotFound
        await service.restore([church["id"]])       # {"count": 1}
    """

    def __init__(self, kind: EntityKind, session: AsyncSession, now: Callable[[], datetime] = utcnow):
        self.kind = kind
        self.model: type[T] = kind.model
        self.session = session
        self.store = SoftDeleteStore(StorageAdapter(session), now=now)

    @property
    def resource(self) -> str:
        return self.kind.name

    def _record(self, entity: T, keep_deleted: bool = False) -> dict[str, Any]:
        exclude = () if keep_deleted else (DELETED_FIELD,)
        return to_record(entity, include=self.kind.include, exclude=exclude)

    async def _load_includes(self, entity: T) -> T:
        if self.kind.include:
            await self.session.refresh(entity, attribute_names=list(self.kind.include))
        return entity

    async def _find_visible(self, id: UUID) -> T:
        entity = await self.store.execute(
            Operation(self.model, Action.FIND_UNIQUE, where={"id": id}, include=self.kind.include)
        )
        if entity is None:
            raise NotFound.for_resource(self.resource, id=str(id))
        return entity

    def _integrity_error(self, error: IntegrityError) -> AlreadyExists | ValidationError:
        logger.info("Integrity error", resource=self.resource, error=str(error.orig))
        if is_unique_violation(error):
            return AlreadyExists.for_resource(self.resource)
        return ValidationError.for_resource(self.resource)

    def _reject_nulls(self, data: dict[str, Any]) -> None:
        """Refuse ``None`` for columns declared NOT NULL."""
        columns = self.model.__table__.columns
        fields = sorted(
            key for key, value in data.items()
            if value is None and key in columns and not columns[key].nullable
        )
        if fields:
            raise ValidationError.for_resource(self.resource, fields=fields)

    @transactional
    async def create(self, data: dict[str, Any]) -> dict[str, Any]:
        try:
            entity = await self.store.execute(Operation(self.model, Action.CREATE, data=data))
        except IntegrityError as e:
            raise self._integrity_error(e) from e

        await self._load_includes(entity)
        logger.debug("Resource created", resource=self.resource, id=str(entity.id))
        return self._record(entity)

    async def find_all(self, params: PaginationParams | None = None) -> Page:
        """
        Paginated listing.

        Records keep ``deleted`` only when ``params.deleted`` is set.
        """
        params = params or PaginationParams()
        options = PaginatedQueryOptions(
            include=self.kind.include,
            exclude_keys=() if params.deleted else (DELETED_FIELD,),
        )
        page = await paginated_query(self.store, self.model, params, options)

        if params.deleted:
            page = page._replace(data=[self._record(entity, keep_deleted=True) for entity in page.data])
        return page

    async def find_one(self, id: UUID) -> dict[str, Any]:
        return self._record(await self._find_visible(id))

    @transactional
    async def update(self, id: UUID, data: dict[str, Any]) -> dict[str, Any]:
        self._reject_nulls(data)
        await self._find_visible(id)

        try:
            entity = await self.store.execute(
                Operation(self.model, Action.UPDATE, where={"id": id}, data=data)
            )
        except RecordNotFound as e:
            raise NotFound.for_resource(self.resource, id=str(id)) from e
        except IntegrityError as e:
            raise self._integrity_error(e) from e

        await self._load_includes(entity)
        return self._record(entity)

    @transactional
    async def remove(self, id: UUID) -> dict[str, Any]:
        """Soft-delete one row; it disappears from every default read."""
        await self._find_visible(id)

        try:
            entity = await self.store.execute(Operation(self.model, Action.DELETE, where={"id": id}))
        except RecordNotFound as e:
            raise NotFound.for_resource(self.resource, id=str(id)) from e

        await self._load_includes(entity)
        return self._record(entity)

    @transactional
    async def restore(self, ids: Sequence[UUID]) -> dict[str, int]:
        """Clear ``deleted`` on the named rows."""
        [count] = await self.store.transaction(
            [
                Operation(
                    self.model,
                    Action.UPDATE_MANY,
                    where={"id__in": list(ids)},
                    data={DELETED_FIELD: None},
                )
            ],
            run_in_transaction=True,
        )
        logger.info("Resources restored", resource=self.resource, count=count)
        return {"count": count}

    @transactional
    async def hard_remove(self, ids: Sequence[UUID]) -> dict[str, int]:
        """
        Physically delete the named rows, deleted or not.

        The rows are read and deleted in one bypass transaction; the loaded
        entities are then handed to ``on_hard_removed``.
        """
        where = {"id__in": list(ids)}
        entities, count = await self.store.transaction(
            [
                Operation(self.model, Action.FIND_MANY, where=where),
                Operation(self.model, Action.DELETE_MANY, where=where),
            ],
            run_in_transaction=True,
        )
        logger.info("Resources hard-removed", resource=self.resource, count=count)
        await self.on_hard_removed(entities)
        return {"count": count}

    async def on_hard_removed(self, entities: Iterable[T]) -> None:
        """Hook run after rows are physically deleted."""


class FileService(ResourceService):
    """Removes the stored file of every hard-removed ``file`` row."""

    def __init__(self, kind: EntityKind, session: AsyncSession, files_path: str | None = None, **kwargs: Any):
        super().__init__(kind, session, **kwargs)
        self.files_path = Path(files_path or get_settings().files_path)

    async def on_hard_removed(self, entities: Iterable[SQLModel]) -> None:
        root = self.files_path.resolve()
        for entity in entities:
            path = (root / entity.name).resolve()
            if path.parent != root:
                logger.warning("Refusing to remove file outside files_path", name=entity.name, files_path=str(root))
                continue
            try:
                path.unlink(missing_ok=True)
            except OSError as e:
                logger.error("Failed to remove file", path=str(path), error=str(e))


SERVICE_CLASSES: dict[str, type[ResourceService]] = {
    "file": FileService,
}


def build_service(resource: str, session: AsyncSession) -> ResourceService:
    """Service for a registered resource name."""
    kind = get_entity_kind(resource)
    service_class = SERVICE_CLASSES.get(resource, ResourceService)
    return service_class(kind, session)
