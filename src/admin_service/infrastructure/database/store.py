# src/admin_service/infrastructure/database/store.py
"""
Storage adapter: executes typed read/write operations against the database.

Callers describe what they want as an ``Operation`` (entity model, action,
filter, data, bounds, ordering) and hand it to ``StorageAdapter.execute`` or
group several of them with ``StorageAdapter.transaction``. The adapter performs
the operation literally; soft-delete semantics are layered on top by
``SoftDeleteStore`` (see ``soft_delete.py``).

Filters are plain dictionaries using the ``field__operator`` convention:

    {"id": some_uuid}                        # eq
    {"id__in": [a, b]}                       # IN
    {"deleted__is_not_null": True}           # IS NOT NULL
    {"name__ilike": "%igreja%", "deleted": None}

A ``None`` value with the ``eq`` operator renders as ``IS NULL``.
"""
from __future__ import annotations

import dataclasses
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass
from enum import Enum
from functools import wraps
from typing import Any, Sequence

from sqlalchemy import Select, asc, delete as sql_delete, desc, func, select, update as sql_update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlmodel import SQLModel

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """Logical operation kinds understood by the storage adapter."""

    FIND_UNIQUE = "find_unique"
    FIND_FIRST = "find_first"
    FIND_MANY = "find_many"
    CREATE = "create"
    UPDATE = "update"
    UPDATE_MANY = "update_many"
    DELETE = "delete"
    DELETE_MANY = "delete_many"
    COUNT = "count"


READ_ACTIONS = frozenset({Action.FIND_UNIQUE, Action.FIND_FIRST, Action.FIND_MANY})
WRITE_ACTIONS = frozenset(
    {Action.CREATE, Action.UPDATE, Action.UPDATE_MANY, Action.DELETE, Action.DELETE_MANY}
)


@dataclass(frozen=True)
class Operation:
    """
    A single typed store operation.

    Attributes:
        model: SQLModel table class the operation targets
        action: What to do
        where: Filter dictionary (``field__operator`` keys)
        data: Values for create/update actions
        skip: Rows to skip (find_many)
        take: Maximum rows to return (find_many)
        order_by: Sequence of ``(field, "asc" | "desc")`` pairs
        include: Relationship names to eager-load
        run_in_transaction: Execute literally, skipping soft-delete rewriting
    """

    model: type[SQLModel]
    action: Action
    where: dict[str, Any] | None = None
    data: dict[str, Any] | None = None
    skip: int | None = None
    take: int | None = None
    order_by: tuple[tuple[str, str], ...] = ()
    include: tuple[str, ...] = ()
    run_in_transaction: bool = False

    def replace(self, **changes: Any) -> "Operation":
        return dataclasses.replace(self, **changes)


class RecordNotFound(Exception):
    """
    A single-row write matched no row.

    This is a storage-level signal; resource services translate it into the
    domain ``NotFound`` error.
    """

    def __init__(self, model: type[SQLModel], where: dict[str, Any] | None):
        self.model = model
        self.where = where or {}
        super().__init__(f"No {model.__name__} record matches {self.where!r}")


UNIQUE_VIOLATION = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """
    True when ``error`` comes from a unique constraint.

    PostgreSQL drivers expose the SQLSTATE; SQLite only reports it in the
    message. NOT NULL, foreign-key and check violations return False.
    """
    orig = error.orig
    if UNIQUE_VIOLATION in (getattr(orig, "sqlstate", None), getattr(orig, "pgcode", None)):
        return True
    message = str(orig)
    return "UNIQUE constraint failed" in message or "duplicate key value" in message


def split_filter_key(key: str) -> tuple[str, str]:
    """Split ``"field__op"`` into ``("field", "op")``; bare keys mean ``eq``."""
    if "__" in key:
        field_name, operator = key.rsplit("__", 1)
        return field_name, operator
    return key, "eq"


def has_condition_on(where: dict[str, Any] | None, field_name: str) -> bool:
    """True when the filter carries any condition on ``field_name``."""
    if not where:
        return False
    return any(split_filter_key(key)[0] == field_name for key in where)


def build_conditions(model: type[SQLModel], where: dict[str, Any] | None) -> list[Any]:
    """
    Translate a filter dictionary into SQLAlchemy criteria.

    Supported operators: eq, ne, gt, gte, lt, lte, like, ilike, in, not_in,
    is_null, is_not_null. Keys naming unknown fields are ignored.
    """
    conditions = []
    for key, value in (where or {}).items():
        field_name, operator = split_filter_key(key)

        if not hasattr(model, field_name):
            continue

        column = getattr(model, field_name)

        if operator == "eq":
            conditions.append(column.is_(None) if value is None else column == value)
        elif operator == "ne":
            conditions.append(column.is_not(None) if value is None else column != value)
        elif operator == "gt":
            conditions.append(column > value)
        elif operator == "gte":
            conditions.append(column >= value)
        elif operator == "lt":
            conditions.append(column < value)
        elif operator == "lte":
            conditions.append(column <= value)
        elif operator == "like":
            conditions.append(column.like(value))
        elif operator == "ilike":
            conditions.append(column.ilike(value))
        elif operator == "in":
            conditions.append(column.in_(list(value)))
        elif operator == "not_in":
            conditions.append(column.not_in(list(value)))
        elif operator == "is_null":
            conditions.append(column.is_(None) if value else column.is_not(None))
        elif operator == "is_not_null":
            conditions.append(column.is_not(None) if value else column.is_(None))
        else:
            logger.warning("Ignoring unknown filter operator %r on %s", operator, model.__name__)

    return conditions


def transactional(func):
    """
    Commit the owning object's ``session`` after ``func`` succeeds.

    Rolls back and re-raises on any exception.

    Example:
        @transactional
        async def remove(self, id):
            ...
    """
    @wraps(func)
    async def wrapper(self, *args, **kwargs):
        try:
            result = await func(self, *args, **kwargs)
            await self.session.commit()
            return result
        except Exception:
            await self.session.rollback()
            raise
    return wrapper


class StorageAdapter:
    """
    Thin wrapper over an ``AsyncSession`` executing ``Operation`` objects.

    Errors raised by the database (``IntegrityError`` and friends) and
    ``RecordNotFound`` propagate unchanged.

    Example:
        store = StorageAdapter(session)
        church = await store.execute(
            Operation(Church, Action.CREATE, data={"name": "Igreja"})
        )
        rows, total = await store.transaction([
            Operation(Church, Action.FIND_MANY, take=20),
            Operation(Church, Action.COUNT),
        ])
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    async def execute(self, operation: Operation) -> Any:
        """Dispatch an operation to ``read``, ``count`` or ``write``."""
        if operation.action in READ_ACTIONS:
            return await self.read(operation)
        if operation.action is Action.COUNT:
            return await self.count(operation)
        return await self.write(operation)

    def _select(self, operation: Operation) -> Select:
        model = operation.model
        query = select(model).where(*build_conditions(model, operation.where))

        for field_name, direction in operation.order_by:
            column = getattr(model, field_name)
            query = query.order_by(asc(column) if direction == "asc" else desc(column))

        if operation.skip:
            query = query.offset(operation.skip)
        if operation.take is not None:
            query = query.limit(operation.take)

        for relationship in operation.include:
            query = query.options(selectinload(getattr(model, relationship)))

        return query

    async def read(self, operation: Operation) -> Any:
        """Execute a single (``find_unique``/``find_first``) or many read."""
        if operation.action not in READ_ACTIONS:
            raise ValueError(f"{operation.action.value} is not a read action")

        query = self._select(operation)
        logger.debug("read %s %s where=%r", operation.model.__name__, operation.action.value, operation.where)
        result = await self.session.execute(query)
        scalars = result.scalars()

        if operation.action is Action.FIND_MANY:
            return list(scalars.all())
        if operation.action is Action.FIND_UNIQUE:
            return scalars.one_or_none()
        return scalars.first()

    async def count(self, operation: Operation) -> int:
        """Count rows matching the operation's filter."""
        model = operation.model
        query = (
            select(func.count())
            .select_from(model)
            .where(*build_conditions(model, operation.where))
        )
        result = await self.session.execute(query)
        return result.scalar_one()

    async def write(self, operation: Operation) -> Any:
        """
        Execute a write.

        Returns:
            create/update/delete: the affected entity
            update_many/delete_many: number of affected rows
        """
        model = operation.model
        data = operation.data or {}
        action = operation.action
        logger.debug("write %s %s where=%r", model.__name__, action.value, operation.where)

        if action is Action.CREATE:
            entity = model(**data)
            self.session.add(entity)
            await self.session.flush()
            await self.session.refresh(entity)
            return entity

        if action is Action.UPDATE:
            entity = await self._first_or_raise(operation)
            for key, value in data.items():
                setattr(entity, key, value)
            await self.session.flush()
            await self.session.refresh(entity)
            return entity

        if action is Action.UPDATE_MANY:
            if not data:
                return 0
            stmt = (
                sql_update(model)
                .where(*build_conditions(model, operation.where))
                .values(**data)
                .execution_options(synchronize_session="fetch")
            )
            result = await self.session.execute(stmt)
            return result.rowcount

        if action is Action.DELETE:
            entity = await self._first_or_raise(operation)
            await self.session.delete(entity)
            await self.session.flush()
            return entity

        if action is Action.DELETE_MANY:
            stmt = (
                sql_delete(model)
                .where(*build_conditions(model, operation.where))
                .execution_options(synchronize_session="fetch")
            )
            result = await self.session.execute(stmt)
            return result.rowcount

        raise ValueError(f"{action.value} is not a write action")

    async def _first_or_raise(self, operation: Operation) -> SQLModel:
        query = select(operation.model).where(*build_conditions(operation.model, operation.where))
        result = await self.session.execute(query)
        entity = result.scalars().first()
        if entity is None:
            raise RecordNotFound(operation.model, operation.where)
        return entity

    @asynccontextmanager
    async def atomic(self):
        """
        Group statements into one atomic unit.

        Opens a transaction, or a savepoint when the session is already inside
        one. Commits (or releases) on success, rolls back on exception.
        """
        if self.session.in_transaction():
            async with self.session.begin_nested():
                yield
        else:
            async with self.session.begin():
                yield

    async def transaction(
        self,
        operations: Sequence[Operation],
        run_in_transaction: bool = False,
    ) -> list[Any]:
        """
        Execute operations sequentially inside one atomic unit.

        Args:
            operations: Operations to run, in order
            run_in_transaction: Flag every operation to bypass soft-delete
                rewriting (restore and hard-remove paths)

        Returns:
            One result per operation, in order
        """
        results = []
        async with self.atomic():
            for operation in operations:
                if run_in_transaction:
                    operation = operation.replace(run_in_transaction=True)
                results.append(await self.execute(operation))
        return results
