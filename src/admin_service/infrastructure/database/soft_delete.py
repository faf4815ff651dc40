# src/admin_service/infrastructure/database/soft_delete.py
"""
Soft-delete rewriting for every operation issued through the store.

``rewrite`` is a pure function turning an ``Operation`` into the operation
that honors the ``deleted`` convention:

- find_unique / find_first: collapse to find_first and add ``deleted IS NULL``
  unless the filter already names ``deleted``
- find_many / count: same visibility filter, created when absent
- delete: becomes an update setting ``deleted`` to now
- delete_many: becomes an update_many; the timestamp is merged into any
  data the caller passed
- create / update / update_many: untouched

Operations flagged ``run_in_transaction`` are returned untouched; that is the
only way to read deleted rows, restore them or physically erase them.

``SoftDeleteStore`` wraps a ``StorageAdapter`` and applies ``rewrite`` to
every call, so resource services never repeat the logic.
"""
from datetime import datetime
from typing import Any, Callable, Sequence

from admin_service.infrastructure.database.base_model import utcnow
from admin_service.infrastructure.database.store import (
    Action,
    Operation,
    StorageAdapter,
    has_condition_on,
)

DELETED_FIELD = "deleted"

_VISIBILITY_ACTIONS = frozenset({Action.FIND_UNIQUE, Action.FIND_FIRST, Action.FIND_MANY, Action.COUNT})


def with_visibility_filter(where: dict[str, Any] | None) -> dict[str, Any]:
    """Return ``where`` plus ``deleted IS NULL`` unless it already names ``deleted``."""
    where = dict(where or {})
    if not has_condition_on(where, DELETED_FIELD):
        where[DELETED_FIELD] = None
    return where


def rewrite(operation: Operation, now: Callable[[], datetime] = utcnow) -> Operation:
    """Rewrite one operation according to the soft-delete rules."""
    if operation.run_in_transaction:
        return operation

    action = operation.action

    if action in _VISIBILITY_ACTIONS:
        if action is Action.FIND_UNIQUE:
            action = Action.FIND_FIRST
        return operation.replace(action=action, where=with_visibility_filter(operation.where))

    if action is Action.DELETE:
        return operation.replace(action=Action.UPDATE, data={DELETED_FIELD: now()})

    if action is Action.DELETE_MANY:
        data = dict(operation.data or {})
        data[DELETED_FIELD] = now()
        return operation.replace(action=Action.UPDATE_MANY, data=data)

    return operation


class SoftDeleteStore:
    """
    Decorator around ``StorageAdapter`` applying ``rewrite`` to every call.

    Exposes the same surface as the adapter (``execute``, ``read``, ``write``,
    ``count``, ``transaction``) and adds no I/O or error handling of its own.

    Example:
        store = SoftDeleteStore(StorageAdapter(session))
        await store.execute(Operation(Church, Action.DELETE, where={"id": church_id}))
        # row kept, church.deleted set to now

        # literal execution, deleted rows reachable
        [row] = await store.transaction(
            [Operation(Church, Action.FIND_FIRST, where={"id": church_id})],
            run_in_transaction=True,
        )
    """

    def __init__(self, adapter: StorageAdapter, now: Callable[[], datetime] = utcnow):
        self.adapter = adapter
        self._now = now

    @property
    def session(self):
        return self.adapter.session

    def rewrite(self, operation: Operation) -> Operation:
        return rewrite(operation, now=self._now)

    async def execute(self, operation: Operation) -> Any:
        return await self.adapter.execute(self.rewrite(operation))

    async def read(self, operation: Operation) -> Any:
        return await self.adapter.read(self.rewrite(operation))

    async def write(self, operation: Operation) -> Any:
        return await self.adapter.write(self.rewrite(operation))

    async def count(self, operation: Operation) -> int:
        return await self.adapter.count(self.rewrite(operation))

    async def transaction(
        self,
        operations: Sequence[Operation],
        run_in_transaction: bool = False,
    ) -> list[Any]:
        if not run_in_transaction:
            operations = [self.rewrite(operation) for operation in operations]
        return await self.adapter.transaction(operations, run_in_transaction=run_in_transaction)
