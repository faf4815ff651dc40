"""
Tests for the storage adapter against an in-memory SQLite database.

The adapter executes operations literally; no soft-delete rules apply here.
"""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from admin_service.infrastructure.database.models import Church, MissionField
from admin_service.infrastructure.database.store import Action, Operation, RecordNotFound, StorageAdapter
from tests.factories import ChurchFactory, MissionFieldFactory

pytestmark = pytest.mark.integration


@pytest.fixture
def adapter(db_session) -> StorageAdapter:
    return StorageAdapter(db_session)


class TestReads:
    async def test_find_unique_and_first(self, adapter, db_session):
        church = await ChurchFactory.create_async(session=db_session, name="Sede")

        found = await adapter.execute(Operation(Church, Action.FIND_UNIQUE, where={"id": church.id}))
        first = await adapter.execute(Operation(Church, Action.FIND_FIRST, where={"name": "Sede"}))

        assert found.id == church.id
        assert first.id == church.id

    async def test_find_returns_none_when_missing(self, adapter):
        assert await adapter.execute(Operation(Church, Action.FIND_FIRST, where={"id": uuid4()})) is None

    async def test_find_many_bounds_and_order(self, adapter, db_session):
        for name in ("B", "D", "A", "C"):
            await ChurchFactory.create_async(session=db_session, name=name)

        rows = await adapter.execute(
            Operation(Church, Action.FIND_MANY, order_by=(("name", "asc"),), skip=1, take=2)
        )

        assert [row.name for row in rows] == ["B", "C"]

    async def test_filter_operators(self, adapter, db_session):
        churches = [await ChurchFactory.create_async(session=db_session, name=name) for name in ("Sede", "Norte", "Sul")]

        by_in = await adapter.execute(
            Operation(Church, Action.FIND_MANY, where={"id__in": [churches[0].id, churches[2].id]})
        )
        by_like = await adapter.execute(Operation(Church, Action.FIND_MANY, where={"name__like": "S%"}))
        by_ne = await adapter.execute(Operation(Church, Action.COUNT, where={"name__ne": "Sede"}))
        with_unknown_field = await adapter.execute(Operation(Church, Action.COUNT, where={"nope": 1}))

        assert {c.name for c in by_in} == {"Sede", "Sul"}
        assert {c.name for c in by_like} == {"Sede", "Sul"}
        assert by_ne == 2
        assert with_unknown_field == 3

    async def test_include_loads_relationship(self, adapter, db_session):
        field = await MissionFieldFactory.create_async(session=db_session)
        church = await ChurchFactory.create_async(session=db_session, field_id=field.id)
        db_session.expunge_all()

        found = await adapter.execute(
            Operation(Church, Action.FIND_FIRST, where={"id": church.id}, include=("field",))
        )

        assert found.field.id == field.id


class TestWrites:
    async def test_create_returns_entity(self, adapter):
        church = await adapter.execute(Operation(Church, Action.CREATE, data={"name": "Nova"}))

        assert church.id is not None
        assert church.deleted is None
        assert church.created_at is not None

    async def test_update_returns_entity(self, adapter, db_session):
        church = await ChurchFactory.create_async(session=db_session)

        updated = await adapter.execute(
            Operation(Church, Action.UPDATE, where={"id": church.id}, data={"name": "Renomeada"})
        )

        assert updated.name == "Renomeada"

    async def test_update_missing_raises(self, adapter):
        with pytest.raises(RecordNotFound):
            await adapter.execute(Operation(Church, Action.UPDATE, where={"id": uuid4()}, data={"name": "x"}))

    async def test_delete_missing_raises(self, adapter):
        with pytest.raises(RecordNotFound):
            await adapter.execute(Operation(Church, Action.DELETE, where={"id": uuid4()}))

    async def test_update_many_and_delete_many_return_counts(self, adapter, db_session):
        churches = await ChurchFactory.create_batch_async(session=db_session, size=3)
        ids = [c.id for c in churches[:2]]

        updated = await adapter.execute(
            Operation(Church, Action.UPDATE_MANY, where={"id__in": ids}, data={"image": "capa.png"})
        )
        deleted = await adapter.execute(Operation(Church, Action.DELETE_MANY, where={"id__in": ids}))
        remaining = await adapter.execute(Operation(Church, Action.COUNT))

        assert updated == 2
        assert deleted == 2
        assert remaining == 1

    async def test_delete_is_physical(self, adapter, db_session):
        church = await ChurchFactory.create_async(session=db_session)

        await adapter.execute(Operation(Church, Action.DELETE, where={"id": church.id}))

        assert await adapter.execute(Operation(Church, Action.COUNT)) == 0

    async def test_unique_violation_propagates(self, adapter, db_session):
        await MissionFieldFactory.create_async(session=db_session, abbreviation="AMEBRRJ01")

        with pytest.raises(IntegrityError):
            await adapter.execute(
                Operation(
                    MissionField,
                    Action.CREATE,
                    data={
                        "continent": "América",
                        "country": "Brasil",
                        "state": "RJ",
                        "abbreviation": "AMEBRRJ01",
                        "designation": "Rio",
                    },
                )
            )


class TestTransaction:
    async def test_results_in_order(self, adapter, db_session):
        await ChurchFactory.create_batch_async(session=db_session, size=3)

        rows, total = await adapter.transaction(
            [
                Operation(Church, Action.FIND_MANY, take=2),
                Operation(Church, Action.COUNT),
            ]
        )

        assert len(rows) == 2
        assert total == 3

    async def test_rolls_back_on_error(self, adapter, db_session, test_engine):
        church = await ChurchFactory.create_async(session=db_session, name="Original")
        church_id = church.id

        with pytest.raises(RecordNotFound):
            await adapter.transaction(
                [
                    Operation(Church, Action.UPDATE_MANY, where={"id": church_id}, data={"name": "Alterada"}),
                    Operation(Church, Action.DELETE, where={"id": uuid4()}),
                ]
            )
        await db_session.rollback()

        session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
        async with session_factory() as session:
            [found] = await StorageAdapter(session).transaction(
                [Operation(Church, Action.FIND_FIRST, where={"id": church_id})]
            )
            assert found.name == "Original"
