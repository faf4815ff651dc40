# tests/factories/base.py
"""
Base factory class integrating Factory Boy with SQLModel and async sessions.
"""

from typing import Any

from factory import alchemy
from sqlalchemy.ext.asyncio import AsyncSession


class AsyncSQLModelFactory(alchemy.SQLAlchemyModelFactory):
    """
    Base factory for SQLModel database models with async session support.

    Usage:
        class ChurchFactory(AsyncSQLModelFactory):
            class Meta:
                model = Church

            name = factory.Sequence(lambda n: f"Igreja {n}")

        # In tests:
        async def test_church(db_session):
            church = await ChurchFactory.create_async(session=db_session)
            assert church.deleted is None
    """

    class Meta:
        abstract = True
        sqlalchemy_session = None
        sqlalchemy_session_persistence = "commit"

    @classmethod
    async def create_async(cls, session: AsyncSession, **kwargs: Any):
        """
        Build an instance, add it to ``session`` and commit.

        Usage:
            church = await ChurchFactory.create_async(session=db_session, name="Sede")
        """
        instance = cls.build(**kwargs)

        session.add(instance)
        await session.commit()
        await session.refresh(instance)

        return instance

    @classmethod
    async def create_batch_async(cls, session: AsyncSession, size: int, **kwargs: Any):
        """
        Create ``size`` instances in one commit.

        Usage:
            churches = await ChurchFactory.create_batch_async(session=db_session, size=25)
        """
        instances = []
        for _ in range(size):
            instance = cls.build(**kwargs)
            session.add(instance)
            instances.append(instance)

        await session.commit()

        for instance in instances:
            await session.refresh(instance)

        return instances
