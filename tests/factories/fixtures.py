# tests/factories/fixtures.py
"""
Factory fixtures for pytest integration.

Loaded via ``pytest_plugins`` in conftest.py.
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories.models import ChurchFactory, MissionFieldFactory


@pytest.fixture
async def mission_field(db_session: AsyncSession):
    """A committed mission field."""
    return await MissionFieldFactory.create_async(session=db_session)


@pytest.fixture
async def churches(db_session: AsyncSession, mission_field):
    """25 committed churches in one mission field."""
    return await ChurchFactory.create_batch_async(
        session=db_session,
        size=25,
        field_id=mission_field.id,
    )
