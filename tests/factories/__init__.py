"""Factory Boy factories for the admin service models."""

from tests.factories.base import AsyncSQLModelFactory
from tests.factories.models import (
    AgendaFactory,
    AnnouncementFactory,
    ChurchFactory,
    FileFactory,
    MissionFieldFactory,
    TestimonialFactory,
    VolunteerFactory,
)

__all__ = [
    "AsyncSQLModelFactory",
    "MissionFieldFactory",
    "ChurchFactory",
    "VolunteerFactory",
    "AnnouncementFactory",
    "AgendaFactory",
    "TestimonialFactory",
    "FileFactory",
]
