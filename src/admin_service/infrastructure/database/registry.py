# src/admin_service/infrastructure/database/registry.py
"""
Explicit registry of entity kinds.

Each ``EntityKind`` ties a resource name (the URL family and message key) to
its table model, its request schemas and the relationships loaded with it.
Routers, services and ``clean_database`` all iterate over ``ENTITY_REGISTRY``;
adding an entity kind means adding one entry here.

Registration order is parent-first; ``clean_database`` deletes in reverse so
foreign keys never block it.
"""
from dataclasses import dataclass
from typing import Iterator

from sqlalchemy import delete as sql_delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import SQLModel

from admin_service.config.settings import get_settings
from admin_service.domain import messages
from admin_service.infrastructure.database.models import (
    Agenda,
    AgendaCreate,
    AgendaUpdate,
    Announcement,
    AnnouncementCreate,
    AnnouncementUpdate,
    Church,
    ChurchCreate,
    ChurchUpdate,
    File,
    FileCreate,
    FileUpdate,
    Log,
    LogCreate,
    LogUpdate,
    MissionField,
    MissionFieldCreate,
    MissionFieldUpdate,
    Testimonial,
    TestimonialCreate,
    TestimonialUpdate,
    Volunteer,
    VolunteerCreate,
    VolunteerUpdate,
)
import logging

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EntityKind:
    """
    One registered entity kind.

    Attributes:
        name: Resource name, used as URL family and message key
        model: SQLModel table class
        create_schema: Request body for create
        update_schema: Request body for update (all fields optional)
        include: Relationships eager-loaded on every read
    """
    name: str
    model: type[SQLModel]
    create_schema: type[SQLModel]
    update_schema: type[SQLModel]
    include: tuple[str, ...] = ()

    @property
    def label(self) -> messages.ResourceLabel:
        return messages.label(self.name)


ENTITY_REGISTRY: dict[str, EntityKind] = {
    kind.name: kind
    for kind in (
        EntityKind("field", MissionField, MissionFieldCreate, MissionFieldUpdate),
        EntityKind("church", Church, ChurchCreate, ChurchUpdate, include=("field",)),
        EntityKind("volunteer", Volunteer, VolunteerCreate, VolunteerUpdate, include=("field",)),
        EntityKind("announcement", Announcement, AnnouncementCreate, AnnouncementUpdate),
        EntityKind("agenda", Agenda, AgendaCreate, AgendaUpdate),
        EntityKind("testimonial", Testimonial, TestimonialCreate, TestimonialUpdate),
        EntityKind("file", File, FileCreate, FileUpdate),
        EntityKind("log", Log, LogCreate, LogUpdate),
    )
}


def get_entity_kind(name: str) -> EntityKind:
    """Look up a registered entity kind, ``KeyError`` when unknown."""
    return ENTITY_REGISTRY[name]


def iter_models() -> Iterator[type[SQLModel]]:
    for kind in ENTITY_REGISTRY.values():
        yield kind.model


async def clean_database(session: AsyncSession) -> dict[str, int]:
    """
    Physically delete every row of every registered table in one transaction.

    Used by tests and local tooling; refuses to run in production.

    Returns:
        Deleted row count per resource name
    """
    if get_settings().is_production:
        raise RuntimeError("clean_database is disabled in production")

    counts: dict[str, int] = {}
    nested = session.in_transaction()
    transaction = session.begin_nested() if nested else session.begin()
    async with transaction:
        for kind in reversed(list(ENTITY_REGISTRY.values())):
            result = await session.execute(sql_delete(kind.model))
            counts[kind.name] = result.rowcount

    logger.info("Database cleaned", extra={"deleted": counts})
    return counts
