# src/admin_service/infrastructure/database/base_model.py
from datetime import datetime, timezone
from uuid import UUID, uuid4
from pydantic import ConfigDict
from pydantic.alias_generators import to_camel
from sqlalchemy import DateTime
from sqlmodel import SQLModel, Field


def utcnow() -> datetime:
    """Timezone-aware UTC timestamp; every timestamp column is ``timestamptz``."""
    return datetime.now(timezone.utc)


class BaseModel(SQLModel):
    """
    Base for all database models.

    Every entity kind carries an immutable ``id``, store-maintained
    ``created_at``/``updated_at`` timestamps and the soft-delete marker
    ``deleted`` (``None`` while the row is active).

    Example:
        class Church(BaseModel, table=True):
            __tablename__ = "church"
            name: str
    """
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        index=True,
    )
    updated_at: datetime = Field(
        default_factory=utcnow,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"onupdate": utcnow},
    )
    deleted: datetime | None = Field(
        default=None,
        sa_type=DateTime(timezone=True),
        index=True,
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted is not None


class RequestSchema(SQLModel):
    """
    Base for create/update request bodies.

    Accepts camelCase keys (``fieldId``) as well as field names.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
