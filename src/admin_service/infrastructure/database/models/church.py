"""Church model."""

from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlmodel import Field, Relationship

from admin_service.infrastructure.database.base_model import BaseModel, RequestSchema

if TYPE_CHECKING:
    from .field import MissionField


class Church(BaseModel, table=True):
    """Church (``church`` resource), owned by a mission field."""

    __tablename__ = "church"

    name: str = Field(max_length=255)
    description: str = Field(default="")
    image: Optional[str] = Field(default=None, max_length=255)
    field_id: Optional[UUID] = Field(default=None, foreign_key="field.id", index=True)

    field: Optional["MissionField"] = Relationship(back_populates="churches")


class ChurchCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=255)
    description: str = ""
    image: Optional[str] = Field(default=None, max_length=255)
    field_id: Optional[UUID] = None


class ChurchUpdate(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    image: Optional[str] = Field(default=None, max_length=255)
    field_id: Optional[UUID] = None
