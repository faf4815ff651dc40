"""Volunteer model."""

from datetime import date
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlmodel import Field, Relationship

from admin_service.infrastructure.database.base_model import BaseModel, RequestSchema

if TYPE_CHECKING:
    from .field import MissionField


class Volunteer(BaseModel, table=True):
    """Volunteer (``volunteer`` resource), attached to a mission field."""

    __tablename__ = "volunteer"

    first_name: str = Field(max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255, unique=True)
    phone: Optional[str] = Field(default=None, max_length=30)
    joined_date: Optional[date] = None
    field_id: Optional[UUID] = Field(default=None, foreign_key="field.id", index=True)

    field: Optional["MissionField"] = Relationship(back_populates="volunteers")


class VolunteerCreate(RequestSchema):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    joined_date: Optional[date] = None
    field_id: Optional[UUID] = None


class VolunteerUpdate(RequestSchema):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=30)
    joined_date: Optional[date] = None
    field_id: Optional[UUID] = None
