"""
Mission field model.

A field groups the churches and volunteers working in one region. It is the
parent side of the ``church`` and ``volunteer`` relationships.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlmodel import Field, Relationship

from admin_service.infrastructure.database.base_model import BaseModel, RequestSchema

if TYPE_CHECKING:
    from .church import Church
    from .volunteer import Volunteer


class MissionField(BaseModel, table=True):
    """
    Mission field (``field`` resource).

    Attributes:
        continent: Continent name
        country: Country name
        state: State or province
        abbreviation: Unique short code, e.g. "AMEBRRJ01"
        designation: Free-form designation
    """

    __tablename__ = "field"

    continent: str = Field(max_length=100)
    country: str = Field(max_length=100)
    state: str = Field(max_length=100)
    abbreviation: str = Field(max_length=20, unique=True, index=True)
    designation: str = Field(max_length=255)

    churches: List["Church"] = Relationship(back_populates="field")
    volunteers: List["Volunteer"] = Relationship(back_populates="field")

    def __repr__(self) -> str:
        return f"<MissionField(id={self.id}, abbreviation={self.abbreviation})>"


class MissionFieldCreate(RequestSchema):
    continent: str = Field(min_length=1, max_length=100)
    country: str = Field(min_length=1, max_length=100)
    state: str = Field(min_length=1, max_length=100)
    abbreviation: str = Field(min_length=1, max_length=20)
    designation: str = Field(min_length=1, max_length=255)


class MissionFieldUpdate(RequestSchema):
    continent: Optional[str] = Field(default=None, max_length=100)
    country: Optional[str] = Field(default=None, max_length=100)
    state: Optional[str] = Field(default=None, max_length=100)
    abbreviation: Optional[str] = Field(default=None, max_length=20)
    designation: Optional[str] = Field(default=None, max_length=255)
