"""Agenda (event) model."""

import datetime
from typing import Optional

from sqlmodel import Field

from admin_service.infrastructure.database.base_model import BaseModel, RequestSchema


class Agenda(BaseModel, table=True):
    """Scheduled event (``agenda`` resource)."""

    __tablename__ = "agenda"

    title: str = Field(max_length=255)
    message: str
    date: datetime.date


class AgendaCreate(RequestSchema):
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    date: datetime.date


class AgendaUpdate(RequestSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    message: Optional[str] = None
    date: Optional[datetime.date] = None
