"""Announcement model."""

import datetime
from typing import Optional

from sqlmodel import Field

from admin_service.infrastructure.database.base_model import BaseModel, RequestSchema


class Announcement(BaseModel, table=True):
    """Announcement (``announcement`` resource)."""

    __tablename__ = "announcement"

    title: str = Field(max_length=255)
    message: str
    date: Optional[datetime.date] = None
    fixed: bool = Field(default=False)


class AnnouncementCreate(RequestSchema):
    title: str = Field(min_length=1, max_length=255)
    message: str = Field(min_length=1)
    date: Optional[datetime.date] = None
    fixed: bool = False


class AnnouncementUpdate(RequestSchema):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    message: Optional[str] = None
    date: Optional[datetime.date] = None
    fixed: Optional[bool] = None
