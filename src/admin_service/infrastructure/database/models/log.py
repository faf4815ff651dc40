"""
Request log model.

One row is written for every non-GET request by ``RequestLogMiddleware``;
sensitive body keys are masked before the row is stored.
"""

from typing import Any, List, Optional

from sqlalchemy import Column, JSON
from sqlmodel import Field

from admin_service.infrastructure.database.base_model import BaseModel, RequestSchema


class Log(BaseModel, table=True):
    """Request log entry (``log`` resource)."""

    __tablename__ = "log"

    ip: Optional[str] = Field(default=None, max_length=64)
    method: str = Field(max_length=10)
    url: str = Field(max_length=2048)
    body: Optional[Any] = Field(default=None, sa_column=Column(JSON))
    query: Optional[str] = Field(default=None, max_length=2048)
    status_code: str = Field(max_length=3)
    files: List[str] = Field(default_factory=list, sa_column=Column(JSON))


class LogCreate(RequestSchema):
    ip: Optional[str] = None
    method: str
    url: str
    body: Optional[Any] = None
    query: Optional[str] = None
    status_code: str
    files: List[str] = []


class LogUpdate(RequestSchema):
    pass
