"""
Uploaded file metadata.

The bytes live under ``Settings.files_path``; the row only records where.
Hard-removing a row also removes the file it owns.
"""

from typing import Optional

from pydantic import field_validator
from sqlmodel import Field

from admin_service.infrastructure.database.base_model import BaseModel, RequestSchema


class File(BaseModel, table=True):
    """Uploaded file (``file`` resource)."""

    __tablename__ = "file"

    name: str = Field(max_length=255, unique=True)
    original_name: str = Field(max_length=255)
    mimetype: str = Field(max_length=100)
    size: int = Field(default=0, ge=0)


class FileCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=255)
    original_name: str = Field(min_length=1, max_length=255)
    mimetype: str = Field(min_length=1, max_length=100)
    size: int = Field(default=0, ge=0)

    @field_validator("name")
    @classmethod
    def name_is_bare_file_name(cls, value: str) -> str:
        """The name is joined to ``files_path``; it may not leave that directory."""
        if any(char in value for char in ("/", "\\", "\0")) or value in (".", ".."):
            raise ValueError("must be a file name without path components")
        return value


class FileUpdate(RequestSchema):
    original_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
