"""Testimonial model."""

from typing import Optional

from sqlmodel import Field

from admin_service.infrastructure.database.base_model import BaseModel, RequestSchema


class Testimonial(BaseModel, table=True):
    """Testimonial (``testimonial`` resource)."""

    __tablename__ = "testimonial"

    name: str = Field(max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    text: str


class TestimonialCreate(RequestSchema):
    name: str = Field(min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    text: str = Field(min_length=1)


class TestimonialUpdate(RequestSchema):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    text: Optional[str] = None
