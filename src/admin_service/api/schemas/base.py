"""Base response schema shared by every resource endpoint."""

from datetime import datetime, timezone
from typing import Generic, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")


def _now() -> datetime:
    return datetime.now(timezone.utc)


class Envelope(BaseModel, Generic[T]):
    """
    Standard success response wrapper.

    Example Response:
        ```json
        {
            "message": "Igreja criada com sucesso!",
            "data": {"id": "3f0c...", "name": "Igreja Central"},
            "timestamp": "2024-12-13T10:30:00Z"
        }
        ```
    """

    message: str = Field(..., description="Localized success message")
    data: T = Field(..., description="Response data payload")
    timestamp: datetime = Field(default_factory=_now, description="Response timestamp in UTC")
