# src/admin_service/api/responses.py
"""
JSON rendering of resource results.

Records leave the API with camelCase keys (``created_at`` -> ``createdAt``)
wrapped in the ``{message, data, timestamp}`` envelope. Listings also carry
their totals in the ``X-Total-Count`` and ``X-Total-Pages`` headers.
"""
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from pydantic.alias_generators import to_camel

from admin_service.api.schemas.base import Envelope

TOTAL_COUNT_HEADER = "X-Total-Count"
TOTAL_PAGES_HEADER = "X-Total-Pages"


def camelize(value: Any) -> Any:
    """Recursively convert dictionary keys to camelCase."""
    if isinstance(value, dict):
        return {to_camel(key) if isinstance(key, str) else key: camelize(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [camelize(item) for item in value]
    return value


def envelope_response(
    message: str,
    data: Any,
    status_code: int = 200,
    total_count: Optional[int] = None,
    total_pages: Optional[int] = None,
) -> JSONResponse:
    """Render ``data`` inside the standard envelope."""
    body = Envelope[Any](message=message, data=camelize(jsonable_encoder(data)))

    headers = {}
    if total_count is not None:
        headers[TOTAL_COUNT_HEADER] = str(total_count)
    if total_pages is not None:
        headers[TOTAL_PAGES_HEADER] = str(total_pages)

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(body),
        headers=headers,
    )
