"""
Request ID tracking middleware.

Provides unique request identification for log correlation and error bodies.
"""
import uuid
from contextvars import ContextVar
from typing import Any, Optional
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
import structlog

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

logger = structlog.get_logger(__name__)


def is_valid_uuid(value: str) -> bool:
    """Validate that a string is a canonical UUID4."""
    try:
        uuid_obj = uuid.UUID(value, version=4)
        return str(uuid_obj) == value and uuid_obj.version == 4
    except (ValueError, AttributeError):
        return False


def get_request_id() -> Optional[str]:
    """Get current request ID from context."""
    return request_id_var.get(None)


def set_request_id(request_id: str) -> None:
    """Set request ID in context (for background tasks)."""
    request_id_var.set(request_id)


def add_request_id_to_log(logger: Any, method_name: str, event_dict: dict) -> dict:
    """Structlog processor adding the current request ID to log entries."""
    request_id = get_request_id()
    if request_id:
        event_dict["request_id"] = request_id
    return event_dict


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Assigns every request a UUID4 request ID.

    An incoming ``X-Request-ID`` header is reused when it is a valid UUID4,
    otherwise a fresh one is generated. The ID is stored in ``request.state``
    and in a context variable, and echoed back in the response headers.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get("X-Request-ID")

        if request_id and not is_valid_uuid(request_id):
            logger.warning(
                "Invalid X-Request-ID received, generating new one",
                invalid_id=request_id,
            )
            request_id = None

        request_id = request_id or str(uuid.uuid4())
        request.state.request_id = request_id
        set_request_id(request_id)

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response
