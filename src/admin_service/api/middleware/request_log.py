"""
Request log middleware.

Persists one ``log`` row for every non-GET request: client IP, method, path,
query string, status code and the JSON body with sensitive keys masked.
Storage failures are logged and never change the response.
"""
import json
import time
from typing import Any, Optional, Set

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from admin_service.config.settings import get_settings
from admin_service.infrastructure.database.connection import db
from admin_service.infrastructure.database.models import Log
from admin_service.infrastructure.database.soft_delete import SoftDeleteStore
from admin_service.infrastructure.database.store import Action, Operation, StorageAdapter
from admin_service.infrastructure.observability.logging import get_logger, mask_sensitive_keys


logger = get_logger(__name__)

SKIPPED_METHODS: Set[str] = {"GET", "HEAD", "OPTIONS"}


async def get_request_json(request: Request) -> Optional[Any]:
    """Request body parsed as JSON, the raw text when it isn't, None when empty."""
    body_bytes = await request.body()
    if not body_bytes:
        return None

    body_str = body_bytes.decode("utf-8", errors="replace")
    try:
        return json.loads(body_str)
    except ValueError:
        return body_str


class RequestLogMiddleware(BaseHTTPMiddleware):
    """
    Structured request logging plus the persisted ``log`` trail.

    Every request is logged through structlog with its duration; non-GET
    requests additionally get a ``log`` row.
    """

    def __init__(self, app):
        super().__init__(app)
        self.settings = get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        start_time = time.time()
        log_context = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else None,
        }

        persist = self.settings.request_log_enabled and request.method not in SKIPPED_METHODS
        body = None
        if persist:
            body = mask_sensitive_keys(await get_request_json(request), self.settings.log_sensitive_keys)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "Request failed with exception",
                **log_context,
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        duration_ms = round((time.time() - start_time) * 1000, 2)
        logger.info(
            "Request completed",
            **log_context,
            status_code=response.status_code,
            duration_ms=duration_ms,
        )

        if persist:
            await self._persist(request, body, response.status_code)

        return response

    async def _persist(self, request: Request, body: Any, status_code: int) -> None:
        if not db.is_connected:
            return

        data = {
            "ip": request.client.host if request.client else None,
            "method": request.method,
            "url": request.url.path,
            "body": body,
            "query": request.url.query or None,
            "status_code": str(status_code),
        }
        try:
            async with db.session() as session:
                store = SoftDeleteStore(StorageAdapter(session))
                await store.execute(Operation(Log, Action.CREATE, data=data))
        except Exception as e:
            logger.error("Failed to persist request log", error=str(e), **data)
