"""
Response cache middleware.

Successful GET responses of resource families are cached under a key built by
``CacheInvalidator``; any successful mutation of a family invalidates it.
Cache failures are logged and the request is served uncached.

Responses carry ``X-Cache: HIT`` or ``X-Cache: MISS``.
"""
import json
from typing import Iterable, Optional

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from admin_service.api.responses import TOTAL_COUNT_HEADER, TOTAL_PAGES_HEADER
from admin_service.config.settings import get_settings
from admin_service.infrastructure.cache.cache import ICache, get_cache
from admin_service.infrastructure.cache.invalidation import (
    CacheInvalidator,
    cache_needs_reset,
    resource_family,
)
from admin_service.infrastructure.cache.redis import CacheMetrics
from admin_service.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)

CACHE_HEADER = "X-Cache"
CACHED_HEADERS = (TOTAL_COUNT_HEADER, TOTAL_PAGES_HEADER)

# Families never cached: health checks, docs, and the log table written behind the
# router's back by RequestLogMiddleware.
UNCACHED_FAMILIES = frozenset({"health", "docs", "redoc", "openapi.json", "log"})


class ResponseCacheMiddleware(BaseHTTPMiddleware):
    """
    Cache GET responses per resource family and invalidate on mutation.

    The cache store is taken from ``app.state.cache`` when set (the lifespan
    and the tests set it), otherwise resolved once with ``get_cache()``.
    """

    def __init__(
        self,
        app,
        prefix: str = "",
        uncached_families: Iterable[str] = UNCACHED_FAMILIES,
    ):
        super().__init__(app)
        self.settings = get_settings()
        self.prefix = prefix
        self.uncached_families = frozenset(uncached_families)
        self.metrics = CacheMetrics()
        self._cache: Optional[ICache] = None

    async def _get_cache(self, request: Request) -> ICache:
        cache = getattr(request.app.state, "cache", None)
        if cache is not None:
            return cache
        if self._cache is None:
            self._cache = await get_cache()
        return self._cache

    async def dispatch(self, request: Request, call_next) -> Response:
        if not self.settings.cache_enabled:
            return await call_next(request)

        family = resource_family(request.url.path, self.prefix)
        if family is None or family in self.uncached_families:
            return await call_next(request)

        invalidator = CacheInvalidator(
            await self._get_cache(request),
            strategy=self.settings.cache_invalidation_strategy,
            prefix=self.prefix,
        )

        if request.method == "GET":
            return await self._cached_get(request, call_next, family, invalidator)

        response = await call_next(request)

        if cache_needs_reset(request.method, response.status_code):
            evicted = await invalidator.invalidate(family)
            self.metrics.record_invalidation(family)
            logger.debug("Cache invalidated", family=family, evicted=evicted)

        return response

    async def _cached_get(
        self,
        request: Request,
        call_next,
        family: str,
        invalidator: CacheInvalidator,
    ) -> Response:
        cache = invalidator.cache
        key = None
        try:
            key = await invalidator.response_key(
                family, request.url.path, request.query_params.multi_items()
            )
            entry = await cache.get(key)
        except Exception as e:
            logger.error("Cache read failed", family=family, key=key, error=str(e))
            self.metrics.record_error(family)
            return await call_next(request)

        if entry:
            self.metrics.record_hit(family)
            headers = dict(entry.get("headers") or {})
            headers[CACHE_HEADER] = "HIT"
            return Response(
                content=entry["body"],
                status_code=entry["status"],
                headers=headers,
                media_type="application/json",
            )

        self.metrics.record_miss(family)
        response = await call_next(request)

        content_type = response.headers.get("content-type", "")
        if not (200 <= response.status_code < 300 and content_type.startswith("application/json")):
            return response

        body = b"".join([chunk async for chunk in response.body_iterator])
        headers = {
            name: response.headers[name]
            for name in CACHED_HEADERS
            if name in response.headers
        }

        try:
            json.loads(body)
            await cache.set(
                key,
                {"status": response.status_code, "body": body.decode("utf-8"), "headers": headers},
                ttl=self.settings.cache_ttl,
            )
            self.metrics.record_set(family)
        except Exception as e:
            logger.error("Cache write failed", family=family, key=key, error=str(e))
            self.metrics.record_error(family)

        cached_response = Response(
            content=body,
            status_code=response.status_code,
            headers={k: v for k, v in response.headers.items() if k.lower() != "content-length"},
            media_type=response.media_type,
        )
        cached_response.headers[CACHE_HEADER] = "MISS"
        return cached_response
