# src/admin_service/infrastructure/cache/invalidation.py
"""
Response cache keys and their invalidation.

Cached GET responses are grouped by resource family, the first path segment
(``/church/123?x=1`` belongs to ``church``). A successful mutation on a family
makes every cached response of that family stale.

Two strategies are supported:

- ``scan``: response keys are the request path plus query
  (``/church?page=1``). Invalidation enumerates the keys, keeps the family's
  and deletes them one at a time.
- ``version`` (default): response keys embed a per-family version counter
  (``response:church:v3:/church?page=1``). Invalidation is one counter
  increment; stale variants are never read again and expire by TTL.

Invalidation failures are logged and swallowed; they never change the
response of the request that triggered them.
"""
import logging
import re
from typing import Iterable, Literal

from admin_service.infrastructure.cache.cache import ICache

logger = logging.getLogger(__name__)

Strategy = Literal["version", "scan"]

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
VERSION_KEY_PREFIX = "cache:version"
RESPONSE_KEY_PREFIX = "response"


def _strip_prefix(path: str, prefix: str = "") -> str:
    prefix = prefix.rstrip("/")
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        return path[len(prefix):]
    return path


def resource_family(path: str, prefix: str = "") -> str | None:
    """
    First non-empty path segment after the optional API prefix.

    Example:
        >>> resource_family("/church/123?x=1")
        'church'
        >>> resource_family("/api/v1/volunteer", prefix="/api/v1")
        'volunteer'
        >>> resource_family("/") is None
        True
    """
    path = _strip_prefix(path.split("?", 1)[0], prefix)
    for segment in path.split("/"):
        if segment:
            return segment
    return None


def cache_needs_reset(method: str, status_code: int) -> bool:
    """True when a request mutated data: a mutating method answered with 2xx."""
    return method.upper() in MUTATING_METHODS and 200 <= status_code < 300


def cache_keys_to_delete(family: str, keys: Iterable[str], prefix: str = "") -> list[str]:
    """
    Keys of ``scan``-strategy responses that belong to ``family``.

    The family must match a whole path segment: ``/church`` and
    ``/church/1?x`` match ``church``, ``/churches`` does not.
    """
    pattern = re.compile(rf"^/{re.escape(family)}(?:[/?]|$)")
    return [key for key in keys if pattern.match(_strip_prefix(key, prefix))]


def version_key(family: str) -> str:
    return f"{VERSION_KEY_PREFIX}:{family}"


def query_string(params: Iterable[tuple[str, str]]) -> str:
    """Canonical query string: parameters sorted so equivalent URLs share a key."""
    return "&".join(f"{k}={v}" for k, v in sorted(params))


class CacheInvalidator:
    """
    Builds response cache keys and invalidates resource families.

    Example:
        invalidator = CacheInvalidator(cache, strategy="version")
        key = await invalidator.response_key("church", "/church", [("page", "1")])
        ...
        await invalidator.invalidate("church")   # key is now unreachable
    """

    def __init__(self, cache: ICache, strategy: Strategy = "version", prefix: str = ""):
        if strategy not in ("version", "scan"):
            raise ValueError(f"Unknown cache invalidation strategy: {strategy!r}")
        self.cache = cache
        self.strategy = strategy
        self.prefix = prefix

    async def current_version(self, family: str) -> int:
        value = await self.cache.get(version_key(family))
        try:
            return int(value) if value is not None else 0
        except (TypeError, ValueError):
            return 0

    async def response_key(self, family: str, path: str, params: Iterable[tuple[str, str]] = ()) -> str:
        """Cache key for a GET response under the configured strategy."""
        location = path
        qs = query_string(params)
        if qs:
            location = f"{path}?{qs}"

        if self.strategy == "scan":
            return location

        version = await self.current_version(family)
        return f"{RESPONSE_KEY_PREFIX}:{family}:v{version}:{location}"

    async def invalidate(self, family: str) -> int:
        """
        Make every cached response of ``family`` stale.

        Returns:
            Number of keys deleted (always 0 under the version strategy)
        """
        try:
            if self.strategy == "version":
                version = await self.cache.increment(version_key(family))
                logger.debug("Cache family %s bumped to version %s", family, version)
                return 0
            return await self._delete_family_keys(family)
        except Exception as e:
            logger.error("Cache invalidation failed for family %s: %s", family, e)
            return 0

    async def _delete_family_keys(self, family: str) -> int:
        keys = cache_keys_to_delete(family, await self.cache.keys("*"), prefix=self.prefix)
        deleted = 0
        for key in keys:
            try:
                if await self.cache.delete(key):
                    deleted += 1
            except Exception as e:
                logger.error("Failed to delete cache key %s: %s", key, e)
        logger.debug("Deleted %d cached responses for family %s", deleted, family)
        return deleted
