# src/admin_service/infrastructure/cache/redis.py
"""
Redis connection manager for the response cache.

Provides an async Redis connection pool with health checks and graceful
fallback: when Redis is not configured or unreachable the manager reports
itself unavailable and callers switch to the in-memory cache.
"""
import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from redis.asyncio import ConnectionPool, Redis
from redis.exceptions import ConnectionError as RedisConnectionError, RedisError

from admin_service.config.settings import get_settings

logger = logging.getLogger(__name__)


class CacheMetrics:
    """
    Counters for cache hits, misses, stores and invalidations per family.
    """

    def __init__(self):
        self._metrics: Dict[str, int] = defaultdict(int)
        self._last_reset: datetime = datetime.now(timezone.utc)

    def record_hit(self, namespace: str = "default") -> None:
        self._metrics[f"{namespace}:hits"] += 1

    def record_miss(self, namespace: str = "default") -> None:
        self._metrics[f"{namespace}:misses"] += 1

    def record_set(self, namespace: str = "default") -> None:
        self._metrics[f"{namespace}:sets"] += 1

    def record_invalidation(self, namespace: str = "default") -> None:
        self._metrics[f"{namespace}:invalidations"] += 1

    def record_error(self, namespace: str = "default") -> None:
        self._metrics[f"{namespace}:errors"] += 1

    def get(self, name: str) -> int:
        return self._metrics.get(name, 0)

    def get_metrics(self) -> Dict[str, Any]:
        return {
            "metrics": dict(self._metrics),
            "last_reset": self._last_reset.isoformat(),
        }

    def get_hit_rate(self, namespace: str = "default") -> float:
        """Hit rate as a percentage (0-100)."""
        hits = self._metrics.get(f"{namespace}:hits", 0)
        misses = self._metrics.get(f"{namespace}:misses", 0)
        total = hits + misses

        if total == 0:
            return 0.0

        return (hits / total) * 100

    def reset(self) -> None:
        self._metrics.clear()
        self._last_reset = datetime.now(timezone.utc)


class RedisManager:
    """
    Redis connection manager with async connection pool.

    Features:
    - Async connection pool sized by ``redis_max_connections``
    - Health checks to verify Redis availability
    - Graceful fallback when Redis is unavailable
    """

    def __init__(self):
        self._pool: Optional[ConnectionPool] = None
        self._client: Optional[Redis] = None
        self._is_available: bool = False
        self._settings = get_settings()

    async def initialize(self) -> None:
        """
        Initialize Redis connection pool.

        Logs errors but doesn't raise - allows graceful degradation.
        """
        if not self._settings.redis_url:
            logger.warning("Redis URL not configured - using in-memory response cache")
            self._is_available = False
            return

        try:
            redis_url = self._settings.redis_url.get_secret_value()

            self._pool = ConnectionPool.from_url(
                redis_url,
                decode_responses=True,
                max_connections=self._settings.redis_max_connections,
                socket_connect_timeout=5,
                socket_keepalive=True,
            )
            self._client = Redis(connection_pool=self._pool)

            await self._client.ping()
            self._is_available = True
            logger.info("Redis connection established successfully")

        except (RedisError, RedisConnectionError, OSError) as e:
            logger.error(f"Failed to connect to Redis: {e}")
            logger.warning("Redis features will be disabled - continuing with in-memory cache")
            self._is_available = False
            self._client = None
            self._pool = None

    async def close(self) -> None:
        """Close Redis connection and cleanup resources."""
        if self._client:
            try:
                await self._client.aclose()
                logger.info("Redis connection closed")
            except RedisError as e:
                logger.error(f"Error closing Redis connection: {e}")

        if self._pool:
            try:
                await self._pool.aclose()
            except RedisError as e:
                logger.error(f"Error closing Redis connection pool: {e}")

        self._client = None
        self._pool = None
        self._is_available = False

    async def health_check(self) -> bool:
        """True if Redis is available and answers PING."""
        if not self._is_available or not self._client:
            return False

        try:
            await self._client.ping()
            return True
        except (RedisError, RedisConnectionError) as e:
            logger.error(f"Redis health check failed: {e}")
            self._is_available = False
            return False

    def get_client(self) -> Optional[Redis]:
        return self._client if self._is_available else None

    @property
    def is_available(self) -> bool:
        return self._is_available

    async def scan_keys(self, pattern: str, count: int = 100) -> List[str]:
        """
        Scan for keys matching a pattern.

        Uses SCAN so large keyspaces are walked incrementally.

        Example:
            >>> manager = await get_redis_manager()
            >>> keys = await manager.scan_keys("admin_service:/church*")
        """
        if not self._is_available or not self._client:
            return []

        try:
            keys = []
            cursor = 0

            while True:
                cursor, batch = await self._client.scan(
                    cursor=cursor,
                    match=pattern,
                    count=count,
                )
                keys.extend(batch)

                if cursor == 0:
                    break

            return keys

        except (RedisError, RedisConnectionError) as e:
            logger.error(f"Redis scan_keys error for pattern {pattern}: {e}")
            return []


# Global Redis manager instance
_redis_manager: Optional[RedisManager] = None


async def get_redis_manager() -> RedisManager:
    """Get or create the global Redis manager instance."""
    global _redis_manager

    if _redis_manager is None:
        _redis_manager = RedisManager()
        await _redis_manager.initialize()

    return _redis_manager


async def close_redis() -> None:
    """Close the global Redis connection. Called during application shutdown."""
    global _redis_manager

    if _redis_manager:
        await _redis_manager.close()
        _redis_manager = None
