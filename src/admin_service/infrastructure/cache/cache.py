# src/admin_service/infrastructure/cache/cache.py
"""
Cache abstraction layer with Redis and in-memory implementations.

Provides a unified interface for the response cache with automatic fallback
to an in-memory LRU cache when Redis is unavailable.
"""

import fnmatch
import json
import logging
import time
from abc import ABC, abstractmethod
from collections import OrderedDict
from threading import Lock
from typing import Any, Generic, Optional, TypeVar

from redis.asyncio import Redis
from redis.exceptions import RedisError

from admin_service.config.settings import get_settings
from admin_service.infrastructure.cache.redis import get_redis_manager

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ICache(ABC, Generic[T]):
    """
    Abstract cache interface.

    Keys passed to and returned from every method are un-namespaced; the
    implementation applies its namespace internally.
    """

    @abstractmethod
    async def get(self, key: str) -> T | None:
        """Cached value, or None if not found/expired."""
        pass

    @abstractmethod
    async def set(self, key: str, value: T, ttl: int | None = None) -> bool:
        """
        Set value in cache with optional TTL.

        Args:
            key: Cache key
            value: JSON-serializable value
            ttl: Time to live in seconds (None = no expiration)
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """True if the key was deleted, False if not found."""
        pass

    @abstractmethod
    async def keys(self, pattern: str = "*") -> list[str]:
        """
        Enumerate keys matching a glob-style pattern.

        Args:
            pattern: Glob pattern (``*``, ``?``, ``[...]``) applied to the
                un-namespaced key
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    async def increment(self, key: str, amount: int = 1) -> int:
        """Increment a numeric value, creating it at ``amount`` when missing."""
        pass

    @abstractmethod
    async def expire(self, key: str, ttl: int) -> bool:
        """Set expiration on an existing key; False if the key doesn't exist."""
        pass


class RedisCache(ICache[T]):
    """
    Redis-based cache implementation.

    Values are stored as JSON. Read and write errors are logged and reported
    as a miss (``None``/``False``); ``increment`` and ``keys`` raise so the
    invalidator can log the failure against the family it was working on.

    Example:
        >>> cache = RedisCache(namespace="admin_service")
        >>> await cache.set("/church?page=1", {"status": 200}, ttl=300)
        >>> await cache.keys("/church*")
        ['/church?page=1']
    """

    def __init__(self, namespace: str = "", client: Redis | None = None):
        self.namespace = namespace
        self._redis: Optional[Redis] = client

    async def _get_redis(self) -> Redis | None:
        if self._redis is None:
            manager = await get_redis_manager()
            self._redis = manager.get_client()
        return self._redis

    def _make_key(self, key: str) -> str:
        if self.namespace:
            return f"{self.namespace}:{key}"
        return key

    def _strip_key(self, key: str) -> str:
        prefix = f"{self.namespace}:" if self.namespace else ""
        return key[len(prefix):] if prefix and key.startswith(prefix) else key

    def _serialize(self, value: Any) -> str:
        try:
            return json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to serialize value: {e}")
            raise

    def _deserialize(self, value: str) -> Any:
        try:
            return json.loads(value)
        except (TypeError, ValueError) as e:
            logger.error(f"Failed to deserialize value: {e}")
            return value

    async def get(self, key: str) -> T | None:
        redis = await self._get_redis()
        if not redis:
            return None

        try:
            value = await redis.get(self._make_key(key))
            if value is None:
                return None
            return self._deserialize(value)
        except RedisError as e:
            logger.error(f"Redis get error for key {key}: {e}")
            return None

    async def set(self, key: str, value: T, ttl: int | None = None) -> bool:
        redis = await self._get_redis()
        if not redis:
            return False

        try:
            namespaced_key = self._make_key(key)
            serialized_value = self._serialize(value)

            if ttl is not None:
                await redis.setex(namespaced_key, ttl, serialized_value)
            else:
                await redis.set(namespaced_key, serialized_value)

            return True
        except RedisError as e:
            logger.error(f"Redis set error for key {key}: {e}")
            return False

    async def delete(self, key: str) -> bool:
        redis = await self._get_redis()
        if not redis:
            return False

        try:
            result = await redis.delete(self._make_key(key))
            return result > 0
        except RedisError as e:
            logger.error(f"Redis delete error for key {key}: {e}")
            return False

    async def keys(self, pattern: str = "*") -> list[str]:
        redis = await self._get_redis()
        if not redis:
            return []

        return [
            self._strip_key(key)
            async for key in redis.scan_iter(match=self._make_key(pattern), count=100)
        ]

    async def exists(self, key: str) -> bool:
        redis = await self._get_redis()
        if not redis:
            return False

        try:
            result = await redis.exists(self._make_key(key))
            return result > 0
        except RedisError as e:
            logger.error(f"Redis exists error for key {key}: {e}")
            return False

    async def increment(self, key: str, amount: int = 1) -> int:
        redis = await self._get_redis()
        if not redis:
            raise RuntimeError("Redis not available for increment operation")

        return await redis.incrby(self._make_key(key), amount)

    async def expire(self, key: str, ttl: int) -> bool:
        redis = await self._get_redis()
        if not redis:
            return False

        try:
            return bool(await redis.expire(self._make_key(key), ttl))
        except RedisError as e:
            logger.error(f"Redis expire error for key {key}: {e}")
            return False


class InMemoryCache(ICache[T]):
    """
    In-memory cache implementation with LRU eviction.

    Fallback when Redis is unavailable, and the cache used by tests.

    Features:
    - LRU eviction when ``max_size`` is reached
    - TTL support with lazy expiration
    - Thread-safe operations

    Limitations:
    - Not distributed (single process only)
    - Data lost on restart

    Example:
        >>> cache = InMemoryCache(max_size=1000, namespace="admin_service")
        >>> await cache.set("/church?page=1", {"status": 200}, ttl=300)
    """

    def __init__(self, max_size: int = 1000, namespace: str = ""):
        self.max_size = max_size
        self.namespace = namespace
        self._cache: OrderedDict[str, tuple[Any, Optional[float]]] = OrderedDict()
        self._lock = Lock()

    def _make_key(self, key: str) -> str:
        if self.namespace:
            return f"{self.namespace}:{key}"
        return key

    def _strip_key(self, key: str) -> str:
        prefix = f"{self.namespace}:" if self.namespace else ""
        return key[len(prefix):] if prefix else key

    def _is_expired(self, expiry: Optional[float]) -> bool:
        if expiry is None:
            return False
        return time.monotonic() > expiry

    def _evict_if_needed(self) -> None:
        """Evict least recently used items until there is room for one more."""
        while len(self._cache) >= self.max_size:
            self._cache.popitem(last=False)

    async def get(self, key: str) -> T | None:
        namespaced_key = self._make_key(key)

        with self._lock:
            if namespaced_key not in self._cache:
                return None

            value, expiry = self._cache[namespaced_key]

            if self._is_expired(expiry):
                del self._cache[namespaced_key]
                return None

            # Mark as recently used
            self._cache.move_to_end(namespaced_key)
            return value

    async def set(self, key: str, value: T, ttl: int | None = None) -> bool:
        namespaced_key = self._make_key(key)

        expiry = None
        if ttl is not None:
            expiry = time.monotonic() + ttl

        with self._lock:
            if namespaced_key in self._cache:
                del self._cache[namespaced_key]

            self._evict_if_needed()
            self._cache[namespaced_key] = (value, expiry)

        return True

    async def delete(self, key: str) -> bool:
        namespaced_key = self._make_key(key)

        with self._lock:
            if namespaced_key in self._cache:
                del self._cache[namespaced_key]
                return True
            return False

    async def keys(self, pattern: str = "*") -> list[str]:
        with self._lock:
            expired = [k for k, (_, expiry) in self._cache.items() if self._is_expired(expiry)]
            for k in expired:
                del self._cache[k]

            live = [self._strip_key(k) for k in self._cache]

        return [k for k in live if fnmatch.fnmatchcase(k, pattern)]

    async def exists(self, key: str) -> bool:
        namespaced_key = self._make_key(key)

        with self._lock:
            if namespaced_key not in self._cache:
                return False

            _, expiry = self._cache[namespaced_key]

            if self._is_expired(expiry):
                del self._cache[namespaced_key]
                return False

            return True

    async def increment(self, key: str, amount: int = 1) -> int:
        namespaced_key = self._make_key(key)

        with self._lock:
            if namespaced_key in self._cache:
                value, expiry = self._cache[namespaced_key]

                if self._is_expired(expiry):
                    expiry = None
                    new_value = amount
                else:
                    if not isinstance(value, (int, float)):
                        raise ValueError(f"Cannot increment non-numeric value: {type(value)}")
                    new_value = value + amount

                self._cache[namespaced_key] = (new_value, expiry)
                self._cache.move_to_end(namespaced_key)
            else:
                new_value = amount
                self._evict_if_needed()
                self._cache[namespaced_key] = (new_value, None)

            return new_value

    async def expire(self, key: str, ttl: int) -> bool:
        namespaced_key = self._make_key(key)
        expiry = time.monotonic() + ttl

        with self._lock:
            if namespaced_key not in self._cache:
                return False

            value, _ = self._cache[namespaced_key]
            self._cache[namespaced_key] = (value, expiry)
            return True

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._cache)


async def get_cache(namespace: str | None = None, fallback_to_memory: bool = True) -> ICache:
    """
    Get cache instance with automatic fallback.

    Returns a Redis cache if available, otherwise an in-memory cache bounded
    by ``cache_max_entries``.

    Example:
        >>> cache = await get_cache()
        >>> await cache.set("/church?page=1", {...}, ttl=300)
    """
    settings = get_settings()
    if namespace is None:
        namespace = settings.cache_key_prefix

    manager = await get_redis_manager()

    if manager.is_available:
        logger.debug(f"Using Redis cache with namespace: {namespace}")
        return RedisCache(namespace=namespace)
    elif fallback_to_memory:
        logger.warning(f"Redis unavailable, using in-memory cache with namespace: {namespace}")
        return InMemoryCache(max_size=settings.cache_max_entries, namespace=namespace)
    else:
        raise RuntimeError("Redis cache not available and fallback disabled")
