"""Response cache stores and invalidation."""

from admin_service.infrastructure.cache.cache import (
    ICache,
    RedisCache,
    InMemoryCache,
    get_cache,
)
from admin_service.infrastructure.cache.invalidation import (
    CacheInvalidator,
    cache_keys_to_delete,
    cache_needs_reset,
    resource_family,
)
from admin_service.infrastructure.cache.redis import (
    RedisManager,
    CacheMetrics,
    get_redis_manager,
    close_redis,
)

__all__ = [
    # Cache stores
    "ICache",
    "RedisCache",
    "InMemoryCache",
    "get_cache",
    # Invalidation
    "CacheInvalidator",
    "cache_keys_to_delete",
    "cache_needs_reset",
    "resource_family",
    # Redis manager
    "RedisManager",
    "CacheMetrics",
    "get_redis_manager",
    "close_redis",
]
