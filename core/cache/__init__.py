"""
Redis Caching Layer.

Provides the async Redis client and key helpers behind the HTTP response
cache:
- JSON values with per-key TTL
- Pattern-based invalidation
- No-op behaviour when Redis is not configured

Usage:
    from core.cache import RedisCache, CacheKeys

    cache = RedisCache.from_settings(settings)
    await cache.set("cache:/api/orders:{}", payload, ttl=CacheKeys.TTL_RESPONSE)
    await cache.delete_pattern(CacheKeys.resource_pattern("/api/orders"))
"""

from core.cache.cache_keys import CacheKeys
from core.cache.redis_client import RedisCache

__all__ = [
    "RedisCache",
    "CacheKeys",
]
