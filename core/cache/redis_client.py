"""
Async Redis client for the response cache.

Provides an explicitly constructed cache object with:
- Lazy, idempotent connection to a single shared client
- JSON serialization of cached payloads
- Fire-and-forget background writes tracked until shutdown
- Graceful degradation: every operation is a no-op when Redis is not configured
"""

import asyncio
import functools
import json
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import redis.asyncio as redis
from redis.exceptions import RedisError

from core.cache.cache_keys import CacheKeys
from core.logging import get_logger

if TYPE_CHECKING:
    from core.config import Settings

logger = get_logger("cache")


class RedisCache:
    """
    Redis cache client owned by the application lifespan.

    The cache is active only when ``enabled`` is true and ``redis_url`` is
    set. Otherwise reads return None, writes and deletes are skipped and no
    network call is made.

    Errors raised by Redis itself (connection refused, timeouts) and
    serialization errors propagate to the caller. Callers that must not
    fail because of the cache (the HTTP middleware) catch them at their
    own boundary.

    Usage:
        cache = RedisCache.from_settings(get_settings())
        await cache.connect()

        await cache.set("cache:orders:1", {"id": 1}, ttl=300)
        order = await cache.get("cache:orders:1")
        await cache.delete_pattern("cache:orders:*")

        await cache.close()
    """

    def __init__(
        self,
        redis_url: str = "",
        enabled: bool = False,
        default_ttl: int = CacheKeys.TTL_DEFAULT,
        client_factory: Callable[..., "redis.Redis"] | None = None,
    ):
        self.redis_url = redis_url
        self.enabled = enabled
        self.default_ttl = default_ttl
        self._client_factory = client_factory or redis.from_url
        self._client: "redis.Redis | None" = None
        self._ping_task: asyncio.Task | None = None
        self._background_writes: set[asyncio.Task] = set()
        self._closing = False

    @classmethod
    def from_settings(cls, settings: "Settings") -> "RedisCache":
        """Build a cache from application settings."""
        return cls(
            redis_url=settings.redis_url,
            enabled=settings.is_production,
            default_ttl=settings.cache_default_ttl,
        )

    @property
    def is_configured(self) -> bool:
        """True when both the production flag and a Redis URL are present."""
        return self.enabled and bool(self.redis_url)

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    # =========================================================================
    # Connection Lifecycle
    # =========================================================================

    async def connect(self) -> "redis.Redis | None":
        """
        Return the shared Redis client, creating it on first use.

        The connectivity check runs in the background so the caller is never
        blocked; its outcome is only logged.

        Returns:
            The client, or None when the cache is not configured or the
            client could not be created.
        """
        if self._client is not None:
            return self._client

        if not self.is_configured:
            return None

        try:
            client = self._client_factory(
                self.redis_url,
                decode_responses=True,
                socket_timeout=5,
                socket_connect_timeout=5,
            )
        except (RedisError, ValueError) as e:
            logger.warning("redis_init_error", error=str(e))
            return None

        self._client = client
        self._ping_task = asyncio.get_running_loop().create_task(self._ping(client))
        return client

    async def _ping(self, client: "redis.Redis") -> None:
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            logger.warning("redis_connection_failed", error=str(e))
        else:
            logger.info("redis_connected")

    async def close(self) -> None:
        """
        Release the shared client.

        Pending background writes are allowed to finish first, even those
        scheduled before any connection was made. No new background writes
        are accepted while closing. Safe to call more than once and safe to
        call when never connected.
        """
        self._closing = True
        try:
            await self.wait_for_background_writes()
            client = self._client
            if client is None:
                return

            self._client = None
            if self._ping_task is not None and not self._ping_task.done():
                self._ping_task.cancel()
            self._ping_task = None

            try:
                await client.aclose()
            except (RedisError, OSError) as e:
                logger.warning("redis_close_error", error=str(e))
            logger.info("redis_disconnected")
        finally:
            self._closing = False

    # =========================================================================
    # JSON Operations
    # =========================================================================

    async def get(self, key: str) -> Any | None:
        """
        Get a JSON value from cache.

        Returns:
            Parsed value, or None if missing or the cache is not configured
        """
        client = await self.connect()
        if client is None:
            return None

        data = await client.get(key)
        if data is None:
            return None
        return json.loads(data)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """
        Store a JSON-serializable value with an expiry.

        Args:
            key: Cache key
            value: Data to cache
            ttl: Time-to-live in seconds (default: ``default_ttl``, 1 hour)

        Raises:
            TypeError, ValueError: If the value is not JSON-serializable
        """
        client = await self.connect()
        if client is None:
            return

        serialized = json.dumps(value, ensure_ascii=False)
        await client.setex(key, self.default_ttl if ttl is None else ttl, serialized)

    def set_in_background(
        self, key: str, value: Any, ttl: int | None = None
    ) -> asyncio.Task | None:
        """
        Schedule ``set`` as a detached task.

        The caller never awaits the task; failures are logged by a done
        callback. Returns None when the cache is not configured or is
        shutting down.
        """
        if not self.is_configured:
            return None
        if self._closing:
            logger.debug("cache_write_skipped", key=key, reason="closing")
            return None

        task = asyncio.get_running_loop().create_task(self.set(key, value, ttl))
        self._background_writes.add(task)
        task.add_done_callback(functools.partial(self._on_background_write_done, key))
        return task

    def _on_background_write_done(self, key: str, task: asyncio.Task) -> None:
        self._background_writes.discard(task)
        if task.cancelled():
            logger.debug("cache_write_cancelled", key=key)
            return
        error = task.exception()
        if error is not None:
            logger.warning(
                "cache_write_failed",
                key=key,
                error=str(error),
                error_type=type(error).__name__,
            )
        else:
            logger.debug("cache_set", key=key)

    async def wait_for_background_writes(self) -> None:
        """Wait until every scheduled background write has finished."""
        while self._background_writes:
            await asyncio.gather(*list(self._background_writes), return_exceptions=True)

    # =========================================================================
    # Key Operations
    # =========================================================================

    async def delete(self, key: str) -> None:
        """Delete a key from cache."""
        client = await self.connect()
        if client is None:
            return
        await client.delete(key)

    async def delete_pattern(self, pattern: str) -> int:
        """
        Delete all keys matching a glob pattern in one batch.

        Args:
            pattern: Redis pattern (e.g., "cache:/api/orders*")

        Returns:
            Number of keys deleted
        """
        client = await self.connect()
        if client is None:
            return 0

        keys = await client.keys(pattern)
        if not keys:
            return 0
        return int(await client.delete(*keys))

    # =========================================================================
    # Health Check
    # =========================================================================

    async def health_check(self) -> dict[str, Any]:
        """
        Get cache health status.

        Returns:
            Dictionary with health information
        """
        status: dict[str, Any] = {
            "configured": self.is_configured,
            "connected": self.is_connected,
        }

        if not self.is_configured:
            status["status"] = "disabled"
            return status

        client = await self.connect()
        if client is None:
            status["status"] = "unavailable"
            return status

        try:
            await client.ping()
            status["status"] = "healthy"
        except (RedisError, OSError):
            status["status"] = "unavailable"
        status["connected"] = self.is_connected
        return status
