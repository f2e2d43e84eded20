"""
Response caching middleware.

ResponseCacheMiddleware serves GET responses from Redis and stores fresh
JSON responses after they are sent. CacheInvalidationMiddleware drops every
cached response under a resource before a write reaches its handler.

Both are pure ASGI middleware and receive the application's RedisCache in
their constructor. A cache failure never changes the HTTP response.
"""

import json
from collections.abc import Iterable
from urllib.parse import parse_qsl

from starlette.responses import JSONResponse

from core.cache import CacheKeys, RedisCache
from core.logging import get_logger

logger = get_logger("cache")

WRITE_METHODS = ("POST", "PUT", "PATCH", "DELETE")


def _matches(path: str, prefixes: tuple[str, ...]) -> bool:
    return not prefixes or any(path.startswith(prefix) for prefix in prefixes)


def _header(headers: Iterable[tuple[bytes, bytes]], name: bytes) -> str:
    for key, value in headers:
        if key.lower() == name:
            return value.decode("latin-1")
    return ""


class CachingSend:
    """
    Wraps the ASGI ``send`` callable to capture a cacheable response.

    Every message is forwarded unchanged. A ``200`` response with a JSON
    content type whose body arrives in a single message is scheduled for a
    background cache write before the body is forwarded.
    """

    def __init__(self, send, cache: RedisCache, key: str, ttl: int):
        self.send = send
        self.cache = cache
        self.key = key
        self.ttl = ttl
        self.status_code: int | None = None
        self.content_type = ""
        self.streamed = False

    @property
    def cacheable(self) -> bool:
        return (
            self.status_code == 200
            and self.content_type.startswith("application/json")
            and not self.streamed
        )

    async def __call__(self, message) -> None:
        if message["type"] == "http.response.start":
            self.status_code = message["status"]
            self.content_type = _header(message.get("headers", []), b"content-type")
        elif message["type"] == "http.response.body":
            if message.get("more_body", False):
                self.streamed = True
            elif self.cacheable:
                self._store(message.get("body", b""))
        await self.send(message)

    def _store(self, body: bytes) -> None:
        try:
            payload = json.loads(body)
        except ValueError as e:
            logger.warning("cache_payload_invalid", key=self.key, error=str(e))
            return
        if payload is None:
            # A stored null reads back as a miss
            return
        self.cache.set_in_background(self.key, payload, self.ttl)


class ResponseCacheMiddleware:
    """
    Read-through cache for GET requests.

    Args:
        app: Downstream ASGI application
        cache: Shared RedisCache
        ttl: Lifetime of a cached response in seconds
        paths: Path prefixes to cache; empty caches every GET
    """

    def __init__(
        self,
        app,
        cache: RedisCache,
        ttl: int = CacheKeys.TTL_RESPONSE,
        paths: Iterable[str] = (),
    ):
        self.app = app
        self.cache = cache
        self.ttl = ttl
        self.paths = tuple(paths)

    async def __call__(self, scope, receive, send):
        if (
            scope["type"] != "http"
            or scope["method"] != "GET"
            or not _matches(scope["path"], self.paths)
        ):
            await self.app(scope, receive, send)
            return

        query_string = scope.get("query_string", b"").decode("latin-1")
        key = CacheKeys.response_key(
            scope["path"],
            query_string,
            parse_qsl(query_string, keep_blank_values=True),
        )

        try:
            cached = await self.cache.get(key)
        except Exception as e:
            logger.warning(
                "cache_read_failed",
                key=key,
                error=str(e),
                error_type=type(e).__name__,
            )
            cached = None

        if cached is not None:
            logger.debug("cache_hit", key=key)
            response = JSONResponse(cached)
            await response(scope, receive, send)
            return

        logger.debug("cache_miss", key=key)
        await self.app(scope, receive, CachingSend(send, self.cache, key, self.ttl))


class CacheInvalidationMiddleware:
    """
    Deletes cached responses matching ``pattern`` before each write request.

    The request always continues to the handler, even when the delete fails.
    Stack one instance per pattern to invalidate several resources.
    """

    def __init__(
        self,
        app,
        cache: RedisCache,
        pattern: str,
        paths: Iterable[str] = (),
        methods: Iterable[str] = WRITE_METHODS,
    ):
        self.app = app
        self.cache = cache
        self.pattern = pattern
        self.paths = tuple(paths)
        self.methods = frozenset(m.upper() for m in methods)

    async def __call__(self, scope, receive, send):
        if (
            scope["type"] == "http"
            and scope["method"] in self.methods
            and _matches(scope["path"], self.paths)
        ):
            try:
                deleted = await self.cache.delete_pattern(self.pattern)
            except Exception as e:
                logger.warning(
                    "cache_invalidation_failed",
                    pattern=self.pattern,
                    error=str(e),
                    error_type=type(e).__name__,
                )
            else:
                logger.info("cache_invalidated", pattern=self.pattern, deleted=deleted)

        await self.app(scope, receive, send)
