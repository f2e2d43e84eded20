"""
Tests for the Redis cache client.

Tests:
- No-op behavior when the cache is not configured
- JSON round trip, default and custom expiry
- Pattern deletion
- Error propagation and background write failures
- Connection lifecycle and health check
"""

import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError
from redis.exceptions import ConnectionError as RedisConnectionError

from core.cache import RedisCache, redis_client
from core.config import Settings

TEST_REDIS_URL = "redis://localhost:6379/0"


def failing_client(**errors) -> AsyncMock:
    """Redis client double whose named commands raise the given errors."""
    client = AsyncMock()
    for command, error in errors.items():
        getattr(client, command).side_effect = error
    return client


class TestActivation:
    """Tests for when the cache talks to Redis at all."""

    def test_production_with_url_is_configured(self):
        settings = Settings(env="production", redis_url=TEST_REDIS_URL)

        assert RedisCache.from_settings(settings).is_configured

    def test_prod_alias_is_production(self):
        settings = Settings(env="prod", redis_url=TEST_REDIS_URL)

        assert RedisCache.from_settings(settings).is_configured

    def test_development_is_not_configured(self):
        settings = Settings(env="development", redis_url=TEST_REDIS_URL)

        assert not RedisCache.from_settings(settings).is_configured

    def test_production_without_url_is_not_configured(self):
        settings = Settings(env="production", redis_url="")

        assert not RedisCache.from_settings(settings).is_configured

    @pytest.mark.parametrize("field", ["cache_response_ttl", "cache_default_ttl"])
    @pytest.mark.parametrize("ttl", [0, -1])
    def test_non_positive_ttl_is_rejected(self, field, ttl):
        with pytest.raises(ValidationError):
            Settings(**{field: ttl})

    def test_ttl_read_from_environment(self, monkeypatch):
        monkeypatch.setenv("CACHE_RESPONSE_TTL", "120")

        assert Settings().cache_response_ttl == 120


class TestDisabledCache:
    """Every operation is a silent no-op without a connection."""

    @pytest.mark.asyncio
    async def test_operations_are_noops(self, disabled_cache, client_factory):
        assert await disabled_cache.connect() is None
        assert await disabled_cache.get("cache:/api/orders:{}") is None
        await disabled_cache.set("cache:/api/orders:{}", {"orders": []})
        await disabled_cache.delete("cache:/api/orders:{}")
        assert await disabled_cache.delete_pattern("cache:*") == 0
        assert disabled_cache.set_in_background("k", {"a": 1}) is None
        await disabled_cache.close()

        client_factory.assert_not_called()

    @pytest.mark.asyncio
    async def test_health_reports_disabled(self, disabled_cache):
        health = await disabled_cache.health_check()

        assert health == {"configured": False, "connected": False, "status": "disabled"}


class TestJsonOperations:
    """Tests for get/set/delete against FakeRedis."""

    @pytest.mark.asyncio
    async def test_set_then_get_returns_equal_value(self, cache):
        value = {"orders": [{"id": 1, "city": "Москва", "result": 1500.5}], "total": 1}

        await cache.set("cache:/api/orders:{}", value, ttl=60)

        assert await cache.get("cache:/api/orders:{}") == value

    @pytest.mark.asyncio
    async def test_value_is_stored_as_json(self, cache, fake_redis):
        await cache.set("k", {"city": "Москва"})

        raw, _ = fake_redis.data["k"]
        assert json.loads(raw) == {"city": "Москва"}

    @pytest.mark.asyncio
    async def test_default_ttl_is_one_hour(self, cache, fake_redis):
        await cache.set("k", [1, 2, 3])

        assert fake_redis.ttl("k") == 3600

    @pytest.mark.asyncio
    async def test_value_expires_after_ttl(self, cache, fake_redis):
        await cache.set("k", "v", ttl=1)

        fake_redis.advance(0.5)
        assert await cache.get("k") == "v"

        fake_redis.advance(1)
        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_missing_key_returns_none(self, cache):
        assert await cache.get("cache:missing") is None

    @pytest.mark.asyncio
    async def test_delete_removes_key(self, cache):
        await cache.set("k", 1)

        await cache.delete("k")

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_unserializable_value_raises(self, cache, fake_redis):
        with pytest.raises(TypeError):
            await cache.set("k", {"when": object()})

        assert "k" not in fake_redis.data

    @pytest.mark.asyncio
    async def test_redis_error_propagates_from_set(self):
        client = failing_client(setex=RedisConnectionError("down"))
        cache = RedisCache(TEST_REDIS_URL, enabled=True, client_factory=MagicMock(return_value=client))

        with pytest.raises(RedisConnectionError):
            await cache.set("k", {"a": 1})

        await cache.close()

    @pytest.mark.asyncio
    async def test_redis_error_propagates_from_get(self):
        client = failing_client(get=RedisConnectionError("down"))
        cache = RedisCache(TEST_REDIS_URL, enabled=True, client_factory=MagicMock(return_value=client))

        with pytest.raises(RedisConnectionError):
            await cache.get("k")

        await cache.close()


class TestDeletePattern:
    """Tests for batched pattern deletion."""

    @pytest.mark.asyncio
    async def test_deletes_only_matching_keys(self, cache):
        await cache.set("cache:/api/orders:{}", 1)
        await cache.set('cache:/api/orders?page=2:{"page":"2"}', 2)
        await cache.set("cache:/api/orders/5:{}", 3)
        await cache.set("cache:/api/masters:{}", 4)

        deleted = await cache.delete_pattern("cache:/api/orders*")

        assert deleted == 3
        assert await cache.get("cache:/api/orders:{}") is None
        assert await cache.get("cache:/api/masters:{}") == 4

    @pytest.mark.asyncio
    async def test_resource_prefix_pattern(self, cache):
        await cache.set("cache:orders:1", "A")
        await cache.set("cache:orders:2", "B")
        await cache.set("cache:masters:1", "C")

        await cache.delete_pattern("cache:orders:*")

        assert await cache.get("cache:orders:1") is None
        assert await cache.get("cache:orders:2") is None
        assert await cache.get("cache:masters:1") == "C"

    @pytest.mark.asyncio
    async def test_no_match_skips_delete(self, cache, fake_redis):
        await cache.set("cache:/api/masters:{}", 4)

        assert await cache.delete_pattern("cache:/api/orders*") == 0
        assert "delete" not in fake_redis.calls

    @pytest.mark.asyncio
    async def test_matches_are_deleted_in_one_batch(self, cache, fake_redis):
        for i in range(5):
            await cache.set(f"cache:/api/cash/{i}:{{}}", i)

        await cache.delete_pattern("cache:/api/cash*")

        assert fake_redis.calls.count("delete") == 1


class TestBackgroundWrites:
    """Tests for fire-and-forget writes."""

    @pytest.mark.asyncio
    async def test_background_write_lands(self, cache):
        task = cache.set_in_background("k", {"a": 1}, ttl=300)

        assert task is not None
        await cache.wait_for_background_writes()
        assert await cache.get("k") == {"a": 1}

    @pytest.mark.asyncio
    async def test_background_failure_is_logged(self, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(redis_client, "logger", logger)
        client = failing_client(setex=RedisConnectionError("down"))
        cache = RedisCache(TEST_REDIS_URL, enabled=True, client_factory=MagicMock(return_value=client))

        cache.set_in_background("k", {"a": 1})
        await cache.wait_for_background_writes()

        events = [c.args[0] for c in logger.warning.call_args_list]
        assert "cache_write_failed" in events
        await cache.close()

    @pytest.mark.asyncio
    async def test_close_drains_pending_writes(self, cache, fake_redis):
        cache.set_in_background("k", "v")

        await cache.close()

        assert "k" in fake_redis.data

    @pytest.mark.asyncio
    async def test_write_scheduled_before_connect_does_not_leak_client(
        self, cache, fake_redis, client_factory
    ):
        cache.set_in_background("k", "v")

        await cache.close()
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert not cache.is_connected
        assert client_factory.call_count == 1
        assert fake_redis.close_count == 1

    @pytest.mark.asyncio
    async def test_no_background_writes_accepted_while_closing(self, cache, fake_redis):
        cache.set_in_background("first", 1)

        closing = asyncio.ensure_future(cache.close())
        await asyncio.sleep(0)
        late = cache.set_in_background("late", 2)
        await closing

        assert late is None
        assert "first" in fake_redis.data
        assert "late" not in fake_redis.data
        assert not cache.is_connected


class TestLifecycle:
    """Tests for connect/close."""

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, cache, client_factory):
        first = await cache.connect()
        second = await cache.connect()

        assert first is second
        client_factory.assert_called_once()
        assert client_factory.call_args.kwargs["decode_responses"] is True

    @pytest.mark.asyncio
    async def test_close_twice_is_safe(self, cache, fake_redis):
        await cache.connect()

        await cache.close()
        await cache.close()

        assert fake_redis.close_count == 1
        assert not cache.is_connected

    @pytest.mark.asyncio
    async def test_close_without_connect_is_noop(self, cache, fake_redis):
        await cache.close()

        assert fake_redis.close_count == 0

    @pytest.mark.asyncio
    async def test_reconnects_after_close(self, cache, client_factory):
        await cache.connect()
        await cache.close()

        assert await cache.connect() is not None
        assert client_factory.call_count == 2

    @pytest.mark.asyncio
    async def test_failed_ping_does_not_raise(self, monkeypatch):
        logger = MagicMock()
        monkeypatch.setattr(redis_client, "logger", logger)
        client = failing_client(ping=RedisConnectionError("refused"))
        cache = RedisCache(TEST_REDIS_URL, enabled=True, client_factory=MagicMock(return_value=client))

        assert await cache.connect() is client
        await cache._ping_task

        events = [c.args[0] for c in logger.warning.call_args_list]
        assert "redis_connection_failed" in events
        await cache.close()

    @pytest.mark.asyncio
    async def test_invalid_url_leaves_cache_disconnected(self):
        factory = MagicMock(side_effect=ValueError("bad url"))
        cache = RedisCache("not-a-url", enabled=True, client_factory=factory)

        assert await cache.connect() is None
        assert await cache.get("k") is None


class TestHealthCheck:
    @pytest.mark.asyncio
    async def test_healthy(self, cache):
        health = await cache.health_check()

        assert health["status"] == "healthy"
        assert health["connected"] is True

    @pytest.mark.asyncio
    async def test_unavailable_when_ping_fails(self):
        client = failing_client(ping=RedisConnectionError("refused"))
        cache = RedisCache(TEST_REDIS_URL, enabled=True, client_factory=MagicMock(return_value=client))

        health = await cache.health_check()

        assert health["status"] == "unavailable"
        await cache.close()
