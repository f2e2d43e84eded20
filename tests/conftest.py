"""
Pytest fixtures for CRM API tests.

Provides an in-memory Redis double, cache clients built on it and an
in-memory SQLite database.
"""

from fnmatch import fnmatchcase
from unittest.mock import MagicMock

import pytest
import pytest_asyncio
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.cache import RedisCache
from core.db import Base
from core.models import Call, CashOperation, Director, Master, Operator, Order

TEST_REDIS_URL = "redis://localhost:6379/0"


class FakeRedis:
    """
    Async stand-in for redis.asyncio.Redis.

    Supports GET, SETEX, DEL, KEYS, PING and aclose. Expiry is driven by
    ``now``, which tests move forward with ``advance``.
    """

    def __init__(self):
        self.data: dict[str, tuple[str, float]] = {}
        self.now = 0.0
        self.calls: list[str] = []
        self.close_count = 0

    def advance(self, seconds: float) -> None:
        self.now += seconds

    def ttl(self, key: str) -> float | None:
        if key not in self.data:
            return None
        return self.data[key][1] - self.now

    def _purge(self) -> None:
        for key in [k for k, (_, expires) in self.data.items() if expires <= self.now]:
            del self.data[key]

    async def get(self, key: str) -> str | None:
        self.calls.append("get")
        self._purge()
        entry = self.data.get(key)
        return entry[0] if entry else None

    async def setex(self, key: str, ttl: int, value: str) -> bool:
        self.calls.append("setex")
        self.data[key] = (value, self.now + ttl)
        return True

    async def delete(self, *keys: str) -> int:
        self.calls.append("delete")
        self._purge()
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed

    async def keys(self, pattern: str) -> list[str]:
        self.calls.append("keys")
        self._purge()
        return [key for key in self.data if fnmatchcase(key, pattern)]

    async def ping(self) -> bool:
        return True

    async def aclose(self) -> None:
        self.close_count += 1


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client_factory(fake_redis):
    """Factory handed to RedisCache; records how it was called."""
    return MagicMock(return_value=fake_redis)


@pytest_asyncio.fixture
async def cache(client_factory):
    """Enabled cache backed by FakeRedis."""
    cache = RedisCache(redis_url=TEST_REDIS_URL, enabled=True, client_factory=client_factory)
    yield cache
    await cache.close()


@pytest.fixture
def disabled_cache(client_factory):
    """Cache outside production: every operation is a no-op."""
    return RedisCache(redis_url=TEST_REDIS_URL, enabled=False, client_factory=client_factory)


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def test_engine():
    """Fresh in-memory SQLite database per test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return sessionmaker(
        bind=test_engine, autoflush=False, autocommit=False, expire_on_commit=False
    )


@pytest.fixture
def test_session(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


# =============================================================================
# Sample Records
# =============================================================================


def _inserter(session, model, defaults):
    def _make(**overrides):
        record = model(**{**defaults, **overrides})
        session.add(record)
        session.commit()
        return record

    return _make


@pytest.fixture
def make_master(test_session):
    """Insert a master; keyword arguments override the defaults."""
    return _inserter(
        test_session,
        Master,
        {"name": "Иван Петров", "cities": ["Москва"], "status_work": "работает"},
    )


@pytest.fixture
def make_order(test_session):
    """Insert an order; keyword arguments override the defaults."""
    return _inserter(
        test_session,
        Order,
        {
            "city": "Москва",
            "phone": "+79990001122",
            "address": "ул. Ленина, 1",
            "client_name": "Анна",
            "status_order": "Ожидает",
        },
    )


@pytest.fixture
def make_cash(test_session):
    """Insert a cash operation; keyword arguments override the defaults."""
    return _inserter(
        test_session,
        CashOperation,
        {"name": "приход", "amount": 1000.0, "name_create": "Оператор", "city": "Москва"},
    )


@pytest.fixture
def make_director(test_session):
    """Insert a director; the stored hash is a placeholder."""
    return _inserter(
        test_session,
        Director,
        {"name": "Сергей", "login": "sergey", "password_hash": "-", "cities": ["Москва"]},
    )


@pytest.fixture
def make_operator(test_session):
    return _inserter(test_session, Operator, {"name": "Мария", "city": "Москва"})


@pytest.fixture
def make_call(test_session):
    """Insert a call record; keyword arguments override the defaults."""
    return _inserter(
        test_session,
        Call,
        {"rk": "Авито", "city": "Москва", "phone_client": "+79990001122", "status": "answered"},
    )
