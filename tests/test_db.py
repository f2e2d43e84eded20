"""
Tests for the database manager.
"""

import pytest
from sqlalchemy import inspect
from sqlalchemy.pool import StaticPool

from core.config import Settings
from core.db import DatabaseManager, build_engine
from core.models import Master


@pytest.fixture
def manager():
    manager = DatabaseManager()
    yield manager
    manager.reset()


@pytest.fixture
def sqlite_settings() -> Settings:
    return Settings(database_url="sqlite://")


class TestBuildEngine:
    def test_sqlite_uses_single_connection(self, sqlite_settings):
        engine = build_engine(sqlite_settings)

        assert isinstance(engine.pool, StaticPool)
        engine.dispose()

    def test_sqlite_enforces_foreign_keys(self, sqlite_settings):
        engine = build_engine(sqlite_settings)

        with engine.connect() as conn:
            assert conn.exec_driver_sql("PRAGMA foreign_keys").scalar() == 1
        engine.dispose()

    def test_echo_follows_debug(self):
        engine = build_engine(Settings(database_url="sqlite://", debug=True))

        assert engine.echo is True
        engine.dispose()


class TestDatabaseManager:
    def test_uninitialized_is_unhealthy(self, manager):
        assert manager.health_check() == {"healthy": False, "error": "Database not initialized"}

    def test_session_requires_initialize(self, manager):
        with pytest.raises(RuntimeError):
            with manager.session():
                pass

    def test_initialize_is_idempotent(self, manager, sqlite_settings):
        manager.initialize(sqlite_settings)
        engine = manager.engine

        manager.initialize(Settings(database_url="sqlite:///other.db"))

        assert manager.engine is engine

    def test_creates_every_crm_table(self, manager, sqlite_settings):
        manager.initialize(sqlite_settings)
        manager.create_all_tables()

        tables = set(inspect(manager.engine).get_table_names())
        assert {"orders", "masters", "cash", "directors", "operators", "calls"} <= tables
        assert manager.health_check() == {"healthy": True, "error": None}

    def test_session_commits_on_success(self, manager, sqlite_settings):
        manager.initialize(sqlite_settings)
        manager.create_all_tables()

        with manager.session() as session:
            session.add(Master(name="Олег", cities=["Тула"], status_work="работает"))

        with manager.session() as session:
            assert session.query(Master).count() == 1

    def test_session_rolls_back_on_error(self, manager, sqlite_settings):
        manager.initialize(sqlite_settings)
        manager.create_all_tables()

        with pytest.raises(ValueError):
            with manager.session() as session:
                session.add(Master(name="Олег", cities=["Тула"], status_work="работает"))
                session.flush()
                raise ValueError("abort")

        with manager.session() as session:
            assert session.query(Master).count() == 0

    def test_reset_allows_reinitialize(self, manager, sqlite_settings):
        manager.initialize(sqlite_settings)
        first = manager.engine

        manager.reset()
        manager.initialize(sqlite_settings)

        assert manager.engine is not first
