"""
Database engine and sessions for the CRM.

The application lifespan builds the engine from the same ``Settings`` object
the app was created with; nothing connects at import time.

Usage:
    from core.db import db, get_db, Base

    db.initialize(settings)
    db.create_all_tables()
    with db.session() as session:
        orders = OrderRepository(session).list_filtered(city="Москва")
"""

from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from sqlalchemy import Engine, create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

if TYPE_CHECKING:
    from .config import Settings


class Base(DeclarativeBase):
    """Declarative base for orders, masters, cash, directors and calls."""


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(settings: "Settings") -> Engine:
    """
    Create the engine for ``settings.database_url``.

    SQLite runs on a single shared connection (in-memory databases live as
    long as it does); other backends get a sized, pre-pinged pool.
    """
    url = settings.database_url
    if url.startswith("sqlite"):
        engine = create_engine(
            url,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
            echo=settings.debug,
        )
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
        return engine

    return create_engine(
        url,
        pool_size=settings.db_pool_size,
        max_overflow=settings.db_max_overflow,
        pool_pre_ping=settings.db_pool_pre_ping,
        echo=settings.debug,
    )


class DatabaseManager:
    """Holds the engine and session factory between startup and shutdown."""

    def __init__(self):
        self.engine: Engine | None = None
        self.SessionLocal: sessionmaker[Session] | None = None

    def initialize(self, settings: "Settings") -> None:
        """Build the engine once; later calls keep the existing one."""
        if self.engine is not None:
            return
        self.engine = build_engine(settings)
        self.SessionLocal = sessionmaker(
            bind=self.engine, autoflush=False, expire_on_commit=False
        )

    def create_all_tables(self) -> None:
        # Registers every CRM table on Base.metadata
        import core.models  # noqa: F401

        Base.metadata.create_all(bind=self._require_engine())

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        """Session that commits on success and rolls back on any error."""
        self._require_engine()
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> dict[str, Any]:
        if self.engine is None:
            return {"healthy": False, "error": "Database not initialized"}
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            return {"healthy": False, "error": str(e)}
        return {"healthy": True, "error": None}

    def reset(self) -> None:
        """Dispose the engine so the next ``initialize`` starts fresh."""
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None

    def _require_engine(self) -> Engine:
        if self.engine is None:
            raise RuntimeError("Database not initialized; call db.initialize(settings) first")
        return self.engine


db = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency yielding a committed-on-success session."""
    with db.session() as session:
        yield session


__all__ = ["Base", "DatabaseManager", "build_engine", "db", "get_db"]
