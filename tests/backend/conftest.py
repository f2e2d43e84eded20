from collections.abc import Iterator

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.orm import Session

from backend.app.database import get_db
from backend.app.main import create_app
from core.config import Settings


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        env="production",
        redis_url="redis://localhost:6379/0",
        database_url="sqlite://",
    )


@pytest.fixture
def test_app(test_settings, cache, session_factory):
    """Application wired to the FakeRedis cache and the in-memory database."""
    app = create_app(settings=test_settings, cache=cache)

    def override_get_db() -> Iterator[Session]:
        db = session_factory()
        try:
            yield db
            db.commit()  # Auto-commit on success like production
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest_asyncio.fixture
async def api_client(test_app) -> httpx.AsyncClient:
    transport = httpx.ASGITransport(app=test_app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def warm(cache):
    """GET a URL and wait until its response is in the cache."""

    async def _warm(client: httpx.AsyncClient, url: str) -> httpx.Response:
        response = await client.get(url)
        await cache.wait_for_background_writes()
        return response

    return _warm
