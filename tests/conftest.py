"""Shared test fixtures and configuration for EventDesk backend tests."""
import os

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from eventdesk.auth.utils import create_access_token
from eventdesk.database import Base, get_db, get_session_factory
from eventdesk.main import app
from eventdesk.storage import LocalObjectStore, get_object_store
import eventdesk.models  # noqa: F401

OWNER_ID = "owner-123"
OTHER_OWNER_ID = "owner-456"


@pytest_asyncio.fixture
async def engine(tmp_path):
    """File-backed SQLite engine so concurrent sessions share one database."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'eventdesk.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def seed(session_factory):
    """Persist model instances and return them with their ids populated."""

    async def _seed(*instances):
        async with session_factory() as session:
            session.add_all(instances)
            await session.commit()
        return instances if len(instances) > 1 else instances[0]

    return _seed


# =============================================================================
# API clients
# =============================================================================

@pytest.fixture
def object_store(tmp_path):
    return LocalObjectStore(tmp_path / "objects")


@pytest_asyncio.fixture
async def client(session_factory, object_store):
    """API client authenticated as OWNER_ID, wired to the per-test database and store."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    app.dependency_overrides[get_object_store] = lambda: object_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {create_access_token(OWNER_ID, 'ana@example.com')}"},
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anonymous_client(client):
    """Same app and overrides, no credentials."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
