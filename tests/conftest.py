"""Test configuration and fixtures."""
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from sensorlog.core.config import Settings
from sensorlog.db.schema import ensure_schema
from sensorlog.db.session import build_engine, build_session_factory
from sensorlog.deps import get_db_session
from sensorlog.main import create_app


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None, database_url="sqlite+aiosqlite:///:memory:")


@pytest_asyncio.fixture
async def test_db(settings: Settings):
    """Create an isolated in-memory database with the schema applied."""
    engine = build_engine(settings)
    await ensure_schema(engine)

    yield build_session_factory(engine)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_db) -> AsyncGenerator[AsyncSession, None]:
    """Get a test database session."""
    async with test_db() as session:
        yield session


@pytest_asyncio.fixture
async def client(test_db, settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Create a test client with database override."""
    app = create_app(settings)

    async def override_get_db():
        async with test_db() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
    await app.state.engine.dispose()
