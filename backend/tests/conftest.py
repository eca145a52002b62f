"""
Posts API — Test Configuration (conftest.py)
=============================================

What:  Shared pytest fixtures for the entire test suite.
How:   The app under test is built with create_app(settings, database) where
       the database is an in-memory SQLite engine, so endpoint tests exercise
       real queries without a hosted database.

Fixture Hierarchy (all function-scoped):
    ├── settings:          Settings pointing at SQLite, fixed CORS allow-list
    ├── database:          Database adapter with the posts table created
    ├── test_client:       HTTPX AsyncClient wired to a fresh app
    ├── create_post:       helper that POSTs a post and returns its data
    └── mock_db_session:   AsyncMock session for service unit tests
"""

import os

# Required settings must exist BEFORE posts_api.main is imported, since it
# builds the module-level app from the environment.
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DATABASE_KEY"] = "test-key-not-real"
os.environ["LOG_LEVEL"] = "WARNING"

from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from posts_api.config import Settings
from posts_api.database import Base, Database
from posts_api.main import create_app

TEST_ORIGIN = "http://localhost:5173"


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite+aiosqlite://",
        database_key="test-key-not-real",
        cors_origins=f"{TEST_ORIGIN},http://localhost:3000",
        frontend_url="https://frontend.example.com",
        log_level="WARNING",
    )


@pytest_asyncio.fixture
async def database():
    """
    Fresh in-memory database per test.

    The table is created here only because SQLite starts empty; in
    production the hosted database owns the schema.
    """
    db = Database("sqlite+aiosqlite://")
    async with db.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield db
    await db.dispose()


@pytest_asyncio.fixture
async def test_client(settings, database):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/api/health")
            assert response.status_code == 200
    """
    app = create_app(settings=settings, database=database)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.fixture
def create_post(test_client):
    """Returns an async helper creating a post and returning its `data`."""

    async def _create(title="A title", body="Some body", user_id=1):
        response = await test_client.post(
            "/api/posts", json={"title": title, "body": body, "user_id": user_id}
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture
def mock_db_session():
    """
    Mock AsyncSession for PostService unit tests.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = post
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session
