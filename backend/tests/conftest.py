"""
Blog API — Test Configuration (conftest.py)
============================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy (all function-scoped, fresh per test):
    ├── mock_db_session: Mock database session (no real DB needed)
    ├── db_engine:       Async SQLite engine on a temp file, schema created
    ├── db_session:      Session on db_engine for service-level tests
    ├── token_service:   TokenService with a test secret
    ├── test_app:        FastAPI app wired to db_engine and token_service
    ├── test_client:     HTTPX AsyncClient for API endpoint testing
    └── register_user / auth_headers: helpers that go through the real API
"""

import os

# Override settings for testing BEFORE any blogapi imports
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./test.db"
os.environ["JWT_SECRET"] = "test-secret-not-for-production"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["ENVIRONMENT"] = "development"

from typing import AsyncGenerator  # noqa: E402
from unittest.mock import AsyncMock, MagicMock  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402

from blogapi.database import build_engine, create_tables, get_db_session  # noqa: E402
from blogapi.services.token_service import TokenService, get_token_service  # noqa: E402

TEST_SECRET = "test-secret-not-for-production"
DEFAULT_PASSWORD = "correct-horse"


# ══════════════════════════════════════════════════════════════════════════
# Mocks
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    Provides a mock async database session.

    Usage:
        async def test_get_user(mock_db_session):
            mock_db_session.execute.return_value.scalar_one_or_none.return_value = user
            result = await user_service.get_user(mock_db_session, 1)
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


# ══════════════════════════════════════════════════════════════════════════
# Database
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine(tmp_path):
    """SQLite file database per test; a file (not :memory:) so every pooled connection sees the schema."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'blog.db'}")
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ══════════════════════════════════════════════════════════════════════════
# Application
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def token_service():
    return TokenService(secret=TEST_SECRET, ttl_seconds=3600)


@pytest.fixture
def test_app(session_factory, token_service):
    """
    A fresh app per test. ASGITransport does not run the lifespan, so the
    schema comes from db_engine and the dependencies are overridden here.
    """
    from blogapi.main import create_app

    app = create_app()

    async def override_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_db_session
    app.dependency_overrides[get_token_service] = lambda: token_service
    return app


@pytest_asyncio.fixture
async def test_client(test_app):
    """
    Provides an async HTTP test client for endpoint testing.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


# ══════════════════════════════════════════════════════════════════════════
# API helpers
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def register_user(test_client):
    """Registers a user through POST /api/users and returns the response data."""

    async def _register(name="Ada", email="ada@example.com", password=DEFAULT_PASSWORD):
        response = await test_client.post(
            "/api/users", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 200, response.text
        return response.json()["data"]

    return _register


@pytest.fixture
def auth_headers(token_service):
    """Bearer header for a user id, signed with the test app's secret."""

    def _headers(user_id: int):
        return {"Authorization": f"Bearer {token_service.issue(user_id)}"}

    return _headers
