"""
Test fixtures for the moco test suite.

This module provides shared fixtures used across all test files:

  - db_engine: Fresh in-memory SQLite database for each test
  - client: Async HTTP test client (unauthenticated)
  - authenticated_client: Client for a pre-registered user with a JWT
  - second_authenticated_client: A second user on its own client, for
    cross-user tests

Key design decisions:
  - In-memory SQLite (sqlite+aiosqlite://) is used for speed and isolation.
    Each test gets a completely fresh database; no state leaks between tests.
  - FastAPI's get_db dependency is overridden to hand out sessions on the
    test engine. The override commits, rolls back and publishes change
    events exactly like the real one.
  - Users are created through the real signup endpoint, so every API test
    also exercises the auth flow.
  - Each user gets a separate AsyncClient; sharing one client and swapping
    its Authorization header would make "user A vs. user B" tests pass for
    the wrong reason.
"""

import os

# Settings() requires a secret; set one before the app is imported
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from moco.database import Base, get_db
from moco.events import discard_pending, publish_pending
from moco.main import app


# In-memory SQLite for fast, isolated tests
TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest_asyncio.fixture
async def db_engine():
    """Create a fresh async engine with all tables for each test."""
    engine = create_async_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(db_engine):
    return async_sessionmaker(
        db_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Provide an async session bound to the test engine."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def app_with_test_db(session_factory):
    """The FastAPI app with get_db pointed at the test engine."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                discard_pending(session)
                raise
            publish_pending(session)

    app.dependency_overrides[get_db] = override_get_db
    yield app
    app.dependency_overrides.clear()


def _new_client(test_app) -> AsyncClient:
    return AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test",
    )


async def _signup(client: AsyncClient, email: str, password: str) -> str:
    response = await client.post(
        "/auth/signup",
        json={"email": email, "password": password, "display_name": email.split("@")[0]},
    )
    assert response.status_code == 201, f"Signup failed: {response.text}"
    return response.json()["token"]


@pytest_asyncio.fixture
async def client(app_with_test_db):
    """Async HTTP test client with the test database injected."""
    async with _new_client(app_with_test_db) as ac:
        yield ac


@pytest_asyncio.fixture
async def authenticated_client(app_with_test_db):
    """
    Test client with a pre-registered user and JWT token.

    Signs up a test user via the real signup endpoint, then sets the
    Authorization header on the client for all subsequent requests.
    """
    async with _new_client(app_with_test_db) as ac:
        token = await _signup(ac, "testuser@example.com", "SecurePass123!")
        ac.headers["Authorization"] = f"Bearer {token}"
        yield ac


@pytest_asyncio.fixture
async def second_authenticated_client(app_with_test_db):
    """
    A second user for cross-user authorization tests.

    Use this alongside authenticated_client to verify that user B cannot
    see or touch user A's rows.
    """
    async with _new_client(app_with_test_db) as ac:
        token = await _signup(ac, "seconduser@example.com", "SecurePass456!")
        ac.headers["Authorization"] = f"Bearer {token}"
        yield ac
