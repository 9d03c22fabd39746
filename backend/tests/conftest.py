"""Pytest configuration and shared fixtures for API and service tests."""

import os

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text

# Set test DB before app imports so config/engine use it. Point DATABASE_URL at
# postgresql+asyncpg://... to run the suite against Postgres instead.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test_sleep_routines.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("RATE_LIMIT_DEFAULT", "10000/minute")

from sleep_routines.core.auth import create_access_token, hash_password
from sleep_routines.db.base import Base
from sleep_routines.db.session import async_session_maker, engine, init_db
from sleep_routines.main import app
from sleep_routines.models.user import User

pytest_plugins = ["pytest_asyncio"]


@pytest_asyncio.fixture(scope="session", loop_scope="session")
async def ensure_db():
    """Create tables once per test session (no lifespan)."""
    await init_db()
    yield
    await engine.dispose()


async def _clear_all():
    """Delete all rows in reverse dependency order so tests start clean."""
    async with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            await conn.execute(text(f"DELETE FROM {table.name}"))


@pytest_asyncio.fixture
async def client(ensure_db):
    """Yield AsyncClient. No session override; use clean_db + test_user for isolated state."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture
async def clean_db(ensure_db):
    """Clear all tables so the next test has a clean DB."""
    await _clear_all()
    yield


async def _create_user(email: str) -> tuple[int, str, str]:
    async with async_session_maker() as session:
        user = User(
            email=email,
            password_hash=hash_password("password123"),
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        token = create_access_token(user.id, user.email)
        return user.id, user.email, token


@pytest_asyncio.fixture
async def test_user(clean_db):
    """Create a user via DB (committed) and return (user_id, email, access_token)."""
    return await _create_user("test@test.com")


@pytest_asyncio.fixture
async def other_user(clean_db):
    """Second user for cross-user ownership checks."""
    return await _create_user("other@test.com")


@pytest_asyncio.fixture
def auth_headers(test_user):
    """Return dict of Authorization header for test_user."""
    _, __, token = test_user
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
def other_headers(other_user):
    _, __, token = other_user
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def db_session(ensure_db):
    """Session for calling services directly; committed like a request would be."""
    async with async_session_maker() as session:
        yield session
        await session.rollback()
