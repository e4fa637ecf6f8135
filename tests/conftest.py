"""
Hebrew Reader Backend — Test Configuration (conftest.py)
========================================================

What:  Shared pytest fixtures for the entire test suite.
How:   Environment variables are set before any hebrew_reader import so the
       settings singleton picks them up. Endpoint tests run against an
       in-memory SQLite database (aiosqlite) created from the ORM metadata.

Fixture Hierarchy:
    Function-scoped (created fresh for each test):
    ├── db_engine:        in-memory SQLite engine with all tables
    ├── session_factory:  async_sessionmaker bound to db_engine
    ├── test_client:      HTTPX AsyncClient with get_db_session overridden
    ├── mock_db_session:  AsyncMock session for service-level failure tests
    ├── make_token:       signs access tokens the app accepts
    └── make_profile:     inserts a profile row (optionally admin)
"""

import os
import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional
from unittest.mock import AsyncMock, MagicMock

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

TEST_JWT_SECRET = "test-jwt-secret-with-at-least-32-bytes!!"

os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["AUTH_JWT_SECRET"] = TEST_JWT_SECRET
os.environ["OPENAI_API_KEY"] = ""
os.environ["OPENROUTER_API_KEY"] = ""
os.environ["GEMINI_API_KEY"] = ""
os.environ["LOG_LEVEL"] = "WARNING"

import jwt  # noqa: E402
import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from hebrew_reader.database import Base, get_db_session  # noqa: E402
from hebrew_reader.models.profile import Profile  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# Database Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def db_engine():
    """One in-memory database per test; StaticPool keeps it on one connection."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return async_sessionmaker(db_engine, expire_on_commit=False)


@pytest.fixture
def mock_db_session():
    """
    A mock AsyncSession.

    Usage:
        mock_db_session.execute.side_effect = OperationalError(...)
        await service.load_settings(mock_db_session, "user_1")
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def make_profile(session_factory):
    """Insert a profile and return its id."""

    async def _make(
        is_admin: bool = False,
        preferences: Optional[dict] = None,
        user_id: Optional[uuid.UUID] = None,
    ) -> uuid.UUID:
        profile_id = user_id or uuid.uuid4()
        async with session_factory() as session:
            session.add(Profile(
                id=profile_id,
                email=f"{profile_id.hex[:8]}@example.com",
                is_admin=is_admin,
                preferences=preferences or {},
            ))
            await session.commit()
        return profile_id

    return _make


# ══════════════════════════════════════════════════════════════════════════
# Auth Fixtures
# ══════════════════════════════════════════════════════════════════════════

def encode_token(
    user_id: uuid.UUID,
    subject: Optional[str] = None,
    expires_in: int = 3600,
    secret: str = TEST_JWT_SECRET,
    audience: str = "authenticated",
    email: Optional[str] = None,
) -> str:
    claims = {
        "sub": subject or str(user_id),
        "aud": audience,
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


@pytest.fixture
def make_token():
    return encode_token


@pytest.fixture
def auth_headers():
    def _headers(user_id: uuid.UUID) -> dict:
        return {"Authorization": f"Bearer {encode_token(user_id)}"}

    return _headers


# ══════════════════════════════════════════════════════════════════════════
# HTTP Client
# ══════════════════════════════════════════════════════════════════════════

@pytest_asyncio.fixture
async def test_client(session_factory):
    """
    HTTPX AsyncClient talking to the app through ASGITransport.

    Each request gets its own session on the test database, committed on
    success and rolled back on error, like the production dependency.
    """
    from hebrew_reader.main import app

    async def override_get_db_session():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = override_get_db_session
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
