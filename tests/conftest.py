"""Shared test fixtures for pytest"""
import os

# Settings are cached on first import
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_DIR"] = ""
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "DEV"

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from timeline_api.database import Base, get_db  # noqa: E402
from timeline_api.main import app  # noqa: E402
from timeline_api.models.user import User  # noqa: E402
from timeline_api.schemas.timeline import TimelineCreate  # noqa: E402
from timeline_api.services.timeline import TimelineService  # noqa: E402
from timeline_api.utils.prometheus_metrics import ready  # noqa: E402
from timeline_api.utils.security import create_access_token, hash_password  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"

FIXED_NOW = datetime(2026, 6, 1, 12, 0, 0)


@pytest.fixture
async def test_engine():
    """In-memory database shared by every connection of the test"""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def test_db(test_engine):
    """Create test database session"""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with async_session() as session:
        yield session


@pytest.fixture
async def client(test_db):
    """HTTP client for API testing"""

    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    ready.set(1)

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _create_user(db: AsyncSession, email: str, username: str) -> User:
    user = User(
        email=email,
        username=username,
        hashed_password=hash_password("testpass123"),
        is_active=True,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest.fixture
async def test_user(test_db):
    """Create test user"""
    return await _create_user(test_db, "owner@example.com", "owner")


@pytest.fixture
async def other_user(test_db):
    """A second user who owns nothing of test_user's"""
    return await _create_user(test_db, "other@example.com", "other")


@pytest.fixture
def auth_headers(test_user):
    """Generate auth headers with JWT token"""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture
def other_auth_headers(other_user):
    return {"Authorization": f"Bearer {create_access_token(other_user.id)}"}


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_NOW"""
    return lambda: FIXED_NOW


@pytest.fixture
async def timeline(test_db, test_user):
    """Timeline owned by test_user"""
    return await TimelineService(test_db).create_timeline(
        test_user,
        TimelineCreate(title="Wedding Day", date="2026-06-20", location="Lakeside Hall"),
    )
