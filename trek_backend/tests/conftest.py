"""
Centralized Test Configuration.
"""

import os

# Required settings must exist before the app is imported
os.environ.setdefault("DB_HOST", "localhost")
os.environ.setdefault("DB_USER", "trek")
os.environ.setdefault("DB_PASSWORD", "trek")
os.environ.setdefault("DB_NAME", "ronins_treks_test")
os.environ.setdefault("JWT_SECRET", "test-secret-key-for-jwt-signing")
os.environ.setdefault("ADMIN_PASSWORD", "admin-test-password")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
# Generous global budget; the throttling test installs its own limiter
os.environ.setdefault("REQUEST_RATE_LIMIT", "100000")

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from trek_backend.app.main import app
from trek_backend.app.db.session import get_db, Base
from trek_backend.app.core.config import settings
from trek_backend.app.core.jwt import create_access_token
from trek_backend.app.core.reliability import login_rate_limiter, request_rate_limiter
from trek_backend.app.models.trek import Trek
from trek_backend.app.models.trek_enums import TrekDifficulty

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)):
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)


@pytest.fixture(scope="session", autouse=True)
def apply_overrides():
    """Apply overrides once for the session."""

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    yield

    app.dependency_overrides = {}


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    login_rate_limiter.reset()
    request_rate_limiter.reset()

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def gallery_file(tmp_path, monkeypatch):
    """Point the gallery store at a per-test file."""
    path = tmp_path / "gallery.json"
    monkeypatch.setattr(settings, "gallery_path", str(path))
    return path


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def admin_token():
    return create_access_token(data={"sub": "admin", "admin": True})


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def trek_payload():
    """Factory for a valid trek creation body."""
    def build(**overrides):
        payload = {
            "name": "Harishchandragad",
            "description": "Konkan Kada cliff and the ancient Kedareshwar cave temple.",
            "duration": "2 Days",
            "trek_length": 14.5,
            "difficulty": "Moderate",
            "max_altitude": 4670,
            "base_village": "Pachnai",
            "transport": "Pune to Pachnai by bus",
            "meals": "Dinner and breakfast",
            "sightseeing": "Konkan Kada, Taramati peak",
            "image": "https://example.com/harishchandragad.jpg",
        }
        payload.update(overrides)
        return payload
    return build


@pytest.fixture
async def trek(db_session):
    """Persisted trek for booking and tracking tests."""
    trek = Trek(
        name="Kalsubai Peak",
        description="Night climb to the highest point in Maharashtra.",
        duration="1 Day",
        trek_length=12.0,
        difficulty=TrekDifficulty.MODERATE,
        max_altitude=5400,
        base_village="Bari",
        transport="Pune to Bari by bus",
        meals="Breakfast and lunch",
        sightseeing="Sunrise point",
        image="https://example.com/kalsubai.jpg",
        price=1499,
    )
    db_session.add(trek)
    await db_session.commit()
    await db_session.refresh(trek)
    return trek
