"""
Shared test fixtures for Luma tests.

Provides fixtures for:
- Database sessions (async, Postgres only)
- API clients (with and without a database)
- Sample profiles
"""
import os
import sys
import uuid
from datetime import time
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Ensure src/ is on sys.path for direct pytest runs
PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_PATH = PROJECT_ROOT / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from luma.api import create_app
from luma.config import Settings, get_settings
from luma.database import Base, get_session, normalize_database_url
from luma.logic.profile import ProfileSnapshot


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest_asyncio.fixture
async def async_engine():
    """Create an async Postgres engine for testing with isolated schema."""
    database_url = os.getenv("TEST_DATABASE_URL") or os.getenv("DATABASE_URL")
    if not database_url:
        pytest.skip("Set TEST_DATABASE_URL for Postgres-backed tests.")

    database_url_str = normalize_database_url(database_url)
    schema_name = f"test_{uuid.uuid4().hex}"

    admin_engine = create_async_engine(
        database_url_str,
        echo=False,
        poolclass=NullPool,
    )

    async with admin_engine.begin() as conn:
        await conn.exec_driver_sql(f'CREATE SCHEMA "{schema_name}"')

    await admin_engine.dispose()

    engine = create_async_engine(
        database_url_str,
        echo=False,
        poolclass=NullPool,
        connect_args={"server_settings": {"search_path": schema_name}},
    )

    # Import all models to register them with Base
    from luma.models import Profile  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.exec_driver_sql(f'DROP SCHEMA IF EXISTS "{schema_name}" CASCADE')

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(async_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create an async database session for testing."""
    async_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session


# ============================================================================
# Settings and App Fixtures
# ============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Create test settings."""
    database_url = (
        os.getenv("TEST_DATABASE_URL")
        or os.getenv("DATABASE_URL")
        or "postgresql+asyncpg://localhost/postgres"
    )
    return Settings(
        database_url=database_url,
        log_level="DEBUG",
        api_docs_enabled=True,
        schedule_max_points=500,
    )


@pytest.fixture
def api_app(test_settings):
    """FastAPI application without a database (schedule preview, health)."""
    app = create_app(test_settings)
    app.dependency_overrides[get_settings] = lambda: test_settings
    return app


@pytest_asyncio.fixture
async def test_app(async_engine, api_app):
    """FastAPI application bound to the isolated test schema."""
    test_session_maker = async_sessionmaker(
        async_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async def override_get_session() -> AsyncGenerator[AsyncSession, None]:
        async with test_session_maker() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise
            finally:
                await session.close()

    api_app.dependency_overrides[get_session] = override_get_session

    yield api_app

    api_app.dependency_overrides.pop(get_session, None)


@pytest_asyncio.fixture
async def async_client(test_app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for database-backed API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=test_app),
        base_url="http://test"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def preview_client(api_app) -> AsyncGenerator[AsyncClient, None]:
    """Create an async HTTP client for endpoints that need no database."""
    async with AsyncClient(
        transport=ASGITransport(app=api_app),
        base_url="http://test"
    ) as client:
        yield client


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_profile_data() -> dict:
    """Sample profile payload for testing."""
    return {
        "name": "Bedroom",
        "timezone": "UTC",
        "sleep_start": "22:00:00",
        "sleep_end": "06:00:00",
        "min_color_temp": 2000,
        "max_color_temp": 6500,
        "night_mode_enabled": True,
        "motion_timeout_seconds": 120,
    }


@pytest.fixture
def utc_profile() -> ProfileSnapshot:
    """Profile without a location: sleeps 22:00-06:00 UTC, 2000-6500K."""
    return ProfileSnapshot(
        id=1,
        timezone="UTC",
        sleep_start=time(22, 0),
        sleep_end=time(6, 0),
        min_color_temp=2000,
        max_color_temp=6500,
        night_mode_enabled=True,
        motion_timeout_seconds=120,
    )


@pytest.fixture
def london_profile() -> ProfileSnapshot:
    """Profile located in London: sleeps 23:00-07:00 local, 2700-5000K."""
    return ProfileSnapshot(
        id=2,
        timezone="Europe/London",
        sleep_start=time(23, 0),
        sleep_end=time(7, 0),
        min_color_temp=2700,
        max_color_temp=5000,
        latitude=51.5074,
        longitude=-0.1278,
    )
