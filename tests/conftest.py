# tests/conftest.py
"""
Main pytest configuration and shared fixtures for all tests.

This module provides:
- Async test support (pytest-asyncio auto mode, see pyproject.toml)
- Settings override for the test environment
- A fresh in-memory SQLite database per test
- An in-memory response cache
- An httpx AsyncClient bound to the ASGI app
- Factory Boy integration
"""

from typing import AsyncGenerator

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from admin_service.api.app import create_app
from admin_service.config.settings import Settings, get_settings
from admin_service.infrastructure.cache.cache import InMemoryCache
from admin_service.infrastructure.database import models  # noqa: F401
from admin_service.infrastructure.database.connection import DatabaseManager, db, enable_sqlite_savepoints


# ============================================================================
# Pytest Configuration
# ============================================================================

pytest_plugins = ["tests.factories.fixtures"]

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# ============================================================================
# Settings and Configuration
# ============================================================================

TEST_ENV = {
    "ENVIRONMENT": "test",
    "LOG_LEVEL": "40",  # ERROR level to reduce noise in tests
    "LOG_FORMAT": "console",
    "CACHE_ENABLED": "true",
    "CACHE_INVALIDATION_STRATEGY": "version",
    "REQUEST_LOG_ENABLED": "true",
}


@pytest.fixture(scope="session", autouse=True)
def override_settings(tmp_path_factory):
    """
    Point ``get_settings()`` at the test environment for the whole session.

    Redis and the database URL are unset so nothing reaches real services.
    """
    with pytest.MonkeyPatch.context() as mp:
        for key, value in TEST_ENV.items():
            mp.setenv(key, value)
        mp.setenv("FILES_PATH", str(tmp_path_factory.mktemp("files")))
        mp.delenv("REDIS_URL", raising=False)
        mp.delenv("DATABASE_URL", raising=False)
        get_settings.cache_clear()

        yield

    get_settings.cache_clear()


@pytest.fixture
def test_settings() -> Settings:
    return get_settings()


@pytest.fixture
def scan_strategy(monkeypatch):
    """Switch the response cache to the key-scan invalidation strategy."""
    monkeypatch.setenv("CACHE_INVALIDATION_STRATEGY", "scan")
    get_settings.cache_clear()
    yield get_settings()
    monkeypatch.setenv("CACHE_INVALIDATION_STRATEGY", "version")
    get_settings.cache_clear()


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
async def test_engine() -> AsyncGenerator[AsyncEngine, None]:
    """
    In-memory SQLite engine with every table created.

    ``StaticPool`` keeps the single in-memory connection alive so every
    session of the test sees the same database; savepoints are enabled so
    nested store transactions roll back cleanly.
    """
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
        echo=False,
    )
    enable_sqlite_savepoints(engine)

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
async def db_session(test_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """
    Database session for the test.

    Usage:
        async def test_something(db_session):
            church = await ChurchFactory.create_async(session=db_session)
    """
    session_factory = async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest.fixture
async def db_manager(test_engine: AsyncEngine) -> AsyncGenerator[DatabaseManager, None]:
    """The global ``db`` manager bound to the test engine."""
    db.bind(test_engine)
    yield db
    await db.disconnect()


# ============================================================================
# Cache Fixtures
# ============================================================================

@pytest.fixture
def memory_cache() -> InMemoryCache:
    return InMemoryCache(max_size=1000, namespace="test")


# ============================================================================
# FastAPI Application and Client
# ============================================================================

@pytest.fixture
def app(db_manager: DatabaseManager, memory_cache: InMemoryCache) -> FastAPI:
    """
    Application wired to the test database and the in-memory cache.

    The lifespan does not run under ``ASGITransport``; the fixtures above do
    its work.
    """
    application = create_app()
    application.state.cache = memory_cache
    return application


@pytest.fixture
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Async HTTP client for API tests.

    Usage:
        async def test_endpoint(async_client):
            response = await async_client.get("/church")
            assert response.status_code == 200
    """
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
