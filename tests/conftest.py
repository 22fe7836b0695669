"""Pytest configuration and fixtures for crudkit.

Environment is set before crudkit settings are read: SQLite provider,
Redis disabled, cheap bcrypt. Each test gets a fresh in-memory database
with the schema created from the ORM metadata.
"""

import os

os.environ["DATABASE__PROVIDER"] = "sqlite"
os.environ["DATABASE__CONNECTION_STRING"] = "sqlite://"
os.environ["REDIS__ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from crudkit.core.config import DatabaseSettings, get_settings
from crudkit.infrastructure.cache.memory_cache import MemoryCache
from crudkit.infrastructure.persistence.database import (
    create_engine_for,
    create_session_factory,
    get_db,
    init_models,
)
from crudkit.infrastructure.security.password import BcryptPasswordHasher
from crudkit.main import create_app


@pytest.fixture
async def engine() -> AsyncEngine:
    """In-memory SQLite engine with all tables created."""
    eng = create_engine_for(DatabaseSettings(provider="sqlite"), "sqlite://")
    await init_models(eng)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest.fixture
async def db_session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncSession:
    """Database session for repository/integration tests."""
    async with session_factory() as session:
        yield session


@pytest.fixture
def password_hasher() -> BcryptPasswordHasher:
    """Low-cost bcrypt so tests stay fast."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def memory_cache() -> MemoryCache:
    return MemoryCache(max_size=100, default_ttl=60)


@pytest.fixture
def app(
    session_factory: async_sessionmaker[AsyncSession], memory_cache: MemoryCache
) -> FastAPI:
    """App wired to the test database and an in-memory cache (lifespan is not run)."""
    get_settings.cache_clear()
    application = create_app()

    async def _get_test_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = _get_test_db
    application.state.cache = memory_cache
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
