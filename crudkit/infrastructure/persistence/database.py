"""Persistence: async engine, session factory, and Base for SQLAlchemy ORM.

The provider (postgres or sqlite) comes from Settings.database.provider and
selects the async driver; the connection string may be written without a
driver (postgresql://..., sqlite:///...) and is normalized here.

Engine and session factory are created lazily on first use (get_db) so
import does not trigger Settings validation.
"""

import logging
from collections.abc import AsyncIterator
from typing import Any

from sqlalchemy.engine import URL, make_url
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import StaticPool

from crudkit.core.config import DatabaseSettings, get_settings

logger = logging.getLogger(__name__)

_PROVIDER_DRIVERS: dict[str, str] = {
    "postgres": "postgresql+asyncpg",
    "sqlite": "sqlite+aiosqlite",
}

# Set by _ensure_engine() on first use; avoids get_settings() at import time.
engine: AsyncEngine | None = None
AsyncSessionLocal: async_sessionmaker[AsyncSession] | None = None


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy declarative models."""


def build_database_url(provider: str, connection_string: str) -> URL:
    """Return the connection URL with the async driver for provider.

    Raises:
        ValueError: If provider is not supported or the URL's backend does not match it.
    """
    driver = _PROVIDER_DRIVERS.get(provider)
    if driver is None:
        raise ValueError(
            f"Unsupported database provider: {provider!r}. "
            f"Supported providers are: {', '.join(_PROVIDER_DRIVERS)}"
        )
    url = make_url(connection_string)
    backend = driver.split("+", 1)[0]
    if url.get_backend_name() != backend:
        raise ValueError(
            f"Connection string backend {url.get_backend_name()!r} does not match provider {provider!r}"
        )
    return url.set(drivername=driver)


def create_engine_for(database: DatabaseSettings, connection_string: str) -> AsyncEngine:
    """Create an AsyncEngine for the configured provider.

    Postgres gets a sized pool with pre-ping; in-memory SQLite shares one
    connection (StaticPool) so every session sees the same database.
    """
    url = build_database_url(database.provider, connection_string)
    kwargs: dict[str, Any] = {"echo": database.echo}
    if database.provider == "postgres":
        kwargs.update(
            pool_pre_ping=True,
            pool_size=database.pool_size,
            max_overflow=database.max_overflow,
            pool_recycle=3600,
        )
    elif url.database in (None, "", ":memory:"):
        kwargs.update(
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    logger.info(
        "Configuring database with provider: %s (%s)",
        database.provider,
        url.render_as_string(hide_password=True),
    )
    return create_async_engine(url, **kwargs)


def create_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    """Session factory used by get_db and by tests."""
    return async_sessionmaker(
        bind=bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


def _ensure_engine() -> None:
    """Create engine and AsyncSessionLocal on first use."""
    global engine, AsyncSessionLocal
    if AsyncSessionLocal is not None:
        return
    settings = get_settings()
    engine = create_engine_for(settings.database, settings.database_connection_string or "")
    AsyncSessionLocal = create_session_factory(engine)


async def get_db() -> AsyncIterator[AsyncSession]:
    """Database session dependency.

    One session per request; repositories commit each mutation themselves.
    The session is closed on exit whether or not the request failed.
    """
    _ensure_engine()
    assert AsyncSessionLocal is not None
    async with AsyncSessionLocal() as session:
        yield session


async def init_models(bind: AsyncEngine) -> None:
    """Create all tables (tests and local sqlite); production uses Alembic."""
    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_engine() -> None:
    """Dispose the pooled engine on shutdown."""
    global engine, AsyncSessionLocal
    if engine is not None:
        await engine.dispose()
        logger.info("Database engine disposed")
    engine = None
    AsyncSessionLocal = None
