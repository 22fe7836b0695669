"""Application lifespan: startup and shutdown.

Single place for all startup/shutdown logic. Only wiring of
infrastructure (cache connect, DB engine dispose); no business logic.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from crudkit.core.config import get_settings
from crudkit.infrastructure.cache.null_cache import NullCache
from crudkit.infrastructure.persistence.database import dispose_engine

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit run shutdown.

    Startup: Redis cache (if enabled; lenient, never blocks startup),
    otherwise NullCache. Shutdown: cache disconnect, SQL engine dispose.
    """
    settings = get_settings()

    # ---- Startup ----
    if settings.redis.enabled:
        from crudkit.infrastructure.cache.redis_cache import RedisCache

        cache = RedisCache.from_settings(settings.redis)
        await cache.connect()
        app.state.cache = cache
    else:
        app.state.cache = NullCache()
        logger.info("Redis disabled; using no-op cache")

    yield

    # ---- Shutdown ----
    cache = getattr(app.state, "cache", None)
    disconnect = getattr(cache, "disconnect", None)
    if disconnect is not None:
        await disconnect()
    await dispose_engine()
