"""Presentation-layer dependency injection.

Routes depend only on service contracts; the concrete classes come from
the ServiceRegistry built in create_app(), one instance per request,
sharing that request's DB session.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from crudkit.application.interfaces import IUserService
from crudkit.core.registry import Scope, ServiceRegistry
from crudkit.infrastructure.cache.cache_protocol import CacheProtocol
from crudkit.infrastructure.cache.null_cache import NullCache
from crudkit.infrastructure.persistence.database import get_db


def get_registry(request: Request) -> ServiceRegistry:
    return request.app.state.registry


def get_cache(request: Request) -> CacheProtocol:
    """Cache set up by the lifespan; NullCache when none was configured."""
    cache = getattr(request.app.state, "cache", None)
    return cache if cache is not None else NullCache()


async def get_user_service(
    registry: Annotated[ServiceRegistry, Depends(get_registry)],
    db: Annotated[AsyncSession, Depends(get_db)],
    cache: Annotated[CacheProtocol, Depends(get_cache)],
) -> IUserService:
    return registry.resolve(IUserService, Scope(db=db, cache=cache))


UserServiceDep = Annotated[IUserService, Depends(get_user_service)]
