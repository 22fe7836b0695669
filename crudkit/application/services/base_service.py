"""Base service: generic CRUD over one repository with cache-aside reads.

The repository is the system of record. The cache is consulted before
get_by_id and updated after every write; it can be NullCache without any
change in outcome. Persistence failures propagate unchanged.
"""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from crudkit.application.interfaces.repositories import IRepository
from crudkit.domain.exceptions import ResourceNotFoundException
from crudkit.infrastructure.cache.cache_protocol import CacheProtocol
from crudkit.infrastructure.cache.keys import entity_key
from crudkit.infrastructure.cache.null_cache import NullCache
from crudkit.infrastructure.cache.serialization import entity_from_cache, entity_to_cache

logger = logging.getLogger(__name__)

ModelType = TypeVar("ModelType")


class BaseService(Generic[ModelType]):
    """Base service with get_by_id, get_all, create, update, delete, exists.

    Subclasses set cache_namespace to enable caching (empty disables it) and
    override create/update to add business rules before delegating.
    """

    cache_namespace: str = ""

    def __init__(
        self,
        repository: IRepository[ModelType],
        model: type[ModelType],
        cache: CacheProtocol | None = None,
        *,
        cache_ttl: int | None = None,
    ) -> None:
        self._repository = repository
        self._model = model
        self._cache: CacheProtocol = cache if cache is not None else NullCache()
        self._cache_ttl = cache_ttl

    def _cache_key(self, entity_id: Any) -> str | None:
        if not self.cache_namespace or entity_id is None:
            return None
        return entity_key(self.cache_namespace, entity_id)

    async def _cache_read(self, entity_id: Any) -> ModelType | None:
        """Return the cached entity, or None on miss. Undecodable entries are evicted."""
        key = self._cache_key(entity_id)
        if key is None:
            return None
        payload = await self._cache.get(key)
        if payload is None:
            return None
        try:
            return entity_from_cache(self._model, payload)
        except (ValueError, TypeError) as e:
            logger.warning("Discarding undecodable cache entry %s: %s", key, e)
            await self._cache.remove(key)
            return None

    async def _cache_write(self, entity: ModelType) -> None:
        key = self._cache_key(getattr(entity, "id", None))
        if key is not None:
            await self._cache.set(key, entity_to_cache(entity), ttl=self._cache_ttl)

    async def _cache_evict(self, entity_id: Any) -> None:
        key = self._cache_key(entity_id)
        if key is not None:
            await self._cache.remove(key)

    async def get_by_id(self, entity_id: int) -> ModelType | None:
        """Return entity by ID from cache, else from the repository (and cache it)."""
        cached = await self._cache_read(entity_id)
        if cached is not None:
            return cached
        entity = await self._repository.get_by_id(entity_id)
        if entity is not None:
            await self._cache_write(entity)
        return entity

    async def get_all(self) -> list[ModelType]:
        return await self._repository.get_all()

    async def exists(self, entity_id: int) -> bool:
        return await self._repository.exists(entity_id)

    async def create(self, entity: ModelType) -> ModelType:
        """Persist entity via the repository and cache the stored form."""
        created = await self._repository.add(entity)
        await self._cache_write(created)
        return created

    async def update(self, entity: ModelType) -> None:
        """Persist changes; ResourceNotFoundException from the repository propagates."""
        try:
            updated = await self._repository.update(entity)
        except ResourceNotFoundException:
            await self._cache_evict(getattr(entity, "id", None))
            raise
        await self._cache_write(updated)

    async def delete(self, entity_id: int) -> None:
        await self._repository.delete(entity_id)
        await self._cache_evict(entity_id)

    async def _find(self, *criteria: Any) -> list[ModelType]:
        """Repository find for subclasses (not cached)."""
        return await self._repository.find(*criteria)
