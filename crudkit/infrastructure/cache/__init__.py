"""Cache: protocol, Redis/in-memory/no-op backends, key builders and entity codec.

Used by services for cache-aside reads. The store stays authoritative;
every backend is interchangeable with NullCache.
"""

from crudkit.infrastructure.cache.cache_protocol import CacheProtocol
from crudkit.infrastructure.cache.keys import entity_key, user_key
from crudkit.infrastructure.cache.memory_cache import MemoryCache
from crudkit.infrastructure.cache.null_cache import NullCache
from crudkit.infrastructure.cache.redis_cache import RedisCache
from crudkit.infrastructure.cache.serialization import entity_from_cache, entity_to_cache

__all__ = [
    "CacheProtocol",
    "MemoryCache",
    "NullCache",
    "RedisCache",
    "entity_from_cache",
    "entity_key",
    "entity_to_cache",
    "user_key",
]
