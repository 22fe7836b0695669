"""In-process TTL cache.

Same contract as RedisCache (JSON round trip, per-key TTL, misses on
expiry) without a server. Useful for single-process deployments and tests.
Bounded by an LRU (cachetools); the clock is injectable.
"""

import json
import logging
import time
from collections.abc import Callable
from typing import Any

from cachetools import LRUCache

logger = logging.getLogger(__name__)


class MemoryCache:
    """In-memory cache storing (expires_at, json) per key.

    Attributes:
        max_size: Maximum number of entries before least recently used ones are evicted.
        default_ttl: TTL in seconds applied when set() gets none; None means no expiry.
    """

    def __init__(
        self,
        max_size: int = 1000,
        default_ttl: int | None = 300,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._entries: LRUCache = LRUCache(maxsize=max_size)
        self.max_size = max_size
        self.default_ttl = default_ttl
        self._clock = clock

    def is_available(self) -> bool:
        return True

    def _live_entry(self, key: str) -> str | None:
        """Return the stored JSON for key, dropping it if expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, payload = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            logger.debug("Cache MISS (expired): %s", key)
            return None
        return payload

    async def get(self, key: str) -> Any | None:
        payload = self._live_entry(key)
        if payload is None:
            return None
        try:
            return json.loads(payload)
        except ValueError:
            logger.warning("Cache entry for %s is not valid JSON; treating as miss", key)
            return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        try:
            payload = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error("Cache value for %s is not JSON-serializable: %s", key, e)
            return False
        expire = ttl if ttl is not None else self.default_ttl
        expires_at = self._clock() + expire if expire else None
        self._entries[key] = (expires_at, payload)
        return True

    async def remove(self, key: str) -> bool:
        if self._live_entry(key) is None:
            return False
        del self._entries[key]
        return True

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    def clear(self) -> None:
        """Drop every entry."""
        self._entries.clear()
