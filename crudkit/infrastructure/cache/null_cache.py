"""No-op cache: every read misses, every write is dropped."""

from typing import Any


class NullCache:
    """Always-empty cache. Used when Redis is disabled and in tests."""

    def is_available(self) -> bool:
        return False

    async def get(self, key: str) -> Any | None:
        return None

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        return False

    async def remove(self, key: str) -> bool:
        return False

    async def exists(self, key: str) -> bool:
        return False
