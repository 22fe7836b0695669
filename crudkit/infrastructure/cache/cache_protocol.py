"""Cache protocol for the service layer (DIP).

Implementations are best-effort: no method raises, absent/expired/corrupt
entries all read as None, and a failed write returns False. Services must
behave identically when handed NullCache.
"""

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class CacheProtocol(Protocol):
    """Protocol for cache backends (Redis, in-memory, no-op)."""

    def is_available(self) -> bool:
        """Return True if cache is connected and usable."""
        ...

    async def get(self, key: str) -> Any | None:
        """Return cached value or None."""
        ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value with optional TTL in seconds. Return True if stored."""
        ...

    async def remove(self, key: str) -> bool:
        """Remove key from cache. Return True if a key was removed."""
        ...

    async def exists(self, key: str) -> bool:
        """Return True if key is present and not expired."""
        ...
