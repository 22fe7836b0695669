"""Redis-based cache for the service layer.

Provides async Redis caching with TTL support. Best-effort: every failure
is logged and degrades to a miss or no-op, never an exception, and no
operation is retried. Connecting is lenient: when Redis is down at startup
the app still starts and a background task keeps pinging until it is back.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any

import redis.asyncio as redis

from crudkit.core.config import RedisSettings
from crudkit.domain.exceptions import CacheException

logger = logging.getLogger(__name__)

_RECONNECT_INITIAL_DELAY = 0.5


class RedisCache:
    """Async Redis cache with TTL support and background reconnect.

    Call connect() at startup and disconnect() at shutdown. Values are
    stored as JSON strings.
    """

    def __init__(
        self,
        redis_client: redis.Redis | None = None,
        *,
        connection_string: str = "redis://localhost:6379/0",
        default_ttl: int | None = 300,
        socket_timeout: float = 2.0,
        reconnect_max_delay: float = 30.0,
    ) -> None:
        """Initialize cache.

        Args:
            redis_client: Optional Redis client for testing or DI; treated as connected.
            connection_string: Redis URL used when no client is given.
            default_ttl: TTL in seconds applied when set() gets none; None or 0 means no expiry.
            socket_timeout: Connect and command timeout in seconds.
            reconnect_max_delay: Upper bound for the reconnect backoff in seconds.
        """
        self.redis = redis_client
        self.connection_string = connection_string
        self.default_ttl = default_ttl
        self.socket_timeout = socket_timeout
        self.reconnect_max_delay = reconnect_max_delay
        self._connected = redis_client is not None
        self._reconnect_task: asyncio.Task[None] | None = None

    @classmethod
    def from_settings(cls, settings: RedisSettings) -> RedisCache:
        return cls(
            connection_string=settings.connection_string,
            default_ttl=settings.default_ttl,
            socket_timeout=settings.socket_timeout,
            reconnect_max_delay=settings.reconnect_max_delay,
        )

    async def connect(self) -> None:
        """Create the client and ping it. On failure log, stay usable, and reconnect in background."""
        if self.redis is None:
            self.redis = redis.from_url(
                self.connection_string,
                decode_responses=True,
                socket_connect_timeout=self.socket_timeout,
                socket_timeout=self.socket_timeout,
                socket_keepalive=True,
            )
        try:
            await self.redis.ping()
        except redis.RedisError as e:
            logger.warning("Redis connection failed: %s. Cache disabled until reconnect.", e)
            self._connected = False
            self._schedule_reconnect()
            return
        self._connected = True
        logger.info("Redis cache connected")

    async def disconnect(self) -> None:
        """Stop reconnecting and close the client. Call on app shutdown."""
        if self._reconnect_task is not None:
            self._reconnect_task.cancel()
            try:
                await self._reconnect_task
            except asyncio.CancelledError:
                pass
            self._reconnect_task = None
        if self.redis is not None:
            await self.redis.aclose()
            self.redis = None
            self._connected = False
            logger.info("Redis cache disconnected")

    def is_available(self) -> bool:
        """Return True if Redis is connected and usable."""
        return self._connected and self.redis is not None

    def _schedule_reconnect(self) -> None:
        if self._reconnect_task is not None and not self._reconnect_task.done():
            return
        self._reconnect_task = asyncio.create_task(self._reconnect_loop())

    async def _reconnect_loop(self) -> None:
        """Ping with exponential backoff until Redis answers."""
        delay = _RECONNECT_INITIAL_DELAY
        while self.redis is not None and not self._connected:
            await asyncio.sleep(delay)
            try:
                await self.redis.ping()
            except redis.RedisError as e:
                logger.debug("Redis still unavailable: %s (next try in %.1fs)", e, delay)
                delay = min(delay * 2, self.reconnect_max_delay)
                continue
            self._connected = True
            logger.info("Redis cache reconnected")

    def _on_failure(self, operation: str, key: str, exc: Exception) -> None:
        """Log a backend failure; connection loss disables the cache and starts reconnecting."""
        error = CacheException(operation, key, str(exc))
        if isinstance(exc, (redis.ConnectionError, redis.TimeoutError)):
            logger.warning("%s (Redis disconnected)", error.message)
            self._connected = False
            self._schedule_reconnect()
        else:
            logger.error("%s", error.message, exc_info=exc)

    async def get(self, key: str) -> Any | None:
        """Return cached value (JSON-deserialized) or None if missing, corrupt, or unavailable."""
        if not self.is_available() or self.redis is None:
            return None
        try:
            value = await self.redis.get(key)
        except redis.RedisError as e:
            self._on_failure("get", key, e)
            return None
        if value is None:
            logger.debug("Cache MISS: %s", key)
            return None
        try:
            decoded = json.loads(value)
        except (TypeError, ValueError):
            logger.warning("Cache entry for %s is not valid JSON; treating as miss", key)
            return None
        logger.debug("Cache HIT: %s", key)
        return decoded

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value with TTL (seconds; default_ttl when None). Returns True on success."""
        if not self.is_available() or self.redis is None:
            return False
        try:
            serialized = json.dumps(value)
        except (TypeError, ValueError) as e:
            logger.error("Cache value for %s is not JSON-serializable: %s", key, e)
            return False
        expire = ttl if ttl is not None else self.default_ttl
        try:
            stored = await self.redis.set(key, serialized, ex=expire or None)
        except redis.RedisError as e:
            self._on_failure("set", key, e)
            return False
        logger.debug("Cache SET: %s (TTL: %ss)", key, expire)
        return bool(stored)

    async def remove(self, key: str) -> bool:
        """Remove key from cache. Returns True if a key was deleted."""
        if not self.is_available() or self.redis is None:
            return False
        try:
            deleted = await self.redis.delete(key)
        except redis.RedisError as e:
            self._on_failure("remove", key, e)
            return False
        logger.debug("Cache DELETE: %s", key)
        return bool(deleted)

    async def exists(self, key: str) -> bool:
        """Return True if key is present (Redis drops expired keys itself)."""
        if not self.is_available() or self.redis is None:
            return False
        try:
            count = await self.redis.exists(key)
        except redis.RedisError as e:
            self._on_failure("exists", key, e)
            return False
        return bool(count)
