"""
Key-value store port used by the semantic cache and model discovery.

Values are strings (JSON documents); every entry carries its own TTL.

Adapters:
- InMemoryCacheStore: process-local dict, expiry checked against a Clock
- RedisCacheStore: redis.asyncio, SETEX / GET / DEL
"""

import heapq
import threading
from typing import Optional, Protocol

import structlog
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from ticket_classifier.cache.redis_client import RedisClient
from ticket_classifier.clock import Clock, SystemClock
from ticket_classifier.config import Settings

logger = structlog.get_logger(__name__)


class CacheStoreError(Exception):
    """The backing store could not be reached or answered with an error."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class CacheStore(Protocol):
    """Async string key-value store with per-entry TTL."""

    async def get(self, key: str) -> Optional[str]:
        ...

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        ...

    async def forget(self, key: str) -> None:
        ...

    async def ping(self) -> bool:
        ...


class InMemoryCacheStore:
    """
    Process-local store.

    Expired entries are dropped when read, and every write purges whatever has
    expired since (a heap of expiry times keeps that cheap). Safe to share
    between event loops and threads.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self._entries: dict[str, tuple[str, float]] = {}
        self._expiries: list[tuple[float, str]] = []
        self._lock = threading.Lock()

    async def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            value, expires_at = entry
            if self.clock.now() >= expires_at:
                del self._entries[key]
                return None
            return value

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        with self._lock:
            now = self.clock.now()
            self._purge_expired(now)
            expires_at = now + ttl_seconds
            self._entries[key] = (value, expires_at)
            heapq.heappush(self._expiries, (expires_at, key))

    async def forget(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    async def ping(self) -> bool:
        return True

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _purge_expired(self, now: float) -> None:
        # Caller holds the lock. Heap items for overwritten or forgotten keys are stale.
        while self._expiries and self._expiries[0][0] <= now:
            expires_at, key = heapq.heappop(self._expiries)
            entry = self._entries.get(key)
            if entry is not None and entry[1] == expires_at:
                del self._entries[key]


class RedisCacheStore:
    """Redis-backed store; redis errors surface as CacheStoreError."""

    def __init__(self, redis_client: AsyncRedis):
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            return await self.redis.get(key)
        except RedisError as e:
            raise CacheStoreError(f"Redis GET failed: {e}", details={"key": key}) from e

    async def put(self, key: str, value: str, ttl_seconds: int) -> None:
        try:
            await self.redis.setex(name=key, time=ttl_seconds, value=value)
        except RedisError as e:
            raise CacheStoreError(f"Redis SETEX failed: {e}", details={"key": key}) from e

    async def forget(self, key: str) -> None:
        try:
            await self.redis.delete(key)
        except RedisError as e:
            raise CacheStoreError(f"Redis DEL failed: {e}", details={"key": key}) from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            logger.warning("Redis ping failed", error=str(e))
            return False


def create_cache_store(settings: Settings, clock: Optional[Clock] = None) -> CacheStore:
    """Build the store selected by CACHE_BACKEND ("memory" or "redis")."""
    backend = settings.CACHE_BACKEND.lower()
    if backend == "redis":
        logger.info("Using Redis cache store")
        return RedisCacheStore(RedisClient.get_async_client(settings))
    if backend == "memory":
        logger.info("Using in-memory cache store")
        return InMemoryCacheStore(clock=clock)
    raise ValueError(f"Unknown CACHE_BACKEND '{settings.CACHE_BACKEND}', expected 'memory' or 'redis'")
