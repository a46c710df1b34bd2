import json
import logging
import time
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

import redis.asyncio as redis

from nexus_api.config import LOOKUP_CACHE_TTL, REDIS_URL


logger = logging.getLogger(__name__)

Compute = Callable[[], Awaitable[Any]]


class MemoryCache:
    """Read-through cache in process memory with per-entry TTL.

    Values produced by ``compute`` are stored only when it returns; an
    exception propagates to the caller and nothing is cached. Expired
    entries are dropped when read, and every ``sweep_every`` writes the
    whole table is swept.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, sweep_every: int = 256) -> None:
        self._clock = clock
        self._sweep_every = sweep_every
        self._writes = 0
        self._entries: Dict[str, Tuple[float, Any]] = {}

    async def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self._clock():
            del self._entries[key]
            return None
        return value

    async def set(self, key: str, value: Any, ttl: int = LOOKUP_CACHE_TTL) -> None:
        now = self._clock()
        self._writes += 1
        if self._writes % self._sweep_every == 0:
            self._sweep(now)
        self._entries[key] = (now + ttl, value)

    def _sweep(self, now: float) -> None:
        for key in [k for k, (expires_at, _) in self._entries.items() if expires_at <= now]:
            del self._entries[key]

    async def get_or_compute(self, key: str, compute: Compute, ttl: int = LOOKUP_CACHE_TTL) -> Any:
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await compute()
        await self.set(key, value, ttl)
        return value


class RedisCache:
    """Same contract as MemoryCache; values are stored as JSON with EX=ttl."""

    def __init__(self, redis_client, prefix: str = "cache") -> None:
        self._redis = redis_client
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def get(self, key: str) -> Optional[Any]:
        raw = await self._redis.get(self._key(key))
        if raw is None:
            return None
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int = LOOKUP_CACHE_TTL) -> None:
        await self._redis.set(self._key(key), json.dumps(value), ex=ttl)

    async def get_or_compute(self, key: str, compute: Compute, ttl: int = LOOKUP_CACHE_TTL) -> Any:
        cached = await self.get(key)
        if cached is not None:
            return cached
        value = await compute()
        await self.set(key, value, ttl)
        return value


_cache = None


async def get_cache():
    global _cache
    if _cache is not None:
        return _cache
    if not REDIS_URL:
        _cache = MemoryCache()
        return _cache
    _cache = RedisCache(redis.from_url(REDIS_URL))
    logger.info("Lookup cache backed by Redis")
    return _cache
