import logging
import time
import uuid
from collections import deque
from typing import Deque, Dict, Optional

import redis.asyncio as redis

from nexus_api.config import MESSAGE_RATE_LIMIT, MESSAGE_RATE_WINDOW_MS, REDIS_URL


logger = logging.getLogger(__name__)


def now_ms() -> int:
    return int(time.time() * 1000)


class MemoryRateLimiter:
    """Sliding-window limiter kept in process memory.

    Each key keeps at most ``limit`` timestamps; anything older than the
    window is dropped on the next check. Every ``sweep_every`` checks, keys
    with nothing left in the window are removed, so idle senders do not
    accumulate. Not shared between worker processes.
    """

    def __init__(self, limit: int = MESSAGE_RATE_LIMIT, window_ms: int = MESSAGE_RATE_WINDOW_MS, sweep_every: int = 1000) -> None:
        self.limit = limit
        self.window_ms = window_ms
        self._sweep_every = sweep_every
        self._checks = 0
        self._hits: Dict[str, Deque[int]] = {}

    async def check_and_record(self, key: str, now: Optional[int] = None) -> bool:
        now = now_ms() if now is None else now
        cutoff = now - self.window_ms
        self._checks += 1
        if self._checks % self._sweep_every == 0:
            self._sweep(cutoff)
        hits = self._hits.setdefault(key, deque())
        while hits and hits[0] <= cutoff:
            hits.popleft()
        if len(hits) >= self.limit:
            return False
        hits.append(now)
        return True

    def _sweep(self, cutoff: int) -> None:
        for key in [k for k, hits in self._hits.items() if not hits or hits[-1] <= cutoff]:
            del self._hits[key]

    async def count(self, key: str, now: Optional[int] = None) -> int:
        now = now_ms() if now is None else now
        cutoff = now - self.window_ms
        return sum(1 for ts in self._hits.get(key, ()) if ts > cutoff)


class RedisRateLimiter:
    """Sliding-window limiter on a Redis sorted set, shared by every process."""

    def __init__(self, redis_client, limit: int = MESSAGE_RATE_LIMIT, window_ms: int = MESSAGE_RATE_WINDOW_MS, prefix: str = "ratelimit:messages") -> None:
        self._redis = redis_client
        self.limit = limit
        self.window_ms = window_ms
        self._prefix = prefix

    def _key(self, key: str) -> str:
        return f"{self._prefix}:{key}"

    async def check_and_record(self, key: str, now: Optional[int] = None) -> bool:
        now = now_ms() if now is None else now
        redis_key = self._key(key)
        member = f"{now}:{uuid.uuid4().hex}"
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(redis_key, "-inf", now - self.window_ms)
            pipe.zadd(redis_key, {member: now})
            pipe.zcard(redis_key)
            pipe.pexpire(redis_key, self.window_ms)
            _, _, count, _ = await pipe.execute()
        if count > self.limit:
            # over the cap: undo our own entry so refused sends are not counted
            await self._redis.zrem(redis_key, member)
            return False
        return True

    async def count(self, key: str, now: Optional[int] = None) -> int:
        now = now_ms() if now is None else now
        return await self._redis.zcount(self._key(key), f"({now - self.window_ms}", "+inf")


_limiter = None


async def get_rate_limiter():
    global _limiter
    if _limiter is not None:
        return _limiter
    if not REDIS_URL:
        _limiter = MemoryRateLimiter()
        return _limiter
    _limiter = RedisRateLimiter(redis.from_url(REDIS_URL))
    logger.info("Message rate limiter backed by Redis")
    return _limiter
