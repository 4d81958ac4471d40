"""
Fixed-Window Counter Stores

Counters live in Redis in production. Each counter's window boundary is fixed
by the first increment (PEXPIRE NX) and never moves, so a window resets
exactly when it was first recorded to.

InMemoryCounterStore has the same interface for local development and tests
(single process only).
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

# DECR only a live, positive counter: a key that expired before the rollback
# must not come back at -1 with no TTL
ROLLBACK_SCRIPT = """
local count = tonumber(redis.call("GET", KEYS[1]) or "0")
if count > 0 then
    return redis.call("DECR", KEYS[1])
end
return 0
"""


@dataclass(frozen=True)
class WindowCount:
    """Current count for one key and milliseconds until its window resets."""
    count: int
    ttl_ms: int


class RedisCounterStore:
    """
    Redis-backed counters.

    Requires Redis 7+ for PEXPIRE NX.
    """

    def __init__(self, redis: Redis):
        self._redis = redis
        self._rollback = redis.register_script(ROLLBACK_SCRIPT)

    @classmethod
    def from_url(cls, url: str) -> "RedisCounterStore":
        return cls(Redis.from_url(url, decode_responses=True))

    async def peek(self, key: str, window_ms: int) -> WindowCount:
        async with self._redis.pipeline(transaction=False) as pipe:
            pipe.get(key)
            pipe.pttl(key)
            raw, ttl = await pipe.execute()
        if raw is None or ttl == -2:
            return WindowCount(0, window_ms)
        return WindowCount(int(raw), ttl if ttl >= 0 else window_ms)

    async def increment(self, key: str, window_ms: int) -> WindowCount:
        async with self._redis.pipeline(transaction=True) as pipe:
            pipe.incr(key)
            pipe.pexpire(key, window_ms, nx=True)
            pipe.pttl(key)
            count, _, ttl = await pipe.execute()
        return WindowCount(int(count), ttl if ttl >= 0 else window_ms)

    async def decrement(self, key: str) -> None:
        await self._rollback(keys=[key])

    async def close(self) -> None:
        await self._redis.close()


class InMemoryCounterStore:
    """Process-local counters with the same fixed-window semantics."""

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._counters: Dict[str, Tuple[int, float]] = {}  # key -> (count, reset_at seconds)
        self._lock = asyncio.Lock()

    def _live(self, key: str) -> Optional[Tuple[int, float]]:
        entry = self._counters.get(key)
        if entry is None:
            return None
        if self._clock() >= entry[1]:
            del self._counters[key]
            return None
        return entry

    def _ttl_ms(self, reset_at: float) -> int:
        return max(0, int((reset_at - self._clock()) * 1000))

    async def peek(self, key: str, window_ms: int) -> WindowCount:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                return WindowCount(0, window_ms)
            return WindowCount(entry[0], self._ttl_ms(entry[1]))

    async def increment(self, key: str, window_ms: int) -> WindowCount:
        async with self._lock:
            entry = self._live(key)
            if entry is None:
                entry = (0, self._clock() + window_ms / 1000)
            count, reset_at = entry[0] + 1, entry[1]
            self._counters[key] = (count, reset_at)
            return WindowCount(count, self._ttl_ms(reset_at))

    async def decrement(self, key: str) -> None:
        async with self._lock:
            entry = self._live(key)
            if entry is not None:
                self._counters[key] = (max(0, entry[0] - 1), entry[1])

    async def close(self) -> None:
        self._counters.clear()


def create_counter_store(redis_url: Optional[str] = None, clock: Callable[[], float] = time.time):
    """Redis store when a URL is configured, in-process store otherwise."""
    if redis_url:
        logger.info("Rate limit counters: Redis")
        return RedisCounterStore.from_url(redis_url)
    logger.warning("REDIS_URL not set - rate limit counters are process-local")
    return InMemoryCounterStore(clock=clock)
