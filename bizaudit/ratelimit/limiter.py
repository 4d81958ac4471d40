"""
Dual Rate Limiter

Two independent fixed-window quotas guard every billed AI call:
- contact identity (the submitted email, case-sensitive), 3 per 24h
- network origin, 10 per 24h (looser for shared networks)

A rejection carries only the rounded-up hours until the later reset of the
counters that tripped. Which counter tripped is never disclosed.

Check order:
1. Peek both counters. If either is already at its limit, reject without
   touching either.
2. Increment both. If a concurrent request got there first and a count now
   exceeds its limit, roll both increments back and reject.
"""

import asyncio
import hashlib
import logging
import math
import time
from typing import Callable, List, Mapping, Optional

from redis.exceptions import RedisError

from bizaudit.errors import RateLimitExceeded, TransientProviderError
from bizaudit.utils.config import Settings, get_settings

from .store import WindowCount, create_counter_store

logger = logging.getLogger(__name__)

MS_PER_HOUR = 60 * 60 * 1000

RATE_CHECK_UNAVAILABLE = "rate_check_unavailable"


def fingerprint(value: str) -> str:
    """Short stable hash for logs; identities never appear in clear text."""
    return hashlib.sha256(value.encode("utf-8")).hexdigest()[:10]


def client_origin(headers: Mapping[str, str], peer: Optional[str] = None) -> str:
    """First X-Forwarded-For entry, else the socket peer, else 'unknown'."""
    forwarded = headers.get("x-forwarded-for") or headers.get("X-Forwarded-For")
    if forwarded:
        first = forwarded.split(",")[0].strip()
        if first:
            return first
    return peer or "unknown"


def hours_until(reset_ms: float, now_ms: float) -> int:
    """Whole hours until reset, rounded up, never below 1."""
    return max(1, math.ceil((reset_ms - now_ms) / MS_PER_HOUR))


class DualRateLimiter:
    """Per-identity and per-origin fixed-window quota guard."""

    def __init__(
        self,
        store,
        email_max: int = 3,
        ip_max: int = 10,
        window_hours: int = 24,
        email_prefix: str = "bizaudit:email",
        ip_prefix: str = "bizaudit:ip",
        clock: Callable[[], float] = time.time,
    ):
        self.store = store
        self.email_max = email_max
        self.ip_max = ip_max
        self.window_ms = window_hours * MS_PER_HOUR
        self.email_prefix = email_prefix
        self.ip_prefix = ip_prefix
        self._clock = clock

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None, store=None) -> "DualRateLimiter":
        settings = settings or get_settings()
        return cls(
            store=store or create_counter_store(settings.REDIS_URL),
            email_max=settings.RATE_LIMIT_EMAIL_MAX,
            ip_max=settings.RATE_LIMIT_IP_MAX,
            window_hours=settings.RATE_LIMIT_WINDOW_HOURS,
            email_prefix=settings.RATE_LIMIT_EMAIL_PREFIX,
            ip_prefix=settings.RATE_LIMIT_IP_PREFIX,
        )

    def _now_ms(self) -> float:
        return self._clock() * 1000

    def _reject(self, tripped: List[WindowCount], now_ms: float, tag: str) -> RateLimitExceeded:
        later_reset = max(now_ms + w.ttl_ms for w in tripped)
        hours = hours_until(later_reset, now_ms)
        logger.info(f"Rate limited [{tag}]: retry in ~{hours}h")
        return RateLimitExceeded(hours)

    async def check(self, identity: str, origin: str) -> None:
        """
        Consume one unit of both quotas, or reject without consuming either.

        Raises:
            RateLimitExceeded: either quota is exhausted
            TransientProviderError: the counter store is unreachable
        """
        identity = identity or "unknown"
        origin = origin or "unknown"
        email_key = f"{self.email_prefix}:{identity}"
        ip_key = f"{self.ip_prefix}:{origin}"
        tag = f"id={fingerprint(identity)} ip={fingerprint(origin)}"

        try:
            email, ip = await asyncio.gather(
                self.store.peek(email_key, self.window_ms),
                self.store.peek(ip_key, self.window_ms),
            )
            now_ms = self._now_ms()
            tripped = self._tripped(email, ip, at_limit=True)
            if tripped:
                raise self._reject(tripped, now_ms, tag)

            email, ip = await asyncio.gather(
                self.store.increment(email_key, self.window_ms),
                self.store.increment(ip_key, self.window_ms),
            )
            now_ms = self._now_ms()
            tripped = self._tripped(email, ip, at_limit=False)
            if tripped:
                # Lost a race with a concurrent request; undo our increments
                await asyncio.gather(
                    self.store.decrement(email_key),
                    self.store.decrement(ip_key),
                )
                raise self._reject(tripped, now_ms, tag)
        except RedisError as e:
            logger.error(f"Rate limit store unavailable: {type(e).__name__}: {e}")
            raise TransientProviderError(RATE_CHECK_UNAVAILABLE, type(e).__name__) from e

        logger.debug(f"Rate check passed [{tag}]: email {email.count}/{self.email_max}, ip {ip.count}/{self.ip_max}")

    def _tripped(self, email: WindowCount, ip: WindowCount, at_limit: bool) -> List[WindowCount]:
        """Counters over quota. Before incrementing, reaching the limit already counts."""
        tripped = []
        for window, limit in ((email, self.email_max), (ip, self.ip_max)):
            if window.count > limit or (at_limit and window.count >= limit):
                tripped.append(window)
        return tripped

    async def close(self) -> None:
        await self.store.close()
