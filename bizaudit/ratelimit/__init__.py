"""Dual fixed-window rate limiting for AI report requests."""

from .limiter import DualRateLimiter, client_origin, fingerprint, hours_until
from .store import InMemoryCounterStore, RedisCounterStore, WindowCount, create_counter_store

__all__ = [
    "DualRateLimiter",
    "client_origin",
    "fingerprint",
    "hours_until",
    "InMemoryCounterStore",
    "RedisCounterStore",
    "WindowCount",
    "create_counter_store",
]
