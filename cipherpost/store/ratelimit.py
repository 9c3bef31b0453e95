"""Per-identity request counter shared through the store.

Counts live under ``ratelimit:<identity>:<window>`` where ``window`` is the
index of the current fixed window, so every process talking to the same
store sees the same count.
"""
from __future__ import annotations

import time
from typing import Callable

from ..errors import RateLimitExceeded
from .backends import Backend


class RateLimiter:
    def __init__(
        self,
        backend: Backend,
        *,
        limit: int = 3,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        if limit < 1 or window_seconds < 1:
            raise ValueError("limit and window_seconds must be >= 1")
        self.backend = backend
        self.limit = limit
        self.window_seconds = window_seconds
        self._clock = clock

    def _key(self, identity: str) -> str:
        window = int(self._clock() // self.window_seconds)
        return f"ratelimit:{identity}:{window}"

    def hit(self, identity: str) -> int:
        """Count one request. Returns the count in the current window."""
        key = self._key(identity)
        count = self.backend.incr(key)
        if count == 1:
            self.backend.expire(key, self.window_seconds)
        if count > self.limit:
            raise RateLimitExceeded(identity, self.limit, self.window_seconds)
        return count

    def remaining(self, identity: str) -> int:
        raw = self.backend.get(self._key(identity))
        used = int(raw) if raw is not None else 0
        return max(self.limit - used, 0)
