"""Key/value backends for the ephemeral store.

Both backends expose the same small command set (SETEX, GET, RPUSH,
LRANGE, INCR, EXPIRE) so the store and the rate limiter never care which
one they are talking to.
"""
from __future__ import annotations

import logging
import threading
import time
from contextlib import contextmanager
from typing import Callable, Dict, Iterator, List, Optional, Protocol, Tuple, Union

import redis
from redis.backoff import NoBackoff
from redis.retry import Retry

from ..errors import StoreUnavailable

logger = logging.getLogger(__name__)


class Backend(Protocol):
    def setex(self, key: str, ttl_seconds: int, value: str) -> None: ...
    def get(self, key: str) -> Optional[str]: ...
    def rpush(self, key: str, value: str) -> int: ...
    def lrange(self, key: str) -> List[str]: ...
    def incr(self, key: str) -> int: ...
    def expire(self, key: str, ttl_seconds: int) -> None: ...
    def close(self) -> None: ...


_Entry = Tuple[Union[str, int, List[str]], Optional[float]]


class MemoryBackend:
    """In-process backend with lazy expiry.

    ``clock`` must be monotonic; tests pass a fake one to step over TTLs.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._data: Dict[str, _Entry] = {}
        self._lock = threading.Lock()

    def _live(self, key: str) -> Optional[_Entry]:
        entry = self._data.get(key)
        if entry is None:
            return None
        _, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._data[key]
            return None
        return entry

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        with self._lock:
            self._data[key] = (value, self._clock() + ttl_seconds)

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._live(key)
            if entry is None:
                return None
            value, _ = entry
            if isinstance(value, list):
                raise TypeError(f"{key} holds a list, not a string")
            return str(value)

    def rpush(self, key: str, value: str) -> int:
        with self._lock:
            entry = self._live(key)
            items: List[str] = [] if entry is None else entry[0]  # type: ignore[assignment]
            expires_at = None if entry is None else entry[1]
            items.append(value)
            self._data[key] = (items, expires_at)
            return len(items)

    def lrange(self, key: str) -> List[str]:
        with self._lock:
            entry = self._live(key)
            if entry is None:
                return []
            return list(entry[0])  # type: ignore[arg-type]

    def incr(self, key: str) -> int:
        with self._lock:
            entry = self._live(key)
            count = 1 if entry is None else int(entry[0]) + 1  # type: ignore[arg-type]
            self._data[key] = (count, None if entry is None else entry[1])
            return count

    def expire(self, key: str, ttl_seconds: int) -> None:
        with self._lock:
            entry = self._live(key)
            if entry is not None:
                self._data[key] = (entry[0], self._clock() + ttl_seconds)

    def close(self) -> None:
        with self._lock:
            self._data.clear()


class RedisBackend:
    """redis-py backend.

    Every call is bounded by ``timeout`` seconds and never retried; a
    connection or timeout failure surfaces as :class:`StoreUnavailable`.
    """

    def __init__(self, url: str, *, timeout: float = 2.0):
        self.url = url
        self.client = redis.Redis.from_url(
            url,
            socket_timeout=timeout,
            socket_connect_timeout=timeout,
            decode_responses=True,
            retry_on_timeout=False,
            retry=Retry(NoBackoff(), 0),
        )

    @contextmanager
    def _guard(self, op: str) -> Iterator[None]:
        try:
            yield
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            logger.error("Store unavailable during %s: %s", op, e)
            raise StoreUnavailable(f"Store unavailable during {op}: {e}") from e

    def setex(self, key: str, ttl_seconds: int, value: str) -> None:
        with self._guard("SETEX"):
            self.client.setex(key, ttl_seconds, value)

    def get(self, key: str) -> Optional[str]:
        with self._guard("GET"):
            return self.client.get(key)

    def rpush(self, key: str, value: str) -> int:
        with self._guard("RPUSH"):
            return int(self.client.rpush(key, value))

    def lrange(self, key: str) -> List[str]:
        with self._guard("LRANGE"):
            return list(self.client.lrange(key, 0, -1))

    def incr(self, key: str) -> int:
        with self._guard("INCR"):
            return int(self.client.incr(key))

    def expire(self, key: str, ttl_seconds: int) -> None:
        with self._guard("EXPIRE"):
            self.client.expire(key, ttl_seconds)

    def close(self) -> None:
        self.client.close()


def make_backend(url: str, *, timeout: float = 2.0) -> Backend:
    if url.startswith("memory://"):
        return MemoryBackend()
    if url.startswith(("redis://", "rediss://", "unix://")):
        return RedisBackend(url, timeout=timeout)
    raise ValueError(f"Unsupported store URL: {url!r}")
