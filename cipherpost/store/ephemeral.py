"""Time-bounded message store with an append-only per-owner index.

Key scheme::

    message:<id>          serialized record, expires after its TTL
    user:<owner>:sent     list of ids in append order, no TTL

There is no delete: records disappear only when their TTL elapses, and an
expired record is indistinguishable from one that was never stored.
"""
from __future__ import annotations

import logging
from typing import List, Optional

from ..config import Settings
from ..errors import NotFoundError
from .backends import Backend, make_backend

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 86400


def message_key(message_id: str) -> str:
    return f"message:{message_id}"


def sent_index_key(owner: str) -> str:
    return f"user:{owner}:sent"


class EphemeralStore:
    def __init__(self, backend: Backend, *, message_ttl: int = DEFAULT_TTL_SECONDS):
        self.backend = backend
        self.message_ttl = message_ttl

    def __enter__(self) -> "EphemeralStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self.backend.close()

    def put(self, message_id: str, serialized: str, ttl_seconds: Optional[int] = None) -> None:
        ttl = self.message_ttl if ttl_seconds is None else ttl_seconds
        if isinstance(ttl, bool) or not isinstance(ttl, int) or ttl <= 0:
            raise ValueError(f"ttl_seconds must be a positive integer, got {ttl!r}")
        self.backend.setex(message_key(message_id), ttl, serialized)
        logger.info("Stored message %s (ttl=%ss)", message_id, ttl)

    def get(self, message_id: str) -> str:
        """Return the stored value, or raise :class:`NotFoundError`."""
        value = self.backend.get(message_key(message_id))
        if value is None:
            raise NotFoundError(message_id)
        return value

    def append_index(self, owner: str, message_id: str) -> None:
        length = self.backend.rpush(sent_index_key(owner), message_id)
        logger.info("Indexed message %s for %s (%d total)", message_id, owner, length)

    def list_index(self, owner: str) -> List[str]:
        """Ids in append order. Some may already have expired."""
        return self.backend.lrange(sent_index_key(owner))


def open_store(settings: Settings) -> EphemeralStore:
    backend = make_backend(settings.redis_url, timeout=settings.store_timeout_seconds)
    return EphemeralStore(backend, message_ttl=settings.message_ttl_seconds)
