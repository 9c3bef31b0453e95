from .backends import Backend, MemoryBackend, RedisBackend, make_backend
from .ephemeral import EphemeralStore, message_key, open_store, sent_index_key
from .ratelimit import RateLimiter

__all__ = [
    "Backend",
    "EphemeralStore",
    "MemoryBackend",
    "RateLimiter",
    "RedisBackend",
    "make_backend",
    "message_key",
    "open_store",
    "sent_index_key",
]
