"""Error types for cipherpost.

A malformed package handed to ``decode`` is deliberately absent here: that
path falls back to returning the raw content instead of raising.
"""
from __future__ import annotations


class CipherPostError(Exception):
    """Base exception for all cipherpost failures."""
    pass


class InputError(CipherPostError):
    """Raised when required message text or recipient is missing."""
    pass


class TransformError(CipherPostError):
    """Raised when the binary encode stage cannot produce a package."""
    pass


class NotFoundError(CipherPostError):
    """Raised when an id was never stored or its TTL has elapsed."""

    def __init__(self, key: str):
        super().__init__(f"Not found or expired: {key}")
        self.key = key


class StoreUnavailable(CipherPostError):
    """Raised when the backing store cannot be reached or times out."""
    pass


class RateLimitExceeded(CipherPostError):
    """Raised when an identity used up its quota for the current window."""

    def __init__(self, identity: str, limit: int, window_seconds: int):
        super().__init__(
            f"Rate limit exceeded for {identity}: {limit} requests per {window_seconds}s"
        )
        self.identity = identity
        self.limit = limit
        self.window_seconds = window_seconds


class AssistantError(CipherPostError):
    """Raised when the rewriting assistant fails with a non-transient error."""
    pass
