import pytest

from cipherpost.errors import RateLimitExceeded
from cipherpost.store.backends import MemoryBackend
from cipherpost.store.ratelimit import RateLimiter


@pytest.fixture
def limiter(clock):
    return RateLimiter(MemoryBackend(clock=clock), limit=3, window_seconds=60, clock=clock)


def test_fourth_request_in_window_is_rejected(limiter):
    assert [limiter.hit("alice") for _ in range(3)] == [1, 2, 3]
    with pytest.raises(RateLimitExceeded) as exc_info:
        limiter.hit("alice")
    assert exc_info.value.limit == 3
    assert exc_info.value.window_seconds == 60


def test_next_window_resets(limiter, clock):
    for _ in range(3):
        limiter.hit("alice")
    clock.advance(60)
    assert limiter.hit("alice") == 1


def test_identities_are_independent(limiter):
    for _ in range(3):
        limiter.hit("alice")
    assert limiter.hit("bob") == 1


def test_remaining(limiter):
    assert limiter.remaining("alice") == 3
    limiter.hit("alice")
    assert limiter.remaining("alice") == 2


def test_counter_is_shared_through_backend(clock):
    backend = MemoryBackend(clock=clock)
    a = RateLimiter(backend, limit=2, window_seconds=60, clock=clock)
    b = RateLimiter(backend, limit=2, window_seconds=60, clock=clock)
    a.hit("alice")
    b.hit("alice")
    with pytest.raises(RateLimitExceeded):
        a.hit("alice")


def test_invalid_configuration():
    with pytest.raises(ValueError):
        RateLimiter(MemoryBackend(), limit=0)
