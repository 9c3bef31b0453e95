import pytest
import redis

from cipherpost.config import Settings
from cipherpost.errors import NotFoundError, StoreUnavailable
from cipherpost.store.backends import MemoryBackend, RedisBackend, make_backend
from cipherpost.store.ephemeral import EphemeralStore, open_store


@pytest.fixture
def store(clock):
    return EphemeralStore(MemoryBackend(clock=clock))


def test_get_returns_exact_value(store):
    payload = '{"encryptedText": "Uryyb", "note": "ünïcode ✓"}'
    store.put("abc", payload, 60)
    assert store.get("abc") == payload


def test_expired_after_ttl(store, clock):
    store.put("abc", "payload", 1)
    clock.advance(1.01)
    with pytest.raises(NotFoundError):
        store.get("abc")


def test_visible_before_ttl(store, clock):
    store.put("abc", "payload", 1)
    clock.advance(0.5)
    assert store.get("abc") == "payload"


def test_never_stored_is_not_found(store):
    with pytest.raises(NotFoundError) as exc_info:
        store.get("missing")
    assert exc_info.value.key == "missing"


def test_default_ttl_is_one_day(store, clock):
    store.put("abc", "payload")
    clock.advance(86399)
    assert store.get("abc") == "payload"
    clock.advance(2)
    with pytest.raises(NotFoundError):
        store.get("abc")


@pytest.mark.parametrize("ttl", [0, -5, 1.5, True])
def test_ttl_must_be_positive_int(store, ttl):
    with pytest.raises(ValueError):
        store.put("abc", "payload", ttl)


def test_index_keeps_append_order_and_never_expires(store, clock):
    for message_id in ["m1", "m2", "m3"]:
        store.append_index("alice@example.com", message_id)
    clock.advance(10 * 86400)
    assert store.list_index("alice@example.com") == ["m1", "m2", "m3"]
    assert store.list_index("bob@example.com") == []


def test_key_scheme(clock):
    backend = MemoryBackend(clock=clock)
    store = EphemeralStore(backend)
    store.put("abc", "payload", 5)
    store.append_index("alice@example.com", "abc")
    assert backend.get("message:abc") == "payload"
    assert backend.lrange("user:alice@example.com:sent") == ["abc"]


def test_context_manager_closes_backend(clock):
    backend = MemoryBackend(clock=clock)
    with EphemeralStore(backend) as store:
        store.put("abc", "payload", 5)
    assert backend.get("message:abc") is None


def test_make_backend():
    assert isinstance(make_backend("memory://"), MemoryBackend)
    assert isinstance(make_backend("redis://localhost:6379/0"), RedisBackend)
    with pytest.raises(ValueError):
        make_backend("postgres://localhost")


def test_open_store_uses_settings():
    store = open_store(Settings(redis_url="memory://", message_ttl_seconds=30))
    assert isinstance(store.backend, MemoryBackend)
    assert store.message_ttl == 30


class _TimingOutClient:
    def __getattr__(self, name):
        def fail(*args, **kwargs):
            raise redis.exceptions.TimeoutError("Timeout reading from socket")
        return fail


def test_timeout_is_store_unavailable_not_not_found():
    backend = RedisBackend("redis://localhost:6379/0", timeout=0.1)
    backend.client = _TimingOutClient()
    store = EphemeralStore(backend)
    with pytest.raises(StoreUnavailable):
        store.get("abc")
    with pytest.raises(StoreUnavailable):
        store.put("abc", "payload", 5)
    with pytest.raises(StoreUnavailable):
        store.list_index("alice@example.com")
    with pytest.raises(StoreUnavailable):
        store.append_index("alice@example.com", "abc")


def test_unreachable_redis_is_store_unavailable():
    # Nothing listens on port 1.
    store = EphemeralStore(RedisBackend("redis://127.0.0.1:1/0", timeout=0.2))
    with pytest.raises(StoreUnavailable):
        store.get("abc")
