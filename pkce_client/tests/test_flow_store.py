"""Tests for the correlation store: single use, expiry, collisions, concurrency."""
import threading

import pytest

from pkce_client.errors import StateCollisionError
from pkce_client.flow_store import CorrelationStore


def test_take_returns_entry_once(store):
    store.put("S", "verifier", {"user_id": "u1"})
    pending = store.take("S")
    assert pending is not None
    assert pending.code_verifier == "verifier"
    assert pending.metadata == {"user_id": "u1"}
    assert store.take("S") is None
    assert len(store) == 0


def test_take_unknown_or_missing_state(store):
    assert store.take("nope") is None
    assert store.take(None) is None
    assert store.take("") is None


def test_expired_entry_is_not_returned(store, clock):
    store.put("S", "v")
    clock.advance(601)
    assert store.take("S") is None


def test_entry_within_ttl_is_returned(store, clock):
    store.put("S", "v")
    clock.advance(599)
    assert store.take("S") is not None


def test_expire_sweeps_only_old_entries(store, clock):
    store.put("old", "v1")
    clock.advance(400)
    store.put("new", "v2")
    clock.advance(300)
    assert store.expire() == 1
    assert len(store) == 1
    assert store.take("new") is not None


def test_put_sweeps_lazily(store, clock):
    store.put("old", "v1")
    clock.advance(601)
    store.put("new", "v2")
    assert len(store) == 1


def test_duplicate_state_is_fatal(store):
    store.put("S", "v1")
    with pytest.raises(StateCollisionError):
        store.put("S", "v2")
    assert store.take("S").code_verifier == "v1"


def test_expired_state_can_be_reissued(store, clock):
    store.put("S", "v1")
    clock.advance(601)
    store.put("S", "v2")
    assert store.take("S").code_verifier == "v2"


def test_concurrent_take_single_winner():
    store = CorrelationStore()
    store.put("S", "v")
    results = []
    barrier = threading.Barrier(16)

    def worker():
        barrier.wait()
        results.append(store.take("S"))

    threads = [threading.Thread(target=worker) for _ in range(16)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert sum(1 for r in results if r is not None) == 1
