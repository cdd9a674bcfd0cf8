"""
Unit tests for the entry store and key registry.
"""

import threading
import pytest

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from caching.entry_store import CacheEntry, EntryStore
from caching.key_registry import KeyRegistry


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class TestCacheEntry:
    """Test cases for CacheEntry expiry rules."""

    def test_entry_without_expiry_never_expires(self):
        entry = CacheEntry(key="k", value="v", last_accessed=0.0)
        assert entry.is_expired(10 ** 9) is False

    def test_absolute_deadline(self):
        entry = CacheEntry(key="k", value="v", expires_at=10.0, last_accessed=0.0)
        assert entry.is_expired(9.5) is False
        assert entry.is_expired(10.0) is True

    def test_touch_restarts_sliding_window(self):
        entry = CacheEntry(key="k", value="v", sliding_seconds=5.0, last_accessed=0.0)
        assert entry.is_expired(5.0) is True

        entry.touch(4.0)
        assert entry.is_expired(8.0) is False
        assert entry.is_expired(9.0) is True


class TestEntryStore:
    """Test cases for EntryStore."""

    @pytest.fixture
    def clock(self):
        return FakeClock()

    @pytest.fixture
    def evicted(self):
        return []

    @pytest.fixture
    def store(self, clock, evicted):
        return EntryStore(clock=clock, on_evict=evicted.append)

    def test_get_hit_and_miss(self, store):
        store.set("k", "v")

        assert store.get("k") == (True, "v")
        assert store.get("missing") == (False, None)

    def test_stored_none_is_found(self, store):
        store.set("k", None)

        assert store.get("k") == (True, None)
        assert store.contains("k") is True

    def test_get_touches_but_contains_does_not(self, store, clock):
        store.set("a", 1, sliding_seconds=1.0)
        store.set("b", 2, sliding_seconds=1.0)

        clock.advance(0.75)
        store.get("a")
        store.contains("b")
        clock.advance(0.5)

        assert store.contains("a") is True
        assert store.contains("b") is False

    def test_rejected_value_is_not_touched(self, store, clock):
        store.set("k", 1, sliding_seconds=1.0)

        clock.advance(0.75)
        assert store.get("k", accept=lambda value: isinstance(value, str)) == (False, None)
        clock.advance(0.5)

        assert store.contains("k") is False

    def test_negative_expiry_stores_expired_entry(self, store, evicted):
        store.set("k", "v", expires_in=-1.0)

        assert store.get("k") == (False, None)
        assert evicted == ["k"]
        assert len(store) == 0

    def test_remove_reports_presence(self, store, evicted):
        store.set("k", "v")

        assert store.remove("k") is True
        assert store.remove("k") is False
        assert evicted == []

    def test_purge_expired(self, store, clock, evicted):
        store.set("short", 1, expires_in=1.0)
        store.set("idle", 2, sliding_seconds=2.0)
        store.set("forever", 3)

        clock.advance(3.0)
        purged = store.purge_expired()

        assert sorted(purged) == ["idle", "short"]
        assert sorted(evicted) == ["idle", "short"]
        assert store.get("forever") == (True, 3)

    def test_concurrent_writers(self, store):
        def writer(offset):
            for i in range(200):
                store.set(f"{offset}-{i}", i)

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(store) == 8 * 200


class TestKeyRegistry:
    """Test cases for KeyRegistry."""

    def test_add_and_discard(self):
        registry = KeyRegistry()
        registry.add("a")
        registry.add("a")
        registry.add("b")

        assert len(registry) == 2
        assert "a" in registry

        registry.discard("a")
        registry.discard("never-added")

        assert sorted(registry) == ["b"]

    def test_snapshot_is_independent_copy(self):
        registry = KeyRegistry()
        for key in ("a", "b", "c"):
            registry.add(key)

        snapshot = registry.snapshot()
        registry.add("d")
        for key in snapshot:
            registry.discard(key)

        assert sorted(snapshot) == ["a", "b", "c"]
        assert registry.snapshot() == ["d"]
