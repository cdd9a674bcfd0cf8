"""
In-process expiring key-value store backing the local cache provider.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

_MISSING = object()


@dataclass
class CacheEntry:
    """A stored value with its expiration metadata.

    Deadlines and access times are readings of the store's monotonic clock.
    """
    key: str
    value: Any
    expires_at: Optional[float] = None
    sliding_seconds: Optional[float] = None
    last_accessed: float = field(default_factory=time.monotonic)

    def is_expired(self, now: float) -> bool:
        """Alive only while the absolute deadline and sliding window both hold."""
        if self.expires_at is not None and now >= self.expires_at:
            return True
        if self.sliding_seconds is not None and now - self.last_accessed >= self.sliding_seconds:
            return True
        return False

    def touch(self, now: float) -> None:
        """Restart the sliding window."""
        self.last_accessed = now


class EntryStore:
    """Thread-safe map of keys to ``CacheEntry`` with lazy expiry.

    Expired entries are dropped when a read finds them and by
    ``purge_expired``. Each drop is reported to *on_evict* while the store
    lock is held; the callback must not call back into the store.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        on_evict: Optional[Callable[[str], None]] = None
    ):
        self.clock = clock
        self.on_evict = on_evict
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.RLock()

    def set(
        self,
        key: str,
        value: Any,
        expires_in: Optional[float] = None,
        sliding_seconds: Optional[float] = None
    ) -> CacheEntry:
        """Write or replace the entry for *key*."""
        now = self.clock()
        entry = CacheEntry(
            key=key,
            value=value,
            expires_at=now + expires_in if expires_in is not None else None,
            sliding_seconds=sliding_seconds,
            last_accessed=now
        )
        with self._lock:
            self._entries[key] = entry
        return entry

    def get(self, key: str, accept: Optional[Callable[[Any], bool]] = None) -> Tuple[bool, Any]:
        """Return ``(found, value)``; a hit restarts the sliding window.

        A value rejected by *accept* is reported as not found and the entry
        is left untouched.
        """
        with self._lock:
            entry = self._live_entry(key)
            if entry is None:
                return False, None
            if accept is not None and not accept(entry.value):
                return False, None
            entry.touch(self.clock())
            return True, entry.value

    def contains(self, key: str) -> bool:
        """Liveness check that leaves sliding windows untouched."""
        with self._lock:
            return self._live_entry(key) is not None

    def remove(self, key: str) -> bool:
        """Drop the entry for *key*; returns whether one was stored."""
        with self._lock:
            return self._entries.pop(key, _MISSING) is not _MISSING

    def purge_expired(self) -> List[str]:
        """Evict every expired entry and return the evicted keys."""
        with self._lock:
            now = self.clock()
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                self._evict(key)
            return expired

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_expired(self.clock()):
            self._evict(key)
            return None
        return entry

    def _evict(self, key: str) -> None:
        del self._entries[key]
        if self.on_evict is not None:
            self.on_evict(key)
