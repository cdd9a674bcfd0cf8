"""
Registry of live keys, kept beside a store that cannot enumerate itself.
"""

import threading
from typing import Iterator, List, Set


class KeyRegistry:
    """Thread-safe set of keys currently tracked as live."""

    def __init__(self):
        self._keys: Set[str] = set()
        self._lock = threading.Lock()

    def add(self, key: str) -> None:
        with self._lock:
            self._keys.add(key)

    def discard(self, key: str) -> None:
        """Forget *key*; unknown keys are ignored."""
        with self._lock:
            self._keys.discard(key)

    def snapshot(self) -> List[str]:
        """Copy of the keys at this instant, safe to iterate while others write."""
        with self._lock:
            return list(self._keys)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._keys

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())
