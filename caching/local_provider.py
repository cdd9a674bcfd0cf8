"""
In-process cache provider with absolute and sliding expiration.
"""

import time
from datetime import timedelta
from typing import Any, Callable, Optional

from shared.logging import get_logger
from shared.metrics import CacheMetrics, get_cache_metrics
from .contract import AbsoluteExpiry, CacheProvider, seconds_until, validate_key
from .entry_store import EntryStore
from .key_registry import KeyRegistry


class LocalCacheProvider(CacheProvider):
    """Cache provider holding values in process memory.

    Values are stored as-is, without serialization. A ``KeyRegistry`` mirrors
    the live keys so ``clear`` can find them. Writes go to the store first
    and the registry second, so the registry never names a key the store has
    not seen.
    """

    PROVIDER_NAME = "memory"

    def __init__(
        self,
        scan_interval: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        metrics: Optional[CacheMetrics] = None
    ):
        self.logger = get_logger("cache.local")
        self.metrics = metrics or get_cache_metrics()
        self.scan_interval = scan_interval
        self.registry = KeyRegistry()
        self.store = EntryStore(clock=clock, on_evict=self.registry.discard)
        self._last_scan = clock()

    async def get(self, key: str, target_type: Optional[Any] = None) -> Optional[Any]:
        """Get value from cache; a hit restarts a sliding window.

        When *target_type* is a class and the stored value is not an
        instance of it, the read counts as a miss.
        """
        validate_key(key)
        self._scan_if_due()
        self.metrics.record_operation(self.PROVIDER_NAME, "get")

        accept = None
        if isinstance(target_type, type):
            def accept(value):
                return value is None or isinstance(value, target_type)

        found, value = self.store.get(key, accept)

        if not found:
            self.metrics.record_miss(self.PROVIDER_NAME)
            self.logger.debug("Cache miss", key=key)
            return None

        self.metrics.record_hit(self.PROVIDER_NAME)
        self.logger.debug("Cache hit", key=key)
        return value

    async def set(
        self,
        key: str,
        value: Any,
        absolute_expiry: Optional[AbsoluteExpiry] = None,
        sliding_expiry: Optional[timedelta] = None
    ) -> None:
        """Set value in cache. ``None`` values are stored like any other."""
        validate_key(key)
        self._scan_if_due()
        self.metrics.record_operation(self.PROVIDER_NAME, "set")

        expires_in = seconds_until(absolute_expiry) if absolute_expiry is not None else None
        sliding_seconds = sliding_expiry.total_seconds() if sliding_expiry is not None else None

        self.store.set(key, value, expires_in=expires_in, sliding_seconds=sliding_seconds)
        self.registry.add(key)
        self.logger.debug("Cached value", key=key, expires_in=expires_in, sliding_seconds=sliding_seconds)

    async def remove(self, key: str) -> None:
        """Remove value from cache."""
        validate_key(key)
        self.metrics.record_operation(self.PROVIDER_NAME, "remove")

        self.store.remove(key)
        self.registry.discard(key)
        self.logger.debug("Removed cache key", key=key)

    async def exists(self, key: str) -> bool:
        """Check for a live entry without counting as an access."""
        validate_key(key)
        self._scan_if_due()
        self.metrics.record_operation(self.PROVIDER_NAME, "exists")
        return self.store.contains(key)

    async def clear(self) -> None:
        """Remove every key registered when the clear starts.

        Keys written while the clear runs may survive it.
        """
        self.metrics.record_operation(self.PROVIDER_NAME, "clear")

        keys = self.registry.snapshot()
        for key in keys:
            self.store.remove(key)
            self.registry.discard(key)

        self.logger.info("Cache cleared", keys_count=len(keys))

    def _scan_if_due(self) -> None:
        now = self.store.clock()
        if now - self._last_scan < self.scan_interval:
            return
        self._last_scan = now
        evicted = self.store.purge_expired()
        if evicted:
            self.logger.debug("Evicted expired entries", keys_count=len(evicted))
