"""
Shared metrics configuration for the cache provider library.
"""

from prometheus_client import Counter, CollectorRegistry, REGISTRY
from typing import Dict, Any, Optional
import threading


class CacheMetrics:
    """Prometheus counters for cache providers."""

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up cache metrics."""
        self._metrics["cache_hits_total"] = Counter(
            "cache_hits_total",
            "Total cache hits",
            ["provider"],
            registry=self.registry
        )

        self._metrics["cache_misses_total"] = Counter(
            "cache_misses_total",
            "Total cache misses",
            ["provider"],
            registry=self.registry
        )

        self._metrics["cache_operations_total"] = Counter(
            "cache_operations_total",
            "Total cache operations",
            ["provider", "operation"],
            registry=self.registry
        )

    def record_hit(self, provider: str):
        """Record a cache hit."""
        self._metrics["cache_hits_total"].labels(provider=provider).inc()

    def record_miss(self, provider: str):
        """Record a cache miss."""
        self._metrics["cache_misses_total"].labels(provider=provider).inc()

    def record_operation(self, provider: str, operation: str):
        """Record a cache operation."""
        self._metrics["cache_operations_total"].labels(provider=provider, operation=operation).inc()


_default_metrics: Optional[CacheMetrics] = None
_default_lock = threading.Lock()


def get_cache_metrics(registry: Optional[CollectorRegistry] = None) -> CacheMetrics:
    """Get cache metrics.

    Without a registry the process-wide instance bound to the default
    prometheus registry is returned, since collectors can only be registered
    there once.
    """
    global _default_metrics

    if registry is not None:
        return CacheMetrics(registry)

    with _default_lock:
        if _default_metrics is None:
            _default_metrics = CacheMetrics()
        return _default_metrics
