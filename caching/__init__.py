"""
Cache providers.

Application code depends on ``CacheProvider``; pick an implementation with
``create_cache_provider``. The in-memory provider supports the whole
contract, the Redis provider only ``get`` and ``set``.
"""

from .contract import CacheProvider, validate_key
from .factory import create_cache_provider
from .local_provider import LocalCacheProvider
from .remote_provider import RemoteCacheProvider
from .serializers import CacheSerializer, JsonSerializer

__all__ = [
    "CacheProvider",
    "CacheSerializer",
    "JsonSerializer",
    "LocalCacheProvider",
    "RemoteCacheProvider",
    "create_cache_provider",
    "validate_key",
]
