"""
Redis-backed cache provider.
"""

from datetime import timedelta
from typing import Any, Optional

import redis.asyncio as redis

from shared.errors import CacheConnectionError, NotSupportedError
from shared.logging import get_logger
from shared.metrics import CacheMetrics, get_cache_metrics
from .contract import AbsoluteExpiry, CacheProvider, seconds_until, validate_key
from .serializers import CacheSerializer, JsonSerializer


class RemoteCacheProvider(CacheProvider):
    """Cache provider storing serialized values on a Redis server.

    Limitations:

    - ``sliding_expiry`` is accepted by ``set`` but has no effect; Redis
      only expires keys at a fixed time.
    - ``remove``, ``exists`` and ``clear`` raise ``NotSupportedError``.
      Redis offers no cheap way to find the keys this provider owns without
      a separate key index.

    Connection, timeout and protocol errors from the client are raised
    unchanged. Callers decide whether a cache failure is a miss or fatal.
    """

    PROVIDER_NAME = "redis"

    def __init__(
        self,
        client: redis.Redis,
        serializer: Optional[CacheSerializer] = None,
        key_prefix: str = "",
        metrics: Optional[CacheMetrics] = None
    ):
        self.redis = client
        self.serializer = serializer or JsonSerializer()
        self.key_prefix = key_prefix
        self.metrics = metrics or get_cache_metrics()
        self.logger = get_logger("cache.remote")

    @classmethod
    def from_url(
        cls,
        redis_url: str,
        socket_timeout: float = 5.0,
        socket_connect_timeout: float = 5.0,
        **kwargs
    ) -> "RemoteCacheProvider":
        """Build a provider over a pooled client for *redis_url*."""
        client = redis.from_url(
            redis_url,
            decode_responses=False,
            socket_connect_timeout=socket_connect_timeout,
            socket_timeout=socket_timeout,
            retry_on_timeout=True,
            health_check_interval=30
        )
        return cls(client, **kwargs)

    async def start(self):
        """Verify the server is reachable."""
        try:
            await self.redis.ping()
            self.logger.info("Redis cache started")
        except Exception as e:
            self.logger.error("Failed to start Redis cache", error=str(e))
            raise CacheConnectionError("Failed to connect to Redis", {"error": str(e)}) from e

    async def stop(self):
        """Close the client and its connection pool."""
        await self.redis.aclose()
        self.logger.info("Redis cache stopped")

    async def health_check(self) -> bool:
        """Check Redis health."""
        try:
            await self.redis.ping()
            return True
        except Exception:
            return False

    async def get(self, key: str, target_type: Optional[Any] = None) -> Optional[Any]:
        """Get value from Redis, decoded into *target_type*.

        An absent key or empty payload is a miss. A payload that cannot be
        decoded raises ``DeserializationError``.
        """
        validate_key(key)
        self.metrics.record_operation(self.PROVIDER_NAME, "get")

        payload = await self.redis.get(self._make_key(key))
        if not payload:
            self.metrics.record_miss(self.PROVIDER_NAME)
            self.logger.debug("Cache miss", key=key)
            return None

        value = self.serializer.decode(payload, Any if target_type is None else target_type)
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
        """Serialize and store value in Redis.

        ``sliding_expiry`` is ignored. An ``absolute_expiry`` already in the
        past still overwrites the key, with the shortest TTL Redis accepts.
        """
        validate_key(key)
        self.metrics.record_operation(self.PROVIDER_NAME, "set")

        payload = self.serializer.encode(value)

        ttl_ms = None
        if absolute_expiry is not None:
            ttl_ms = max(1, int(round(seconds_until(absolute_expiry) * 1000)))
        if sliding_expiry is not None:
            self.logger.debug("Sliding expiry not supported, ignoring", key=key)

        await self.redis.set(self._make_key(key), payload, px=ttl_ms)
        self.logger.debug("Cached value", key=key, ttl_ms=ttl_ms)

    async def remove(self, key: str) -> None:
        validate_key(key)
        raise NotSupportedError("remove", self.PROVIDER_NAME)

    async def exists(self, key: str) -> bool:
        validate_key(key)
        raise NotSupportedError("exists", self.PROVIDER_NAME)

    async def clear(self) -> None:
        raise NotSupportedError("clear", self.PROVIDER_NAME)

    def _make_key(self, key: str) -> str:
        """Generate the Redis key."""
        return f"{self.key_prefix}{key}"
