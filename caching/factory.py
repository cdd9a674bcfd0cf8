"""
Provider selection from configuration.
"""

from typing import Optional

import redis.asyncio as redis

from shared.config import CacheConfig, get_config
from shared.errors import CacheConfigurationError
from shared.logging import configure_logging, get_logger
from shared.metrics import CacheMetrics
from .contract import CacheProvider
from .local_provider import LocalCacheProvider
from .remote_provider import RemoteCacheProvider

logger = get_logger("cache.factory")

PROVIDERS = ("memory", "redis")


def create_cache_provider(
    config: Optional[CacheConfig] = None,
    redis_client: Optional[redis.Redis] = None,
    metrics: Optional[CacheMetrics] = None
) -> CacheProvider:
    """Construct the provider named by ``config.provider``.

    Logging is configured from ``config.service_name`` and
    ``config.log_level``. A ``redis_client`` given by the caller is used
    as-is; otherwise one is built from ``config.redis_url``. The remote
    provider is not started here, call ``start()`` to check connectivity.
    """
    config = config or get_config()
    configure_logging(config.service_name, config.log_level)
    provider = config.provider.lower()

    if provider == "memory":
        logger.info("Using in-memory cache provider")
        return LocalCacheProvider(scan_interval=config.scan_interval_seconds, metrics=metrics)

    if provider == "redis":
        logger.info("Using Redis cache provider", key_prefix=config.key_prefix)
        if redis_client is not None:
            return RemoteCacheProvider(redis_client, key_prefix=config.key_prefix, metrics=metrics)
        return RemoteCacheProvider.from_url(
            config.redis_url,
            socket_timeout=config.redis_socket_timeout,
            socket_connect_timeout=config.redis_connect_timeout,
            key_prefix=config.key_prefix,
            metrics=metrics
        )

    raise CacheConfigurationError(
        f"Unknown cache provider '{config.provider}'",
        {"provider": config.provider, "supported": list(PROVIDERS)}
    )
