"""
Tests for provider selection, configuration and error responses.
"""

import logging
import pytest
import structlog
from unittest.mock import AsyncMock
from prometheus_client import CollectorRegistry

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from caching.contract import validate_key
from caching.factory import create_cache_provider
from caching.local_provider import LocalCacheProvider
from caching.remote_provider import RemoteCacheProvider
from shared.config import CacheConfig, get_config
from shared.errors import CacheConfigurationError, InvalidKeyError, NotSupportedError
from shared.logging import add_service_context, add_timestamp
from shared.metrics import CacheMetrics


@pytest.fixture
def metrics():
    return CacheMetrics(CollectorRegistry())


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo the logging setup done by the factory."""
    root = logging.getLogger()
    level = root.level
    yield
    root.setLevel(level)
    structlog.reset_defaults()


def test_default_config(monkeypatch):
    """Test configuration defaults."""
    monkeypatch.delenv("CACHE_PROVIDER", raising=False)
    config = get_config()

    assert config.provider == "memory"
    assert config.redis_url == "redis://localhost:6379/0"
    assert config.scan_interval_seconds == 60.0
    assert config.service_name == "cache"


def test_config_from_environment(monkeypatch):
    monkeypatch.setenv("CACHE_PROVIDER", "redis")
    monkeypatch.setenv("CACHE_KEY_PREFIX", "svc:")

    config = get_config()

    assert config.provider == "redis"
    assert config.key_prefix == "svc:"


def test_memory_provider_selected(metrics):
    provider = create_cache_provider(CacheConfig(provider="memory", scan_interval_seconds=5), metrics=metrics)

    assert isinstance(provider, LocalCacheProvider)
    assert provider.scan_interval == 5


def test_redis_provider_uses_given_client(metrics):
    client = AsyncMock()

    provider = create_cache_provider(
        CacheConfig(provider="REDIS", key_prefix="app:"),
        redis_client=client,
        metrics=metrics
    )

    assert isinstance(provider, RemoteCacheProvider)
    assert provider.redis is client
    assert provider.key_prefix == "app:"


def test_unknown_provider_rejected(metrics):
    with pytest.raises(CacheConfigurationError) as exc_info:
        create_cache_provider(CacheConfig(provider="memcached"), metrics=metrics)

    assert exc_info.value.details["supported"] == ["memory", "redis"]


@pytest.mark.asyncio
async def test_providers_interchangeable_for_get_and_set(metrics):
    """Test both providers serve the same get/set calls."""
    store = {}
    client = AsyncMock()

    async def _set(key, value, px=None):
        store[key] = value

    async def _get(key):
        return store.get(key)

    client.set.side_effect = _set
    client.get.side_effect = _get

    providers = [
        create_cache_provider(CacheConfig(provider="memory"), metrics=metrics),
        create_cache_provider(CacheConfig(provider="redis"), redis_client=client, metrics=metrics),
    ]

    for provider in providers:
        await provider.set("report:7", {"rows": 3})
        assert await provider.get("report:7") == {"rows": 3}
        assert await provider.get("report:8") is None


def test_validate_key_returns_key():
    assert validate_key("user:1") == "user:1"


def test_error_response():
    response = InvalidKeyError().to_response()

    assert response.code == "INVALID_KEY"
    assert response.message == "Cache key cannot be null or empty"
    assert response.details == {}


def test_not_supported_error_message():
    error = NotSupportedError("exists", "redis")

    assert error.code == "NOT_SUPPORTED"
    assert str(error) == "redis: 'exists' is not supported"


def test_factory_applies_log_level(metrics):
    create_cache_provider(CacheConfig(provider="memory", log_level="debug"), metrics=metrics)

    assert logging.getLogger().level == logging.DEBUG

    create_cache_provider(CacheConfig(provider="memory", log_level="warning"), metrics=metrics)

    assert logging.getLogger().level == logging.WARNING


def test_service_context_processor():
    processor = add_service_context("pricing-cache")

    event = processor(None, "info", {"event": "Cache hit", "logger": "cache.local"})

    assert event["service"] == "pricing-cache"
    assert event["component"] == "local"
    assert "component" not in processor(None, "info", {"event": "Cache hit", "logger": "cache"})


def test_timestamp_processor():
    event = add_timestamp(None, "info", {"event": "Cache cleared"})

    assert isinstance(event["timestamp"], float)
