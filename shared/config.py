"""
Shared configuration management for the cache provider library.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class CacheConfig(BaseSettings):
    """Cache provider selection and backend settings.

    Every field can be overridden through a ``CACHE_``-prefixed environment
    variable, e.g. ``CACHE_PROVIDER=redis``.
    """

    model_config = SettingsConfigDict(
        env_prefix="CACHE_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    provider: str = Field(default="memory")
    service_name: str = Field(default="cache")
    log_level: str = Field(default="info")

    # In-process provider
    scan_interval_seconds: float = Field(default=60.0, gt=0)

    # Remote provider
    redis_url: str = Field(default="redis://localhost:6379/0")
    redis_socket_timeout: float = Field(default=5.0, gt=0)
    redis_connect_timeout: float = Field(default=5.0, gt=0)
    key_prefix: str = Field(default="")


def get_config(**overrides) -> CacheConfig:
    """Get cache configuration from the environment, with explicit overrides."""
    return CacheConfig(**overrides)
