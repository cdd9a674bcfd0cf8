"""
Shared error handling for the cache provider library.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error response format."""

    code: str
    message: str
    details: Dict[str, Any] = {}


class CacheException(Exception):
    """Base exception for cache providers."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            code=self.code,
            message=self.message,
            details=self.details
        )


class InvalidKeyError(CacheException):
    """Cache key is missing, empty or not a string."""

    def __init__(self, message: str = "Cache key cannot be null or empty", details: Optional[Dict[str, Any]] = None):
        super().__init__("INVALID_KEY", message, details)


class SerializationError(CacheException):
    """Value could not be encoded for the remote store."""

    def __init__(self, message: str = "Failed to serialize cache value", details: Optional[Dict[str, Any]] = None):
        super().__init__("SERIALIZATION_ERROR", message, details)


class DeserializationError(CacheException):
    """Cached payload could not be decoded into the requested type."""

    def __init__(self, message: str = "Failed to deserialize cache value", details: Optional[Dict[str, Any]] = None):
        super().__init__("DESERIALIZATION_ERROR", message, details)


class NotSupportedError(CacheException):
    """Operation is not available on this provider. Never retry."""

    def __init__(self, operation: str, provider: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(
            "NOT_SUPPORTED",
            f"{provider}: '{operation}' is not supported",
            {"operation": operation, "provider": provider, **(details or {})}
        )


class CacheConnectionError(CacheException):
    """Remote cache could not be reached at startup."""

    def __init__(self, message: str = "Cache backend unavailable", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_CONNECTION_ERROR", message, details)


class CacheConfigurationError(CacheException):
    """Cache configuration names something that does not exist."""

    def __init__(self, message: str = "Invalid cache configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CACHE_CONFIGURATION_ERROR", message, details)
