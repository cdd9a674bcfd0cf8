"""
Cache provider contract shared by every backing store.

Application code depends on ``CacheProvider`` only; whether values live in
process memory or on a remote server is a configuration-time choice (see
``caching.factory``).
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, Optional, Union

from shared.errors import InvalidKeyError

AbsoluteExpiry = Union[datetime, timedelta]


def validate_key(key: Any) -> str:
    """Reject null, empty or non-string keys before any store is touched."""
    if key is None:
        raise InvalidKeyError("Cache key cannot be null")
    if not isinstance(key, str):
        raise InvalidKeyError(
            "Cache key must be a string",
            {"key_type": type(key).__name__}
        )
    if not key:
        raise InvalidKeyError("Cache key cannot be empty")
    return key


def seconds_until(absolute_expiry: AbsoluteExpiry) -> float:
    """Seconds from now until the expiry; negative when already passed.

    Naive datetimes are compared against local time, aware ones against
    their own timezone.
    """
    if isinstance(absolute_expiry, timedelta):
        return absolute_expiry.total_seconds()
    now = datetime.now(absolute_expiry.tzinfo)
    return (absolute_expiry - now).total_seconds()


class CacheProvider(ABC):
    """Contract for keyed value caches.

    All operations are async so network-backed stores can suspend on I/O.
    A miss is a normal outcome: ``get`` returns ``None`` and ``exists``
    returns ``False``. ``None`` is itself a storable value, so callers that
    cache negative results tell the two apart with ``exists``.
    """

    @abstractmethod
    async def get(self, key: str, target_type: Optional[Any] = None) -> Optional[Any]:
        """Return the live value stored under *key*, or ``None``.

        *target_type* is the type the caller expects back. Providers that
        store encoded payloads decode into it.
        """

    @abstractmethod
    async def set(
        self,
        key: str,
        value: Any,
        absolute_expiry: Optional[AbsoluteExpiry] = None,
        sliding_expiry: Optional[timedelta] = None
    ) -> None:
        """Store *value* under *key*, replacing any existing entry.

        *absolute_expiry* is an instant or a duration from now after which
        the entry is gone. *sliding_expiry* evicts the entry once it has not
        been read for that long; not every provider honours it.
        """

    @abstractmethod
    async def remove(self, key: str) -> None:
        """Remove the entry for *key*. Removing an absent key is a no-op."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Return ``True`` iff a live entry is stored under *key*."""

    @abstractmethod
    async def clear(self) -> None:
        """Remove every entry this provider tracks."""
