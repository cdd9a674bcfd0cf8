"""
Value serializers for providers that store encoded payloads.
"""

from functools import lru_cache
from typing import Any, Protocol, Union

from pydantic import PydanticUserError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from shared.errors import DeserializationError, SerializationError


class CacheSerializer(Protocol):
    """Encodes values for a remote store and decodes them back."""

    def encode(self, value: Any) -> bytes:
        ...

    def decode(self, payload: Union[bytes, str], target_type: Any = Any) -> Any:
        ...


@lru_cache(maxsize=256)
def _cached_adapter(target_type: Any) -> TypeAdapter:
    return TypeAdapter(target_type)


def _adapter(target_type: Any) -> TypeAdapter:
    try:
        hash(target_type)
    except TypeError:
        # hints carrying unhashable metadata, e.g. Annotated[int, {...}]
        return TypeAdapter(target_type)
    return _cached_adapter(target_type)


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", None) or repr(target_type)


class JsonSerializer:
    """JSON serializer driven by pydantic type adapters.

    Encoding infers the shape from the value, so pydantic models,
    dataclasses, datetimes and plain containers all work. Decoding validates
    into *target_type*; ``Any`` yields plain JSON structures.
    """

    def encode(self, value: Any) -> bytes:
        try:
            return _adapter(Any).dump_json(value)
        except PydanticSerializationError as e:
            raise SerializationError(
                f"Cannot serialize value of type {type(value).__name__}",
                {"value_type": type(value).__name__, "error": str(e)}
            ) from e

    def decode(self, payload: Union[bytes, str], target_type: Any = Any) -> Any:
        try:
            return _adapter(target_type).validate_json(payload)
        except (ValidationError, PydanticUserError) as e:
            raise DeserializationError(
                f"Cannot deserialize cached payload into {_type_name(target_type)}",
                {"target_type": _type_name(target_type), "error": str(e)}
            ) from e
