"""
JSON codec.

Encoding and validated decoding on top of pydantic's TypeAdapter, so a
target shape can be a BaseModel, a dataclass, a TypedDict or a plain
typing construct like ``list[int]``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

from pydantic import PydanticSchemaGenerationError, TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from jsonwire.schemas.errors import DecodeException, EncodeException

T = TypeVar("T")

_ANY_ADAPTER: TypeAdapter[Any] = TypeAdapter(Any)


@lru_cache(maxsize=256)
def _cached_adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def get_adapter(shape: Any) -> TypeAdapter[Any]:
    """
    Return a (cached when possible) TypeAdapter for ``shape``.

    Raises:
        PydanticSchemaGenerationError: If pydantic cannot build a schema for ``shape``.
    """
    try:
        hash(shape)
    except TypeError:
        # unhashable shape, e.g. Annotated with dict metadata
        return TypeAdapter(shape)
    return _cached_adapter(shape)


def check_shape(shape: Any) -> None:
    """
    Raise TypeError unless responses can be decoded into ``shape``.
    """
    try:
        get_adapter(shape)
    except PydanticSchemaGenerationError as e:
        raise TypeError(f"Cannot decode responses into {shape_name(shape)}: {e}") from e


def shape_name(shape: Any) -> str:
    return getattr(shape, "__name__", None) or repr(shape)


def encode(obj: Any) -> str:
    """
    Serialize ``obj`` to JSON text.

    Raises:
        EncodeException: If the object is not JSON-serializable.
    """
    try:
        return _ANY_ADAPTER.dump_json(obj).decode("utf-8")
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise EncodeException(
            f"Cannot encode {type(obj).__name__} as JSON: {e}",
            details={"type": type(obj).__name__},
        ) from e


def decode(text: str | bytes, shape: type[T]) -> T:
    """
    Parse JSON text and validate it against ``shape``.

    Raises:
        DecodeException: On malformed JSON, a shape mismatch, or a shape
            pydantic cannot validate against.
    """
    try:
        return get_adapter(shape).validate_json(text)
    except (ValidationError, PydanticSchemaGenerationError) as e:
        raise DecodeException(
            f"Cannot decode response as {shape_name(shape)}: {e}",
            shape=shape_name(shape),
        ) from e
