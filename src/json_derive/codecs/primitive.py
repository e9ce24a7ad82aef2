"""Member-level codecs for JSON scalars and containers.

These are the leaves and the generic containers of codec composition:
object and enum codecs delegate to them for each member value.

Shape checks follow the JSON model, not Python's: ``bool`` is never
accepted where a number is expected, even though ``bool`` subclasses
``int`` (isinstance(True, int) is True).
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from json_derive.errors import (
    DecodeError,
    EncodeError,
    FieldDecodeError,
    TypeMismatchError,
    json_shape,
)
from json_derive.protocols import JsonCodec, JsonValue

__all__ = [
    "AnyCodec",
    "BoolCodec",
    "FloatCodec",
    "IntCodec",
    "ListCodec",
    "MapCodec",
    "OptionalCodec",
    "StringCodec",
]


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class StringCodec:
    """``str`` <-> JSON string."""

    def encode(self, value: Any) -> str:
        if not isinstance(value, str):
            raise EncodeError(f"expected str, got {type(value).__name__}")
        return value

    def decode(self, value: Any) -> str:
        if not isinstance(value, str):
            raise TypeMismatchError("string", json_shape(value))
        return value


class IntCodec:
    """``int`` <-> JSON integer number."""

    def encode(self, value: Any) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise EncodeError(f"expected int, got {type(value).__name__}")
        return value

    def decode(self, value: Any) -> int:
        if not isinstance(value, int) or isinstance(value, bool):
            raise TypeMismatchError("integer", json_shape(value))
        return value


class FloatCodec:
    """``float`` <-> JSON number.  Integers are widened on both sides."""

    def encode(self, value: Any) -> float:
        if not _is_number(value):
            raise EncodeError(f"expected float, got {type(value).__name__}")
        return float(value)

    def decode(self, value: Any) -> float:
        if not _is_number(value):
            raise TypeMismatchError("number", json_shape(value))
        return float(value)


class BoolCodec:
    """``bool`` <-> JSON boolean."""

    def encode(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise EncodeError(f"expected bool, got {type(value).__name__}")
        return value

    def decode(self, value: Any) -> bool:
        if not isinstance(value, bool):
            raise TypeMismatchError("boolean", json_shape(value))
        return value


class AnyCodec:
    """Passes already-parsed JSON values through unchanged."""

    def encode(self, value: Any) -> JsonValue:
        return value

    def decode(self, value: Any) -> Any:
        return value


@dataclass(frozen=True, slots=True)
class OptionalCodec:
    """``T | None`` <-> JSON value or null."""

    inner: JsonCodec

    def encode(self, value: Any) -> JsonValue:
        if value is None:
            return None
        return self.inner.encode(value)

    def decode(self, value: Any) -> Any:
        if value is None:
            return None
        return self.inner.decode(value)


@dataclass(frozen=True, slots=True)
class ListCodec:
    """``list[T]`` <-> JSON array.  Element failures carry their index."""

    inner: JsonCodec

    def encode(self, value: Any) -> list[JsonValue]:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Sequence):
            raise EncodeError(f"expected a sequence, got {type(value).__name__}")
        return [self.inner.encode(item) for item in value]

    def decode(self, value: Any) -> list[Any]:
        if not isinstance(value, list):
            raise TypeMismatchError("array", json_shape(value))
        decoded: list[Any] = []
        for index, item in enumerate(value):
            try:
                decoded.append(self.inner.decode(item))
            except DecodeError as exc:
                raise FieldDecodeError(index, exc) from exc
        return decoded


@dataclass(frozen=True, slots=True)
class MapCodec:
    """``dict[str, T]`` <-> JSON object.  Value failures carry their key."""

    inner: JsonCodec

    def encode(self, value: Any) -> dict[str, JsonValue]:
        if not isinstance(value, Mapping):
            raise EncodeError(f"expected a mapping, got {type(value).__name__}")
        encoded: dict[str, JsonValue] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodeError(f"mapping keys must be str, got {type(key).__name__}")
            encoded[key] = self.inner.encode(item)
        return encoded

    def decode(self, value: Any) -> dict[str, Any]:
        if not isinstance(value, dict):
            raise TypeMismatchError("object", json_shape(value))
        decoded: dict[str, Any] = {}
        for key, item in value.items():
            try:
                decoded[key] = self.inner.decode(item)
            except DecodeError as exc:
                raise FieldDecodeError(key, exc) from exc
        return decoded
