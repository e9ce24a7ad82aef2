"""Public API functions for json-derive.

These functions share one process-wide ``Deriver`` so that each type's codec
is derived once and reused by every caller.  Build a separate ``Deriver``
when you need a different ``CodecConfig`` or an isolated set of registrations.
"""

from __future__ import annotations

import json
from collections.abc import Hashable
from typing import Any, TypeVar

from json_derive.derive import Deriver
from json_derive.protocols import JsonCodec, JsonValue

__all__ = [
    "codec_for",
    "decode",
    "default_deriver",
    "dumps",
    "encode",
    "loads",
    "register",
]

T = TypeVar("T")

_DEFAULT = Deriver()


def default_deriver() -> Deriver:
    """Return the process-wide Deriver behind the module-level functions."""
    return _DEFAULT


def codec_for(tp: Any) -> JsonCodec:
    """Return the (cached) codec for ``tp``.

    Raises:
        DerivationError: If ``tp`` cannot be mapped to JSON.
        KeyCollisionError: If two members of ``tp`` share a JSON key.
    """
    return _DEFAULT.codec_for(tp)


def register(tp: Hashable, codec: JsonCodec) -> None:
    """Use ``codec`` for every occurrence of ``tp`` in derived types."""
    _DEFAULT.register(tp, codec)


def encode(value: Any, tp: Any = None) -> JsonValue:
    """Encode ``value`` into a JSON-compatible Python value.

    Args:
        value: Host value to encode.
        tp:    Type to encode as.  Defaults to ``type(value)``; pass it for
               generic containers such as ``list[User]``.

    Returns:
        A tree of dict/list/str/int/float/bool/None ready for ``json.dumps``.
    """
    return _DEFAULT.encode(value, tp)


def decode(data: Any, tp: type[T] | Any) -> T:
    """Decode an already-parsed JSON value into an instance of ``tp``.

    Raises:
        DecodeError: Subclass describing the first problem; nested failures
            are ``FieldDecodeError`` carrying the member path.
    """
    return _DEFAULT.decode(data, tp)


def dumps(value: Any, tp: Any = None, **json_kwargs: Any) -> str:
    """Encode ``value`` and serialise it with ``json.dumps``."""
    return json.dumps(encode(value, tp), **json_kwargs)


def loads(text: str | bytes, tp: type[T] | Any) -> T:
    """Parse JSON text with ``json.loads`` and decode it into ``tp``."""
    return decode(json.loads(text), tp)
