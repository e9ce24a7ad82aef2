"""JsonCodec Protocol: the structural interface of every codec.

Users can plug in custom codecs without inheriting from any base class.
Any object with conformant ``encode`` and ``decode`` methods passes
``isinstance`` checks and can be registered for a type or attached to a
single member with ``json_field(codec=...)``.

Example::

    import uuid

    from json_derive.errors import FormatError, TypeMismatchError, json_shape
    from json_derive.protocols import JsonCodec

    class UUIDCodec:
        def encode(self, value: uuid.UUID) -> str:
            return str(value)

        def decode(self, value: object) -> uuid.UUID:
            if not isinstance(value, str):
                raise TypeMismatchError("string", json_shape(value))
            try:
                return uuid.UUID(value)
            except ValueError:
                raise FormatError(value, "uuid") from None

    assert isinstance(UUIDCodec(), JsonCodec)  # True, structural conformance
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

__all__ = ["JsonCodec", "JsonValue"]

# Type alias for already-parsed JSON values
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


@runtime_checkable
class JsonCodec(Protocol):
    """Structural protocol for codecs.

    ``encode`` maps a host value to a JSON value tree and raises
    ``EncodeError`` when the host value breaks the codec's contract.
    ``decode`` maps a JSON value tree to a host value and raises a
    ``DecodeError`` subclass on malformed input.  Both must be pure so a
    codec can be shared across threads without locking.
    """

    def encode(self, value: Any) -> JsonValue: ...

    def decode(self, value: Any) -> Any: ...
