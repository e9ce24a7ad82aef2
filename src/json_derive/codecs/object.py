"""ObjectCodec: record types <-> JSON objects.

An ObjectCodec is built from an ordered list of ``ObjectMember`` (key
metadata, a nested codec and an optional absent-default) plus a constructor
callable.  It owns a ``KeyTable``, so key collisions surface when the codec
is built, never while it is used.

Encode:
- Members are written in declaration order.
- An optional member holding ``None`` is omitted when an absent key also
  decodes to ``None`` (no default factory); otherwise it is written as null.
- Everything else is written under the member's primary key.

Decode:
- Only JSON objects are accepted (``TypeMismatchError`` otherwise).
- For each member, the present accepted keys are collected in table
  precedence order (primary first) and ``KeyPrecedence`` picks the winner.
- Missing optional members take their default; missing required members
  raise ``MissingFieldError``.
- Nested failures are wrapped in ``FieldDecodeError`` naming the member.
- Keys that belong to no member are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

from json_derive.config import CodecConfig, KeyPrecedence
from json_derive.errors import (
    AmbiguousKeyError,
    DecodeError,
    EncodeError,
    FieldDecodeError,
    MissingFieldError,
    TypeMismatchError,
    json_shape,
)
from json_derive.keys.table import KeyEntry, KeyTable, MemberSpec
from json_derive.naming.strategy import Strategy
from json_derive.protocols import JsonCodec, JsonValue

__all__ = ["DeferredCodec", "ObjectCodec", "ObjectMember"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ObjectMember:
    """One member of a record type.

    Attributes:
        spec:    Key metadata (identifier, key override, alternatives, optionality).
        codec:   Codec for the member's value.
        default: Zero-argument factory for the value of an absent optional
                 member.  ``None`` means the member decodes to ``None``.
    """

    spec: MemberSpec
    codec: JsonCodec
    default: Callable[[], Any] | None = None


class DeferredCodec:
    """Stand-in for a codec that is still being built.

    Handed out when a type refers back to itself (directly or through other
    types) during derivation, and bound to the finished codec afterwards.
    Using it before it is bound is a derivation bug and raises RuntimeError.
    """

    __slots__ = ("_target", "name")

    def __init__(self, name: str) -> None:
        self.name = name
        self._target: JsonCodec | None = None

    def bind(self, codec: JsonCodec) -> None:
        if self._target is not None:
            raise RuntimeError(f"deferred codec for {self.name} is already bound")
        self._target = codec

    @property
    def target(self) -> JsonCodec:
        if self._target is None:
            raise RuntimeError(f"codec for {self.name} used before it was built")
        return self._target

    def encode(self, value: Any) -> JsonValue:
        return self.target.encode(value)

    def decode(self, value: Any) -> Any:
        return self.target.decode(value)

    def __repr__(self) -> str:
        state = "bound" if self._target is not None else "unbound"
        return f"DeferredCodec({self.name}, {state})"


class ObjectCodec:
    """Encoder/decoder pair for one record type.

    Example::

        @dataclass
        class User:
            user_name: str
            age: int | None = None

        codec = ObjectCodec(
            "User",
            [
                ObjectMember(MemberSpec("user_name", alternatives=("login",)), StringCodec()),
                ObjectMember(MemberSpec("age", optional=True), OptionalCodec(IntCodec())),
            ],
            construct=lambda fields: User(**fields),
        )
        codec.decode({"login": "ada"})  # User(user_name="ada", age=None)
        codec.encode(User("ada"))      # {"user_name": "ada"}
    """

    __slots__ = ("_codecs", "_construct", "_defaults", "_omit_none", "config", "name", "table")

    def __init__(
        self,
        name: str,
        members: Sequence[ObjectMember],
        construct: Callable[[dict[str, Any]], Any],
        strategy: Strategy = Strategy.IDENTITY,
        config: CodecConfig | None = None,
    ) -> None:
        """Build the key table and index the member codecs.

        Args:
            name:      Display name of the record type, used in logs and errors.
            members:   Members in declaration order.
            construct: Called with the decoded ``{member: value}`` mapping.
            strategy:  Naming strategy for members without an explicit key.
            config:    Derivation configuration.  Defaults to ``CodecConfig()``.

        Raises:
            KeyCollisionError: If one key is accepted for two different members.
        """
        self.name = name
        self.config = config if config is not None else CodecConfig()
        self.table = KeyTable.build((m.spec for m in members), strategy)
        self._codecs = {m.spec.name: m.codec for m in members}
        self._defaults = {m.spec.name: m.default for m in members}
        self._omit_none = frozenset(
            m.spec.name for m in members if m.spec.optional and m.default is None
        )
        self._construct = construct
        logger.debug(
            "Built object codec for %s: %d members, strategy=%s",
            name,
            len(self.table),
            self.table.strategy,
        )

    # ------------------------------------------------------------------
    # Encode
    # ------------------------------------------------------------------

    def encode(self, value: Any) -> dict[str, JsonValue]:
        encoded: dict[str, JsonValue] = {}
        for entry in self.table.entries:
            try:
                member_value = getattr(value, entry.member)
            except AttributeError as exc:
                msg = f"{self.name} value has no member {entry.member!r}"
                raise EncodeError(msg) from exc
            if member_value is None and entry.member in self._omit_none:
                continue
            encoded[entry.primary_key] = self._codecs[entry.member].encode(member_value)
        return encoded

    # ------------------------------------------------------------------
    # Decode
    # ------------------------------------------------------------------

    def decode(self, value: Any) -> Any:
        if not isinstance(value, dict):
            raise TypeMismatchError("object", json_shape(value))

        fields: dict[str, Any] = {}
        for entry in self.table.entries:
            key = self._select_key(entry, value)
            if key is None:
                if not entry.optional:
                    raise MissingFieldError(entry.member)
                default = self._defaults[entry.member]
                fields[entry.member] = default() if default is not None else None
                continue
            try:
                fields[entry.member] = self._codecs[entry.member].decode(value[key])
            except DecodeError as exc:
                raise FieldDecodeError(entry.member, exc) from exc
        return self._construct(fields)

    def _select_key(self, entry: KeyEntry, obj: dict[str, Any]) -> str | None:
        """Pick which of the member's accepted keys to read, or None if absent."""
        precedence = self.config.key_precedence
        if precedence is KeyPrecedence.EARLIEST:
            for key in entry.decode_keys:
                if key in obj:
                    return key
            return None

        present = [key for key in entry.decode_keys if key in obj]
        if not present:
            return None
        if precedence is KeyPrecedence.REJECT and len(present) > 1:
            raise AmbiguousKeyError(entry.member, present)
        return present[-1] if precedence is KeyPrecedence.LATEST else present[0]

    def __repr__(self) -> str:
        return f"ObjectCodec({self.name}, {self.table!r})"
