"""CodecConfig, KeyPrecedence and CaseMode for codec derivation.

CodecConfig is a frozen (immutable) dataclass holding the derivation
parameters shared by every codec a ``Deriver`` builds.  KeyPrecedence selects
how an object decoder resolves several accepted keys for the same member
being present at once; CaseMode selects how enum decoders compare keys.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum, auto

from json_derive.naming.strategy import Strategy

__all__ = ["CaseMode", "CodecConfig", "KeyPrecedence"]


class KeyPrecedence(StrEnum):
    """Which key wins when several of one member's keys appear in an object.

    - EARLIEST: The earliest-declared key wins (primary key first, then the
                alternatives in declaration order).
    - LATEST:   The latest-declared key wins.
    - REJECT:   Decoding fails with ``AmbiguousKeyError``.

    Precedence is by key table order, never by the order keys occur in the
    input object.
    """

    EARLIEST = auto()
    LATEST = auto()
    REJECT = auto()


class CaseMode(StrEnum):
    """How enum decoding compares JSON strings with constant keys.

    - SENSITIVE:   Exact match.
    - INSENSITIVE: Match after ``str.casefold()``.  Encoding still emits the
                   canonical key.
    """

    SENSITIVE = auto()
    INSENSITIVE = auto()


@dataclass(frozen=True, slots=True)
class CodecConfig:
    """Immutable configuration for codec derivation.

    Attributes:
        default_strategy: Naming strategy for types that do not choose one
            with ``@json_object``.  Default ``Strategy.IDENTITY``.
        key_precedence: Tie-break among simultaneously present keys of one
            member.  Default ``KeyPrecedence.EARLIEST``.
    """

    default_strategy: Strategy = Strategy.IDENTITY
    key_precedence: KeyPrecedence = KeyPrecedence.EARLIEST

    def __post_init__(self) -> None:
        if not isinstance(self.default_strategy, Strategy):
            msg = f"default_strategy must be a Strategy, got {self.default_strategy!r}"
            raise ValueError(msg)
        if not isinstance(self.key_precedence, KeyPrecedence):
            msg = f"key_precedence must be a KeyPrecedence, got {self.key_precedence!r}"
            raise ValueError(msg)
