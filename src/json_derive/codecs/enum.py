"""EnumCodec: closed sets of named constants <-> JSON strings.

Each constant's key is its Python member *name* run through the naming
strategy; the member's ``.value`` plays no part.  With
``CaseMode.INSENSITIVE`` decoding goes through a second index keyed by the
case-folded key, while encoding always emits the canonical key.

Example::

    class Color(Enum):
        Red = 1
        DarkBlue = 2

    codec = EnumCodec(Color, Strategy.UNDERSCORE, CaseMode.INSENSITIVE)
    codec.encode(Color.DarkBlue)   # "dark_blue"
    codec.decode("DARK_BLUE")      # Color.DarkBlue
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import Enum
from types import MappingProxyType
from typing import Any, TypeVar

from json_derive.config import CaseMode
from json_derive.errors import (
    EncodeError,
    KeyCollisionError,
    NoSuchVariantError,
    TypeMismatchError,
    json_shape,
)
from json_derive.naming.strategy import KeyNamer, Strategy

__all__ = ["EnumCodec", "EnumSettings", "json_enum"]

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=type[Enum])

_SETTINGS_ATTR = "__json_enum__"


class EnumSettings:
    """Naming strategy and case mode recorded on an enum by ``json_enum``."""

    __slots__ = ("case_mode", "strategy")

    def __init__(
        self,
        strategy: Strategy = Strategy.IDENTITY,
        case_mode: CaseMode = CaseMode.SENSITIVE,
    ) -> None:
        self.strategy = Strategy(strategy)
        self.case_mode = CaseMode(case_mode)

    @classmethod
    def of(cls, enum_cls: type[Enum]) -> EnumSettings:
        settings = enum_cls.__dict__.get(_SETTINGS_ATTR)
        return settings if isinstance(settings, EnumSettings) else cls()

    def __repr__(self) -> str:
        return f"EnumSettings(strategy={self.strategy!s}, case_mode={self.case_mode!s})"


def json_enum(
    strategy: Strategy = Strategy.IDENTITY,
    case_insensitive: bool = False,
) -> Callable[[E], E]:
    """Class decorator choosing how an enum is written to and read from JSON.

    Args:
        strategy:         Naming strategy applied to member names.
        case_insensitive: Accept any case variant of a key on decode.
    """
    settings = EnumSettings(
        strategy,
        CaseMode.INSENSITIVE if case_insensitive else CaseMode.SENSITIVE,
    )

    def decorate(enum_cls: E) -> E:
        if not (isinstance(enum_cls, type) and issubclass(enum_cls, Enum)):
            raise TypeError(f"json_enum applies to Enum classes, not {enum_cls!r}")
        setattr(enum_cls, _SETTINGS_ATTR, settings)
        return enum_cls

    return decorate


class EnumCodec:
    """Encoder/decoder pair for one Enum class.

    Raises:
        KeyCollisionError: At construction, if two constants derive the same
            decode key (after case folding under ``CaseMode.INSENSITIVE``).
    """

    __slots__ = ("_by_key", "_folded", "_keys", "case_mode", "enum_cls", "strategy")

    def __init__(
        self,
        enum_cls: type[Enum],
        strategy: Strategy = Strategy.IDENTITY,
        case_mode: CaseMode = CaseMode.SENSITIVE,
    ) -> None:
        self.enum_cls = enum_cls
        self.strategy = Strategy(strategy)
        self.case_mode = CaseMode(case_mode)

        namer = KeyNamer(self.strategy)
        keys: dict[Enum, str] = {}
        by_key: dict[str, Enum] = {}
        folded: dict[str, Enum] = {}

        # Iterating an Enum skips aliases, so each constant appears once.
        for member in enum_cls:
            key = namer.name(member.name)
            self._claim(by_key, key, member)
            if self.case_mode is CaseMode.INSENSITIVE:
                self._claim(folded, key.casefold(), member)
            keys[member] = key

        self._keys = MappingProxyType(keys)
        self._by_key = MappingProxyType(by_key)
        self._folded = MappingProxyType(folded)
        logger.debug(
            "Built enum codec for %s: %d constants, strategy=%s, case_mode=%s",
            enum_cls.__qualname__,
            len(keys),
            self.strategy,
            self.case_mode,
        )

    @classmethod
    def for_enum(cls, enum_cls: type[Enum]) -> EnumCodec:
        """Build a codec from the settings recorded by ``json_enum``."""
        settings = EnumSettings.of(enum_cls)
        return cls(enum_cls, settings.strategy, settings.case_mode)

    @staticmethod
    def _claim(index: dict[str, Enum], key: str, member: Enum) -> None:
        other = index.get(key)
        if other is not None:
            raise KeyCollisionError(key, other.name, member.name)
        index[key] = member

    def key_of(self, constant: Enum) -> str:
        """Return the canonical key of ``constant``."""
        return self._keys[constant]

    def encode(self, value: Any) -> str:
        if not isinstance(value, self.enum_cls):
            raise EncodeError(
                f"expected {self.enum_cls.__qualname__}, got {type(value).__name__}"
            )
        key = self._keys.get(value)
        if key is None:
            raise EncodeError(f"{value!r} is not a single {self.enum_cls.__qualname__} constant")
        return key

    def decode(self, value: Any) -> Enum:
        if not isinstance(value, str):
            raise TypeMismatchError("string", json_shape(value))
        if self.case_mode is CaseMode.INSENSITIVE:
            member = self._folded.get(value.casefold())
        else:
            member = self._by_key.get(value)
        if member is None:
            raise NoSuchVariantError(value)
        return member

    def __repr__(self) -> str:
        return (
            f"EnumCodec({self.enum_cls.__qualname__}, strategy={self.strategy!s}, "
            f"case_mode={self.case_mode!s})"
        )
