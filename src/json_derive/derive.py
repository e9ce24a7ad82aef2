"""Deriver: turns type annotations into codecs, once per type.

Member metadata is read from dataclass fields.  ``json_field`` attaches an
explicit key, alternative decode keys, a date/time format or a custom codec
to one field; ``json_object`` chooses the naming strategy of a whole type;
``json_enum`` (in ``json_derive.codecs.enum``) does the same for enums.

Supported annotations:
- ``str``, ``int``, ``float``, ``bool``, ``Any``
- ``X | None`` / ``Optional[X]``
- ``list[X]`` / ``Sequence[X]`` and ``dict[str, X]`` / ``Mapping[str, X]``
- ``Enum`` subclasses and dataclasses (nested and self-referential)
- ``datetime``, ``date``, ``time``
- any type with a codec registered through ``Deriver.register``

Every derived codec is cached in the Deriver's ``CodecCache``.  Nested codecs
built while deriving a root type are staged and published together with the
root, so a failed derivation never leaves half-built codecs in the cache.

Example::

    @json_object(strategy=Strategy.UNDERSCORE)
    @dataclass
    class Account:
        accountId: str
        displayName: str = json_field(alternatives=("name", "title"))
        createdAt: datetime | None = None

    deriver = Deriver()
    codec = deriver.codec_for(Account)
    codec.decode({"account_id": "a1", "title": "Ada"})
    # Account(accountId="a1", displayName="Ada", createdAt=None)
"""

from __future__ import annotations

import dataclasses
import logging
import threading
import types
import typing
from collections.abc import Callable, Hashable, Mapping, Sequence
from datetime import date, time
from enum import Enum
from typing import Any, TypeVar

from json_derive.cache import CodecCache
from json_derive.codecs.enum import EnumCodec
from json_derive.codecs.object import DeferredCodec, ObjectCodec, ObjectMember
from json_derive.codecs.primitive import (
    AnyCodec,
    BoolCodec,
    FloatCodec,
    IntCodec,
    ListCodec,
    MapCodec,
    OptionalCodec,
    StringCodec,
)
from json_derive.codecs.time import TimeCodec, TimeFormat, default_time_format
from json_derive.config import CodecConfig
from json_derive.errors import DerivationError
from json_derive.keys.table import MemberSpec
from json_derive.naming.strategy import Strategy
from json_derive.protocols import JsonCodec, JsonValue

__all__ = ["Deriver", "FieldOptions", "ObjectSettings", "json_field", "json_object"]

logger = logging.getLogger(__name__)

T = TypeVar("T")
C = TypeVar("C", bound=type)

_FIELD_META = "json_derive"
_OBJECT_ATTR = "__json_object__"

_SCALARS: dict[Any, Callable[[], JsonCodec]] = {
    str: StringCodec,
    int: IntCodec,
    float: FloatCodec,
    bool: BoolCodec,
    Any: AnyCodec,
    object: AnyCodec,
}

_SEQUENCE_ORIGINS = frozenset({list, Sequence})
_MAPPING_ORIGINS = frozenset({dict, Mapping})


# ---------------------------------------------------------------------------
# Metadata surface
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True, slots=True)
class FieldOptions:
    """Per-field metadata recorded by ``json_field``."""

    key: str | None = None
    alternatives: tuple[str, ...] = ()
    time_format: TimeFormat | None = None
    codec: JsonCodec | None = None

    @classmethod
    def of(cls, f: dataclasses.Field[Any]) -> FieldOptions:
        options = f.metadata.get(_FIELD_META)
        return options if isinstance(options, FieldOptions) else cls()


@dataclasses.dataclass(frozen=True, slots=True)
class ObjectSettings:
    """Per-type settings recorded by ``json_object``."""

    strategy: Strategy

    @classmethod
    def of(cls, tp: type) -> ObjectSettings | None:
        settings = getattr(tp, _OBJECT_ATTR, None)
        return settings if isinstance(settings, ObjectSettings) else None


def json_field(
    *,
    key: str | None = None,
    alternatives: str | Sequence[str] = (),
    time_format: TimeFormat | str | None = None,
    codec: JsonCodec | None = None,
    default: Any = dataclasses.MISSING,
    default_factory: Any = dataclasses.MISSING,
    **field_kwargs: Any,
) -> Any:
    """``dataclasses.field`` carrying JSON key metadata.

    Args:
        key:          Explicit JSON key, overriding the type's naming strategy.
        alternatives: Extra keys accepted on decode, earliest-declared first.
        time_format:  Textual form for a ``datetime``/``date``/``time`` field.
        codec:        Custom codec for this field's value.
        default:      As for ``dataclasses.field``; makes the member optional.
        default_factory: As for ``dataclasses.field``; makes the member optional.
        **field_kwargs: Passed through to ``dataclasses.field``.
    """
    if isinstance(alternatives, str):
        alternatives = (alternatives,)
    if codec is not None and not isinstance(codec, JsonCodec):
        raise TypeError(f"codec must provide encode() and decode(), got {codec!r}")
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[_FIELD_META] = FieldOptions(
        key=key,
        alternatives=tuple(alternatives),
        time_format=TimeFormat(time_format) if time_format is not None else None,
        codec=codec,
    )
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **field_kwargs,
    )


def json_object(strategy: Strategy = Strategy.IDENTITY) -> Callable[[C], C]:
    """Class decorator choosing the naming strategy of a dataclass."""
    settings = ObjectSettings(Strategy(strategy))

    def decorate(cls: C) -> C:
        setattr(cls, _OBJECT_ATTR, settings)
        return cls

    return decorate


# ---------------------------------------------------------------------------
# Annotation helpers
# ---------------------------------------------------------------------------


def _is_union(tp: Any) -> bool:
    return typing.get_origin(tp) in (typing.Union, types.UnionType)


def _admits_none(tp: Any) -> bool:
    return tp is None or tp is type(None) or (
        _is_union(tp) and type(None) in typing.get_args(tp)
    )


def _strip_none(tp: Any) -> Any:
    """``X | None`` -> ``X``; anything else unchanged."""
    if not _is_union(tp):
        return tp
    rest = [arg for arg in typing.get_args(tp) if arg is not type(None)]
    if len(rest) != 1:
        raise DerivationError(f"unions other than X | None are not supported: {tp!r}")
    return rest[0]


def _type_name(tp: Any) -> str:
    return tp.__qualname__ if isinstance(tp, type) else repr(tp)


def _constant(value: Any) -> Callable[[], Any]:
    return lambda: value


def _has_default(f: dataclasses.Field[Any]) -> bool:
    return (
        f.default is not dataclasses.MISSING
        or f.default_factory is not dataclasses.MISSING
    )


class _DerivationState(threading.local):
    """Per-thread bookkeeping for one root derivation."""

    def __init__(self) -> None:
        self.depth = 0
        self.pending: dict[Hashable, DeferredCodec] = {}
        self.staged: dict[Hashable, JsonCodec] = {}


# ---------------------------------------------------------------------------
# Deriver
# ---------------------------------------------------------------------------


class Deriver:
    """Derives, caches and applies codecs for host types.

    A Deriver owns one ``CodecCache``; codecs are built on first use and
    shared by every later caller.  Separate Deriver instances never share
    codecs, so each can carry its own ``CodecConfig`` and registrations.

    Example::

        deriver = Deriver(config=CodecConfig(key_precedence=KeyPrecedence.REJECT))
        deriver.register(uuid.UUID, UUIDCodec())
        deriver.encode(order)              # {"id": "...", ...}
        deriver.decode(payload, Order)     # Order(...)
    """

    def __init__(
        self,
        config: CodecConfig | None = None,
        max_cache_size: int = 1024,
    ) -> None:
        """Initialise the deriver.

        Args:
            config: Derivation parameters.  Defaults to ``CodecConfig()``.
            max_cache_size: Maximum number of derived codecs held in the
                LRU cache.  This is an infrastructure parameter, NOT part of
                ``CodecConfig`` (which governs codec behaviour only).
        """
        self._config: CodecConfig = config if config is not None else CodecConfig()
        self._cache = CodecCache(max_size=max_cache_size)
        self._state = _DerivationState()

    @property
    def config(self) -> CodecConfig:
        return self._config

    @property
    def cache(self) -> CodecCache:
        return self._cache

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def register(self, tp: Hashable, codec: JsonCodec) -> None:
        """Use ``codec`` for every occurrence of ``tp``, replacing any previous one."""
        if not isinstance(codec, JsonCodec):
            raise TypeError(f"codec must provide encode() and decode(), got {codec!r}")
        self._cache.register(tp, codec)

    def codec_for(self, tp: Any) -> JsonCodec:
        """Return the codec for ``tp``, deriving and caching it on first use.

        Raises:
            DerivationError: If ``tp`` (or a type it refers to) is unsupported.
            KeyCollisionError: If a record or enum maps two members to one key.
        """
        cached = self._cache.get(tp)
        if cached is not None:
            return cached

        state = self._state
        if tp in state.pending:
            return state.pending[tp]
        if tp in state.staged:
            return state.staged[tp]
        if state.depth:
            codec = self._build(tp)
            state.staged[tp] = codec
            return codec
        return self._cache.get_or_build(tp, lambda: self._build_root(tp))

    def encode(self, value: Any, tp: Any = None) -> JsonValue:
        """Encode ``value`` with the codec of ``tp`` (default: its own type)."""
        return self.codec_for(type(value) if tp is None else tp).encode(value)

    def decode(self, data: Any, tp: type[T] | Any) -> T:
        """Decode an already-parsed JSON value into ``tp``."""
        return self.codec_for(tp).decode(data)  # type: ignore[no-any-return]

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------

    def _build_root(self, tp: Any) -> JsonCodec:
        state = self._state
        state.depth += 1
        try:
            codec = self._build(tp)
            staged = dict(state.staged)
        finally:
            state.depth -= 1
            state.staged.clear()
        for key, nested in staged.items():
            self._cache.get_or_build(key, lambda nested=nested: nested)
        return codec

    def _build(self, tp: Any) -> JsonCodec:
        logger.debug("Deriving codec for %s", _type_name(tp))

        scalar = _SCALARS.get(tp) if isinstance(tp, Hashable) else None
        if scalar is not None:
            return scalar()

        if _is_union(tp):
            return OptionalCodec(self.codec_for(_strip_none(tp)))

        origin = typing.get_origin(tp)
        args = typing.get_args(tp)
        if origin in _SEQUENCE_ORIGINS or tp in (list, Sequence):
            return ListCodec(self.codec_for(args[0] if args else Any))
        if origin in _MAPPING_ORIGINS or tp in (dict, Mapping):
            if args and args[0] is not str:
                raise DerivationError(f"JSON object keys must be str: {tp!r}")
            return MapCodec(self.codec_for(args[1] if args else Any))

        if origin is None and isinstance(tp, type):
            if issubclass(tp, Enum):
                return EnumCodec.for_enum(tp)
            if dataclasses.is_dataclass(tp):
                return self._build_object(tp)
            fmt = default_time_format(tp)
            if fmt is not None:
                return TimeCodec(fmt)

        raise DerivationError(f"cannot derive a JSON codec for {_type_name(tp)}")

    def _build_object(self, tp: type) -> ObjectCodec:
        name = tp.__qualname__
        settings = ObjectSettings.of(tp)
        strategy = settings.strategy if settings else self._config.default_strategy
        try:
            hints = typing.get_type_hints(tp)
        except NameError as exc:
            raise DerivationError(f"cannot resolve annotations of {name}: {exc}") from exc

        deferred = DeferredCodec(name)
        self._state.pending[tp] = deferred
        try:
            members = [
                self._member(name, f, hints[f.name])
                for f in dataclasses.fields(tp)
                if f.init
            ]
            codec = ObjectCodec(
                name,
                members,
                construct=lambda fields: tp(**fields),
                strategy=strategy,
                config=self._config,
            )
        finally:
            del self._state.pending[tp]
        deferred.bind(codec)
        return codec

    def _member(self, owner: str, f: dataclasses.Field[Any], hint: Any) -> ObjectMember:
        options = FieldOptions.of(f)
        try:
            if options.codec is not None:
                codec = options.codec
            elif options.time_format is not None:
                codec = self._time_codec(hint, options.time_format)
            else:
                codec = self.codec_for(hint)
        except DerivationError as exc:
            raise DerivationError(f"{owner}.{f.name}: {exc}") from exc

        default: Callable[[], Any] | None = None
        if f.default is not dataclasses.MISSING:
            default = None if f.default is None else _constant(f.default)
        elif f.default_factory is not dataclasses.MISSING:
            default = f.default_factory

        spec = MemberSpec(
            name=f.name,
            key=options.key,
            alternatives=options.alternatives,
            optional=_admits_none(hint) or _has_default(f),
        )
        return ObjectMember(spec=spec, codec=codec, default=default)

    def _time_codec(self, hint: Any, fmt: TimeFormat) -> JsonCodec:
        base = _strip_none(hint)
        if not (isinstance(base, type) and issubclass(base, (date, time))):
            raise DerivationError(f"time_format {fmt!s} needs a date/time field, got {hint!r}")
        codec = TimeCodec(fmt)
        return OptionalCodec(codec) if _admits_none(hint) else codec
