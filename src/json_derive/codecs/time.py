"""Date/time string codecs.

Each ``TimeFormat`` fixes one textual form and one host type:

| Format            | Host value                     | Example text
|-------------------|--------------------------------|-------------------------------
| OFFSET_DATE_TIME  | aware ``datetime``             | 2008-06-03T11:05:30+02:00
| OFFSET_TIME       | aware ``time``                 | 11:05:30+02:00
| LOCAL_DATE_TIME   | naive ``datetime``             | 2008-06-03T11:05:30
| LOCAL_DATE        | ``date``                       | 2008-06-03
| LOCAL_TIME        | naive ``time``                 | 11:05:30
| INSTANT           | aware ``datetime`` in UTC      | 2008-06-03T09:05:30Z
| RFC_1123          | aware ``datetime``             | Tue, 03 Jun 2008 11:05:30 GMT

ISO-8601 forms use ``fromisoformat``/``isoformat``; a zero offset is written
as ``Z``.  RFC 1123 uses
``email.utils`` and carries whole seconds only.  Text that does not parse,
or parses to the wrong kind of value (naive where an offset is required, or
the reverse), raises ``FormatError`` with the offending text.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from email.utils import format_datetime, parsedate_to_datetime
from enum import StrEnum, auto
from typing import Any

from json_derive.errors import EncodeError, FormatError, TypeMismatchError, json_shape

__all__ = ["TimeCodec", "TimeFormat", "default_time_format"]


class TimeFormat(StrEnum):
    """The supported date/time textual forms."""

    OFFSET_DATE_TIME = auto()
    OFFSET_TIME = auto()
    LOCAL_DATE_TIME = auto()
    LOCAL_DATE = auto()
    LOCAL_TIME = auto()
    INSTANT = auto()
    RFC_1123 = auto()

    @property
    def label(self) -> str:
        return _LABELS[self]


_LABELS: dict[TimeFormat, str] = {
    TimeFormat.OFFSET_DATE_TIME: "ISO-8601 offset date-time",
    TimeFormat.OFFSET_TIME: "ISO-8601 offset time",
    TimeFormat.LOCAL_DATE_TIME: "ISO-8601 local date-time",
    TimeFormat.LOCAL_DATE: "ISO-8601 local date",
    TimeFormat.LOCAL_TIME: "ISO-8601 local time",
    TimeFormat.INSTANT: "ISO-8601 instant",
    TimeFormat.RFC_1123: "RFC-1123 date-time",
}


def default_time_format(tp: type) -> TimeFormat | None:
    """Return the format used for ``tp`` when a member does not choose one."""
    # datetime before date: datetime subclasses date
    if issubclass(tp, datetime):
        return TimeFormat.OFFSET_DATE_TIME
    if issubclass(tp, date):
        return TimeFormat.LOCAL_DATE
    if issubclass(tp, time):
        return TimeFormat.LOCAL_TIME
    return None


def _is_aware(value: datetime | time) -> bool:
    return value.utcoffset() is not None


# ---------------------------------------------------------------------------
# Parsers: text -> value, raising ValueError on any malformed input
# ---------------------------------------------------------------------------


def _parse_iso_datetime(text: str, aware: bool) -> datetime:
    if len(text) < 11 or text[10] not in "Tt":
        raise ValueError("missing date/time separator")
    value = datetime.fromisoformat(text)
    if _is_aware(value) != aware:
        raise ValueError("offset presence does not match the format")
    return value


def _parse_iso_time(text: str, aware: bool) -> time:
    value = time.fromisoformat(text)
    if _is_aware(value) != aware:
        raise ValueError("offset presence does not match the format")
    return value


def _parse_instant(text: str) -> datetime:
    return _parse_iso_datetime(text, aware=True).astimezone(timezone.utc)


def _parse_rfc_1123(text: str) -> datetime:
    try:
        value = parsedate_to_datetime(text)
    except TypeError as exc:
        raise ValueError(str(exc)) from exc
    if value.tzinfo is None:
        # "-0000" means UTC with no local offset information
        value = value.replace(tzinfo=timezone.utc)
    return value


_PARSERS: dict[TimeFormat, Callable[[str], Any]] = {
    TimeFormat.OFFSET_DATE_TIME: lambda s: _parse_iso_datetime(s, aware=True),
    TimeFormat.OFFSET_TIME: lambda s: _parse_iso_time(s, aware=True),
    TimeFormat.LOCAL_DATE_TIME: lambda s: _parse_iso_datetime(s, aware=False),
    TimeFormat.LOCAL_DATE: date.fromisoformat,
    TimeFormat.LOCAL_TIME: lambda s: _parse_iso_time(s, aware=False),
    TimeFormat.INSTANT: _parse_instant,
    TimeFormat.RFC_1123: _parse_rfc_1123,
}


# ---------------------------------------------------------------------------
# Formatters: value -> text, raising EncodeError on contract violations
# ---------------------------------------------------------------------------


def _require(value: Any, kind: type, aware: bool | None, fmt: TimeFormat) -> None:
    if not isinstance(value, kind) or (kind is date and isinstance(value, datetime)):
        raise EncodeError(
            f"{fmt.label} expects {kind.__name__}, got {type(value).__name__}"
        )
    if aware is not None and _is_aware(value) != aware:
        needed = "an offset-aware" if aware else "a naive"
        raise EncodeError(f"{fmt.label} expects {needed} {kind.__name__}")


def _zulu(text: str) -> str:
    """Write a zero offset as ``Z``."""
    if text.endswith("+00:00"):
        return text.removesuffix("+00:00") + "Z"
    return text


def _format_offset(value: datetime | time) -> str:
    return _zulu(value.isoformat())


def _format_instant(value: datetime) -> str:
    return _zulu(value.astimezone(timezone.utc).isoformat())


def _format_rfc_1123(value: datetime) -> str:
    if value.utcoffset() == timedelta(0):
        return format_datetime(value.astimezone(timezone.utc), usegmt=True)
    return format_datetime(value)


_EXPECTED: dict[TimeFormat, tuple[type, bool | None]] = {
    TimeFormat.OFFSET_DATE_TIME: (datetime, True),
    TimeFormat.OFFSET_TIME: (time, True),
    TimeFormat.LOCAL_DATE_TIME: (datetime, False),
    TimeFormat.LOCAL_DATE: (date, None),
    TimeFormat.LOCAL_TIME: (time, False),
    TimeFormat.INSTANT: (datetime, True),
    TimeFormat.RFC_1123: (datetime, True),
}

_FORMATTERS: dict[TimeFormat, Callable[[Any], str]] = {
    TimeFormat.OFFSET_DATE_TIME: _format_offset,
    TimeFormat.OFFSET_TIME: _format_offset,
    TimeFormat.LOCAL_DATE_TIME: datetime.isoformat,
    TimeFormat.LOCAL_DATE: date.isoformat,
    TimeFormat.LOCAL_TIME: time.isoformat,
    TimeFormat.INSTANT: _format_instant,
    TimeFormat.RFC_1123: _format_rfc_1123,
}


@dataclass(frozen=True, slots=True)
class TimeCodec:
    """Date/time value <-> JSON string in one fixed ``TimeFormat``.

    Example::

        codec = TimeCodec(TimeFormat.INSTANT)
        codec.decode("2008-06-03T11:05:30+02:00")
        # datetime(2008, 6, 3, 9, 5, 30, tzinfo=timezone.utc)
        codec.encode(datetime(2008, 6, 3, 9, 5, 30, tzinfo=timezone.utc))
        # "2008-06-03T09:05:30Z"
    """

    format: TimeFormat

    def encode(self, value: Any) -> str:
        kind, aware = _EXPECTED[self.format]
        _require(value, kind, aware, self.format)
        return _FORMATTERS[self.format](value)

    def decode(self, value: Any) -> Any:
        if not isinstance(value, str):
            raise TypeMismatchError("string", json_shape(value))
        try:
            return _PARSERS[self.format](value)
        except ValueError as exc:
            raise FormatError(value, self.format.label) from exc
