"""Codecs subpackage: encoder/decoder pairs composed per type.

Re-exports the public API for the codecs module:
- EnumCodec, json_enum: enum constants <-> JSON strings
- ObjectCodec, ObjectMember: record types <-> JSON objects
- TimeCodec, TimeFormat: date/time values <-> JSON strings
- Primitive and container codecs used for member values
"""

from json_derive.codecs.enum import EnumCodec, EnumSettings, json_enum
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
from json_derive.codecs.time import TimeCodec, TimeFormat

__all__ = [
    "AnyCodec",
    "BoolCodec",
    "DeferredCodec",
    "EnumCodec",
    "EnumSettings",
    "FloatCodec",
    "IntCodec",
    "ListCodec",
    "MapCodec",
    "ObjectCodec",
    "ObjectMember",
    "OptionalCodec",
    "StringCodec",
    "TimeCodec",
    "TimeFormat",
    "json_enum",
]
