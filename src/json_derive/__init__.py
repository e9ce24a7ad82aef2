"""json-derive - derived JSON codecs for dataclasses and enums."""

from __future__ import annotations

from json_derive.api import (
    codec_for,
    decode,
    default_deriver,
    dumps,
    encode,
    loads,
    register,
)
from json_derive.codecs.enum import json_enum
from json_derive.codecs.time import TimeFormat
from json_derive.config import CaseMode, CodecConfig, KeyPrecedence
from json_derive.derive import Deriver, json_field, json_object
from json_derive.errors import (
    AmbiguousKeyError,
    DecodeError,
    DerivationError,
    EncodeError,
    FieldDecodeError,
    FormatError,
    JsonDeriveError,
    KeyCollisionError,
    MissingFieldError,
    NoSuchVariantError,
    TypeMismatchError,
)
from json_derive.naming.strategy import Strategy
from json_derive.protocols import JsonCodec

__version__: str = "0.1.0"
__all__: list[str] = [
    "AmbiguousKeyError",
    "CaseMode",
    "CodecConfig",
    "DecodeError",
    "DerivationError",
    "Deriver",
    "EncodeError",
    "FieldDecodeError",
    "FormatError",
    "JsonCodec",
    "JsonDeriveError",
    "KeyCollisionError",
    "KeyPrecedence",
    "MissingFieldError",
    "NoSuchVariantError",
    "Strategy",
    "TimeFormat",
    "TypeMismatchError",
    "codec_for",
    "decode",
    "default_deriver",
    "dumps",
    "encode",
    "json_enum",
    "json_field",
    "json_object",
    "loads",
    "register",
]
