"""Exception taxonomy for codec construction, encoding and decoding.

Three families:

- Construction errors (``KeyCollisionError``, ``DerivationError``) are raised
  while a codec is being built.  A type whose metadata triggers one never
  yields a usable codec.
- ``EncodeError`` signals a host value that violates its declared type (for
  example ``None`` in a required ``int`` member).  It is a programming
  contract violation and is never a ``DecodeError``.
- ``DecodeError`` and its subclasses are raised while decoding untrusted JSON.
  Nested failures are wrapped in ``FieldDecodeError`` at each level, so the
  outermost error carries the full path from the root to the failing leaf::

      try:
          codec.decode({"owner": {"age": "ten"}})
      except DecodeError as exc:
          exc.dotted_path   # "owner.age"
          exc.leaf          # TypeMismatchError: expected integer, got string
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

__all__ = [
    "AmbiguousKeyError",
    "DecodeError",
    "DerivationError",
    "EncodeError",
    "FieldDecodeError",
    "FormatError",
    "JsonDeriveError",
    "KeyCollisionError",
    "MissingFieldError",
    "NoSuchVariantError",
    "TypeMismatchError",
    "json_shape",
]


def json_shape(value: Any) -> str:
    """Return the JSON shape name of an already-parsed JSON value.

    ``bool`` is checked before ``int`` because ``bool`` subclasses ``int``.
    """
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, (list, tuple)):
        return "array"
    return type(value).__name__


class JsonDeriveError(Exception):
    """Base class for every error raised by json_derive."""


class KeyCollisionError(JsonDeriveError, ValueError):
    """Two distinct members map to the same decode key within one table."""

    def __init__(self, key: str, member_a: str, member_b: str) -> None:
        self.key = key
        self.member_a = member_a
        self.member_b = member_b
        super().__init__(
            f"key {key!r} is claimed by both {member_a!r} and {member_b!r}"
        )


class DerivationError(JsonDeriveError, TypeError):
    """A type or annotation cannot be turned into a codec."""


class EncodeError(JsonDeriveError, TypeError):
    """A host value violates the contract of the codec encoding it."""


class DecodeError(JsonDeriveError, ValueError):
    """Base class for failures while decoding a JSON value."""

    @property
    def path(self) -> tuple[str | int, ...]:
        """Member names and array indices from the root to the failing leaf."""
        return ()

    @property
    def dotted_path(self) -> str:
        """``path`` rendered as ``owner.pets[2].name``."""
        rendered = ""
        for segment in self.path:
            if isinstance(segment, int):
                rendered += f"[{segment}]"
            elif rendered:
                rendered += f".{segment}"
            else:
                rendered = segment
        return rendered

    @property
    def leaf(self) -> DecodeError:
        """The innermost error; ``self`` for everything but FieldDecodeError."""
        return self


class TypeMismatchError(DecodeError):
    """The JSON value has the wrong shape for the codec decoding it."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(f"expected {expected}, got {actual}")


class MissingFieldError(DecodeError):
    """A required member has none of its accepted keys in the JSON object."""

    def __init__(self, member: str) -> None:
        self.member = member
        super().__init__(f"missing required field {member!r}")


class NoSuchVariantError(DecodeError):
    """An enum decode was given a string that names no constant."""

    def __init__(self, value: str) -> None:
        self.value = value
        super().__init__(f"no such variant: {value!r}")


class FormatError(DecodeError):
    """Text could not be parsed in the expected textual format."""

    def __init__(self, text: str, expected_format: str) -> None:
        self.text = text
        self.expected_format = expected_format
        super().__init__(f"{text!r} is not a valid {expected_format} value")


class AmbiguousKeyError(DecodeError):
    """Several accepted keys for the same member were present at once."""

    def __init__(self, member: str, keys: Sequence[str]) -> None:
        self.member = member
        self.keys = tuple(keys)
        super().__init__(
            f"field {member!r} given through several keys: {', '.join(self.keys)}"
        )


class FieldDecodeError(DecodeError):
    """Wraps a nested decode failure with the owning member or array index."""

    def __init__(self, member: str | int, cause: DecodeError) -> None:
        self.member = member
        self.cause = cause
        super().__init__(f"{self.dotted_path}: {cause.leaf}")

    @property
    def path(self) -> tuple[str | int, ...]:
        return (self.member, *self.cause.path)

    @property
    def leaf(self) -> DecodeError:
        return self.cause.leaf
