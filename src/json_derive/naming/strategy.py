"""Naming strategies: derive a JSON object key from a host identifier.

Two strategies are supported:
- IDENTITY   -> the identifier is used unchanged ("HelloWorld" -> "HelloWorld")
- UNDERSCORE -> split on guessed word boundaries, lower-case, join with "_"
               ("HelloWorld" -> "hello_world")

UNDERSCORE handles:
- camelCase / PascalCase (e.g. "helloWorld" -> "hello_world")
- Acronyms (e.g. "URLParser" -> "url_parser", "APIKey" -> "api_key")
- Digit boundaries (e.g. "address2" -> "address_2", "v2Config" -> "v_2_config")
- Existing separators (e.g. "HELLO_WORLD" -> "hello_world", "some__key" -> "some_key")
- Leading/trailing underscores, which are kept verbatim ("_id" -> "_id")

Word boundaries are detected on ASCII letters and digits only; other letters
("ÉtéBon") stay inside the surrounding word and are only lower-cased.

The UNDERSCORE output is a fixed point: deriving it again returns it unchanged.
"""

from __future__ import annotations

import re
from enum import StrEnum, auto

__all__ = ["KeyNamer", "Strategy", "derive_key"]

# Compiled regex patterns (module-level, compiled once)

# Matches runs of underscores and hyphens
_SEP = re.compile(r"[_\-]+")

# Lowercase letter or digit followed by uppercase letter
# e.g. "helloWorld" -> "hello World", "2Config" -> "2 Config"
_LOWER_UPPER = re.compile(r"([a-z0-9])([A-Z])")

# Acronym run before an uppercase+lowercase pair
# e.g. "URLParser" -> "URL Parser"
_UPPER_RUN = re.compile(r"([A-Z]+)([A-Z][a-z])")

# Letter/digit boundaries in both directions.
# NOTE: applied twice because each match consumes both characters, so the
# opposite boundary of an isolated digit ("v2c") is only visible on the
# second pass.
_DIGIT_BOUNDARY = re.compile(r"([a-zA-Z])(\d)|(\d)([a-zA-Z])")


class Strategy(StrEnum):
    """How member and constant identifiers become JSON keys."""

    IDENTITY = auto()
    UNDERSCORE = auto()


def _split_words(core: str) -> list[str]:
    s = _SEP.sub(" ", core)
    s = _LOWER_UPPER.sub(r"\1 \2", s)
    s = _UPPER_RUN.sub(r"\1 \2", s)
    s = _DIGIT_BOUNDARY.sub(r"\1\3 \2\4", s)
    s = _DIGIT_BOUNDARY.sub(r"\1\3 \2\4", s)
    return s.split()


def _underscore(identifier: str) -> str:
    core = identifier.strip("_")
    if not core:
        return identifier
    lead = identifier[: len(identifier) - len(identifier.lstrip("_"))]
    trail = identifier[len(identifier.rstrip("_")) :]
    return lead + "_".join(word.lower() for word in _split_words(core)) + trail


def derive_key(identifier: str, strategy: Strategy) -> str:
    """Derive the JSON key for ``identifier`` under ``strategy``.

    Args:
        identifier: A member or constant name.
        strategy:   The naming strategy of the owning type.

    Returns:
        The JSON key.  Total and pure; never raises for a valid strategy.

    Example::

        derive_key("HelloWorld", Strategy.UNDERSCORE)  # "hello_world"
        derive_key("HelloWorld", Strategy.IDENTITY)    # "HelloWorld"
    """
    if strategy is Strategy.UNDERSCORE:
        return _underscore(identifier)
    return identifier


class KeyNamer:
    """Stateless key deriver bound to one strategy.

    Example usage:
        namer = KeyNamer(Strategy.UNDERSCORE)
        namer.name("createdAt")   # "created_at"
        namer.name("HTTPStatus")  # "http_status"
    """

    __slots__ = ("strategy",)

    def __init__(self, strategy: Strategy = Strategy.IDENTITY) -> None:
        self.strategy = Strategy(strategy)

    def name(self, identifier: str) -> str:
        return derive_key(identifier, self.strategy)

    def __repr__(self) -> str:
        return f"KeyNamer({self.strategy!r})"
