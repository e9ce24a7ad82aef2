"""Naming subpackage: identifier-to-JSON-key strategies.

Re-exports the public API for the naming module:
- Strategy: StrEnum of the supported strategies (IDENTITY, UNDERSCORE)
- derive_key: pure function mapping an identifier to its JSON key
- KeyNamer: stateless deriver bound to one strategy
"""

from json_derive.naming.strategy import KeyNamer, Strategy, derive_key

__all__ = ["KeyNamer", "Strategy", "derive_key"]
