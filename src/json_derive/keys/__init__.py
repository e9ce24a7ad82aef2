"""Keys subpackage: per-type member/key tables.

Re-exports the public API for the keys module:
- MemberSpec: declared key metadata for one member
- KeyEntry: a member's resolved primary and alternative keys
- KeyTable: immutable, collision-checked lookup built from MemberSpecs
"""

from json_derive.keys.table import KeyEntry, KeyTable, MemberSpec

__all__ = ["KeyEntry", "KeyTable", "MemberSpec"]
