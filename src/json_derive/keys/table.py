"""KeyTable: immutable member <-> JSON key mapping for one record type.

Each member gets a primary key (an explicit override, or the identifier run
through the type's naming strategy) and an ordered tuple of alternative keys
that are accepted on decode only.  The table is built once, rejects any key
claimed by two different members, and is never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

from json_derive.errors import KeyCollisionError
from json_derive.naming.strategy import KeyNamer, Strategy

__all__ = ["KeyEntry", "KeyTable", "MemberSpec"]


@dataclass(frozen=True, slots=True)
class MemberSpec:
    """Key metadata for one member, as declared on the host type.

    Attributes:
        name:         The member identifier.
        key:          Explicit JSON key; overrides the naming strategy.
        alternatives: Extra keys accepted on decode, in declaration order.
        optional:     Whether the member may be absent from the JSON object.
    """

    name: str
    key: str | None = None
    alternatives: tuple[str, ...] = ()
    optional: bool = False


@dataclass(frozen=True, slots=True)
class KeyEntry:
    """A member's resolved keys.

    Attributes:
        member:       The member identifier.
        primary_key:  The key written on encode.
        alternatives: Extra keys accepted on decode, in declaration order,
                      with the primary key and repeats removed.
        optional:     Whether the member may be absent from the JSON object.
    """

    member: str
    primary_key: str
    alternatives: tuple[str, ...] = ()
    optional: bool = False

    @property
    def decode_keys(self) -> tuple[str, ...]:
        """All accepted keys, primary first: the table's precedence order."""
        return (self.primary_key, *self.alternatives)


def _unique_alternatives(primary: str, alternatives: Iterable[str]) -> tuple[str, ...]:
    seen = {primary}
    ordered: list[str] = []
    for alt in alternatives:
        if alt not in seen:
            seen.add(alt)
            ordered.append(alt)
    return tuple(ordered)


class KeyTable:
    """Decode-key and encode-key lookups for the members of one type.

    Use ``KeyTable.build`` rather than the constructor.

    Example::

        table = KeyTable.build(
            [MemberSpec("userName", alternatives=("login",))],
            Strategy.UNDERSCORE,
        )
        table.primary_key("userName")    # "user_name"
        table.resolve("login").member    # "userName"
    """

    __slots__ = ("_by_key", "_by_member", "entries", "strategy")

    def __init__(
        self,
        entries: tuple[KeyEntry, ...],
        by_key: Mapping[str, KeyEntry],
        strategy: Strategy,
    ) -> None:
        self.entries = entries
        self.strategy = strategy
        self._by_key = MappingProxyType(dict(by_key))
        self._by_member = MappingProxyType({e.member: e for e in entries})

    @classmethod
    def build(cls, members: Iterable[MemberSpec], strategy: Strategy) -> KeyTable:
        """Resolve every member's keys and check them for collisions.

        Args:
            members:  Member metadata in declaration order.
            strategy: Naming strategy for members without an explicit key.

        Returns:
            The immutable table.

        Raises:
            KeyCollisionError: If one key is accepted for two different members.
            ValueError: If two members share the same identifier.
        """
        namer = KeyNamer(strategy)
        entries: list[KeyEntry] = []
        by_key: dict[str, KeyEntry] = {}
        seen_members: set[str] = set()

        for spec in members:
            if spec.name in seen_members:
                raise ValueError(f"duplicate member {spec.name!r}")
            seen_members.add(spec.name)

            primary = spec.key if spec.key is not None else namer.name(spec.name)
            entry = KeyEntry(
                member=spec.name,
                primary_key=primary,
                alternatives=_unique_alternatives(primary, spec.alternatives),
                optional=spec.optional,
            )
            for key in entry.decode_keys:
                other = by_key.get(key)
                if other is not None:
                    raise KeyCollisionError(key, other.member, entry.member)
                by_key[key] = entry
            entries.append(entry)

        return cls(tuple(entries), by_key, namer.strategy)

    def resolve(self, key: str) -> KeyEntry | None:
        """Return the entry accepting ``key`` (exact match), or None."""
        return self._by_key.get(key)

    def entry(self, member: str) -> KeyEntry:
        """Return the entry for ``member``; KeyError if there is none."""
        return self._by_member[member]

    def primary_key(self, member: str) -> str:
        """Return the key written for ``member`` on encode."""
        return self._by_member[member].primary_key

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[KeyEntry]:
        return iter(self.entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, KeyTable):
            return NotImplemented
        return self.entries == other.entries and self.strategy == other.strategy

    def __hash__(self) -> int:
        return hash((self.entries, self.strategy))

    def __repr__(self) -> str:
        members = ", ".join(e.member for e in self.entries)
        return f"KeyTable([{members}], strategy={self.strategy!s})"
