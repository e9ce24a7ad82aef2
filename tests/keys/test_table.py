"""Tests for KeyTable construction and lookups.

Covers:
- Primary keys from the strategy or an explicit override
- Alternatives accepted on decode, primary key and repeats dropped
- Collisions between members are rejected at build time
- Equality of tables built from the same metadata
"""

from __future__ import annotations

import pytest

from json_derive.errors import KeyCollisionError
from json_derive.keys import KeyEntry, KeyTable, MemberSpec
from json_derive.naming import Strategy


class TestPrimaryKeys:
    def test_strategy_applies_to_members(self) -> None:
        table = KeyTable.build([MemberSpec("userName"), MemberSpec("age")], Strategy.UNDERSCORE)
        assert table.primary_key("userName") == "user_name"
        assert table.primary_key("age") == "age"

    def test_explicit_key_overrides_strategy(self) -> None:
        table = KeyTable.build([MemberSpec("userName", key="login")], Strategy.UNDERSCORE)
        assert table.primary_key("userName") == "login"

    def test_entries_keep_declaration_order(self) -> None:
        table = KeyTable.build(
            [MemberSpec("b"), MemberSpec("a"), MemberSpec("c")], Strategy.IDENTITY
        )
        assert [e.member for e in table] == ["b", "a", "c"]
        assert len(table) == 3

    def test_unknown_member_raises_key_error(self) -> None:
        table = KeyTable.build([MemberSpec("a")], Strategy.IDENTITY)
        with pytest.raises(KeyError):
            table.primary_key("missing")


class TestAlternatives:
    def test_resolve_accepts_every_key(self) -> None:
        table = KeyTable.build(
            [MemberSpec("newName", alternatives=("old_name", "older_name"))],
            Strategy.UNDERSCORE,
        )
        for key in ("new_name", "old_name", "older_name"):
            entry = table.resolve(key)
            assert entry is not None
            assert entry.member == "newName"

    def test_resolve_is_exact(self) -> None:
        table = KeyTable.build([MemberSpec("name")], Strategy.IDENTITY)
        assert table.resolve("Name") is None

    def test_decode_keys_primary_first(self) -> None:
        table = KeyTable.build(
            [MemberSpec("x", alternatives=("b", "a"))], Strategy.IDENTITY
        )
        assert table.entry("x").decode_keys == ("x", "b", "a")

    def test_primary_and_repeats_dropped_from_alternatives(self) -> None:
        table = KeyTable.build(
            [MemberSpec("x", alternatives=("x", "y", "y"))], Strategy.IDENTITY
        )
        assert table.entry("x").alternatives == ("y",)

    def test_optional_flag_carried(self) -> None:
        table = KeyTable.build([MemberSpec("x", optional=True)], Strategy.IDENTITY)
        assert table.entry("x") == KeyEntry("x", "x", (), True)


class TestCollisions:
    def test_primary_keys_collide(self) -> None:
        with pytest.raises(KeyCollisionError) as exc_info:
            KeyTable.build(
                [MemberSpec("userName"), MemberSpec("user_name")], Strategy.UNDERSCORE
            )
        err = exc_info.value
        assert err.key == "user_name"
        assert (err.member_a, err.member_b) == ("userName", "user_name")

    def test_alternative_collides_with_primary(self) -> None:
        with pytest.raises(KeyCollisionError, match="'name'"):
            KeyTable.build(
                [MemberSpec("name"), MemberSpec("title", alternatives=("name",))],
                Strategy.IDENTITY,
            )

    def test_alternatives_collide(self) -> None:
        with pytest.raises(KeyCollisionError):
            KeyTable.build(
                [
                    MemberSpec("a", alternatives=("shared",)),
                    MemberSpec("b", alternatives=("shared",)),
                ],
                Strategy.IDENTITY,
            )

    def test_collision_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            KeyTable.build([MemberSpec("a"), MemberSpec("b", key="a")], Strategy.IDENTITY)

    def test_duplicate_member_rejected(self) -> None:
        with pytest.raises(ValueError, match="duplicate member"):
            KeyTable.build([MemberSpec("a"), MemberSpec("a")], Strategy.IDENTITY)


class TestEquality:
    def test_same_metadata_equal(self) -> None:
        specs = [MemberSpec("a", alternatives=("b",)), MemberSpec("c", optional=True)]
        left = KeyTable.build(specs, Strategy.UNDERSCORE)
        right = KeyTable.build(specs, Strategy.UNDERSCORE)
        assert left == right
        assert hash(left) == hash(right)

    def test_strategy_differs(self) -> None:
        specs = [MemberSpec("a")]
        assert KeyTable.build(specs, Strategy.IDENTITY) != KeyTable.build(
            specs, Strategy.UNDERSCORE
        )
