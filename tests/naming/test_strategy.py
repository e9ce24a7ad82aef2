"""Tests for key derivation under the IDENTITY and UNDERSCORE strategies.

Covers:
- IDENTITY returns the identifier unchanged
- UNDERSCORE on PascalCase, camelCase, acronyms, digits and separators
- Leading/trailing underscores are preserved
- UNDERSCORE output is a fixed point
- KeyNamer binds one strategy
"""

from __future__ import annotations

import pytest

from json_derive.naming import KeyNamer, Strategy, derive_key


@pytest.fixture
def namer() -> KeyNamer:
    """Provide a shared UNDERSCORE KeyNamer."""
    return KeyNamer(Strategy.UNDERSCORE)


class TestStrategyEnum:
    def test_has_exactly_two_members(self) -> None:
        assert len(list(Strategy)) == 2

    def test_values(self) -> None:
        assert Strategy.IDENTITY == "identity"
        assert Strategy.UNDERSCORE == "underscore"


class TestIdentity:
    @pytest.mark.parametrize("identifier", ["HelloWorld", "hello_world", "A", "_id", "URLParser"])
    def test_identity_is_unchanged(self, identifier: str) -> None:
        assert derive_key(identifier, Strategy.IDENTITY) == identifier


class TestUnderscore:
    @pytest.mark.parametrize(
        ("identifier", "expected"),
        [
            ("HelloWorld", "hello_world"),
            ("helloWorld", "hello_world"),
            ("A", "a"),
            ("createdAt", "created_at"),
            ("userID", "user_id"),
            ("URLParser", "url_parser"),
            ("APIKey", "api_key"),
            ("HTTPStatus", "http_status"),
            ("address2", "address_2"),
            ("v2Config", "v_2_config"),
            ("HELLO_WORLD", "hello_world"),
            ("some__key", "some_key"),
            ("kebab-case", "kebab_case"),
        ],
    )
    def test_word_boundaries(self, namer: KeyNamer, identifier: str, expected: str) -> None:
        assert namer.name(identifier) == expected

    def test_leading_underscore_preserved(self, namer: KeyNamer) -> None:
        assert namer.name("_privateId") == "_private_id"

    def test_dunder_preserved(self, namer: KeyNamer) -> None:
        assert namer.name("__init__") == "__init__"

    def test_non_ascii_letters_not_split(self, namer: KeyNamer) -> None:
        assert namer.name("ÉtéBon") == "étébon"
        assert namer.name("userÉtat") == "userétat"

    def test_only_underscores_unchanged(self, namer: KeyNamer) -> None:
        assert namer.name("___") == "___"

    @pytest.mark.parametrize(
        "identifier",
        ["HelloWorld", "URLParser", "v2Config", "_privateId", "HELLO_WORLD", "x"],
    )
    def test_output_is_fixed_point(self, namer: KeyNamer, identifier: str) -> None:
        once = namer.name(identifier)
        assert namer.name(once) == once


class TestKeyNamer:
    def test_default_strategy_is_identity(self) -> None:
        assert KeyNamer().name("HelloWorld") == "HelloWorld"

    def test_accepts_strategy_value(self) -> None:
        assert KeyNamer("underscore").strategy is Strategy.UNDERSCORE  # type: ignore[arg-type]

    def test_rejects_unknown_strategy(self) -> None:
        with pytest.raises(ValueError):
            KeyNamer("kebab")  # type: ignore[arg-type]

    def test_repr_names_strategy(self, namer: KeyNamer) -> None:
        assert "UNDERSCORE" in repr(namer)
