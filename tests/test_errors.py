"""Tests for the exception hierarchy and decode error paths."""

from __future__ import annotations

from typing import Any

import pytest

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
    json_shape,
)


class TestJsonShape:
    @pytest.mark.parametrize(
        ("value", "shape"),
        [
            (None, "null"),
            (True, "boolean"),
            (0, "number"),
            (1.5, "number"),
            ("", "string"),
            ({}, "object"),
            ([], "array"),
        ],
    )
    def test_shapes(self, value: Any, shape: str) -> None:
        assert json_shape(value) == shape


class TestHierarchy:
    @pytest.mark.parametrize(
        "exc",
        [
            TypeMismatchError("string", "number"),
            MissingFieldError("name"),
            NoSuchVariantError("x"),
            FormatError("x", "ISO-8601 local date"),
            AmbiguousKeyError("name", ["a", "b"]),
        ],
    )
    def test_decode_errors(self, exc: DecodeError) -> None:
        assert isinstance(exc, DecodeError)
        assert isinstance(exc, ValueError)
        assert isinstance(exc, JsonDeriveError)
        assert exc.path == ()
        assert exc.leaf is exc

    def test_construction_and_encode_errors_are_not_decode_errors(self) -> None:
        for exc in (KeyCollisionError("k", "a", "b"), DerivationError("x"), EncodeError("x")):
            assert isinstance(exc, JsonDeriveError)
            assert not isinstance(exc, DecodeError)

    def test_builtin_bases(self) -> None:
        assert issubclass(KeyCollisionError, ValueError)
        assert issubclass(DerivationError, TypeError)
        assert issubclass(EncodeError, TypeError)


class TestMessages:
    def test_type_mismatch(self) -> None:
        assert str(TypeMismatchError("integer", "string")) == "expected integer, got string"

    def test_collision(self) -> None:
        assert str(KeyCollisionError("k", "a", "b")) == "key 'k' is claimed by both 'a' and 'b'"

    def test_ambiguous(self) -> None:
        exc = AmbiguousKeyError("name", ["name", "title"])
        assert exc.keys == ("name", "title")
        assert "name, title" in str(exc)


class TestFieldDecodeError:
    def test_path_accumulates(self) -> None:
        leaf = TypeMismatchError("integer", "string")
        exc = FieldDecodeError("owner", FieldDecodeError("pets", FieldDecodeError(2, leaf)))
        assert exc.path == ("owner", "pets", 2)
        assert exc.dotted_path == "owner.pets[2]"
        assert exc.leaf is leaf
        assert str(exc) == "owner.pets[2]: expected integer, got string"

    def test_index_first(self) -> None:
        exc = FieldDecodeError(0, FieldDecodeError("name", MissingFieldError("first")))
        assert exc.dotted_path == "[0].name"
        assert isinstance(exc.leaf, MissingFieldError)
