"""Integration tests for the json-derive pytest plugin.

These tests verify that the assert_json_round_trip fixture is auto-discovered
via the pytest11 entry point and behaves correctly.

NOTE: These tests require json-derive to be installed (even in editable mode
via ``pip install -e .``). The pytest11 entry point is only registered at
install time -- running from a raw source checkout without installing will not
discover the fixture.
"""

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest

from json_derive import CodecConfig, Deriver, Strategy, json_object


@json_object(strategy=Strategy.UNDERSCORE)
@dataclass
class Member:
    userName: str
    roles: list[str] = field(default_factory=list)


@dataclass
class Lossy:
    value: int

    def __eq__(self, other: object) -> bool:
        return False


def test_fixture_passes_round_trip(assert_json_round_trip: Any) -> None:
    assert_json_round_trip(Member("ada", ["admin"]), {"user_name": "ada", "roles": ["admin"]})


def test_fixture_without_expected(assert_json_round_trip: Any) -> None:
    assert_json_round_trip(Member("ada"))


def test_fixture_generic_type(assert_json_round_trip: Any) -> None:
    assert_json_round_trip([Member("a"), Member("b")], tp=list[Member])


def test_fixture_fails_on_encoding_mismatch(assert_json_round_trip: Any) -> None:
    with pytest.raises(AssertionError, match="encoding mismatch"):
        assert_json_round_trip(Member("ada"), {"userName": "ada", "roles": []})


def test_fixture_fails_when_value_changes(assert_json_round_trip: Any) -> None:
    with pytest.raises(AssertionError, match="round trip changed the value"):
        assert_json_round_trip(Lossy(1))


def test_fixture_custom_deriver(assert_json_round_trip: Any) -> None:
    @dataclass
    class Local:
        displayName: str

    deriver = Deriver(CodecConfig(default_strategy=Strategy.UNDERSCORE))
    assert_json_round_trip(Local("x"), {"display_name": "x"}, deriver=deriver)


def test_fixture_returns_callable(assert_json_round_trip: Any) -> None:
    assert callable(assert_json_round_trip)


def test_plugin_discovery() -> None:
    """Verify assert_json_round_trip appears in pytest --fixtures output."""
    result = subprocess.run(
        [sys.executable, "-m", "pytest", "--fixtures", "-q"],
        capture_output=True,
        text=True,
        cwd=str(Path(__file__).resolve().parents[2]),
    )
    assert "assert_json_round_trip" in result.stdout, (
        f"assert_json_round_trip not found in pytest --fixtures output.\n"
        f"stdout:\n{result.stdout}\n"
        f"stderr:\n{result.stderr}"
    )
