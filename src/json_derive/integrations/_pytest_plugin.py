"""pytest plugin for json-derive.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.
"""

from __future__ import annotations

import json
from typing import Any

import pytest

from json_derive.api import default_deriver
from json_derive.derive import Deriver


@pytest.fixture(scope="session")
def assert_json_round_trip() -> Any:
    """Fixture that returns a callable JSON round-trip asserter.

    Usage in tests::

        def test_user(assert_json_round_trip):
            assert_json_round_trip(User("ada", 36), {"user_name": "ada", "age": 36})

    Returns:
        A callable ``_assert(value, expected=None, tp=None, deriver=None) -> None``.
    """

    def _assert(
        value: Any,
        expected: Any = None,
        tp: Any = None,
        deriver: Deriver | None = None,
    ) -> None:
        """Encode ``value``, optionally compare the JSON, then decode it back.

        Args:
            value:    Host value to round-trip.
            expected: JSON value the encoding must equal.  Skipped when None.
            tp:       Type to encode/decode as.  Defaults to ``type(value)``.
            deriver:  Deriver to use.  Defaults to the process-wide one.

        Raises:
            AssertionError: When the encoding differs from ``expected`` or
                decodes back to an unequal value.
        """
        active = deriver if deriver is not None else default_deriver()
        target = type(value) if tp is None else tp
        encoded = active.encode(value, target)
        if expected is not None and encoded != expected:
            raise AssertionError(
                f"encoding mismatch\n"
                f"  value:    {value!r}\n"
                f"  encoded:  {encoded!r}\n"
                f"  expected: {expected!r}"
            )
        decoded = active.decode(json.loads(json.dumps(encoded)), target)
        if decoded != value:
            raise AssertionError(
                f"round trip changed the value\n"
                f"  value:   {value!r}\n"
                f"  decoded: {decoded!r}\n"
                f"  via:     {encoded!r}"
            )

    return _assert
