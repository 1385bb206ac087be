"""pytest plugin for json-contract-diff.

Auto-discovered by pytest via the pytest11 entry point declared in pyproject.toml.
When the package is installed (even in editable mode), pytest discovers this plugin
automatically -- no conftest.py changes are needed.

Source: https://docs.pytest.org/en/stable/how-to/writing_plugins.html
"""

from __future__ import annotations

from typing import Any

import pytest

from json_contract_diff import DiffConfig, SchemaDocument, diff, validate_instance


@pytest.fixture(scope="session")
def assert_no_json_diff() -> Any:
    """Fixture that returns a callable structural-equality asserter.

    The fixture is session-scoped because the returned callable is stateless
    (delegates to diff() which creates a fresh StructuralDiffer per call).

    Usage in tests::

        def test_reorder(assert_no_json_diff):
            assert_no_json_diff({"a": 1, "b": [1, 2]}, {"b": [2, 1], "a": 1})

        def test_regression(assert_no_json_diff):
            with pytest.raises(AssertionError, match=r"1 divergence"):
                assert_no_json_diff({"a": 1}, {"a": 2})

    Returns:
        A callable ``_assert(actual, expected, config=None) -> None`` that
        raises ``AssertionError`` listing every asserted divergence.
    """

    def _assert(actual: Any, expected: Any, config: DiffConfig | None = None) -> None:
        diffs = diff(expected, actual, config=config)
        asserted = diffs.asserted_records()
        if asserted:
            lines = [
                f"  {record.key or '<root>'}: expected {record.basic_log!r}, "
                f"got {record.a_log!r}"
                for record in asserted
            ]
            raise AssertionError(
                f"JSON documents differ: {len(asserted)} divergence(s)\n" + "\n".join(lines)
            )

    return _assert


@pytest.fixture(scope="session")
def assert_matches_schema() -> Any:
    """Fixture that returns a callable schema-conformance asserter.

    Usage in tests::

        def test_contract(assert_matches_schema):
            schema = infer_schema(b'{"id": 1}')
            assert_matches_schema({"id": 1}, schema)

    Returns:
        A callable ``_assert(instance, schema) -> None`` that raises
        ``AssertionError`` with every validation message.
    """

    def _assert(instance: Any, schema: SchemaDocument | dict[str, Any]) -> None:
        errors = validate_instance(instance, schema)
        if errors:
            raise AssertionError(
                f"JSON document violates schema: {len(errors)} error(s)\n  "
                + "\n  ".join(errors)
            )

    return _assert
