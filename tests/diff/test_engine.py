"""Tests for StructuralDiffer.

Covers the object, array and root dispatch, removal/addition/value diffs,
key-order independence, positional semantics for object and array elements,
set semantics for scalar elements, bulk diffs for empty arrays, the ORDERED
and UNORDERED modes, kind-strict equality, null_equals_missing and
ignored_paths.
"""

from __future__ import annotations

import logging
from typing import Any

import pytest

from json_contract_diff.diff.config import ArrayComparisonMode, DiffConfig
from json_contract_diff.diff.engine import StructuralDiffer, json_equal, render_value
from json_contract_diff.diff.records import DiffSet
from json_contract_diff.paths import Member, Path

# ---------------------------------------------------------------------------
# Fixtures / helpers
# ---------------------------------------------------------------------------


@pytest.fixture
def differ() -> StructuralDiffer:
    """A StructuralDiffer with the default (AUTO) configuration."""
    return StructuralDiffer()


def _logs(diffs: DiffSet) -> dict[str, tuple[str, str]]:
    return {record.key: (record.basic_log, record.a_log) for record in diffs}


# ---------------------------------------------------------------------------
# Value rendering and equality
# ---------------------------------------------------------------------------


class TestRenderValue:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("text", "text"),
            (2, "2"),
            (2.5, "2.5"),
            (True, "true"),
            (None, "null"),
            ({"b": 1, "a": [1, "x"]}, '{"a":[1,"x"],"b":1}'),
        ],
    )
    def test_render(self, value: Any, expected: str) -> None:
        assert render_value(value) == expected


class TestJsonEqual:
    def test_bool_never_equals_int(self) -> None:
        assert not json_equal(True, 1)
        assert not json_equal(0, False)
        assert not json_equal([True], [1])

    def test_int_equals_float(self) -> None:
        assert json_equal(1, 1.0)

    def test_key_order_irrelevant(self) -> None:
        assert json_equal({"a": 1, "b": 2}, {"b": 2, "a": 1})

    def test_list_order_matters(self) -> None:
        assert not json_equal([1, 2], [2, 1])

    def test_mismatched_kinds(self) -> None:
        assert not json_equal("1", 1)
        assert not json_equal(None, {})
        assert not json_equal([], {})


# ---------------------------------------------------------------------------
# Objects
# ---------------------------------------------------------------------------


class TestObjects:
    def test_scenario_value_diff(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": 1, "b": 2}, {"a": 1, "b": 3})
        assert len(diffs) == 1
        record = diffs.at("b")
        assert (record.basic_log, record.a_log) == ("2", "3")
        assert record.asserted is True

    def test_equal_documents_have_no_diffs(self, differ: StructuralDiffer) -> None:
        assert len(differ.diff({"a": [{"x": 1}]}, {"a": [{"x": 1}]})) == 0

    def test_key_order_irrelevant(self, differ: StructuralDiffer) -> None:
        left = {"a": 1, "b": {"c": [1, 2], "d": None}}
        right = {"b": {"d": None, "c": [1, 2]}, "a": 1}
        assert len(differ.diff(left, right)) == 0

    def test_removal_and_addition(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"gone": {"x": 1}, "kept": 1}, {"kept": 1, "new": "v"})
        assert _logs(diffs) == {"gone": ('{"x":1}', ""), "new": ("", "v")}

    def test_nested_path(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": {"b": {"c": "x"}}}, {"a": {"b": {"c": "y"}}})
        assert diffs.paths() == ["a.b.c"]
        assert diffs.at("a.b.c").path == Path(("a", "b", "c"))

    def test_kind_change_is_value_diff(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": {"x": 1}}, {"a": [1]})
        assert _logs(diffs) == {"a": ('{"x":1}', "[1]")}

    def test_bool_to_int_detected(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"flag": True}, {"flag": 1})
        assert _logs(diffs) == {"flag": ("true", "1")}

    def test_int_and_float_equal(self, differ: StructuralDiffer) -> None:
        assert len(differ.diff({"n": 1}, {"n": 1.0})) == 0

    def test_records_in_sorted_path_order(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"z": 1, "a": 1, "m": 1}, {"z": 2, "a": 2, "m": 2})
        assert [record.key for record in diffs] == ["a", "m", "z"]


class TestRoot:
    def test_scalar_roots(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff("a", "b")
        assert _logs(diffs) == {"": ("a", "b")}

    def test_equal_scalar_roots(self, differ: StructuralDiffer) -> None:
        assert len(differ.diff(None, None)) == 0

    def test_array_roots(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff([{"x": 1}], [{"x": 2}])
        assert diffs.paths() == ["[0].x"]

    def test_root_kind_change(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({}, [])
        assert _logs(diffs) == {"": ("{}", "[]")}


# ---------------------------------------------------------------------------
# Arrays (AUTO)
# ---------------------------------------------------------------------------


class TestAutoArrays:
    def test_scalar_arrays_are_unordered(self, differ: StructuralDiffer) -> None:
        assert len(differ.diff({"a": [1, 2, 3]}, {"a": [3, 2, 1]})) == 0

    def test_object_arrays_are_positional(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": [{"x": 1}]}, {"a": [{"x": 2}]})
        assert diffs.paths() == ["a[0].x"]
        assert _logs(diffs)["a[0].x"] == ("1", "2")

    def test_reordered_objects_differ(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": [{"x": 1}, {"x": 2}]}, {"a": [{"x": 2}, {"x": 1}]})
        assert diffs.paths() == ["a[0].x", "a[1].x"]

    def test_nested_arrays_are_positional(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"m": [[1, 2], [3]]}, {"m": [[1, 2], [4]]})
        assert _logs(diffs) == {"m[1][=3]": ("3", ""), "m[1][=4]": ("", "4")}

    def test_trailing_elements_ignored(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": [{"x": 1}]}, {"a": [{"x": 1}, {"x": 2}]})
        assert len(diffs) == 0

    def test_scalar_set_members(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"tags": ["red", "blue"]}, {"tags": ["blue", "green"]})
        assert _logs(diffs) == {
            'tags[="red"]': ("red", ""),
            'tags[="green"]': ("", "green"),
        }
        assert diffs.at('tags[="red"]').path == Path(("tags", Member('"red"')))

    def test_scalar_duplicates_ignored(self, differ: StructuralDiffer) -> None:
        assert len(differ.diff({"a": [1, 1, 2]}, {"a": [2, 1]})) == 0

    def test_scalar_set_is_kind_strict(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": [True]}, {"a": [1]})
        assert _logs(diffs) == {"a[=true]": ("true", ""), "a[=1]": ("", "1")}

    def test_string_to_number_change_keeps_both_sides(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": ["1"]}, {"a": [1]})
        assert _logs(diffs) == {'a[="1"]': ("1", ""), "a[=1]": ("", "1")}

    def test_classified_by_left_first_element(self, differ: StructuralDiffer) -> None:
        # a scalar first element selects set semantics for the whole array
        diffs = differ.diff({"a": [1, {"x": 1}]}, {"a": [{"x": 1}, 1]})
        assert len(diffs) == 0


class TestEmptyArrays:
    def test_left_empty_bulk_addition(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": []}, {"a": [1, 2]})
        assert _logs(diffs) == {"a": ("", "[1,2]")}

    def test_right_empty_bulk_removal(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff({"a": [{"x": 1}]}, {"a": []})
        assert _logs(diffs) == {"a": ('[{"x":1}]', "")}

    def test_both_empty(self, differ: StructuralDiffer) -> None:
        assert len(differ.diff({"a": []}, {"a": []})) == 0


# ---------------------------------------------------------------------------
# Array comparison modes
# ---------------------------------------------------------------------------


class TestOrderedMode:
    @pytest.fixture
    def ordered(self) -> StructuralDiffer:
        return StructuralDiffer(DiffConfig(array_comparison_mode=ArrayComparisonMode.ORDERED))

    def test_scalar_order_matters(self, ordered: StructuralDiffer) -> None:
        diffs = ordered.diff({"a": [1, 2]}, {"a": [2, 1]})
        assert _logs(diffs) == {"a[0]": ("1", "2"), "a[1]": ("2", "1")}

    def test_trailing_elements_reported(self, ordered: StructuralDiffer) -> None:
        diffs = ordered.diff({"a": [1, 2, 3]}, {"a": [1]})
        assert _logs(diffs) == {"a[1]": ("2", ""), "a[2]": ("3", "")}


class TestUnorderedMode:
    @pytest.fixture
    def unordered(self) -> StructuralDiffer:
        return StructuralDiffer(
            DiffConfig(array_comparison_mode=ArrayComparisonMode.UNORDERED)
        )

    def test_object_order_irrelevant(self, unordered: StructuralDiffer) -> None:
        left = {"a": [{"x": 1}, {"x": 2}]}
        right = {"a": [{"x": 2}, {"x": 1}]}
        assert len(unordered.diff(left, right)) == 0

    def test_multiplicity_counts(self, unordered: StructuralDiffer) -> None:
        diffs = unordered.diff({"a": [1, 1, 2]}, {"a": [1, 2]})
        assert _logs(diffs) == {"a[=1]": ("1", "")}

    def test_changed_object_member(self, unordered: StructuralDiffer) -> None:
        diffs = unordered.diff({"a": [{"x": 1}]}, {"a": [{"x": 3}]})
        assert _logs(diffs) == {'a[={"x":1}]': ('{"x":1}', ""), 'a[={"x":3}]': ("", '{"x":3}')}


# ---------------------------------------------------------------------------
# Config options
# ---------------------------------------------------------------------------


class TestNullEqualsMissing:
    def test_default_null_differs_from_missing(self, differ: StructuralDiffer) -> None:
        assert _logs(differ.diff({"x": None}, {})) == {"x": ("null", "")}

    def test_enabled(self) -> None:
        differ = StructuralDiffer(DiffConfig(null_equals_missing=True))
        assert len(differ.diff({"x": None, "y": [{"z": None}]}, {"y": [{}]})) == 0

    def test_input_not_mutated(self) -> None:
        left = {"x": None}
        StructuralDiffer(DiffConfig(null_equals_missing=True)).diff(left, {})
        assert left == {"x": None}


class TestIgnoredPaths:
    def test_ignored_path_recorded_unasserted(self) -> None:
        differ = StructuralDiffer(DiffConfig(ignored_paths={"meta.requestId"}))
        diffs = differ.diff(
            {"meta": {"requestId": "a"}, "v": 1}, {"meta": {"requestId": "b"}, "v": 2}
        )
        assert diffs.at("meta.requestId").asserted is False
        assert diffs.at("v").asserted is True
        assert [record.key for record in diffs.asserted_records()] == ["v"]

    def test_ignored_prefix_covers_descendants(self) -> None:
        differ = StructuralDiffer(DiffConfig(ignored_paths=["meta"]))
        diffs = differ.diff({"meta": {"a": [1], "b": 1}}, {"meta": {"a": [2], "b": 2}})
        assert len(diffs) == 3
        assert diffs.asserted_records() == []


class TestLogging:
    def test_debug_timing(
        self, differ: StructuralDiffer, caplog: pytest.LogCaptureFixture
    ) -> None:
        with caplog.at_level(logging.DEBUG, logger="json_contract_diff.diff.engine"):
            differ.diff({"a": 1}, {"a": 2})
        assert "structural diff found 1 divergences" in caplog.text

    def test_never_raises_on_mixed_shapes(self, differ: StructuralDiffer) -> None:
        left = {"a": [{"x": 1}, [1], "s"], "b": [[1], {"y": 2}]}
        right = {"a": [[2], {"x": 1}, 3], "b": [{"y": 2}, [1]]}
        diffs = differ.diff(left, right)
        assert len(diffs) > 0


# ---------------------------------------------------------------------------
# Deep documents
# ---------------------------------------------------------------------------


def _nested(depth: int, leaf: Any) -> Any:
    value = leaf
    for level in range(depth):
        value = {"k": value} if level % 2 else [value]
    return value


class TestDeepDocuments:
    DEPTH = 5000

    def test_changed_leaf_found(self, differ: StructuralDiffer) -> None:
        diffs = differ.diff(_nested(self.DEPTH, {"v": 1}), _nested(self.DEPTH, {"v": 2}))
        assert len(diffs) == 1
        (record,) = diffs.records()
        assert len(record.path) == self.DEPTH + 1
        assert record.path.last == "v"
        assert (record.basic_log, record.a_log) == ("1", "2")

    def test_equal_documents(self, differ: StructuralDiffer) -> None:
        assert len(differ.diff(_nested(self.DEPTH, 1), _nested(self.DEPTH, 1))) == 0

    def test_json_equal(self) -> None:
        assert json_equal(_nested(self.DEPTH, 1), _nested(self.DEPTH, 1))
        assert not json_equal(_nested(self.DEPTH, 1), _nested(self.DEPTH, True))

    def test_null_equals_missing(self) -> None:
        differ = StructuralDiffer(DiffConfig(null_equals_missing=True))
        left = _nested(self.DEPTH, {"v": 1, "gone": None})
        right = _nested(self.DEPTH, {"v": 1})
        assert len(differ.diff(left, right)) == 0
