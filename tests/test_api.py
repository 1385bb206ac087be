"""Unit tests for the public API functions.

infer_schema, merge_schemas, update_schema, diff, chained_diff and
validate_instance, plus the re-exports of the top-level package.
"""

from __future__ import annotations

import pytest

import json_contract_diff
from json_contract_diff import (
    ArrayComparisonMode,
    DiffConfig,
    DiffSet,
    InferenceConfig,
    Kind,
    MergePolicy,
    ParseError,
    SchemaDocument,
    TypeConflictError,
    chained_diff,
    decode,
    diff,
    infer_schema,
    merge_schemas,
    to_dict,
    update_schema,
    validate_instance,
)


class TestInferSchema:
    def test_scenario_flat_object(self) -> None:
        document = infer_schema(b'{"a": 1, "b": "x"}')
        assert isinstance(document, SchemaDocument)
        wire = to_dict(document)
        assert wire["required"] == ["a", "b"]
        assert wire["properties"]["a"]["type"] == "integer"
        assert wire["properties"]["b"]["type"] == "string"

    def test_config_passthrough(self) -> None:
        document = infer_schema(b'{"a": "x"}', config=InferenceConfig(with_examples=False))
        assert "examples" not in to_dict(document)["properties"]["a"]

    def test_parse_error(self) -> None:
        with pytest.raises(ParseError):
            infer_schema(b"not json")


class TestMergeSchemas:
    def test_scenario_required_intersection(self) -> None:
        accumulated = infer_schema(b'{"a": 1}')
        merge_schemas(accumulated, infer_schema(b'{"a": 1, "b": 2}'))
        wire = to_dict(accumulated)
        assert wire["required"] == ["a"]
        assert set(wire["properties"]) == {"a", "b"}

    def test_fail_fast_by_default(self) -> None:
        accumulated = infer_schema(b'{"a": 1}')
        with pytest.raises(TypeConflictError):
            merge_schemas(accumulated, infer_schema(b'{"a": true}'))

    def test_best_effort(self) -> None:
        accumulated = infer_schema(b'{"a": 1}')
        conflicts = merge_schemas(
            accumulated,
            infer_schema(b'{"a": true}'),
            config=InferenceConfig(merge_policy=MergePolicy.BEST_EFFORT),
        )
        assert len(conflicts) == 1


class TestUpdateSchema:
    def test_from_nothing(self) -> None:
        document = update_schema(None, b'{"a": 1}', b'{"a": 2, "b": 1}')
        assert to_dict(document)["required"] == ["a"]

    def test_from_stored_wire_dict(self) -> None:
        stored = to_dict(infer_schema(b'{"a": 1, "b": "x"}'))
        document = update_schema(stored, b'{"a": 9}')
        wire = to_dict(document)
        assert wire["required"] == ["a"]
        assert wire["properties"]["a"]["maximum"] == 9

    def test_document_updated_in_place(self) -> None:
        stored = infer_schema(b'{"a": 1}')
        assert update_schema(stored, b'{"a": 2}') is stored

    def test_bad_samples_left_out(self) -> None:
        document = update_schema(None, b'{"a": 1}', b"{oops")
        assert document.kind == Kind.OBJECT

    def test_nothing_to_build_from(self) -> None:
        with pytest.raises(ValueError, match="at least one valid payload"):
            update_schema(None)

    def test_only_bad_samples_raise_first_error(self) -> None:
        with pytest.raises(ParseError):
            update_schema(None, b"{oops")


class TestDiff:
    def test_scenario_value_diff(self) -> None:
        diffs = diff({"a": 1, "b": 2}, {"a": 1, "b": 3})
        assert isinstance(diffs, DiffSet)
        assert diffs.to_dict() == {"b": {"xpath": ["b"], "basiclog": "2", "alog": "3"}}

    def test_scenario_equal_object_arrays(self) -> None:
        assert len(diff({"a": [{"x": 1}]}, {"a": [{"x": 1}]})) == 0

    def test_config_passthrough(self) -> None:
        config = DiffConfig(array_comparison_mode=ArrayComparisonMode.ORDERED)
        assert len(diff([1, 2], [2, 1], config=config)) == 2

    def test_decoded_payloads(self) -> None:
        diffs = diff(decode(b'{"a": [1, 2]}'), decode(b'{"a": [2, 1]}'))
        assert len(diffs) == 0


class TestChainedDiff:
    def test_scenario_three_way(self) -> None:
        combined = chained_diff({"p": "base"}, {"p": "a"}, {"p": "b"})
        record = combined.at("p")
        assert record.confirmed is True
        assert record.asserted is False
        assert combined.serialize_asserted() == "{}"
        assert record.to_dict() == {
            "xpath": ["p"],
            "basiclog": "base",
            "alog": "a",
            "abasic": "a",
            "blog": "b",
        }


class TestValidateInstance:
    def test_learned_contract(self) -> None:
        contract = infer_schema(b'{"id": 1}')
        assert validate_instance({"id": 1}, contract) == []
        assert validate_instance({"id": "1"}, contract) == ["id: '1' is not of type 'integer'"]


class TestPackage:
    def test_version(self) -> None:
        assert json_contract_diff.__version__ == "0.1.0"

    def test_all_names_importable(self) -> None:
        for name in json_contract_diff.__all__:
            assert hasattr(json_contract_diff, name), name

    def test_all_sorted(self) -> None:
        assert json_contract_diff.__all__ == sorted(json_contract_diff.__all__)
