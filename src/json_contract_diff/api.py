"""Public API functions for json-contract-diff.

Each call creates fresh engine objects (builder, merger, differ) to
guarantee zero global state mutation between calls.
"""

from __future__ import annotations

from typing import Any

from json_contract_diff.decoding import decode
from json_contract_diff.diff.config import DiffConfig
from json_contract_diff.diff.engine import StructuralDiffer
from json_contract_diff.diff.records import DiffSet
from json_contract_diff.errors import TypeConflictError
from json_contract_diff.pipeline import Payload, SchemaAccumulator
from json_contract_diff.pipeline import chained_diff as _chained_diff
from json_contract_diff.schema.builder import SchemaBuilder
from json_contract_diff.schema.codec import from_dict
from json_contract_diff.schema.config import InferenceConfig
from json_contract_diff.schema.merge import SchemaMerger
from json_contract_diff.schema.nodes import SchemaDocument
from json_contract_diff.schema.validation import validate_instance

__all__ = [
    "chained_diff",
    "decode",
    "diff",
    "infer_schema",
    "merge_schemas",
    "update_schema",
    "validate_instance",
]


def infer_schema(
    payload: Payload,
    config: InferenceConfig | None = None,
) -> SchemaDocument:
    """Infer a schema document from one raw JSON sample.

    Args:
        payload: UTF-8 bytes or text of one JSON document.
        config:  Inference parameters.  Defaults to ``InferenceConfig()``.

    Returns:
        A ``SchemaDocument`` in which every observed field is required.

    Raises:
        ParseError: If the payload is not JSON.
    """
    resolved = config if config is not None else InferenceConfig()
    return SchemaBuilder(config=resolved).build_document(decode(payload))


def merge_schemas(
    accumulated: SchemaDocument,
    incoming: SchemaDocument,
    config: InferenceConfig | None = None,
) -> list[TypeConflictError]:
    """Widen ``accumulated`` in place with ``incoming``.

    Returns:
        Conflicts skipped under ``MergePolicy.BEST_EFFORT``.

    Raises:
        TypeConflictError: Under ``MergePolicy.FAIL_FAST`` (the default); the
            accumulated document is left unchanged.
    """
    return SchemaMerger(config).merge(accumulated, incoming)


def update_schema(
    schema: SchemaDocument | dict[str, Any] | None,
    *payloads: Payload,
    config: InferenceConfig | None = None,
    max_workers: int = 4,
    timeout: float | None = None,
) -> SchemaDocument:
    """Fold new raw samples into a stored schema and return the result.

    This is the "update a stored contract with freshly captured traffic"
    operation: samples are inferred in parallel and merged sequentially.
    Samples that fail to decode, build or merge are logged and left out.

    Args:
        schema:      The stored schema (document or wire dict), or None to
                     start from the first sample.
        payloads:    Raw JSON samples.
        config:      Inference parameters.
        max_workers: Size of the inference pool.
        timeout:     Seconds allowed for the whole batch, or None.

    Returns:
        The updated ``SchemaDocument``.  A document passed in is updated in
        place and returned.

    Raises:
        ValueError: If there is no schema and no sample could be merged.
        AccumulationTimeoutError: If the deadline expired.
    """
    document = from_dict(schema) if isinstance(schema, dict) else schema
    accumulator = SchemaAccumulator(document, config)
    report = accumulator.add_many(payloads, max_workers=max_workers, timeout=timeout)
    if accumulator.document is None:
        if report.failures:
            raise report.failures[0].error
        msg = "update_schema needs a schema or at least one valid payload"
        raise ValueError(msg)
    return accumulator.document


def diff(
    left: Any,
    right: Any,
    config: DiffConfig | None = None,
) -> DiffSet:
    """Return the path-addressed differences between two decoded JSON values.

    Args:
        left:   Baseline JSON value (dict, list, str, int, float, bool, None).
        right:  Value compared against the baseline.
        config: Diff parameters.  Defaults to ``DiffConfig()`` when None.

    Returns:
        A ``DiffSet``; empty when the values are structurally equal.
    """
    return StructuralDiffer(config).diff(left, right)


def chained_diff(
    baseline: Any,
    a: Any,
    b: Any,
    config: DiffConfig | None = None,
    timeout: float | None = None,
) -> DiffSet:
    """Diff baseline vs ``a`` and ``a`` vs ``b`` and combine the two reports.

    A record present in both stages is ``confirmed``, carries all four log
    slots and is no longer asserted.  ``DiffSet.serialize_asserted()`` renders
    the records still asserted: divergences seen at only one stage.

    Raises:
        DiffTimeoutError: If the comparisons do not finish within ``timeout``.
    """
    return _chained_diff(baseline, a, b, config=config, timeout=timeout)
