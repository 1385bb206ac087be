"""Validation of documents against a learned contract.

Validation itself is the ``jsonschema`` library's job; this module only
adapts inputs (a ``SchemaDocument`` or a wire dict) and renders errors with
the package's canonical paths so they line up with diff reports.

``format`` keywords are annotations here, not assertions: a sample whose
string stopped looking like a date is a drift signal for the diff engine,
not a validation failure.
"""

from __future__ import annotations

from typing import Any

from jsonschema import exceptions as jsonschema_exceptions
from jsonschema import validators

from json_contract_diff.errors import ParseError
from json_contract_diff.paths import Path
from json_contract_diff.schema.codec import to_dict
from json_contract_diff.schema.nodes import SchemaDocument

__all__ = ["is_valid", "validate_instance"]


def _as_wire(schema: SchemaDocument | dict[str, Any]) -> dict[str, Any]:
    if isinstance(schema, SchemaDocument):
        return to_dict(schema)
    if isinstance(schema, dict):
        return schema
    raise ParseError(f"schema must be a SchemaDocument or dict, got {type(schema).__name__}")


def validate_instance(
    instance: Any,
    schema: SchemaDocument | dict[str, Any],
) -> list[str]:
    """Validate a decoded JSON value against a schema.

    Args:
        instance: Decoded JSON value.
        schema:   A ``SchemaDocument`` or its wire dict.

    Returns:
        Sorted error messages, each prefixed with the canonical path of the
        failing location (``<root>`` for the document itself).  Empty when
        the instance is valid.

    Raises:
        ParseError: If the schema itself is invalid for its dialect.
    """
    wire = _as_wire(schema)
    validator_cls = validators.validator_for(wire)
    try:
        validator_cls.check_schema(wire)
    except jsonschema_exceptions.SchemaError as exc:
        raise ParseError(f"invalid schema: {exc.message}") from exc

    validator = validator_cls(wire)
    messages = []
    for error in validator.iter_errors(instance):
        location = str(Path(tuple(error.absolute_path))) or "<root>"
        messages.append(f"{location}: {error.message}")
    return sorted(messages)


def is_valid(instance: Any, schema: SchemaDocument | dict[str, Any]) -> bool:
    """Return True if ``instance`` satisfies ``schema``."""
    return not validate_instance(instance, schema)
