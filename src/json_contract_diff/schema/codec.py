"""Wire codec for schema documents.

The wire shape is the JSON-Schema subset that stored contracts already use,
so the keyword names below are frozen for backward compatibility:

    $schema, type, format, properties, required, additionalProperties,
    items, minItems, maxItems, minLength, maxLength, minimum, maximum,
    examples

Empty ``properties`` / ``required`` / ``examples`` are omitted on encode and
read back as empty on decode, so schema -> JSON -> schema reproduces the same
kinds, properties, required sets and items nesting.  Properties are emitted
in sorted order.
"""

from __future__ import annotations

import json
from typing import Any

from json_contract_diff.errors import ParseError, UnsupportedTypeError
from json_contract_diff.paths import ROOT, Path
from json_contract_diff.schema.config import DEFAULT_DIALECT
from json_contract_diff.schema.nodes import (
    ArrayNode,
    BooleanNode,
    Kind,
    NullNode,
    NumberNode,
    ObjectNode,
    PropertyNode,
    SchemaDocument,
    StringNode,
)

__all__ = ["dumps", "from_dict", "loads", "node_from_dict", "node_to_dict", "to_dict"]


def to_dict(document: SchemaDocument) -> dict[str, Any]:
    """Encode a document to its wire dict, ``$schema`` first."""
    return {"$schema": document.dialect, **node_to_dict(document.root)}


def node_to_dict(node: PropertyNode) -> dict[str, Any]:
    out: dict[str, Any] = {"type": str(node.kind)}

    if isinstance(node, ObjectNode):
        if node.properties:
            out["properties"] = {
                key: node_to_dict(node.properties[key]) for key in sorted(node.properties)
            }
        if node.required:
            out["required"] = list(node.required)
        if node.additional_properties is not None:
            out["additionalProperties"] = node.additional_properties
    elif isinstance(node, ArrayNode):
        if node.items is not None:
            out["items"] = node_to_dict(node.items)
        out["minItems"] = node.min_items
        out["maxItems"] = node.max_items
    elif isinstance(node, StringNode):
        if node.format is not None:
            out["format"] = node.format
        out["minLength"] = node.min_length
        out["maxLength"] = node.max_length
        if node.examples:
            out["examples"] = list(node.examples)
    elif isinstance(node, NumberNode):
        out["minimum"] = node.minimum
        out["maximum"] = node.maximum
        if node.examples:
            out["examples"] = list(node.examples)

    return out


def from_dict(data: Any) -> SchemaDocument:
    """Decode a wire dict into a ``SchemaDocument``.

    Raises:
        ParseError: If ``data`` is not a schema object.
        UnsupportedTypeError: If a ``type`` keyword names no JSON kind.
    """
    if not isinstance(data, dict):
        raise ParseError(f"schema must be a JSON object, got {type(data).__name__}")
    dialect = data.get("$schema", DEFAULT_DIALECT)
    if not isinstance(dialect, str):
        raise ParseError("$schema must be a string")
    return SchemaDocument(root=node_from_dict(data), dialect=dialect)


def node_from_dict(data: Any, path: Path = ROOT) -> PropertyNode:
    if not isinstance(data, dict):
        raise ParseError(f"schema node at {path or '<root>'} must be a JSON object")

    raw_type = data.get("type", Kind.NULL.value)
    try:
        kind = Kind(raw_type)
    except ValueError as exc:
        raise UnsupportedTypeError(str(path), f"schema type {raw_type!r}") from exc

    if kind == Kind.OBJECT:
        properties = data.get("properties", {})
        if not isinstance(properties, dict):
            raise ParseError(f"properties at {path or '<root>'} must be an object")
        return ObjectNode(
            properties={
                key: node_from_dict(properties[key], path.child(key))
                for key in sorted(properties)
            },
            required=sorted(_list_field(data, "required", path)),
            additional_properties=_additional_properties(data, path),
        )
    if kind == Kind.ARRAY:
        items = data.get("items")
        return ArrayNode(
            items=node_from_dict(items, path.child(0)) if items is not None else None,
            min_items=_int_field(data, "minItems", path),
            max_items=_int_field(data, "maxItems", path),
        )
    if kind == Kind.STRING:
        fmt = data.get("format")
        if fmt is not None and not isinstance(fmt, str):
            raise ParseError(f"format at {path or '<root>'} must be a string")
        return StringNode(
            format=fmt,
            min_length=_int_field(data, "minLength", path),
            max_length=_int_field(data, "maxLength", path),
            examples=_list_field(data, "examples", path),
        )
    if kind in (Kind.NUMBER, Kind.INTEGER):
        return NumberNode(
            kind=kind,
            minimum=_number_field(data, "minimum", path),
            maximum=_number_field(data, "maximum", path),
            examples=_list_field(data, "examples", path),
        )
    if kind == Kind.BOOLEAN:
        return BooleanNode()
    return NullNode()


def dumps(document: SchemaDocument) -> str:
    """Encode a document as indented JSON text."""
    return json.dumps(to_dict(document), indent=4, ensure_ascii=False)


def loads(text: str | bytes) -> SchemaDocument:
    """Decode JSON text into a document.

    Raises:
        ParseError: If ``text`` is not JSON or not a schema object.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseError(f"malformed schema JSON: {exc.msg}", exc.pos) from exc
    return from_dict(data)


# ---------------------------------------------------------------------------
# Field readers
# ---------------------------------------------------------------------------


def _int_field(data: dict[str, Any], key: str, path: Path) -> int:
    value = data.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParseError(f"{key} at {path or '<root>'} must be an integer")
    return value


def _number_field(data: dict[str, Any], key: str, path: Path) -> int | float:
    value = data.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParseError(f"{key} at {path or '<root>'} must be a number")
    return value


def _list_field(data: dict[str, Any], key: str, path: Path) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ParseError(f"{key} at {path or '<root>'} must be an array")
    return list(value)


def _additional_properties(data: dict[str, Any], path: Path) -> bool | None:
    value = data.get("additionalProperties")
    if value is not None and not isinstance(value, bool):
        raise ParseError(f"additionalProperties at {path or '<root>'} must be a boolean")
    return value
