"""Walk decoded JSON documents and property trees by canonical path.

Both walkers raise ``PathError(path, reason)`` naming the prefix that failed
to resolve.  Reasons:

- ``uninitialized``          an array schema that has not seen an element yet
- ``key does not exist``     object lookup of an absent key
- ``index out of range``     array lookup past the end
- ``member does not exist``  set-member lookup with no matching element
- ``not an object (<kind>)`` / ``not an array (<kind>)``  wrong-kind access
"""

from __future__ import annotations

from typing import Any

from json_contract_diff.errors import PathError
from json_contract_diff.paths import Member, Path
from json_contract_diff.schema.nodes import ArrayNode, ObjectNode, PropertyNode, SchemaDocument

__all__ = ["json_kind", "resolve", "resolve_schema"]


def json_kind(value: Any) -> str:
    """JSON kind name of a decoded value (``"object"``, ``"integer"``, ...)."""
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "array"
    if isinstance(value, str):
        return "string"
    if isinstance(value, int):
        return "integer"
    if isinstance(value, float):
        return "number"
    if value is None:
        return "null"
    return type(value).__name__


def _as_path(path: Path | str) -> Path:
    return path if isinstance(path, Path) else Path.parse(path)


def resolve(value: Any, path: Path | str) -> Any:
    """Return the element of a decoded JSON document at ``path``.

    ``Member`` segments select the first array element whose JSON text
    matches, so paths taken from a ``DiffSet`` resolve against either side.

    Raises:
        PathError: If any segment of ``path`` cannot be followed.
    """
    path = _as_path(path)
    current = value
    for depth, segment in enumerate(path.segments):
        here = str(Path(path.segments[: depth + 1]))
        if isinstance(segment, str):
            if not isinstance(current, dict):
                raise PathError(here, f"not an object ({json_kind(current)})")
            if segment not in current:
                raise PathError(here, "key does not exist")
            current = current[segment]
            continue
        if not isinstance(current, list):
            raise PathError(here, f"not an array ({json_kind(current)})")
        if isinstance(segment, Member):
            for element in current:
                if Member.of(element) == segment:
                    current = element
                    break
            else:
                raise PathError(here, "member does not exist")
            continue
        if segment >= len(current):
            raise PathError(here, "index out of range")
        current = current[segment]
    return current


def resolve_schema(node: PropertyNode | SchemaDocument, path: Path | str) -> PropertyNode:
    """Return the property node describing ``path``.

    Keys follow ``properties``; any index or member follows the single
    ``items`` node, because an array schema describes all of its elements.

    Raises:
        PathError: If any segment of ``path`` cannot be followed.
    """
    path = _as_path(path)
    current = node.root if isinstance(node, SchemaDocument) else node
    for depth, segment in enumerate(path.segments):
        here = str(Path(path.segments[: depth + 1]))
        if isinstance(segment, str):
            if not isinstance(current, ObjectNode):
                raise PathError(here, f"not an object ({current.kind})")
            if segment not in current.properties:
                raise PathError(here, "key does not exist")
            current = current.properties[segment]
            continue
        if not isinstance(current, ArrayNode):
            raise PathError(here, f"not an array ({current.kind})")
        if current.items is None:
            raise PathError(here, "uninitialized")
        current = current.items
    return current
