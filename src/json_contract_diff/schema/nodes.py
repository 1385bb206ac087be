"""Property nodes: the tagged union describing one JSON value's shape.

Each JSON kind has its own dataclass carrying only the fields that are
meaningful for it, so a string node cannot have ``items`` and an array node
cannot have a ``format``.  Unset bounds do not exist: a node is created from
an observed value and its bounds are that value's extremes.

Dataclass equality is deep structural equality, which the merge engine uses
as its no-op fast path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto
from typing import Any, ClassVar, Union

from json_contract_diff.schema.config import DEFAULT_DIALECT


class Kind(StrEnum):
    """The seven JSON kinds a property node can declare.

    StrEnum values are the lowercased member names, which are also the
    JSON-Schema ``type`` keywords:
    - OBJECT  -> "object"
    - ARRAY   -> "array"
    - STRING  -> "string"
    - NUMBER  -> "number"  : a literal with a fractional part / exponent
    - INTEGER -> "integer"
    - BOOLEAN -> "boolean"
    - NULL    -> "null"    : also the pending-merge placeholder
    """

    OBJECT = auto()
    ARRAY = auto()
    STRING = auto()
    NUMBER = auto()
    INTEGER = auto()
    BOOLEAN = auto()
    NULL = auto()


@dataclass(slots=True)
class ObjectNode:
    """Shape of a JSON object.

    Attributes:
        properties: Field name -> child node.
        required: Sorted names of fields present in every merged sample.
        additional_properties: Passed through from stored schemas; the
            builder never sets it.
    """

    kind: ClassVar[Kind] = Kind.OBJECT

    properties: dict[str, PropertyNode] = field(default_factory=dict)
    required: list[str] = field(default_factory=list)
    additional_properties: bool | None = None


@dataclass(slots=True)
class ArrayNode:
    """Shape of a JSON array.

    Attributes:
        items: Shape of the elements, inferred from element 0 only.  None
            while no non-empty array has been observed.
        min_items: Smallest observed length.
        max_items: Largest observed length.
    """

    kind: ClassVar[Kind] = Kind.ARRAY

    items: PropertyNode | None = None
    min_items: int = 0
    max_items: int = 0


@dataclass(slots=True)
class StringNode:
    kind: ClassVar[Kind] = Kind.STRING

    format: str | None = None
    min_length: int = 0
    max_length: int = 0
    examples: list[Any] = field(default_factory=list)


@dataclass(slots=True)
class NumberNode:
    """Shape of a JSON number; ``kind`` is either NUMBER or INTEGER."""

    kind: Kind
    minimum: int | float
    maximum: int | float
    examples: list[Any] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.kind not in (Kind.NUMBER, Kind.INTEGER):
            msg = f"NumberNode kind must be number or integer, got {self.kind!r}"
            raise ValueError(msg)


@dataclass(slots=True)
class BooleanNode:
    kind: ClassVar[Kind] = Kind.BOOLEAN


@dataclass(slots=True)
class NullNode:
    kind: ClassVar[Kind] = Kind.NULL


PropertyNode = Union[ObjectNode, ArrayNode, StringNode, NumberNode, BooleanNode, NullNode]


@dataclass(slots=True)
class SchemaDocument:
    """A dialect URI plus one root property node.

    Created fresh per sample by ``SchemaBuilder``; the accumulated document
    is then widened in place by ``SchemaMerger``.
    """

    root: PropertyNode
    dialect: str = DEFAULT_DIALECT

    @property
    def kind(self) -> Kind:
        return self.root.kind
