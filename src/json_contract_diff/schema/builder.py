"""SchemaBuilder: converts one decoded JSON value into a property tree.

Uses recursive dispatch to convert JSON dicts, lists, and scalar values into
the property-node tagged union.  Object keys are visited in lexicographic
order so that structurally identical documents yield identical trees no
matter how the producer ordered its keys.

Canonical paths are threaded through the recursion to give
``UnsupportedTypeError`` a precise location and to bound the depth: a sample
nested deeper than ``InferenceConfig.max_depth`` is rejected up front, so the
recursive merge, codec and validation steps never see a tree deeper than
that.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from json_contract_diff.errors import NestingDepthError, UnsupportedTypeError
from json_contract_diff.paths import ROOT, Path
from json_contract_diff.schema.config import InferenceConfig
from json_contract_diff.schema.formats import FormatClassifier
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

# Type alias for valid JSON values
JsonValue = dict[str, Any] | list[Any] | str | int | float | bool | None


@dataclass
class SchemaBuilder:
    """Infers a property tree from a single JSON sample.

    The dispatch order is critical: bool MUST be checked before int because
    bool is a subclass of int in Python (isinstance(True, int) is True).

    Every field observed in an object is marked required *for this sample*;
    narrowing ``required`` to fields present in every sample is the merge
    engine's job.

    Arrays are described by their first element only.  Mixed-shape arrays are
    not inspected beyond index 0.

    Example::

        builder = SchemaBuilder()
        node = builder.build({"b": "x", "a": 1})
        node.required                  # ["a", "b"]
        node.properties["a"].kind      # Kind.INTEGER
    """

    config: InferenceConfig = field(default_factory=InferenceConfig)
    classifier: FormatClassifier = field(default_factory=FormatClassifier)

    def build_document(self, value: JsonValue) -> SchemaDocument:
        """Build a fresh ``SchemaDocument`` stamped with the configured dialect.

        Raises:
            UnsupportedTypeError: If any value in the tree is not a JSON kind.
            NestingDepthError: If the tree is nested deeper than
                ``config.max_depth``.
        """
        return SchemaDocument(root=self.build(value), dialect=self.config.dialect)

    def build(self, value: JsonValue, path: Path = ROOT) -> PropertyNode:
        """Convert a JSON value to a property node.

        Args:
            value: Any valid JSON value (dict, list, str, int, float, bool, None).
            path:  Canonical path of this value.  Defaults to the root.

        Returns:
            The property node describing ``value``.

        Raises:
            UnsupportedTypeError: If value is not a valid JSON type.
            NestingDepthError: If ``path`` is deeper than ``config.max_depth``.
        """
        if len(path) > self.config.max_depth:
            raise NestingDepthError(str(path), self.config.max_depth)

        # CRITICAL: bool MUST be checked before int
        if isinstance(value, bool):
            return BooleanNode()

        if isinstance(value, dict):
            return self._build_object(value, path)

        if isinstance(value, list):
            return self._build_array(value, path)

        if isinstance(value, str):
            return self._build_string(value)

        if isinstance(value, int):
            return self._build_number(Kind.INTEGER, value)

        if isinstance(value, float):
            return self._build_number(Kind.NUMBER, value)

        if value is None:
            return NullNode()

        raise UnsupportedTypeError(str(path), type(value))

    def _build_object(self, obj: dict[str, Any], path: Path) -> ObjectNode:
        for key in obj:
            if not isinstance(key, str):
                raise UnsupportedTypeError(str(path), f"object key {type(key).__name__}")

        node = ObjectNode()
        for key in sorted(obj):
            node.properties[key] = self.build(obj[key], path.child(key))
            node.required.append(key)
        return node

    def _build_array(self, arr: list[Any], path: Path) -> ArrayNode:
        node = ArrayNode(min_items=len(arr), max_items=len(arr))
        if arr:
            node.items = self.build(arr[0], path.child(0))
        return node

    def _build_string(self, value: str) -> StringNode:
        match = self.classifier.classify(value)
        node = StringNode(
            format=str(match.format) if match.format is not None else None,
            min_length=len(value),
            max_length=len(value),
        )
        if self._keeps_examples() and len(value) < self.config.max_example_length:
            node.examples.append(value)
        return node

    def _build_number(self, kind: Kind, value: int | float) -> NumberNode:
        node = NumberNode(kind=kind, minimum=value, maximum=value)
        if self._keeps_examples():
            node.examples.append(value)
        return node

    def _keeps_examples(self) -> bool:
        return self.config.with_examples and self.config.max_examples > 0
