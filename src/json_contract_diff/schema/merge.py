"""SchemaMerger: widens an accumulated schema with a newly inferred one.

Merging is accumulate-and-widen:

- numeric, length and item-count bounds only ever grow;
- ``required`` only ever shrinks (it is the intersection of every sample's
  required set, so a field is required only if it was present every time);
- a ``null`` kind on either side is absorbed by the other side's kind;
- any other kind mismatch is a ``TypeConflictError`` carrying the canonical
  path of the conflicting node.

What a conflict does to the rest of the merge is an explicit contract chosen
by ``InferenceConfig.merge_policy``:

- ``FAIL_FAST`` merges into a copy and only commits it when the whole tree
  merged cleanly, so a failed merge leaves the accumulated document untouched.
- ``BEST_EFFORT`` merges in place, keeps the accumulated shape of every
  conflicting node, carries on with its siblings and returns the conflicts.
"""

from __future__ import annotations

import copy
import logging
from typing import Any

from json_contract_diff.errors import TypeConflictError
from json_contract_diff.paths import ROOT, Path
from json_contract_diff.schema.config import InferenceConfig, MergePolicy
from json_contract_diff.schema.nodes import (
    ArrayNode,
    Kind,
    NumberNode,
    ObjectNode,
    PropertyNode,
    SchemaDocument,
    StringNode,
)

__all__ = ["SchemaMerger", "merge_documents"]

logger = logging.getLogger(__name__)

_NUMERIC_KINDS = frozenset({Kind.INTEGER, Kind.NUMBER})


class SchemaMerger:
    """Binary, in-place reconciliation of two schema documents.

    Merge order does not change the final kinds, bounds or ``required`` sets;
    it only changes the order of accumulated ``examples``.

    Example::

        builder = SchemaBuilder()
        merger = SchemaMerger()
        acc = builder.build_document({"a": 1})
        merger.merge(acc, builder.build_document({"a": 5, "b": "x"}))
        acc.root.required                      # ["a"]
        acc.root.properties["a"].maximum       # 5
    """

    def __init__(self, config: InferenceConfig | None = None) -> None:
        self._config: InferenceConfig = config if config is not None else InferenceConfig()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def merge(
        self, accumulated: SchemaDocument, incoming: SchemaDocument
    ) -> list[TypeConflictError]:
        """Widen ``accumulated`` with ``incoming``.

        Args:
            accumulated: The evolving contract.  Mutated in place.
            incoming:    A freshly inferred document.  Never mutated; subtrees
                adopted from it are copied.

        Returns:
            The conflicts skipped under ``BEST_EFFORT``; always empty under
            ``FAIL_FAST``.

        Raises:
            TypeConflictError: Under ``FAIL_FAST``, on the first conflict.
        """
        if accumulated.root == incoming.root:
            return []

        conflicts: list[TypeConflictError] = []
        if self._config.merge_policy is MergePolicy.FAIL_FAST:
            working = copy.deepcopy(accumulated.root)
            accumulated.root = self._merge_node(working, incoming.root, ROOT, conflicts)
            return conflicts

        accumulated.root = self._merge_node(accumulated.root, incoming.root, ROOT, conflicts)
        for conflict in conflicts:
            logger.warning("schema merge skipped conflicting field: %s", conflict)
        return conflicts

    # ------------------------------------------------------------------
    # Recursive merge
    # ------------------------------------------------------------------

    def _merge_node(
        self,
        acc: PropertyNode,
        inc: PropertyNode,
        path: Path,
        conflicts: list[TypeConflictError],
    ) -> PropertyNode:
        """Merge ``inc`` into ``acc`` and return the node that replaces ``acc``.

        The returned node is ``acc`` itself unless the kind changed (a null
        placeholder replaced by a concrete kind), in which case the caller
        stores the returned node in place of the old one.
        """
        if acc == inc:
            return acc

        if acc.kind != inc.kind:
            if inc.kind == Kind.NULL:
                return acc
            if acc.kind == Kind.NULL:
                return copy.deepcopy(inc)
            if not self._can_widen(acc, inc):
                conflict = TypeConflictError(str(path), acc.kind, inc.kind)
                if self._config.merge_policy is MergePolicy.FAIL_FAST:
                    raise conflict
                conflicts.append(conflict)
                return acc

        if isinstance(acc, StringNode) and isinstance(inc, StringNode):
            self._merge_string(acc, inc, path)
        elif isinstance(acc, NumberNode) and isinstance(inc, NumberNode):
            self._merge_number(acc, inc)
        elif isinstance(acc, ObjectNode) and isinstance(inc, ObjectNode):
            self._merge_object(acc, inc, path, conflicts)
        elif isinstance(acc, ArrayNode) and isinstance(inc, ArrayNode):
            self._merge_array(acc, inc, path, conflicts)
        # boolean and null: nothing to widen
        return acc

    def _can_widen(self, acc: PropertyNode, inc: PropertyNode) -> bool:
        return (
            self._config.widen_integer_to_number
            and acc.kind in _NUMERIC_KINDS
            and inc.kind in _NUMERIC_KINDS
        )

    def _merge_string(self, acc: StringNode, inc: StringNode, path: Path) -> None:
        if inc.format != acc.format:
            if acc.format is None:
                acc.format = inc.format
            elif inc.format is not None:
                logger.warning(
                    "format conflict at %s: keeping %s, ignoring %s",
                    path or "<root>",
                    acc.format,
                    inc.format,
                )
        acc.min_length = min(acc.min_length, inc.min_length)
        acc.max_length = max(acc.max_length, inc.max_length)
        acc.examples = self._concat_examples(acc.examples, inc.examples)

    def _merge_number(self, acc: NumberNode, inc: NumberNode) -> None:
        if acc.kind != inc.kind:
            # integer widened to number (widen_integer_to_number=True)
            acc.kind = Kind.NUMBER
        acc.minimum = min(acc.minimum, inc.minimum)
        acc.maximum = max(acc.maximum, inc.maximum)
        acc.examples = self._concat_examples(acc.examples, inc.examples)

    def _merge_object(
        self,
        acc: ObjectNode,
        inc: ObjectNode,
        path: Path,
        conflicts: list[TypeConflictError],
    ) -> None:
        merged: dict[str, PropertyNode] = {}
        for key in sorted(acc.properties.keys() | inc.properties.keys()):
            if key not in inc.properties:
                merged[key] = acc.properties[key]
            elif key not in acc.properties:
                merged[key] = copy.deepcopy(inc.properties[key])
            else:
                merged[key] = self._merge_node(
                    acc.properties[key], inc.properties[key], path.child(key), conflicts
                )
        acc.properties = merged
        acc.required = sorted(set(acc.required) & set(inc.required))
        if acc.additional_properties is None:
            acc.additional_properties = inc.additional_properties

    def _merge_array(
        self,
        acc: ArrayNode,
        inc: ArrayNode,
        path: Path,
        conflicts: list[TypeConflictError],
    ) -> None:
        if inc.items is not None:
            if acc.items is None:
                acc.items = copy.deepcopy(inc.items)
            else:
                acc.items = self._merge_node(acc.items, inc.items, path.child(0), conflicts)
        acc.min_items = min(acc.min_items, inc.min_items)
        acc.max_items = max(acc.max_items, inc.max_items)

    def _concat_examples(self, a: list[Any], b: list[Any]) -> list[Any]:
        return [*a, *b][: self._config.max_examples]


def merge_documents(
    accumulated: SchemaDocument,
    incoming: SchemaDocument,
    config: InferenceConfig | None = None,
) -> list[TypeConflictError]:
    """Module-level shortcut for ``SchemaMerger(config).merge(...)``."""
    return SchemaMerger(config).merge(accumulated, incoming)
