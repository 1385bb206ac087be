"""StructuralDiffer: path-addressed differences between two decoded JSON values.

Generic deep equality tells you *that* two documents differ; a regression
report needs to know *where*.  ``StructuralDiffer.diff()`` walks both values
together and records every divergence in a ``DiffSet`` keyed by canonical
path.

Architecture:
- diff() preprocesses both inputs (``null_equals_missing``), starts a timer,
  and dispatches on the root pair.
- Objects: keys only on the left are removals (``basic_log`` = value,
  ``a_log`` = ""), keys only on the right are additions.  Shared keys descend
  when both values are objects or both are arrays, otherwise a value diff is
  recorded.  Keys are visited in sorted order so reports are deterministic.
- Arrays with exactly one empty side produce a single bulk diff carrying the
  whole non-empty side.
- Arrays under ``ArrayComparisonMode.AUTO`` are classified by the left
  side's first element: objects and arrays are compared by index up to the
  shorter length (trailing elements are not reported), scalars are compared
  as an unordered set and reported at ``path[=member]``, where ``member`` is
  the element's JSON text (``tags[="red"]``, ``ids[=1]``).
- Equality is strict about JSON kinds: ``true`` never equals ``1`` while
  ``1`` equals ``1.0``.

The engine never raises for decoded JSON input.  Pending comparisons live on
an explicit stack, so the walk itself is not bounded by the interpreter's
recursion limit.  A Path is an immutable value carried by each pending comparison, so
separate diffs share no state.
"""

from __future__ import annotations

import json
import logging
import time
from collections import Counter
from typing import Any

from json_contract_diff.diff.config import ArrayComparisonMode, DiffConfig
from json_contract_diff.diff.records import DiffSet
from json_contract_diff.paths import ROOT, Member, Path

__all__ = ["StructuralDiffer", "json_equal", "render_value"]

logger = logging.getLogger(__name__)

# A comparison still to be made: location, left value, right value
_Pending = tuple[Path, Any, Any]


def render_value(value: Any) -> str:
    """Textual form of a JSON value used in diff log slots.

    Strings are returned verbatim; everything else is compact JSON with
    sorted keys (``2`` -> ``"2"``, ``None`` -> ``"null"``).
    """
    if isinstance(value, str):
        return value
    return json.dumps(value, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def json_equal(left: Any, right: Any) -> bool:
    """Deep equality over decoded JSON that never conflates kinds.

    Python's ``True == 1`` would hide a boolean turning into a number, so
    booleans only equal booleans.  Integers and floats compare numerically.
    Nested values are walked with an explicit stack, so any depth
    ``json.loads`` accepts is compared without recursion.
    """
    pending = [(left, right)]
    while pending:
        a, b = pending.pop()
        if isinstance(a, bool) or isinstance(b, bool):
            if not (isinstance(a, bool) and isinstance(b, bool) and a == b):
                return False
        elif isinstance(a, dict):
            if not isinstance(b, dict) or a.keys() != b.keys():
                return False
            pending.extend((a[key], b[key]) for key in a)
        elif isinstance(a, list):
            if not isinstance(b, list) or len(a) != len(b):
                return False
            pending.extend(zip(a, b))
        elif isinstance(a, (int, float)):
            if not (isinstance(b, (int, float)) and a == b):
                return False
        elif isinstance(b, (dict, list, int, float)) or a != b:
            return False
    return True


def _member_key(value: Any) -> tuple[str, Any]:
    """Hashable identity of an array element for set comparison."""
    if isinstance(value, bool):
        return ("boolean", value)
    if isinstance(value, (int, float)):
        return ("number", value)
    if isinstance(value, str):
        return ("string", value)
    if value is None:
        return ("null", None)
    return ("composite", render_value(value))


def _by_member_text(pair: tuple[Member, Any]) -> str:
    return pair[0].text


class StructuralDiffer:
    """Structural diff between two decoded JSON values.

    The walk keeps its pending ``(path, left, right)`` pairs on an explicit
    stack instead of the call stack, so nesting depth is bounded only by what
    the decoder accepted.

    Example::

        differ = StructuralDiffer()
        diffs = differ.diff({"a": 1, "b": 2}, {"a": 1, "b": 3})
        record = diffs.at("b")
        record.basic_log, record.a_log     # ("2", "3")
    """

    def __init__(self, config: DiffConfig | None = None) -> None:
        self._config: DiffConfig = config if config is not None else DiffConfig()

    @property
    def config(self) -> DiffConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def diff(self, left: Any, right: Any) -> DiffSet:
        """Compare two JSON values and return their divergences.

        Args:
            left:  Baseline value (dict, list, str, int, float, bool, None).
            right: Value compared against the baseline.

        Returns:
            A ``DiffSet``; empty when the values are structurally equal,
            regardless of object key order.
        """
        t0 = time.perf_counter()
        left = self._preprocess(left)
        right = self._preprocess(right)

        diffs = DiffSet()
        stack: list[_Pending] = [(ROOT, left, right)]
        while stack:
            path, a, b = stack.pop()
            # Reversed so children are visited in sorted / index order
            stack.extend(reversed(self._compare_values(diffs, path, a, b)))

        elapsed_ms = (time.perf_counter() - t0) * 1000.0
        logger.debug("structural diff found %d divergences in %.3f ms", len(diffs), elapsed_ms)
        return diffs

    # ------------------------------------------------------------------
    # Walk steps: each records what it can settle and returns the child
    # pairs still to compare.
    # ------------------------------------------------------------------

    def _compare_values(
        self, diffs: DiffSet, path: Path, left: Any, right: Any
    ) -> list[_Pending]:
        if isinstance(left, dict) and isinstance(right, dict):
            return self._compare_objects(diffs, path, left, right)
        if isinstance(left, list) and isinstance(right, list):
            return self._compare_arrays(diffs, path, left, right)
        if not json_equal(left, right):
            self._store(diffs, path, render_value(left), render_value(right))
        return []

    def _compare_objects(
        self, diffs: DiffSet, path: Path, left: dict[str, Any], right: dict[str, Any]
    ) -> list[_Pending]:
        pending: list[_Pending] = []
        for key in sorted(left.keys() | right.keys()):
            if key not in right:
                self._store(diffs, path.child(key), render_value(left[key]), "")
            elif key not in left:
                self._store(diffs, path.child(key), "", render_value(right[key]))
            else:
                pending.append((path.child(key), left[key], right[key]))
        return pending

    def _compare_arrays(
        self, diffs: DiffSet, path: Path, left: list[Any], right: list[Any]
    ) -> list[_Pending]:
        if not left and not right:
            return []
        if not left:
            self._store(diffs, path, "", render_value(right))
            return []
        if not right:
            self._store(diffs, path, render_value(left), "")
            return []

        mode = self._config.array_comparison_mode
        if mode == ArrayComparisonMode.ORDERED:
            return self._compare_positional(diffs, path, left, right, report_trailing=True)
        if mode == ArrayComparisonMode.UNORDERED:
            self._compare_multiset(diffs, path, left, right)
        elif isinstance(left[0], (dict, list)):
            return self._compare_positional(diffs, path, left, right, report_trailing=False)
        else:
            self._compare_set(diffs, path, left, right)
        return []

    def _compare_positional(
        self,
        diffs: DiffSet,
        path: Path,
        left: list[Any],
        right: list[Any],
        *,
        report_trailing: bool,
    ) -> list[_Pending]:
        shared = min(len(left), len(right))
        pending = [(path.child(index), left[index], right[index]) for index in range(shared)]
        if report_trailing:
            for index in range(shared, len(left)):
                self._store(diffs, path.child(index), render_value(left[index]), "")
            for index in range(shared, len(right)):
                self._store(diffs, path.child(index), "", render_value(right[index]))
        return pending

    def _compare_set(
        self, diffs: DiffSet, path: Path, left: list[Any], right: list[Any]
    ) -> None:
        left_members = {_member_key(value): value for value in left}
        right_members = {_member_key(value): value for value in right}
        self._store_members(
            diffs,
            path,
            [left_members[key] for key in left_members.keys() - right_members.keys()],
            [right_members[key] for key in right_members.keys() - left_members.keys()],
        )

    def _compare_multiset(
        self, diffs: DiffSet, path: Path, left: list[Any], right: list[Any]
    ) -> None:
        samples: dict[tuple[str, Any], Any] = {}
        for value in (*left, *right):
            samples.setdefault(_member_key(value), value)
        left_counts = Counter(_member_key(value) for value in left)
        right_counts = Counter(_member_key(value) for value in right)
        self._store_members(
            diffs,
            path,
            [samples[key] for key in left_counts - right_counts],
            [samples[key] for key in right_counts - left_counts],
        )

    def _store_members(
        self, diffs: DiffSet, path: Path, removed: list[Any], added: list[Any]
    ) -> None:
        for member, value in sorted(((Member.of(v), v) for v in removed), key=_by_member_text):
            self._store(diffs, path.child(member), render_value(value), "")
        for member, value in sorted(((Member.of(v), v) for v in added), key=_by_member_text):
            self._store(diffs, path.child(member), "", render_value(value))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _store(self, diffs: DiffSet, path: Path, left_log: str, right_log: str) -> None:
        diffs.store_one_sided(path, left_log, right_log, asserted=not self._is_ignored(path))

    def _is_ignored(self, path: Path) -> bool:
        """True if ``path`` or one of its ancestors is an ignored path."""
        ignored = self._config.ignored_paths
        if not ignored:
            return False
        return any(
            str(Path(path.segments[:depth])) in ignored for depth in range(len(path) + 1)
        )

    def _preprocess(self, value: Any) -> Any:
        """Strip None-valued keys when null_equals_missing=True.

        Returns a new object and never mutates the input.
        """
        if not self._config.null_equals_missing:
            return value

        holder = [value]
        stack: list[tuple[Any, Any, Any]] = [(holder, 0, value)]
        while stack:
            parent, slot, item = stack.pop()
            if isinstance(item, dict):
                copy = {k: v for k, v in item.items() if v is not None}
                parent[slot] = copy
                stack.extend((copy, k, v) for k, v in copy.items())
            elif isinstance(item, list):
                copy_list = list(item)
                parent[slot] = copy_list
                stack.extend((copy_list, i, v) for i, v in enumerate(copy_list))
        return holder[0]
