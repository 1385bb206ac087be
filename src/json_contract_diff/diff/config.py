"""DiffConfig and ArrayComparisonMode for structural diff configuration.

DiffConfig is a frozen (immutable) dataclass holding the comparator
parameters.  ArrayComparisonMode selects how arrays are compared:
auto-detected from content, ordered (positional), or unordered (set-like).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum, auto

from json_contract_diff.errors import PathError
from json_contract_diff.paths import Path


class ArrayComparisonMode(StrEnum):
    """How to compare two non-empty JSON arrays.

    - AUTO:      Infer from the left array's first element: objects and
                 arrays are compared by index, scalars as an unordered set.
    - ORDERED:   Every array is compared by index, scalars included.
    - UNORDERED: Every array is compared as a multiset of its elements.
    """

    AUTO = auto()
    ORDERED = auto()
    UNORDERED = auto()


@dataclass(frozen=True, slots=True)
class DiffConfig:
    """Immutable configuration for the structural diff engine.

    Attributes:
        array_comparison_mode: How arrays are compared.  Default AUTO.
        null_equals_missing: When True, a JSON null value is treated as
            equivalent to a missing key.  Default False.
        ignored_paths: Canonical paths (e.g. ``"meta.requestId"``) whose
            divergences are still recorded but never asserted.  Volatile
            fields such as timestamps and trace ids belong here.
    """

    array_comparison_mode: ArrayComparisonMode = ArrayComparisonMode.AUTO
    null_equals_missing: bool = False
    ignored_paths: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if isinstance(self.ignored_paths, str):
            msg = "ignored_paths must be a collection of paths, not a single string"
            raise ValueError(msg)
        if not isinstance(self.ignored_paths, frozenset):
            object.__setattr__(self, "ignored_paths", frozenset(self.ignored_paths))
        for text in self.ignored_paths:
            if not isinstance(text, str):
                msg = f"ignored_paths entries must be strings, got {type(text).__name__}"
                raise ValueError(msg)
            try:
                Path.parse(text)
            except PathError as exc:
                msg = f"ignored_paths entry {text!r} is not a canonical path"
                raise ValueError(msg) from exc
