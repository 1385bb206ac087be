"""Diff subpackage: structural comparison and chained diff aggregation.

Re-exports:
- StructuralDiffer: path-addressed differences between two JSON values
- DiffSet / DiffRecord: the aggregated, serializable report
- DiffConfig / ArrayComparisonMode: configuration
"""

from json_contract_diff.diff.config import ArrayComparisonMode, DiffConfig
from json_contract_diff.diff.engine import StructuralDiffer, json_equal, render_value
from json_contract_diff.diff.records import DiffRecord, DiffSet

__all__ = [
    "ArrayComparisonMode",
    "DiffConfig",
    "DiffRecord",
    "DiffSet",
    "StructuralDiffer",
    "json_equal",
    "render_value",
]
