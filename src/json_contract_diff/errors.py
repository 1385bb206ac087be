"""Exception hierarchy for json-contract-diff.

Every error raised by the package derives from ``ContractDiffError`` and, where
a builtin category fits, from that builtin too (``ParseError`` is a
``ValueError``, ``PathError`` is a ``LookupError``, ...) so callers can catch
either the precise type or the familiar builtin.

Propagation policy:
- Builder-time errors (``ParseError``, ``UnsupportedTypeError``) are fatal to
  the one sample being processed.
- ``TypeConflictError`` follows the configured ``MergePolicy``.
- The structural diff engine never raises for decoded JSON input.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from json_contract_diff.pipeline import AccumulationReport

__all__ = [
    "AccumulationTimeoutError",
    "ContractDiffError",
    "DiffTimeoutError",
    "NestingDepthError",
    "ParseError",
    "PathError",
    "TypeConflictError",
    "UnsupportedTypeError",
]


class ContractDiffError(Exception):
    """Base class for all json-contract-diff errors."""


class ParseError(ContractDiffError, ValueError):
    """Malformed input bytes (or malformed schema JSON).

    Attributes:
        position: Character offset of the failure when the decoder reports
            one, otherwise None.
    """

    def __init__(self, message: str, position: int | None = None) -> None:
        super().__init__(message)
        self.position = position


class UnsupportedTypeError(ContractDiffError, TypeError):
    """A value outside the seven JSON kinds reached the schema builder."""

    def __init__(self, path: str, python_type: type[Any] | str) -> None:
        type_name = python_type if isinstance(python_type, str) else python_type.__name__
        location = path or "<root>"
        super().__init__(f"Unsupported JSON value type {type_name!r} at {location}")
        self.path = path
        self.python_type = type_name


class NestingDepthError(UnsupportedTypeError):
    """A sample nests values deeper than ``InferenceConfig.max_depth``."""

    def __init__(self, path: str, limit: int) -> None:
        super().__init__(path, "nesting")
        self.args = (f"value nested deeper than {limit} levels at {path or '<root>'}",)
        self.limit = limit


class TypeConflictError(ContractDiffError):
    """Merge-time kind mismatch between the accumulated and incoming schema."""

    def __init__(self, path: str, kind_a: str, kind_b: str) -> None:
        location = path or "<root>"
        super().__init__(f"Type difference {kind_a} vs {kind_b} at {location}")
        self.path = path
        self.kind_a = kind_a
        self.kind_b = kind_b

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TypeConflictError):
            return NotImplemented
        return (self.path, self.kind_a, self.kind_b) == (
            other.path,
            other.kind_a,
            other.kind_b,
        )

    def __hash__(self) -> int:
        return hash((self.path, self.kind_a, self.kind_b))


class PathError(ContractDiffError, LookupError):
    """Navigation failure while walking a document, property tree or diff set."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{reason}; {path or '<root>'}")
        self.path = path
        self.reason = reason


class AccumulationTimeoutError(ContractDiffError, TimeoutError):
    """The per-batch deadline of ``SchemaAccumulator.add_many`` expired.

    ``report`` holds the partial result: every sample merged before the
    deadline is already part of the accumulated document.
    """

    def __init__(self, report: AccumulationReport, timeout: float) -> None:
        super().__init__(
            f"schema accumulation timed out after {timeout}s "
            f"({report.merged} merged, {report.pending} pending)"
        )
        self.report = report
        self.timeout = timeout


class DiffTimeoutError(ContractDiffError, TimeoutError):
    """A chained diff did not finish before its deadline."""
