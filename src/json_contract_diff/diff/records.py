"""DiffRecord and DiffSet: path-keyed divergences and their aggregation.

A ``DiffSet`` holds at most one ``DiffRecord`` per canonical path string.
Each record has two pairs of log slots:

- ``basic_log`` / ``a_log``   : the first comparison (baseline vs A)
- ``a_basic_log`` / ``b_log`` : the second comparison (A vs B), filled by
  ``combine``

``combine`` chains two independently computed diff sets into one transitive
report without recomputing a three-way comparison.  ``asserted`` marks a
record as still to be acted on: a fresh record is asserted, and ``combine``
clears the flag on a path seen at both stages of the chain.  ``confirmed``
tells whether both pairs of slots are filled.

Wire shape (``to_dict``)::

    {"a[0].x": {"xpath": ["a", 0, "x"], "basiclog": "1", "alog": "2",
                "abasic": "2", "blog": "3"}}

``abasic`` and ``blog`` are omitted while empty.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from json_contract_diff.errors import PathError
from json_contract_diff.paths import Path

__all__ = ["DiffRecord", "DiffSet"]

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DiffRecord:
    """One divergence at one canonical path.

    Attributes:
        path:        Location of the divergence.
        basic_log:   Left side of the first comparison ("" for an addition).
        a_log:       Right side of the first comparison ("" for a removal).
        a_basic_log: Left side of the second comparison, "" until combined.
        b_log:       Right side of the second comparison, "" until combined.
        asserted:    True when the caller should act on this divergence.
                     Cleared by ``DiffSet.combine`` on a shared path.
    """

    path: Path
    basic_log: str = ""
    a_log: str = ""
    a_basic_log: str = ""
    b_log: str = ""
    asserted: bool = True

    @property
    def key(self) -> str:
        """Canonical path string this record is stored under."""
        return str(self.path)

    @property
    def confirmed(self) -> bool:
        """True when the divergence was seen at both stages of a chain."""
        first = bool(self.basic_log or self.a_log)
        second = bool(self.a_basic_log or self.b_log)
        return first and second

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "xpath": self.path.to_json(),
            "basiclog": self.basic_log,
            "alog": self.a_log,
        }
        if self.a_basic_log:
            out["abasic"] = self.a_basic_log
        if self.b_log:
            out["blog"] = self.b_log
        return out


class DiffSet:
    """Collection of ``DiffRecord`` keyed by canonical path string.

    Ephemeral: built per comparison run, optionally combined with another
    diff set, then serialized and discarded.  A ``DiffSet`` is owned by one
    comparison at a time and is not thread-safe.

    Example::

        first = DiffSet()
        first.store_one_sided(Path.parse("b"), "2", "3")
        second = DiffSet()
        second.store_one_sided(Path.parse("b"), "3", "4")
        first.combine(second)
        first.at("b").confirmed        # True
        first.at("b").asserted         # False
        first.serialize_asserted()     # "{}"
    """

    def __init__(self) -> None:
        self._records: dict[str, DiffRecord] = {}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def store_one_sided(
        self,
        path: Path,
        left_log: str,
        right_log: str,
        *,
        asserted: bool = True,
    ) -> bool:
        """Record a fresh divergence with only the first pair of slots filled.

        A collision with an existing path drops the new write: two positions
        that render to the same canonical string are not merged.

        Returns:
            True if stored, False if the path was already present.
        """
        key = str(path)
        if key in self._records:
            logger.warning("duplicate diff path %r dropped", key)
            return False
        self._records[key] = DiffRecord(
            path=path, basic_log=left_log, a_log=right_log, asserted=asserted
        )
        return True

    def combine(self, other: DiffSet) -> None:
        """Fold ``other`` (A vs B) into this set (baseline vs A) in place.

        - Path present in both: other's pair lands in the second slots, the
          record becomes confirmed and its ``asserted`` flag is cleared.
        - Path only in ``other``: inserted with the first pair empty and
          other's pair in the second slots.
        """
        for key, theirs in other._records.items():
            mine = self._records.get(key)
            if mine is not None:
                mine.a_basic_log = theirs.basic_log
                mine.b_log = theirs.a_log
                mine.asserted = False
                continue
            self._records[key] = DiffRecord(
                path=theirs.path,
                a_basic_log=theirs.basic_log,
                b_log=theirs.a_log,
                asserted=theirs.asserted,
            )

    # ------------------------------------------------------------------
    # Access
    # ------------------------------------------------------------------

    def get(self, path: Path | str) -> DiffRecord | None:
        return self._records.get(str(path))

    def at(self, path: Path | str) -> DiffRecord:
        """Return the record at ``path``.

        Raises:
            PathError: If no divergence is recorded at ``path``.
        """
        record = self._records.get(str(path))
        if record is None:
            raise PathError(str(path), "no divergence recorded")
        return record

    def paths(self) -> list[str]:
        return sorted(self._records)

    def records(self) -> list[DiffRecord]:
        """All records, sorted by canonical path."""
        return [self._records[key] for key in sorted(self._records)]

    def asserted_records(self) -> list[DiffRecord]:
        return [record for record in self.records() if record.asserted]

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[DiffRecord]:
        return iter(self.records())

    def __contains__(self, path: object) -> bool:
        if isinstance(path, (Path, str)):
            return str(path) in self._records
        return False

    def __repr__(self) -> str:
        return f"DiffSet({self.paths()!r})"

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self, asserted_only: bool = False) -> dict[str, dict[str, Any]]:
        records = self.asserted_records() if asserted_only else self.records()
        return {record.key: record.to_dict() for record in records}

    def to_json(self, asserted_only: bool = False) -> str:
        return json.dumps(self.to_dict(asserted_only), indent=1, ensure_ascii=False)

    def serialize_asserted(self) -> str:
        """JSON report of the asserted records only -- the ones to act on."""
        return self.to_json(asserted_only=True)
