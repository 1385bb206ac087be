"""Concurrent schema accumulation and chained diffs.

Two points of parallelism, both on bounded ``ThreadPoolExecutor`` pools:

- ``SchemaAccumulator.add_many`` infers one property tree per sample on the
  pool (no shared state between tasks; each worker thread owns its own
  builder and format cache) while the calling thread is the single reducer
  that folds finished trees into the accumulated document in arrival order.
  Merging mutates the document in place, so it never runs on a worker.
- ``chained_diff`` runs baseline-vs-A and A-vs-B on two workers and combines
  the two diff sets once both have finished.

Both accept a deadline.  On expiry, queued tasks are cancelled, the pool is
shut down without waiting, and a timeout error is raised instead of hanging.
Nothing is retried: a bad sample only aborts itself.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Iterable
from concurrent.futures import Future, ThreadPoolExecutor, as_completed, wait
from dataclasses import dataclass, field
from typing import Any

from json_contract_diff.decoding import decode, fingerprint
from json_contract_diff.diff.config import DiffConfig
from json_contract_diff.diff.engine import StructuralDiffer
from json_contract_diff.diff.records import DiffSet
from json_contract_diff.errors import (
    AccumulationTimeoutError,
    ContractDiffError,
    DiffTimeoutError,
    ParseError,
    TypeConflictError,
    UnsupportedTypeError,
)
from json_contract_diff.schema.builder import SchemaBuilder
from json_contract_diff.schema.config import InferenceConfig
from json_contract_diff.schema.merge import SchemaMerger
from json_contract_diff.schema.nodes import SchemaDocument

__all__ = ["AccumulationReport", "SampleFailure", "SchemaAccumulator", "chained_diff"]

logger = logging.getLogger(__name__)

Payload = bytes | bytearray | str

# Errors that abort one sample without touching the rest of a batch.
_SAMPLE_ERRORS = (ParseError, UnsupportedTypeError, TypeConflictError)


@dataclass(frozen=True, slots=True)
class SampleFailure:
    """A sample that could not be merged.

    Attributes:
        index: Position of the sample in the submitted batch.
        error: Why it was rejected.
    """

    index: int
    error: ContractDiffError


@dataclass(slots=True)
class AccumulationReport:
    """Outcome of one accumulation batch.

    Attributes:
        merged:    Samples folded into the document.
        skipped:   Byte-identical samples that were not processed again.
        failures:  Samples rejected by decoding, building or merging.
        conflicts: Fields skipped under ``MergePolicy.BEST_EFFORT``.
        pending:   Samples still unmerged when a deadline expired.
    """

    merged: int = 0
    skipped: int = 0
    failures: list[SampleFailure] = field(default_factory=list)
    conflicts: list[TypeConflictError] = field(default_factory=list)
    pending: int = 0

    @property
    def ok(self) -> bool:
        return not self.failures and not self.conflicts and not self.pending


class SchemaAccumulator:
    """Owns one evolving schema document and folds samples into it.

    The accumulator is the single writer of its document: call it from one
    thread at a time.  Parallelism happens inside ``add_many``.

    Example::

        acc = SchemaAccumulator()
        report = acc.add_many([b'{"a": 1}', b'{"a": 2, "b": "x"}'])
        report.merged                     # 2
        acc.document.root.required        # ["a"]
    """

    def __init__(
        self,
        document: SchemaDocument | None = None,
        config: InferenceConfig | None = None,
    ) -> None:
        self._config: InferenceConfig = config if config is not None else InferenceConfig()
        self._document = document
        self._merger = SchemaMerger(self._config)
        self._seen: set[str] = set()
        self._local = threading.local()

    @property
    def document(self) -> SchemaDocument | None:
        """The accumulated document, or None before the first merged sample."""
        return self._document

    @property
    def config(self) -> InferenceConfig:
        return self._config

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def add(self, payload: Payload) -> AccumulationReport:
        """Decode, infer and merge one sample on the calling thread.

        Raises:
            ParseError: If the payload is not JSON.
            UnsupportedTypeError: If the decoded value is not a JSON kind.
            TypeConflictError: Under ``MergePolicy.FAIL_FAST``.
        """
        report = AccumulationReport()
        digest = fingerprint(payload)
        if digest in self._seen:
            report.skipped += 1
            return report
        report.conflicts.extend(self._fold(self._infer(payload)))
        self._seen.add(digest)
        report.merged += 1
        return report

    def add_many(
        self,
        payloads: Iterable[Payload],
        max_workers: int = 4,
        timeout: float | None = None,
    ) -> AccumulationReport:
        """Infer samples in parallel and fold them into the document.

        Args:
            payloads:    Raw JSON samples.
            max_workers: Size of the inference pool.
            timeout:     Seconds allowed for the whole batch, or None.

        Returns:
            An ``AccumulationReport``; per-sample failures are reported there,
            not raised.

        Raises:
            ValueError: If ``max_workers`` is below 1.
            AccumulationTimeoutError: If the deadline expired.  Its ``report``
                is the partial result; every sample merged before the
                deadline stays in the document.
        """
        if max_workers < 1:
            msg = f"max_workers must be >= 1, got {max_workers}"
            raise ValueError(msg)

        t0 = time.perf_counter()
        deadline = None if timeout is None else time.monotonic() + timeout
        report = AccumulationReport()
        executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="schema-infer")
        futures: dict[Future[SchemaDocument], tuple[int, str]] = {}
        batch_seen: set[str] = set()
        try:
            for index, payload in enumerate(payloads):
                digest = fingerprint(payload)
                if digest in self._seen or digest in batch_seen:
                    logger.debug("skipping duplicate sample %d (%s)", index, digest)
                    report.skipped += 1
                    continue
                batch_seen.add(digest)
                futures[executor.submit(self._infer, payload)] = (index, digest)

            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            try:
                for future in as_completed(futures, timeout=remaining):
                    index, digest = futures[future]
                    self._reduce(report, index, digest, future)
            except TimeoutError as exc:
                report.pending = len(futures) - report.merged - len(report.failures)
                logger.warning(
                    "schema accumulation timed out: %d merged, %d pending",
                    report.merged,
                    report.pending,
                )
                raise AccumulationTimeoutError(report, timeout or 0.0) from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        logger.debug(
            "accumulated %d samples (%d skipped, %d failed) in %.3f ms",
            report.merged,
            report.skipped,
            len(report.failures),
            (time.perf_counter() - t0) * 1000.0,
        )
        return report

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _builder(self) -> SchemaBuilder:
        """Per-thread builder; the format cache is not safe to share."""
        builder = getattr(self._local, "builder", None)
        if builder is None:
            builder = SchemaBuilder(config=self._config)
            self._local.builder = builder
        return builder

    def _infer(self, payload: Payload) -> SchemaDocument:
        return self._builder().build_document(decode(payload))

    def _fold(self, incoming: SchemaDocument) -> list[TypeConflictError]:
        if self._document is None:
            self._document = incoming
            return []
        return self._merger.merge(self._document, incoming)

    def _reduce(
        self,
        report: AccumulationReport,
        index: int,
        digest: str,
        future: Future[SchemaDocument],
    ) -> None:
        try:
            conflicts = self._fold(future.result())
        except _SAMPLE_ERRORS as exc:
            logger.warning("sample %d rejected: %s", index, exc)
            report.failures.append(SampleFailure(index, exc))
            return
        self._seen.add(digest)
        report.merged += 1
        report.conflicts.extend(conflicts)


def chained_diff(
    baseline: Any,
    a: Any,
    b: Any,
    config: DiffConfig | None = None,
    timeout: float | None = None,
) -> DiffSet:
    """Diff baseline vs ``a`` and ``a`` vs ``b`` concurrently, then combine.

    Returns:
        The baseline-vs-A diff set with the A-vs-B records folded in; see
        ``DiffSet.combine``.

    Raises:
        DiffTimeoutError: If either comparison is still running at the
            deadline.
    """
    differ = StructuralDiffer(config)
    executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="chained-diff")
    try:
        first = executor.submit(differ.diff, baseline, a)
        second = executor.submit(differ.diff, a, b)
        _, not_done = wait((first, second), timeout=timeout)
        if not_done:
            msg = f"chained diff did not finish within {timeout}s"
            raise DiffTimeoutError(msg)
        combined = first.result()
        combined.combine(second.result())
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
    return combined
