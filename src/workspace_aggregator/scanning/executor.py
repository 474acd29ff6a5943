"""Parallel ingestion: scatter candidates, gather partial results, sort.

Each batch task owns its entry list, skip list and StatsCollector, so
workers share nothing. Partial results are merged once in the calling
thread and sorted by path, which makes the output independent of
completion order.
"""

from __future__ import annotations

import math
import os
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence, Union

from ..exceptions import ScanCancelledError
from ..logging_config import get_logger
from .ingest import ContentIngestor
from .models import CandidatePath, FileEntry, SkippedFile, SkipReason
from .stats import StatsCollector

logger = get_logger(__name__)

_DEFAULT_WORKERS = min(os.cpu_count() or 4, 8)

# Below this many files a thread pool costs more than it saves
_SEQUENTIAL_THRESHOLD = 10

_BATCHES_PER_WORKER = 4

ProgressCallback = Callable[[str], None]


@dataclass
class PartialResult:
    """Worker-local output of one batch."""

    entries: list[FileEntry] = field(default_factory=list)
    skipped: list[SkippedFile] = field(default_factory=list)
    stats: StatsCollector = field(default_factory=StatsCollector)

    @property
    def processed(self) -> int:
        return len(self.entries) + len(self.skipped)

    def absorb(self, other: PartialResult) -> None:
        self.entries.extend(other.entries)
        self.skipped.extend(other.skipped)
        self.stats = self.stats.merge(other.stats)


@dataclass(frozen=True)
class ExecutionResult:
    """Merged, path-sorted output of a run."""

    entries: tuple[FileEntry, ...]
    skipped: tuple[SkippedFile, ...]
    stats: StatsCollector


def make_batches(candidates: Sequence[CandidatePath], workers: int) -> list[Sequence[CandidatePath]]:
    """Split candidates into contiguous batches, several per worker."""
    if not candidates:
        return []
    size = max(1, math.ceil(len(candidates) / (workers * _BATCHES_PER_WORKER)))
    return [candidates[i : i + size] for i in range(0, len(candidates), size)]


class ParallelExecutor:
    """Runs a ContentIngestor over many candidates on a bounded thread pool.

    Args:
        ingestor: Reads one file.
        workers: Pool size (default: CPU count capped at 8).
        progress: Called with the relative path after each file. It is
            invoked from worker threads and must be thread-safe.
        cancel_event: When set, no new files are started and ``run``
            raises ScanCancelledError.
    """

    def __init__(
        self,
        ingestor: ContentIngestor,
        workers: Optional[int] = None,
        progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        self.ingestor = ingestor
        self.workers = workers or _DEFAULT_WORKERS
        self.progress = progress
        self.cancel_event = cancel_event

    def _ingest_one(self, candidate: CandidatePath) -> Union[FileEntry, SkippedFile]:
        try:
            return self.ingestor.ingest(candidate)
        except Exception as e:
            logger.error(f"Unexpected error ingesting {candidate.relative}: {e}")
            return SkippedFile(candidate.relative, SkipReason.UNREADABLE, f"unexpected error: {e}")

    def _run_batch(self, batch: Sequence[CandidatePath], cancel: threading.Event) -> PartialResult:
        partial = PartialResult()
        for candidate in batch:
            if cancel.is_set():
                break
            outcome = self._ingest_one(candidate)
            if isinstance(outcome, FileEntry):
                partial.entries.append(outcome)
                partial.stats.fold(outcome)
            else:
                logger.debug(f"Skipped {outcome.path} ({outcome.reason.value}: {outcome.detail})")
                partial.skipped.append(outcome)
            if self.progress is not None:
                self.progress(candidate.relative)
        return partial

    def run(self, candidates: Sequence[CandidatePath]) -> ExecutionResult:
        """Ingest every candidate and return the sorted, merged result.

        Raises:
            ScanCancelledError: If cancelled or interrupted before completion.
        """
        cancel = self.cancel_event or threading.Event()
        total = len(candidates)
        merged = PartialResult()

        if self.workers == 1 or total < _SEQUENTIAL_THRESHOLD:
            try:
                merged = self._run_batch(candidates, cancel)
            except KeyboardInterrupt:
                raise ScanCancelledError(merged.processed, total) from None
        else:
            batches = make_batches(candidates, self.workers)
            logger.debug(f"Ingesting {total} files in {len(batches)} batches on {self.workers} workers")
            executor = ThreadPoolExecutor(max_workers=self.workers)
            try:
                futures = [executor.submit(self._run_batch, batch, cancel) for batch in batches]
                for future in as_completed(futures):
                    merged.absorb(future.result())
                    if cancel.is_set():
                        break
            except KeyboardInterrupt:
                cancel.set()
                raise ScanCancelledError(merged.processed, total) from None
            finally:
                executor.shutdown(wait=True, cancel_futures=True)

        if cancel.is_set():
            raise ScanCancelledError(merged.processed, total)

        return ExecutionResult(
            entries=tuple(sorted(merged.entries, key=lambda e: e.path)),
            skipped=tuple(sorted(merged.skipped, key=lambda s: s.path)),
            stats=merged.stats,
        )
