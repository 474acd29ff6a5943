"""The single core entry point: walk, filter, ingest, aggregate."""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Callable, Optional, Union

from ..config import FilterConfiguration, IngestOptions
from ..exceptions import AggregationInvariantError, ScanCancelledError
from ..logging_config import get_logger
from ..scanning import (
    ContentIngestor,
    ExecutionResult,
    FilterChain,
    GitignoreResolver,
    ParallelExecutor,
    PathWalker,
)
from ..scanning.models import CandidatePath
from ..security import validate_ignore_file, validate_root_directory
from .result import AggregationResult

logger = get_logger(__name__)


def _check_coverage(candidates: list[CandidatePath], run: ExecutionResult) -> None:
    """Every admitted candidate ends up either ingested or skipped, exactly once."""
    admitted = {c.relative for c in candidates}
    accounted = [e.path for e in run.entries] + [s.path for s in run.skipped]
    if len(accounted) != len(admitted) or set(accounted) != admitted:
        missing = sorted(admitted - set(accounted))[:5]
        raise AggregationInvariantError(
            "complete_coverage",
            f"{len(admitted)} admitted, {len(accounted)} accounted for; missing {missing}",
        )


def scan(
    root: Union[str, Path],
    config: Optional[FilterConfiguration] = None,
    *,
    options: Optional[IngestOptions] = None,
    workers: Optional[int] = None,
    progress: Optional[Callable[[str], None]] = None,
    cancel_event: Optional[threading.Event] = None,
    on_start: Optional[Callable[[int], None]] = None,
) -> AggregationResult:
    """Aggregate every admitted file below ``root``.

    Args:
        root: Directory to scan.
        config: Filter rules (default: exclude nothing).
        options: Ingestion options (default: 10 MiB cap, binaries kept).
        workers: Reader threads (default: CPU count capped at 8).
        progress: Called with each file's relative path once it is processed.
            Called from worker threads.
        cancel_event: Set it to abandon the scan.
        on_start: Called once with the number of admitted files, before
            any file is read.

    Returns:
        The finished AggregationResult.

    Raises:
        InvalidPathError: If the root or the custom ignore file is unusable.
        InvalidPatternError: If an exclude glob cannot be compiled.
        ScanCancelledError: If ``cancel_event`` is set or the scan is interrupted.
        AggregationInvariantError: If the result fails its consistency checks.
    """
    root = validate_root_directory(Path(root))
    config = config or FilterConfiguration()

    resolver = None
    if config.respect_gitignore:
        ignore_file = validate_ignore_file(config.ignore_file, root) if config.ignore_file else None
        resolver = GitignoreResolver(root, ignore_file=ignore_file)
    chain = FilterChain(config, resolver)

    logger.info(f"Scanning {root}")
    walker = PathWalker(root, chain)
    candidates: list[CandidatePath] = []
    try:
        for candidate in walker.walk():
            if cancel_event is not None and cancel_event.is_set():
                raise ScanCancelledError(0)
            candidates.append(candidate)
    except KeyboardInterrupt:
        raise ScanCancelledError(0) from None
    logger.info(f"Admitted {len(candidates)} files, rejected {walker.rejected} paths")

    if on_start is not None:
        on_start(len(candidates))

    executor = ParallelExecutor(
        ContentIngestor(options),
        workers=workers,
        progress=progress,
        cancel_event=cancel_event,
    )
    run = executor.run(candidates)
    _check_coverage(candidates, run)

    result = AggregationResult(
        root=root,
        entries=run.entries,
        languages=run.stats.snapshot(),
        skipped=run.skipped,
        config=config,
    )
    logger.info(
        f"Aggregated {result.total_files} files ({result.total_lines} lines, "
        f"{result.total_bytes} bytes), skipped {len(result.skipped)}"
    )
    return result
