"""Scan-time exceptions: file access, cancellation, result invariants."""

from pathlib import Path
from typing import Optional

from .base import WorkspaceAggregatorError


class ScanError(WorkspaceAggregatorError):
    """Base class for errors raised while a scan is running."""

    pass


class FileAccessError(ScanError):
    """Raised when a file cannot be accessed, read or written."""

    def __init__(self, filepath: Path, reason: str):
        super().__init__(
            f"Cannot access file: {filepath}",
            details={"filepath": str(filepath), "reason": reason},
        )
        self.filepath = filepath
        self.reason = reason


class ScanCancelledError(ScanError):
    """Raised when a scan is interrupted. The partial result is discarded."""

    def __init__(self, processed: int, total: Optional[int] = None):
        details = {"processed": str(processed)}
        if total is not None:
            details["total"] = str(total)
        super().__init__("Scan cancelled before completion", details=details)
        self.processed = processed
        self.total = total


class AggregationInvariantError(ScanError):
    """Raised when a finished result violates one of its published invariants."""

    def __init__(self, invariant: str, reason: str):
        super().__init__(
            f"Aggregation invariant violated: {invariant}",
            details={"invariant": invariant, "reason": reason},
        )
        self.invariant = invariant
        self.reason = reason
