"""Exception hierarchy for workspace-aggregator."""

from .base import WorkspaceAggregatorError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
    InvalidPatternError,
)
from .scanning import (
    AggregationInvariantError,
    FileAccessError,
    ScanCancelledError,
    ScanError,
)

__all__ = [
    "WorkspaceAggregatorError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
    "InvalidPatternError",
    "ScanError",
    "FileAccessError",
    "ScanCancelledError",
    "AggregationInvariantError",
]
