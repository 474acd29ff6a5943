"""Core pipeline: scan() and its result."""

from .aggregator import scan
from .progress import ProgressReporter, SilentReporter
from .result import AggregationResult, Distribution

__all__ = [
    "scan",
    "AggregationResult",
    "Distribution",
    "ProgressReporter",
    "SilentReporter",
]
