"""Traversal, filtering and ingestion."""

from .executor import ExecutionResult, ParallelExecutor
from .filters import FilterChain, candidate_extensions
from .gitignore import GitignoreResolver
from .ingest import ContentIngestor, is_binary, measure_lines, split_lines
from .languages import LANGUAGE_EXTENSIONS, OTHER, LanguageClassifier, extension_of
from .models import (
    CandidatePath,
    FileEntry,
    LanguageStat,
    ReadOutcome,
    SkippedFile,
    SkipReason,
)
from .stats import StatsCollector
from .walker import PathWalker

__all__ = [
    # Models
    "CandidatePath",
    "FileEntry",
    "LanguageStat",
    "ReadOutcome",
    "SkippedFile",
    "SkipReason",
    # Filtering
    "FilterChain",
    "GitignoreResolver",
    "candidate_extensions",
    # Traversal and ingestion
    "PathWalker",
    "ContentIngestor",
    "ParallelExecutor",
    "ExecutionResult",
    "is_binary",
    "measure_lines",
    "split_lines",
    # Classification and stats
    "LanguageClassifier",
    "LANGUAGE_EXTENSIONS",
    "OTHER",
    "extension_of",
    "StatsCollector",
]
