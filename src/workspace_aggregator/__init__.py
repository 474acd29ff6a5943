"""
Workspace Aggregator - Source Tree Export

Walks a directory tree, applies extension, directory, glob and .gitignore
exclusions, reads the remaining files in parallel and renders the result as
text reports: a full-content workspace export, file listing, directory tree,
statistics, summary, JSON metadata and a chunked export for LLM context.
"""

__version__ = "0.4.6"

from .config import FilterConfiguration, IngestOptions
from .core import AggregationResult, scan
from .formatters import chunk_sections, chunk_workspace, get_formatter
from .scanning import FileEntry, LanguageStat, ReadOutcome, SkippedFile, SkipReason

__all__ = [
    "scan",  # Main entry point
    "AggregationResult",
    "FilterConfiguration",
    "IngestOptions",
    "FileEntry",
    "LanguageStat",
    "SkippedFile",
    "SkipReason",
    "ReadOutcome",
    "get_formatter",
    "chunk_sections",
    "chunk_workspace",
]
