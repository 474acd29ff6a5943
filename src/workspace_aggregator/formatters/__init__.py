"""Report formatters for workspace-aggregator."""

from datetime import datetime
from typing import Optional

from .base import BaseFormatter
from .chunking import Chunk, chunk_sections, chunk_workspace
from .files import FilesFormatter
from .llm import LlmChunk, LlmFormatter
from .meta import MetaFormatter
from .stats import StatsFormatter
from .summary import SummaryFormatter
from .tree import TreeFormatter
from .workspace import WorkspaceFormatter

FORMATTERS = {
    "workspace": WorkspaceFormatter,
    "files": FilesFormatter,
    "tree": TreeFormatter,
    "stats": StatsFormatter,
    "summary": SummaryFormatter,
    "meta": MetaFormatter,
    "llm": LlmFormatter,
}


def get_formatter(name: str, generated_at: Optional[datetime] = None, **kwargs) -> BaseFormatter:
    """Get a formatter instance by name.

    Args:
        name: One of "workspace", "files", "tree", "stats", "summary", "meta", "llm"
        generated_at: Header timestamp; None keeps the output deterministic
        **kwargs: Extra constructor arguments (``chunk_size`` for "llm")

    Returns:
        Formatter instance

    Raises:
        ValueError: If name is not recognized
    """
    cls = FORMATTERS.get(name)
    if cls is None:
        raise ValueError(f"Unknown formatter: {name!r}. Choose from: {', '.join(sorted(FORMATTERS))}")
    return cls(generated_at, **kwargs)


__all__ = [
    "BaseFormatter",
    "WorkspaceFormatter",
    "FilesFormatter",
    "TreeFormatter",
    "StatsFormatter",
    "SummaryFormatter",
    "MetaFormatter",
    "LlmFormatter",
    "LlmChunk",
    "Chunk",
    "chunk_sections",
    "chunk_workspace",
    "get_formatter",
    "FORMATTERS",
]
