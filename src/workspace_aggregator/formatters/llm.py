"""LLM-oriented export: an index document plus size-bounded chunk files.

Complex files go into "core" chunks with their full content; every other
text file is listed in "supporting" chunks with its metrics only.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional

from ..config import DEFAULT_CHUNK_SIZE
from ..core.result import AggregationResult
from ..file_ops import chunk_filename
from ..scanning.models import FileEntry
from .base import BaseFormatter, percent
from .chunking import chunk_sections
from .workspace import _fence

CORE_COMPLEXITY = 10


@dataclass(frozen=True)
class LlmChunk:
    sequence: int
    total: int
    content_type: str
    content: str

    @property
    def filename(self) -> str:
        return chunk_filename(self.sequence, self.total, self.content_type)

    def document(self) -> str:
        return f"# Code Analysis Chunk {self.sequence}/{self.total}\nType: {self.content_type}\n\n{self.content}"


def _core_section(entry: FileEntry) -> str:
    content = entry.content or ""
    if content and not content.endswith("\n"):
        content += "\n"
    fence = _fence(content)
    return (
        f"\n### File: {entry.path}\n#### Metrics\n- Lines: {entry.line_count}\n"
        f"- Complexity: {entry.complexity}\n- Comments: {entry.comment_lines}\n\n"
        f"{fence}{entry.extension}\n{content}{fence}\n"
    )


def _supporting_section(entry: FileEntry) -> str:
    return (
        f"\n### {entry.path}\n- Lines: {entry.line_count}\n"
        f"- Complexity: {entry.complexity}\n- Comments: {entry.comment_lines}\n"
    )


class LlmFormatter(BaseFormatter):
    """``format`` returns the index; ``chunks`` returns the chunk files."""

    name = "llm"

    def __init__(self, generated_at: Optional[datetime] = None, chunk_size: int = DEFAULT_CHUNK_SIZE):
        super().__init__(generated_at)
        self.chunk_size = chunk_size

    def chunks(self, result: AggregationResult) -> List[LlmChunk]:
        ranked = sorted(result.text_entries, key=lambda e: (-e.complexity, e.path))
        core = [_core_section(e) for e in ranked if e.complexity > CORE_COMPLEXITY]
        supporting = [_supporting_section(e) for e in ranked if e.complexity <= CORE_COMPLEXITY]

        typed = [("core", c.text) for c in chunk_sections(core, self.chunk_size)]
        typed += [("supporting", c.text) for c in chunk_sections(supporting, self.chunk_size)]
        total = len(typed)
        return [
            LlmChunk(sequence=i, total=total, content_type=kind, content=text)
            for i, (kind, text) in enumerate(typed, start=1)
        ]

    def format(self, result: AggregationResult) -> str:
        lines = ["# Project Code Analysis", *self.generated_lines()]
        lines += [
            "",
            "## Project Overview",
            f"- Total Files: {result.total_files}",
            f"- Total Lines: {result.total_lines}",
            f"- Total Size: {result.total_bytes} bytes",
            "",
            "## Language Distribution",
        ]
        for language, stat in result.languages.items():
            lines += [
                f"### {language}",
                f"- Files: {stat.file_count}",
                f"- Total Lines: {stat.total_lines}",
                f"- Code Lines: {stat.code_lines}",
                f"- Comment Lines: {stat.comment_lines}",
                f"- Comment Ratio: {percent(stat.comment_lines, stat.total_lines):.2f}%",
                "",
            ]

        lines.append("## Complexity Analysis")
        lines.append("Most Complex Files:")
        for entry in result.most_complex_files(5):
            if entry.complexity > CORE_COMPLEXITY:
                lines.append(f"- {entry.path} (Complexity: {entry.complexity})")

        chunks = self.chunks(result)
        lines += ["", "## Content Structure", "The code analysis is split into the following chunks:"]
        lines += [f"{c.sequence}. {c.filename} ({c.content_type})" for c in chunks]
        if not chunks:
            lines.append("(no text files)")
        return "\n".join(lines) + "\n"
