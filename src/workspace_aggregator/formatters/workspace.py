"""Full-content aggregate: every ingested file with a metadata header."""

import re
from typing import List

from ..core.result import AggregationResult
from ..scanning.models import FileEntry, ReadOutcome
from .base import BaseFormatter, format_size

_BACKTICK_RUN = re.compile(r"`{3,}")


def _fence(content: str) -> str:
    """A code fence longer than any backtick run inside the content."""
    longest = max((len(m) for m in _BACKTICK_RUN.findall(content)), default=0)
    return "`" * max(3, longest + 1)


class WorkspaceFormatter(BaseFormatter):
    """Markdown export of the whole workspace.

    The text is built from sections: one header, one per file, one footer.
    ``format`` is their concatenation, and the chunker splits on the same
    boundaries.
    """

    name = "workspace"

    def header(self, result: AggregationResult) -> str:
        lines = ["# Project Analysis Export", *self.generated_lines()]
        lines += [
            "",
            "## Project Overview",
            f"- Base Directory: {result.root}",
            f"- Total Files: {result.total_files}",
            f"- Total Lines: {result.total_lines}",
            f"- Total Size: {format_size(result.total_bytes)}",
            "",
            "## Language Distribution",
        ]
        for language, stat in result.languages.items():
            lines += [
                "",
                f"### {language}:",
                f"- Files: {stat.file_count}",
                f"- Total Lines: {stat.total_lines}",
                f"- Code Lines: {stat.code_lines}",
                f"- Comment Lines: {stat.comment_lines}",
                f"- Blank Lines: {stat.blank_lines}",
            ]
        lines += [
            "",
            "## File Contents",
            "Each file is separated by clear markers and includes metadata.",
            "",
        ]
        return "\n".join(lines) + "\n"

    def file_section(self, entry: FileEntry) -> str:
        lines = [
            f"### File: {entry.path}",
            "#### Metadata",
            f"- Language: {entry.language}",
            f"- Size: {entry.size} bytes",
        ]
        if entry.binary:
            lines += ["", "#### Content", "(binary file, content omitted)", "", "---", ""]
            return "\n".join(lines) + "\n"

        lines += [
            f"- Lines: {entry.line_count}",
            f"- Lines of Code: {entry.code_lines}",
            f"- Comment Lines: {entry.comment_lines}",
            f"- Blank Lines: {entry.blank_lines}",
            f"- Cyclomatic Complexity: {entry.complexity}",
        ]
        if entry.outcome is ReadOutcome.LOSSY:
            lines.append("- Encoding: invalid UTF-8 replaced")

        content = entry.content or ""
        if content and not content.endswith("\n"):
            content += "\n"
        fence = _fence(content)
        lines += ["", "#### Content", f"{fence}{entry.extension}"]
        return "\n".join(lines) + "\n" + content + f"{fence}\n\n---\n\n"

    def footer(self, result: AggregationResult) -> str:
        lines = [
            "## Project Summary",
            "### Statistics",
            f"- Total Files Processed: {result.total_files}",
            f"- Total Size: {format_size(result.total_bytes)}",
            f"- Files Skipped: {len(result.skipped)}",
        ]
        complex_files = [e for e in result.most_complex_files(5) if e.complexity > 10]
        if complex_files:
            lines += ["", "### Most Complex Files"]
            lines += [f"- {e.path} (Complexity: {e.complexity})" for e in complex_files]
        if result.skipped:
            lines += ["", "### Skipped Files"]
            lines += [f"- {s.path} ({s.reason.value}: {s.detail})" for s in result.skipped]
        return "\n".join(lines) + "\n"

    def sections(self, result: AggregationResult) -> List[str]:
        return [
            self.header(result),
            *(self.file_section(e) for e in result.entries),
            self.footer(result),
        ]

    def format(self, result: AggregationResult) -> str:
        return "".join(self.sections(result))
