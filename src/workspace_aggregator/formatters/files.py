"""File listing grouped by extension."""

from collections import defaultdict

from ..core.result import AggregationResult
from .base import BaseFormatter


class FilesFormatter(BaseFormatter):
    """Plain list of processed files, one group per extension."""

    name = "files"

    def format(self, result: AggregationResult) -> str:
        lines = ["# Processed Files List", *self.generated_lines("# Generated: ")]
        lines += [
            f"# Base Path: {result.root}",
            f"# Total Files: {result.total_files}",
        ]

        by_extension = defaultdict(list)
        for entry in result.entries:
            by_extension[entry.extension or "unknown"].append(entry.path)

        for extension in sorted(by_extension):
            lines += ["", f"## {extension.upper()} files"]
            lines += by_extension[extension]

        if by_extension:
            lines += ["", "## Summary"]
            lines += [f"{ext}: {len(paths)} files" for ext, paths in sorted(by_extension.items())]

        if result.skipped:
            lines += ["", "## Skipped files"]
            lines += [f"{s.path} ({s.reason.value})" for s in result.skipped]

        return "\n".join(lines) + "\n"
