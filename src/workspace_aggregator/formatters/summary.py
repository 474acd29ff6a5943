"""Condensed summary with a language chart and recommendations."""

from collections import Counter
from typing import List, Sequence, Tuple

from ..core.result import AggregationResult
from .base import BaseFormatter, format_size, percent

BAR_WIDTH = 40
RULE = "-" * 40

# Recommendation thresholds
HIGH_COMPLEXITY = 20
COMPLEX_FILE = 10
LOW_COMMENT_RATIO = 0.1
LARGE_FILE_BYTES = 100 * 1024


def bar_chart(title: str, data: Sequence[Tuple[str, float]], width: int = BAR_WIDTH) -> List[str]:
    """Horizontal bar chart scaled to the largest value."""
    lines = [title, "=" * len(title)]
    if not data:
        return lines + ["(no data)"]
    peak = max(value for _, value in data) or 1.0
    label_width = max(len(label) for label, _ in data)
    for label, value in data:
        bar = "█" * int(value / peak * width)
        lines.append(f"{label:<{label_width}} │ {value:>6.1f}% {bar}")
    return lines


class SummaryFormatter(BaseFormatter):
    name = "summary"

    def recommendations(self, result: AggregationResult) -> List[str]:
        text = result.text_entries
        complex_count = sum(1 for e in text if e.complexity > HIGH_COMPLEXITY)
        undocumented = sum(
            1 for e in text if e.line_count and e.comment_lines / e.line_count < LOW_COMMENT_RATIO
        )
        large = sum(1 for e in result.entries if e.size > LARGE_FILE_BYTES)

        recs = []
        if complex_count:
            recs.append(f"- Consider refactoring {complex_count} files with high complexity")
        if undocumented:
            recs.append(f"- Add documentation to {undocumented} files with low comment coverage")
        if large:
            recs.append(f"- Consider splitting {large} large files (>100KB)")
        return recs or ["No immediate improvements needed"]

    def format(self, result: AggregationResult) -> str:
        lines = ["Project Summary", "=" * 15, *self.generated_lines(), ""]
        lines += ["Project Location", RULE, f"Base Path: {result.root}", ""]

        lines += ["Key Metrics", RULE]
        lines += [
            f"  Total Files:        {result.total_files:>8}",
            f"  Total Size:         {format_size(result.total_bytes):>8}",
            f"  Total Lines:        {result.total_lines:>8}",
        ]
        code = sum(s.code_lines for s in result.languages.values())
        comments = sum(s.comment_lines for s in result.languages.values())
        lines += [
            f"  Code Lines:         {code:>8}",
            f"  Comment Lines:      {comments:>8}",
            f"  Comment Ratio:      {percent(comments, result.total_lines):>7.1f}%",
            f"  Skipped Files:      {len(result.skipped):>8}",
            "",
        ]

        chart = [
            (s.language, percent(s.total_lines, result.total_lines))
            for s in result.languages_by_lines()
        ]
        lines += bar_chart("Language Distribution", chart)
        lines.append("")

        lines += ["Complexity Analysis", RULE]
        dist = result.complexity_distribution()
        lines.append(f"  Average: {dist.mean:.2f}  Median: {dist.median:.2f}  Max: {dist.maximum:.0f}")
        complex_files = [e for e in result.most_complex_files(5) if e.complexity > COMPLEX_FILE]
        if complex_files:
            lines.append("  Most Complex Files:")
            lines += [f"    {e.path} ({e.complexity})" for e in complex_files]
        lines.append("")

        lines += ["File Insights", RULE, "  Largest Files:"]
        lines += [f"    {e.path} ({format_size(e.size)})" for e in result.largest_files(5)]
        directories = Counter(e.path.split("/", 1)[0] if "/" in e.path else "." for e in result.entries)
        if directories:
            lines.append("  Directory Distribution:")
            for name, count in sorted(directories.items(), key=lambda kv: (-kv[1], kv[0]))[:10]:
                lines.append(f"    {name:<30}{count:>6} files")
        lines.append("")

        lines += ["Recommendations", RULE, *self.recommendations(result)]
        return "\n".join(lines) + "\n"
