"""Numeric statistics report."""

from typing import List

from ..core.result import AggregationResult, Distribution
from ..scanning.models import ReadOutcome
from .base import BaseFormatter, percent


def _heading(title: str) -> List[str]:
    return [title, "-" * len(title)]


def _distribution_lines(dist: Distribution) -> List[str]:
    return [
        f"  Files:     {dist.count:>10}",
        f"  Mean:      {dist.mean:>10.2f}",
        f"  Median:    {dist.median:>10.2f}",
        f"  P90:       {dist.p90:>10.2f}",
        f"  Min:       {dist.minimum:>10.0f}",
        f"  Max:       {dist.maximum:>10.0f}",
        f"  Std dev:   {dist.std:>10.2f}",
    ]


class StatsFormatter(BaseFormatter):
    """Totals, distributions and per-language table."""

    name = "stats"

    def format(self, result: AggregationResult) -> str:
        title = "Statistics Report"
        lines = [title, "=" * len(title), *self.generated_lines(), ""]

        binary = sum(1 for e in result.entries if e.binary)
        lossy = sum(1 for e in result.entries if e.outcome is ReadOutcome.LOSSY)
        lines += _heading("Totals")
        lines += [
            f"  Files:         {result.total_files:>10}",
            f"  Lines:         {result.total_lines:>10}",
            f"  Bytes:         {result.total_bytes:>10}",
            f"  Binary files:  {binary:>10}",
            f"  Lossy decodes: {lossy:>10}",
            f"  Skipped:       {len(result.skipped):>10}",
        ]
        for reason, count in result.skip_counts().items():
            lines.append(f"    {reason.value:<16}{count:>8}")
        lines.append("")

        lines += _heading("Lines per text file")
        lines += _distribution_lines(result.line_distribution())
        lines.append("")
        lines += _heading("Complexity per text file")
        lines += _distribution_lines(result.complexity_distribution())
        lines.append("")

        lines += _heading("Languages")
        header = f"  {'Language':<18}{'Files':>7}{'Lines':>9}{'Code':>9}{'Comment':>9}{'Blank':>8}{'Bytes':>11}{'Share':>8}"
        lines.append(header)
        for stat in result.languages_by_lines():
            share = percent(stat.total_lines, result.total_lines)
            lines.append(
                f"  {stat.language:<18}{stat.file_count:>7}{stat.total_lines:>9}{stat.code_lines:>9}"
                f"{stat.comment_lines:>9}{stat.blank_lines:>8}{stat.total_bytes:>11}{share:>7.1f}%"
            )
        lines.append("")

        lines += _heading("Extensions")
        for extension, count in result.extension_counts().items():
            lines.append(f"  {extension or '(none)':<18}{count:>7}")

        return "\n".join(lines) + "\n"
