"""Base formatter interface for workspace-aggregator reports."""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional

from ..core.result import AggregationResult

TIMESTAMP_DISPLAY = "%Y-%m-%d %H:%M:%S"


def format_size(size: int) -> str:
    """Human-readable byte count."""
    kb = 1024
    mb = kb * 1024
    gb = mb * 1024
    if size >= gb:
        return f"{size / gb:.2f} GB"
    if size >= mb:
        return f"{size / mb:.2f} MB"
    if size >= kb:
        return f"{size / kb:.2f} KB"
    return f"{size} B"


def percent(part: float, whole: float) -> float:
    return part / whole * 100.0 if whole else 0.0


class BaseFormatter(ABC):
    """Abstract base class for report formatters.

    Args:
        generated_at: Timestamp written into the report header. When None
            the report carries no time at all, so two runs over an unchanged
            tree produce identical text.
    """

    name: str = ""

    def __init__(self, generated_at: Optional[datetime] = None):
        self.generated_at = generated_at

    def generated_lines(self, prefix: str = "Generated: ") -> List[str]:
        if self.generated_at is None:
            return []
        return [f"{prefix}{self.generated_at.strftime(TIMESTAMP_DISPLAY)}"]

    def render(self, result: AggregationResult) -> None:
        """Print the report to stdout."""
        print(self.format(result), end="")

    @abstractmethod
    def format(self, result: AggregationResult) -> str:
        """Return the report text."""
