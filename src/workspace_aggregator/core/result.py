"""The finished, read-only outcome of a scan."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterable, Mapping

import numpy as np

from ..config import FilterConfiguration
from ..exceptions import AggregationInvariantError
from ..scanning.models import FileEntry, LanguageStat, SkippedFile, SkipReason


@dataclass(frozen=True)
class Distribution:
    """Summary statistics of a numeric sample."""

    count: int = 0
    mean: float = 0.0
    median: float = 0.0
    p90: float = 0.0
    minimum: float = 0.0
    maximum: float = 0.0
    std: float = 0.0

    @classmethod
    def of(cls, values: Iterable[float]) -> Distribution:
        data = np.asarray(list(values), dtype=float)
        if data.size == 0:
            return cls()
        return cls(
            count=int(data.size),
            mean=float(np.mean(data)),
            median=float(np.median(data)),
            p90=float(np.percentile(data, 90)),
            minimum=float(np.min(data)),
            maximum=float(np.max(data)),
            std=float(np.std(data)),
        )

    def to_dict(self) -> dict[str, float]:
        return {
            "count": self.count,
            "average": round(self.mean, 2),
            "median": round(self.median, 2),
            "p90": round(self.p90, 2),
            "minimum": round(self.minimum, 2),
            "maximum": round(self.maximum, 2),
            "standard_deviation": round(self.std, 2),
        }


@dataclass(frozen=True)
class AggregationResult:
    """Entries, per-language stats and skip records of one scan.

    Built once and never mutated. Construction checks that entries are
    unique and sorted by path, that the language totals add up to the
    entries, and that no skipped path is also an entry.

    Raises:
        AggregationInvariantError: If any of those checks fails.
    """

    root: Path
    entries: tuple[FileEntry, ...] = ()
    languages: Mapping[str, LanguageStat] = field(default_factory=dict)
    skipped: tuple[SkippedFile, ...] = ()
    config: FilterConfiguration = field(default_factory=FilterConfiguration)

    def __post_init__(self) -> None:
        object.__setattr__(self, "entries", tuple(self.entries))
        object.__setattr__(self, "skipped", tuple(sorted(self.skipped, key=lambda s: s.path)))
        object.__setattr__(
            self,
            "languages",
            MappingProxyType({k: self.languages[k] for k in sorted(self.languages)}),
        )
        self._validate()

    def _validate(self) -> None:
        paths = [e.path for e in self.entries]
        for previous, current in zip(paths, paths[1:]):
            if previous >= current:
                raise AggregationInvariantError(
                    "sorted_unique_paths", f"{previous!r} is not before {current!r}"
                )

        stats = self.languages.values()
        checks = (
            ("file_count", sum(s.file_count for s in stats), len(self.entries)),
            ("total_lines", sum(s.total_lines for s in stats), sum(e.line_count for e in self.entries)),
            ("total_bytes", sum(s.total_bytes for s in stats), sum(e.size for e in self.entries)),
        )
        for name, from_stats, from_entries in checks:
            if from_stats != from_entries:
                raise AggregationInvariantError(
                    name, f"language totals give {from_stats}, entries give {from_entries}"
                )

        overlap = set(paths) & {s.path for s in self.skipped}
        if overlap:
            raise AggregationInvariantError(
                "skipped_disjoint", f"skipped paths also ingested: {sorted(overlap)[:5]}"
            )

    # ── Totals ─────────────────────────────────────────────────────

    @property
    def total_files(self) -> int:
        return len(self.entries)

    @property
    def total_lines(self) -> int:
        return sum(e.line_count for e in self.entries)

    @property
    def total_bytes(self) -> int:
        return sum(e.size for e in self.entries)

    @property
    def text_entries(self) -> tuple[FileEntry, ...]:
        return tuple(e for e in self.entries if not e.binary)

    # ── Derived views ──────────────────────────────────────────────

    def skip_counts(self) -> dict[SkipReason, int]:
        """Count per skip reason, every reason present."""
        counts = Counter(s.reason for s in self.skipped)
        return {reason: counts.get(reason, 0) for reason in SkipReason}

    def extension_counts(self) -> dict[str, int]:
        """File count per extension ("" for none), ordered by extension."""
        counts = Counter(e.extension for e in self.entries)
        return dict(sorted(counts.items()))

    def languages_by_lines(self) -> list[LanguageStat]:
        return sorted(self.languages.values(), key=lambda s: (-s.total_lines, s.language))

    def largest_files(self, limit: int = 10) -> list[FileEntry]:
        return sorted(self.entries, key=lambda e: (-e.size, e.path))[:limit]

    def most_complex_files(self, limit: int = 10) -> list[FileEntry]:
        return sorted(self.text_entries, key=lambda e: (-e.complexity, e.path))[:limit]

    def line_distribution(self) -> Distribution:
        return Distribution.of(e.line_count for e in self.text_entries)

    def complexity_distribution(self) -> Distribution:
        return Distribution.of(e.complexity for e in self.text_entries)

    def size_distribution(self) -> Distribution:
        return Distribution.of(e.size for e in self.entries)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable view."""
        return {
            "root": str(self.root),
            "totals": {
                "files": self.total_files,
                "lines": self.total_lines,
                "bytes": self.total_bytes,
            },
            "languages": {name: stat.to_dict() for name, stat in self.languages.items()},
            "files": [e.to_dict() for e in self.entries],
            "skipped": [
                {"path": s.path, "reason": s.reason.value, "detail": s.detail} for s in self.skipped
            ],
            "skip_counts": {r.value: n for r, n in self.skip_counts().items()},
            "configuration": self.config.to_dict(),
        }
