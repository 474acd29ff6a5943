"""Per-language accumulation."""

from __future__ import annotations

from types import MappingProxyType
from typing import Iterable, Mapping

from .models import FileEntry, LanguageStat


class StatsCollector:
    """Folds entries into one LanguageStat per language label.

    Not thread-safe: each worker owns a collector and the partial
    collectors are merged once at the end. ``merge`` is associative and
    commutative and leaves both operands untouched.
    """

    def __init__(self, stats: Iterable[LanguageStat] = ()):
        self._stats: dict[str, LanguageStat] = {}
        for stat in stats:
            self._add(stat)

    def _add(self, stat: LanguageStat) -> None:
        current = self._stats.get(stat.language)
        self._stats[stat.language] = stat if current is None else current + stat

    def fold(self, entry: FileEntry) -> None:
        self._add(LanguageStat.of(entry))

    def merge(self, other: StatsCollector) -> StatsCollector:
        merged = StatsCollector(self._stats.values())
        for stat in other._stats.values():
            merged._add(stat)
        return merged

    def snapshot(self) -> Mapping[str, LanguageStat]:
        """Read-only view ordered by language label."""
        return MappingProxyType({k: self._stats[k] for k in sorted(self._stats)})

    def __len__(self) -> int:
        return len(self._stats)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, StatsCollector):
            return NotImplemented
        return self._stats == other._stats
