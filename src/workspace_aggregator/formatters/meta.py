"""JSON metadata document."""

import json
from typing import Any, Dict

from ..core.result import AggregationResult, Distribution
from .base import BaseFormatter


class MetaFormatter(BaseFormatter):
    """Machine-readable project metadata."""

    name = "meta"

    def build(self, result: AggregationResult) -> Dict[str, Any]:
        from .. import __version__

        by_language: Dict[str, list] = {}
        for entry in result.text_entries:
            by_language.setdefault(entry.language, []).append(entry.complexity)

        languages = {}
        for name, stat in result.languages.items():
            data = stat.to_dict()
            data["complexity"] = {
                "average": round(Distribution.of(by_language.get(name, [])).mean, 2),
                "comment_ratio": round(stat.comment_lines / stat.total_lines, 4) if stat.total_lines else 0.0,
            }
            languages[name] = data

        document: Dict[str, Any] = {"version": __version__}
        if self.generated_at is not None:
            document["timestamp"] = self.generated_at.isoformat()
        document.update(
            {
                "project": {
                    "path": str(result.root),
                    "files": {
                        "total": result.total_files,
                        "size_bytes": result.total_bytes,
                        "lines": result.total_lines,
                    },
                },
                "languages": languages,
                "complexity_metrics": result.complexity_distribution().to_dict(),
                "line_metrics": result.line_distribution().to_dict(),
                "file_sizes": {
                    "largest": [
                        {"path": e.path, "size_bytes": e.size} for e in result.largest_files(10)
                    ],
                    "distribution": result.size_distribution().to_dict(),
                },
                "extensions": result.extension_counts(),
                "skipped": {
                    "counts": {r.value: n for r, n in result.skip_counts().items()},
                    "files": [
                        {"path": s.path, "reason": s.reason.value, "detail": s.detail}
                        for s in result.skipped
                    ],
                },
                "configuration": result.config.to_dict(),
            }
        )
        return document

    def format(self, result: AggregationResult) -> str:
        return json.dumps(self.build(result), indent=2, ensure_ascii=False) + "\n"
