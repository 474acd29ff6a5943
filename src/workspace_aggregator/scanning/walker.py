"""Lazy directory traversal with pruning."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Iterator

from ..logging_config import get_logger
from .filters import FilterChain
from .models import CandidatePath

logger = get_logger(__name__)


class PathWalker:
    """Depth-first enumeration of the admitted regular files below a root.

    Rejected directories are pruned before descending. Symbolic links to
    directories are never followed; links to regular files are yielded.
    Unreadable directories are logged and skipped.
    """

    def __init__(self, root: Path, chain: FilterChain):
        self.root = Path(root)
        self.chain = chain
        self.rejected = 0

    def _on_error(self, error: OSError) -> None:
        logger.warning(f"Cannot read directory {error.filename}: {error.strerror}")

    def walk(self) -> Iterator[CandidatePath]:
        self.rejected = 0
        for dirpath, dirnames, filenames in os.walk(
            self.root, topdown=True, onerror=self._on_error, followlinks=False
        ):
            current = Path(dirpath)
            rel_dir = current.relative_to(self.root).as_posix()
            prefix = "" if rel_dir == "." else f"{rel_dir}/"

            # Prune in place so os.walk never descends into rejected directories
            kept = []
            for name in dirnames:
                if self.chain.admit_directory(prefix + name):
                    kept.append(name)
                else:
                    self.rejected += 1
            dirnames[:] = sorted(kept)

            for name in sorted(filenames):
                absolute = current / name
                if not os.path.isfile(absolute):
                    logger.debug(f"Skipping {prefix}{name} (not a regular file)")
                    continue
                candidate = CandidatePath(absolute=absolute, relative=prefix + name, parent=current)
                if self.chain.admit(candidate):
                    yield candidate
                else:
                    self.rejected += 1
