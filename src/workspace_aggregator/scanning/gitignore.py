"""Hierarchical .gitignore resolution backed by pathspec.

Each directory may hold a ``.gitignore``. A query walks from the path's
parent up to the scan root and the first file with an opinion decides;
inside one file pathspec applies git's last-match-wins rule, so ``!pattern``
lines re-include. A directory that is itself ignored hides everything below
it, whatever deeper files say.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath
from typing import Iterable, Optional

from pathspec import GitIgnoreSpec

from ..exceptions import InvalidPathError
from ..logging_config import get_logger

logger = get_logger(__name__)

GITIGNORE_FILENAME = ".gitignore"


def compile_ignore_lines(lines: Iterable[str], source: str = "<lines>") -> Optional[GitIgnoreSpec]:
    """Compile ignore lines one at a time, dropping the ones pathspec rejects.

    Returns None when no usable pattern remains.
    """
    valid: list[str] = []
    for lineno, line in enumerate(lines, start=1):
        try:
            GitIgnoreSpec.from_lines([line])
        except ValueError as e:
            logger.debug(f"Skipping invalid ignore pattern {source}:{lineno} {line!r}: {e}")
            continue
        valid.append(line)
    spec = GitIgnoreSpec.from_lines(valid)
    if not any(p.include is not None for p in spec.patterns):
        return None
    return spec


def _read_ignore_lines(path: Path) -> list[str]:
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read().splitlines()


def _parent_dirs(rel_path: str) -> list[str]:
    """Ancestor directories of a relative path, nearest first, ending with the root ("")."""
    parents = [p.as_posix() for p in PurePosixPath(rel_path).parents]
    return ["" if p == "." else p for p in parents]


class GitignoreResolver:
    """Answers whether a root-relative path is ignored by the tree's ignore files.

    Ignore files are loaded lazily, once per directory, on the first query
    that reaches that directory.

    Args:
        root: Scan root; every queried path is relative to it.
        ignore_file: Optional extra ignore file anchored at the root. It is
            consulted after every ``.gitignore`` and so has the lowest
            precedence.

    Raises:
        InvalidPathError: If ``ignore_file`` is given but cannot be read.
    """

    def __init__(self, root: Path, ignore_file: Optional[Path] = None) -> None:
        self.root = Path(root)
        self._specs: dict[str, Optional[GitIgnoreSpec]] = {}
        self._dir_ignored: dict[str, bool] = {}
        self._custom: Optional[GitIgnoreSpec] = None
        if ignore_file is not None:
            try:
                lines = _read_ignore_lines(Path(ignore_file))
            except OSError as e:
                raise InvalidPathError(Path(ignore_file), f"Cannot read ignore file: {e}")
            self._custom = compile_ignore_lines(lines, source=str(ignore_file))

    def _spec_for(self, rel_dir: str) -> Optional[GitIgnoreSpec]:
        if rel_dir in self._specs:
            return self._specs[rel_dir]
        path = self.root / rel_dir / GITIGNORE_FILENAME
        spec = None
        if path.is_file():
            try:
                spec = compile_ignore_lines(_read_ignore_lines(path), source=str(path))
            except OSError as e:
                logger.warning(f"Cannot read {path}: {e}")
            else:
                logger.debug(f"Loaded {path}")
        self._specs[rel_dir] = spec
        return spec

    def _decide(self, rel_path: str, is_dir: bool) -> Optional[bool]:
        """Verdict of the nearest ignore file with an opinion, or None."""
        for base in _parent_dirs(rel_path):
            spec = self._spec_for(base)
            if spec is None:
                continue
            local = rel_path[len(base) + 1:] if base else rel_path
            if is_dir:
                local += "/"
            result = spec.check_file(local)
            if result.include is not None:
                return result.include
        if self._custom is not None:
            result = self._custom.check_file(rel_path + "/" if is_dir else rel_path)
            if result.include is not None:
                return result.include
        return None

    def _is_dir_ignored(self, rel_dir: str) -> bool:
        if rel_dir not in self._dir_ignored:
            self._dir_ignored[rel_dir] = self.is_ignored(rel_dir, is_dir=True)
        return self._dir_ignored[rel_dir]

    def is_ignored(self, rel_path: str, is_dir: bool = False) -> bool:
        """Whether ``rel_path`` (POSIX, relative to the root) is ignored."""
        rel_path = rel_path.strip("/")
        if not rel_path:
            return False
        for ancestor in reversed(_parent_dirs(rel_path)[:-1]):
            if self._is_dir_ignored(ancestor):
                return True
        return bool(self._decide(rel_path, is_dir))
