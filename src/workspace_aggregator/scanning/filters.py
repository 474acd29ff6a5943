"""Admission rules for candidate paths.

Four independent checks, all of which must pass:

    extension   the file's extension (simple or compound) is not excluded
    directory   no parent directory name is excluded
    pattern     no exclude glob matches the root-relative path
    gitignore   the ignore files in the tree do not ignore the path

A path rejected by a glob stays rejected even when a ``.gitignore``
negation would re-include it.
"""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Optional

from pathspec import PathSpec

from ..config import FilterConfiguration
from ..exceptions import InvalidPatternError
from ..logging_config import get_logger
from .gitignore import GitignoreResolver
from .models import CandidatePath

logger = get_logger(__name__)


def candidate_extensions(name: str) -> set[str]:
    """Every extension a file name can be matched on.

    ``bundle.min.js`` yields ``{"js", "min.js"}``; a leading dot does not
    start an extension, so ``.bashrc`` yields nothing.
    """
    suffixes = [s.lstrip(".").lower() for s in PurePosixPath(name.lstrip(".")).suffixes]
    return {".".join(suffixes[i:]) for i in range(len(suffixes))}


def compile_patterns(patterns: tuple[str, ...]) -> Optional[PathSpec]:
    """Compile exclude globs, failing fast on the first invalid one."""
    if not patterns:
        return None
    for pattern in patterns:
        try:
            PathSpec.from_lines("gitwildmatch", [pattern])
        except ValueError as e:
            raise InvalidPatternError(pattern, str(e))
    return PathSpec.from_lines("gitwildmatch", patterns)


class FilterChain:
    """Pure admission predicate built from a FilterConfiguration.

    Args:
        config: The filter rules.
        resolver: Ignore-file resolver; only consulted when
            ``config.respect_gitignore`` is set.

    Raises:
        InvalidPatternError: If an exclude glob cannot be compiled.
    """

    def __init__(self, config: FilterConfiguration, resolver: Optional[GitignoreResolver] = None):
        self.config = config
        self._extensions = frozenset(config.exclude_extensions)
        self._directories = frozenset(config.exclude_directories)
        self._patterns = compile_patterns(config.exclude_patterns)
        self._resolver = resolver if config.respect_gitignore else None

    def rejection_reason(self, relative: str, is_dir: bool = False) -> Optional[str]:
        """Name of the first check that rejects the path, or None if admitted."""
        path = PurePosixPath(relative)
        if not is_dir and self._extensions and candidate_extensions(path.name) & self._extensions:
            return "extension"
        names = path.parts if is_dir else path.parts[:-1]
        if self._directories and any(part in self._directories for part in names):
            return "directory"
        if self._patterns is not None:
            target = relative + "/" if is_dir else relative
            if self._patterns.match_file(target):
                return "pattern"
        if self._resolver is not None and self._resolver.is_ignored(relative, is_dir=is_dir):
            return "gitignore"
        return None

    def admit(self, candidate: CandidatePath) -> bool:
        reason = self.rejection_reason(candidate.relative)
        if reason is not None:
            logger.debug(f"Skipping {candidate.relative} ({reason})")
            return False
        return True

    def admit_directory(self, relative: str) -> bool:
        """Whether the walker should descend into a directory."""
        reason = self.rejection_reason(relative, is_dir=True)
        if reason is not None:
            logger.debug(f"Pruning {relative}/ ({reason})")
            return False
        return True
