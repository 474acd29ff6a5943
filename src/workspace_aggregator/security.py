"""
Path validation for workspace-aggregator.

The scan root and the custom ignore file are validated once, before
traversal starts.
"""

import os
from pathlib import Path

from .exceptions import InvalidPathError

# System directories that should never be aggregated
SYSTEM_DIRECTORIES = {
    "/etc", "/sys", "/proc", "/dev", "/boot",
    "/bin", "/sbin", "/usr/bin", "/usr/sbin",
    "C:\\Windows", "C:\\Program Files", "C:\\Program Files (x86)",
}


def _is_under(path: Path, directory: str) -> bool:
    try:
        path.relative_to(directory)
        return True
    except ValueError:
        return False


def validate_root_directory(path: Path) -> Path:
    """
    Validate that a root directory is safe to aggregate.

    Args:
        path: Directory path to validate

    Returns:
        Resolved absolute path

    Raises:
        InvalidPathError: If path is missing, not a directory, unreadable
            or a system directory
    """
    # Resolve to absolute path
    try:
        resolved = Path(path).resolve()
    except (OSError, RuntimeError) as e:
        raise InvalidPathError(path, f"Cannot resolve path: {e}")

    # Check existence
    if not resolved.exists():
        raise InvalidPathError(resolved, "Directory does not exist")

    # Check it's a directory
    if not resolved.is_dir():
        raise InvalidPathError(resolved, "Path is not a directory")

    # Check readability
    if not os.access(resolved, os.R_OK | os.X_OK):
        raise InvalidPathError(resolved, "Directory is not readable")

    # Block system directories
    for sys_dir in SYSTEM_DIRECTORIES:
        if _is_under(resolved, sys_dir):
            raise InvalidPathError(resolved, f"Cannot aggregate system directory: {sys_dir}")

    return resolved


def validate_ignore_file(path: Path, root: Path) -> Path:
    """
    Validate a custom ignore file before the scan starts.

    Relative paths are resolved against the scan root first, then the
    current directory.

    Raises:
        InvalidPathError: If the file does not exist or cannot be read
    """
    path = Path(path)
    candidates = [path] if path.is_absolute() else [root / path, Path.cwd() / path]
    for candidate in candidates:
        if candidate.is_file():
            if not os.access(candidate, os.R_OK):
                raise InvalidPathError(candidate, "Ignore file is not readable")
            return candidate.resolve()
    raise InvalidPathError(path, "Ignore file does not exist")
