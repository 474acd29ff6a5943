"""Configuration exceptions: paths, settings, filter patterns.

These are fatal. They are raised before any traversal begins.
"""

from pathlib import Path
from typing import Any

from .base import WorkspaceAggregatorError


class ConfigurationError(WorkspaceAggregatorError):
    """Base class for configuration-related errors."""

    pass


class InvalidPathError(ConfigurationError):
    """Raised when a provided path is invalid."""

    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid path: {path}", details={"path": str(path), "reason": reason})
        self.path = path
        self.reason = reason


class InvalidConfigError(ConfigurationError):
    """Raised when configuration values are invalid."""

    def __init__(self, key: str, value: Any, reason: str):
        super().__init__(
            f"Invalid configuration for {key}: {value}",
            details={"key": key, "value": str(value), "reason": reason},
        )
        self.key = key
        self.value = value
        self.reason = reason


class InvalidPatternError(ConfigurationError):
    """Raised when an exclude glob pattern cannot be compiled."""

    def __init__(self, pattern: str, reason: str):
        super().__init__(
            f"Invalid exclude pattern: {pattern!r}",
            details={"pattern": pattern, "reason": reason},
        )
        self.pattern = pattern
        self.reason = reason
