"""Data models for the scanning layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Optional


class ReadOutcome(str, Enum):
    """How a file's bytes became text."""

    OK = "ok"
    LOSSY = "lossy"  # invalid UTF-8 was replaced
    BINARY = "binary"


class SkipReason(str, Enum):
    """Why an admitted file is absent from the entries."""

    UNREADABLE = "unreadable"
    TOO_LARGE = "too_large"
    BINARY_EXCLUDED = "binary_excluded"


@dataclass(frozen=True)
class CandidatePath:
    """A path produced by the walker, before admission."""

    absolute: Path
    relative: str  # POSIX, relative to the scan root
    parent: Path

    @property
    def name(self) -> str:
        return self.absolute.name


@dataclass(frozen=True)
class FileEntry:
    """One ingested file."""

    path: str
    extension: str
    language: str
    size: int
    line_count: int
    binary: bool = False
    outcome: ReadOutcome = ReadOutcome.OK
    content: Optional[str] = None
    blank_lines: int = 0
    comment_lines: int = 0
    code_lines: int = 0
    complexity: int = 1

    def to_dict(self) -> dict:
        return {
            "path": self.path,
            "extension": self.extension,
            "language": self.language,
            "size": self.size,
            "lines": self.line_count,
            "binary": self.binary,
            "outcome": self.outcome.value,
            "blank_lines": self.blank_lines,
            "comment_lines": self.comment_lines,
            "code_lines": self.code_lines,
            "complexity": self.complexity,
        }


@dataclass(frozen=True)
class SkippedFile:
    """An admitted file that was not ingested, with the reason."""

    path: str
    reason: SkipReason
    detail: str = ""


@dataclass(frozen=True)
class LanguageStat:
    """Per-language totals."""

    language: str
    file_count: int = 0
    total_lines: int = 0
    total_bytes: int = 0
    code_lines: int = 0
    comment_lines: int = 0
    blank_lines: int = 0

    @classmethod
    def of(cls, entry: FileEntry) -> LanguageStat:
        return cls(
            language=entry.language,
            file_count=1,
            total_lines=entry.line_count,
            total_bytes=entry.size,
            code_lines=entry.code_lines,
            comment_lines=entry.comment_lines,
            blank_lines=entry.blank_lines,
        )

    def __add__(self, other: LanguageStat) -> LanguageStat:
        if not isinstance(other, LanguageStat):
            return NotImplemented
        if other.language != self.language:
            raise ValueError(f"cannot add {other.language} stats to {self.language} stats")
        return LanguageStat(
            language=self.language,
            file_count=self.file_count + other.file_count,
            total_lines=self.total_lines + other.total_lines,
            total_bytes=self.total_bytes + other.total_bytes,
            code_lines=self.code_lines + other.code_lines,
            comment_lines=self.comment_lines + other.comment_lines,
            blank_lines=self.blank_lines + other.blank_lines,
        )

    def to_dict(self) -> dict:
        return {
            "files": self.file_count,
            "lines": self.total_lines,
            "bytes": self.total_bytes,
            "code_lines": self.code_lines,
            "comment_lines": self.comment_lines,
            "blank_lines": self.blank_lines,
        }
