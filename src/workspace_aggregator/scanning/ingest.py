"""Reading and measuring one admitted file."""

from __future__ import annotations

import os
import stat
from typing import Optional, Union

from ..config import IngestOptions
from ..logging_config import get_logger
from .languages import LanguageClassifier, extension_of
from .models import CandidatePath, FileEntry, ReadOutcome, SkippedFile, SkipReason

logger = get_logger(__name__)

COMMENT_PREFIXES = ("//", "#", "/*", "*", "'''", '"""', "--", ";")
BRANCH_TOKENS = ("if ", "else ", "elif ", "match ", "case ", "while ", "for ", "catch ", "&&", "||")

# Control bytes that legitimately appear in text files
_TEXT_CONTROL = frozenset(b"\t\n\r\f\b\x1b")


def is_binary(probe: bytes, ratio: float = 0.30) -> bool:
    """Heuristic binary check on the leading bytes of a file.

    A NUL byte, or a share of non-text control bytes above ``ratio``,
    marks the data as binary. Empty data is text.
    """
    if not probe:
        return False
    if b"\x00" in probe:
        return True
    control = sum(1 for b in probe if (b < 32 or b == 127) and b not in _TEXT_CONTROL)
    return control / len(probe) > ratio


def split_lines(content: str) -> list[str]:
    """Split on LF only, dropping one trailing CR per line.

    Form feeds and other Unicode line separators stay inside their line.
    A final newline does not start an extra empty line.
    """
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def measure_lines(lines: list[str]) -> tuple[int, int, int, int]:
    """Line-based heuristics: (blank, comment, code, complexity).

    Complexity is one plus the number of lines holding a branch token.
    """
    blank = comment = branches = 0
    for line in lines:
        stripped = line.strip()
        if not stripped:
            blank += 1
            continue
        if stripped.startswith(COMMENT_PREFIXES) or "*/" in stripped:
            comment += 1
        if any(token in stripped for token in BRANCH_TOKENS):
            branches += 1
    code = len(lines) - blank - comment
    return blank, comment, code, 1 + branches


class ContentIngestor:
    """Turns a CandidatePath into a FileEntry or a SkippedFile.

    Never raises for per-file problems: they become skip records.
    """

    def __init__(
        self,
        options: Optional[IngestOptions] = None,
        classifier: Optional[LanguageClassifier] = None,
    ):
        self.options = options or IngestOptions()
        self.classifier = classifier or LanguageClassifier()

    def ingest(self, candidate: CandidatePath) -> Union[FileEntry, SkippedFile]:
        rel = candidate.relative
        limit = self.options.max_file_size

        try:
            st = os.stat(candidate.absolute)
            if not stat.S_ISREG(st.st_mode):
                return SkippedFile(rel, SkipReason.UNREADABLE, "not a regular file")
            if st.st_size > limit:
                return SkippedFile(
                    rel, SkipReason.TOO_LARGE, f"{st.st_size} bytes exceeds limit of {limit}"
                )
            with open(candidate.absolute, "rb") as f:
                data = f.read(limit + 1)
        except OSError as e:
            logger.warning(f"Cannot read {rel}: {e.strerror or e}")
            return SkippedFile(rel, SkipReason.UNREADABLE, str(e.strerror or e))

        # File grew between stat and read
        if len(data) > limit:
            return SkippedFile(rel, SkipReason.TOO_LARGE, f"more than {limit} bytes")

        extension = extension_of(rel)
        language = self.classifier.classify_path(rel)

        if is_binary(data[: self.options.probe_size], self.options.binary_ratio):
            if self.options.exclude_binary:
                return SkippedFile(rel, SkipReason.BINARY_EXCLUDED, "binary content")
            return FileEntry(
                path=rel,
                extension=extension,
                language=language,
                size=len(data),
                line_count=0,
                binary=True,
                outcome=ReadOutcome.BINARY,
                content=None,
                complexity=0,
            )

        try:
            content = data.decode("utf-8")
            outcome = ReadOutcome.OK
        except UnicodeDecodeError:
            content = data.decode("utf-8", errors="replace")
            outcome = ReadOutcome.LOSSY
            logger.debug(f"Invalid UTF-8 replaced in {rel}")

        lines = split_lines(content)
        blank, comment, code, complexity = measure_lines(lines)
        return FileEntry(
            path=rel,
            extension=extension,
            language=language,
            size=len(data),
            line_count=len(lines),
            binary=False,
            outcome=outcome,
            content=content,
            blank_lines=blank,
            comment_lines=comment,
            code_lines=code,
            complexity=complexity,
        )
