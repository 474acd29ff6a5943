"""Tests for ContentIngestor and its measurement helpers."""

import pytest

from workspace_aggregator.config import IngestOptions
from workspace_aggregator.scanning.ingest import (
    ContentIngestor,
    is_binary,
    measure_lines,
    split_lines,
)
from workspace_aggregator.scanning.models import (
    CandidatePath,
    FileEntry,
    ReadOutcome,
    SkippedFile,
    SkipReason,
)


def _candidate(root, rel):
    absolute = root / rel
    return CandidatePath(absolute=absolute, relative=rel, parent=absolute.parent)


def _ingest(root, rel, **options):
    return ContentIngestor(IngestOptions(**options)).ingest(_candidate(root, rel))


# ---------------------------------------------------------------------------
# Text files
# ---------------------------------------------------------------------------


class TestTextFiles:
    def test_reads_and_measures(self, make_tree):
        root = make_tree({"src/a.rs": "line\n" * 10})
        entry = _ingest(root, "src/a.rs")
        assert isinstance(entry, FileEntry)
        assert entry.path == "src/a.rs"
        assert entry.extension == "rs"
        assert entry.language == "Rust"
        assert entry.line_count == 10
        assert entry.size == 50
        assert entry.outcome is ReadOutcome.OK
        assert entry.binary is False
        assert entry.content == "line\n" * 10

    def test_empty_file(self, make_tree):
        root = make_tree({"empty.py": ""})
        entry = _ingest(root, "empty.py")
        assert entry.line_count == 0
        assert entry.content == ""
        assert entry.binary is False

    def test_last_line_without_newline_counts(self, make_tree):
        root = make_tree({"a.txt": "one\ntwo"})
        assert _ingest(root, "a.txt").line_count == 2

    def test_invalid_utf8_is_replaced(self, make_tree):
        root = make_tree({"latin.txt": b"caf\xe9\n"})
        entry = _ingest(root, "latin.txt")
        assert entry.outcome is ReadOutcome.LOSSY
        assert "�" in entry.content
        assert entry.line_count == 1

    def test_form_feed_and_separators_do_not_break_lines(self, make_tree):
        root = make_tree({"a.c": "int a;\n\f\nint b;\n", "b.py": "SEP = '\x1c'\nx = 1\n"})
        assert _ingest(root, "a.c").line_count == 3
        assert _ingest(root, "b.py").line_count == 2

    def test_crlf_line_endings(self, make_tree):
        root = make_tree({"win.txt": b"one\r\ntwo\r\n"})
        entry = _ingest(root, "win.txt")
        assert entry.line_count == 2
        assert entry.blank_lines == 0


class TestBinaryFiles:
    def test_recorded_without_content(self, make_tree):
        root = make_tree({"logo.png": b"\x89PNG\x00\x00\x01\x02"})
        entry = _ingest(root, "logo.png")
        assert isinstance(entry, FileEntry)
        assert entry.binary is True
        assert entry.content is None
        assert entry.line_count == 0
        assert entry.size == 8
        assert entry.outcome is ReadOutcome.BINARY

    def test_excluded_on_request(self, make_tree):
        root = make_tree({"logo.png": b"\x00\x01"})
        skipped = _ingest(root, "logo.png", exclude_binary=True)
        assert isinstance(skipped, SkippedFile)
        assert skipped.reason is SkipReason.BINARY_EXCLUDED


class TestSkips:
    def test_too_large_is_not_read(self, make_tree):
        root = make_tree({"big.txt": "x" * 11})
        skipped = _ingest(root, "big.txt", max_file_size=10)
        assert isinstance(skipped, SkippedFile)
        assert skipped.reason is SkipReason.TOO_LARGE

    def test_exactly_at_limit_is_read(self, make_tree):
        root = make_tree({"ok.txt": "x" * 10})
        assert isinstance(_ingest(root, "ok.txt", max_file_size=10), FileEntry)

    def test_missing_file_is_unreadable(self, tmp_path):
        skipped = _ingest(tmp_path, "gone.txt")
        assert isinstance(skipped, SkippedFile)
        assert skipped.reason is SkipReason.UNREADABLE
        assert skipped.path == "gone.txt"

    def test_directory_is_unreadable(self, make_tree):
        root = make_tree({"sub/a.txt": ""})
        skipped = _ingest(root, "sub")
        assert skipped.reason is SkipReason.UNREADABLE


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class TestIsBinary:
    def test_empty_is_text(self):
        assert is_binary(b"") is False

    def test_nul_byte(self):
        assert is_binary(b"abc\x00def") is True

    def test_text_with_whitespace_controls(self):
        assert is_binary(b"col1\tcol2\r\nline\f\n") is False

    def test_control_ratio(self):
        assert is_binary(bytes([1]) * 50 + b"a" * 50) is True
        assert is_binary(bytes([1]) * 10 + b"a" * 90) is False

    def test_utf8_text(self):
        assert is_binary("naïve café ✓".encode("utf-8")) is False


class TestMeasureLines:
    def test_counts(self):
        lines = [
            "fn main() {",
            "    // comment",
            "",
            "    if x && y {",
            "    }",
        ]
        blank, comment, code, complexity = measure_lines(lines)
        assert blank == 1
        assert comment == 1
        assert code == 3
        assert complexity == 2

    def test_empty(self):
        assert measure_lines([]) == (0, 0, 0, 1)

    @pytest.mark.parametrize("line", ["# note", "/* block", " * middle", "end */", '"""doc'])
    def test_comment_markers(self, line):
        assert measure_lines([line])[1] == 1


class TestSplitLines:
    @pytest.mark.parametrize(
        "content,expected",
        [
            ("", []),
            ("a", ["a"]),
            ("a\n", ["a"]),
            ("a\n\n", ["a", ""]),
            ("a\r\nb", ["a", "b"]),
            ("a\fb c\x85d\n", ["a\fb c\x85d"]),
        ],
    )
    def test_lf_only(self, content, expected):
        assert split_lines(content) == expected
