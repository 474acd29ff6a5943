"""End-to-end tests for scan()."""

import threading

import pytest

from workspace_aggregator import FilterConfiguration, IngestOptions, scan
from workspace_aggregator.exceptions import (
    InvalidPathError,
    InvalidPatternError,
    ScanCancelledError,
)
from workspace_aggregator.formatters import get_formatter
from workspace_aggregator.scanning.models import SkipReason


class TestScenarios:
    def test_min_pattern_leaves_only_rust(self, make_tree):
        root = make_tree({"a.rs": "let x = 1;\n" * 10, "b.min.js": "var a;\n" * 5})
        result = scan(root, FilterConfiguration(exclude_patterns=("*.min.*",)))
        assert [e.path for e in result.entries] == ["a.rs"]
        assert list(result.languages) == ["Rust"]
        rust = result.languages["Rust"]
        assert rust.file_count == 1
        assert rust.total_lines == 10

    def test_gitignore_negation(self, make_tree):
        root = make_tree(
            {
                ".gitignore": "*.log\n",
                "subdir/.gitignore": "!important.log\n",
                "subdir/important.log": "keep\n",
                "subdir/debug.log": "drop\n",
                "app.log": "drop\n",
                "main.py": "print(1)\n",
            }
        )
        result = scan(root, FilterConfiguration(respect_gitignore=True))
        paths = [e.path for e in result.entries]
        assert "subdir/important.log" in paths
        assert "subdir/debug.log" not in paths
        assert "app.log" not in paths
        assert "main.py" in paths

    def test_node_modules_excluded(self, sample_project):
        result = scan(sample_project, FilterConfiguration.with_defaults())
        assert not any("node_modules" in e.path for e in result.entries)

    def test_node_modules_excluded_even_when_extension_allowed(self, sample_project):
        config = FilterConfiguration(exclude_directories=("node_modules",))
        result = scan(sample_project, config)
        assert all(not e.path.startswith("node_modules/") for e in result.entries)
        assert "src/util/helpers.js" in [e.path for e in result.entries]

    def test_workspace_output_is_byte_identical(self, sample_project):
        first = get_formatter("workspace").format(scan(sample_project, workers=4))
        second = get_formatter("workspace").format(scan(sample_project, workers=1))
        assert first.encode("utf-8") == second.encode("utf-8")


class TestProperties:
    def test_entries_sorted_and_unique(self, make_tree):
        files = {f"d{i % 4}/f{i:02d}.txt": f"{i}\n" for i in range(30)}
        result = scan(make_tree(files), workers=4)
        paths = [e.path for e in result.entries]
        assert paths == sorted(set(paths))
        assert len(paths) == 30

    def test_stats_sum_to_entries(self, sample_project):
        result = scan(sample_project)
        stats = result.languages.values()
        assert sum(s.file_count for s in stats) == len(result.entries)
        assert sum(s.total_lines for s in stats) == sum(e.line_count for e in result.entries)
        assert sum(s.total_bytes for s in stats) == sum(e.size for e in result.entries)

    def test_binary_recorded(self, sample_project):
        result = scan(sample_project)
        logo = next(e for e in result.entries if e.path == "assets/logo.png")
        assert logo.binary is True
        assert logo.content is None

    def test_partial_failures_do_not_abort(self, sample_project):
        options = IngestOptions(max_file_size=20, exclude_binary=True)
        result = scan(sample_project, options=options)
        reasons = {s.path: s.reason for s in result.skipped}
        assert reasons["assets/logo.png"] is SkipReason.BINARY_EXCLUDED
        assert reasons["src/main.rs"] is SkipReason.TOO_LARGE
        assert "docs/guide.md" in [e.path for e in result.entries]

    def test_config_recorded_on_result(self, sample_project):
        config = FilterConfiguration(exclude_extensions=("md",))
        assert scan(sample_project, config).config is config


class TestProgressHooks:
    def test_on_start_then_progress(self, make_tree):
        root = make_tree({f"f{i}.txt": "x\n" for i in range(12)})
        events = []
        lock = threading.Lock()

        def on_file(path):
            with lock:
                events.append(("file", path))

        result = scan(root, on_start=lambda n: events.append(("start", n)), progress=on_file)
        assert events[0] == ("start", 12)
        assert sorted(p for kind, p in events[1:]) == [e.path for e in result.entries]


class TestFatalErrors:
    def test_missing_root(self, tmp_path):
        with pytest.raises(InvalidPathError):
            scan(tmp_path / "nope")

    def test_root_is_a_file(self, tmp_path):
        target = tmp_path / "file.txt"
        target.write_text("x")
        with pytest.raises(InvalidPathError):
            scan(target)

    def test_missing_ignore_file(self, make_tree):
        root = make_tree({"a.txt": ""})
        config = FilterConfiguration(respect_gitignore=True, ignore_file=root / "missing")
        with pytest.raises(InvalidPathError):
            scan(root, config)

    def test_invalid_pattern_before_traversal(self, make_tree):
        root = make_tree({"a.txt": ""})
        with pytest.raises(InvalidPatternError):
            scan(root, FilterConfiguration(exclude_patterns=("!",)))

    def test_cancelled(self, sample_project):
        event = threading.Event()
        event.set()
        with pytest.raises(ScanCancelledError):
            scan(sample_project, cancel_event=event)
