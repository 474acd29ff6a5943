"""Tests for PathWalker traversal and pruning."""

import os

import pytest

from workspace_aggregator.config import FilterConfiguration
from workspace_aggregator.scanning.filters import FilterChain
from workspace_aggregator.scanning.gitignore import GitignoreResolver
from workspace_aggregator.scanning.walker import PathWalker


def _walk(root, config=None, resolver=None):
    chain = FilterChain(config or FilterConfiguration(), resolver)
    return [c.relative for c in PathWalker(root, chain).walk()]


class TestEnumeration:
    def test_yields_posix_relative_paths(self, make_tree):
        root = make_tree({"a.txt": "", "src/b.py": "", "src/deep/c.rs": ""})
        assert sorted(_walk(root)) == ["a.txt", "src/b.py", "src/deep/c.rs"]

    def test_candidate_fields(self, make_tree):
        root = make_tree({"src/b.py": ""})
        (found,) = PathWalker(root, FilterChain(FilterConfiguration())).walk()
        assert found.absolute == root / "src" / "b.py"
        assert found.parent == root / "src"
        assert found.name == "b.py"

    def test_is_lazy(self, make_tree):
        root = make_tree({"a.txt": ""})
        walker = PathWalker(root, FilterChain(FilterConfiguration()))
        iterator = walker.walk()
        assert next(iterator).relative == "a.txt"

    def test_empty_directory(self, tmp_path):
        assert _walk(tmp_path) == []


class TestPruning:
    def test_node_modules_removed_entirely(self, make_tree):
        root = make_tree(
            {
                "index.js": "",
                "node_modules/pkg/index.js": "",
                "web/node_modules/other/lib.js": "",
            }
        )
        assert _walk(root, FilterConfiguration.with_defaults()) == ["index.js"]

    def test_rejected_count(self, make_tree):
        root = make_tree({"keep.rs": "", "drop.lock": "", "vendor/x.go": ""})
        chain = FilterChain(
            FilterConfiguration(exclude_extensions=("lock",), exclude_directories=("vendor",))
        )
        walker = PathWalker(root, chain)
        assert [c.relative for c in walker.walk()] == ["keep.rs"]
        assert walker.rejected == 2

    def test_gitignored_directory_not_descended(self, make_tree):
        root = make_tree({".gitignore": "build/\n", "build/out.bin": "", "src/a.rs": ""})
        found = _walk(root, FilterConfiguration(respect_gitignore=True), GitignoreResolver(root))
        assert sorted(found) == [".gitignore", "src/a.rs"]


class TestSpecialFiles:
    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_directory_symlink_not_followed(self, make_tree, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("x")
        root = make_tree({"a.txt": ""})
        os.symlink(outside, root / "linked", target_is_directory=True)
        assert _walk(root) == ["a.txt"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_file_symlink_is_yielded(self, make_tree):
        root = make_tree({"a.txt": "hello"})
        os.symlink(root / "a.txt", root / "b.txt")
        assert sorted(_walk(root)) == ["a.txt", "b.txt"]

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
    def test_broken_symlink_skipped(self, make_tree):
        root = make_tree({"a.txt": ""})
        os.symlink(root / "missing.txt", root / "dangling.txt")
        assert _walk(root) == ["a.txt"]

    @pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="FIFOs unavailable")
    def test_fifo_skipped(self, make_tree):
        root = make_tree({"a.txt": ""})
        os.mkfifo(root / "pipe")
        assert _walk(root) == ["a.txt"]
