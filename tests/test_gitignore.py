"""Tests for hierarchical .gitignore resolution."""

import pytest

from workspace_aggregator.exceptions import InvalidPathError
from workspace_aggregator.scanning.gitignore import GitignoreResolver, compile_ignore_lines


class TestNearestFilePrecedence:
    def test_subdirectory_negation_reincludes(self, make_tree):
        root = make_tree(
            {
                ".gitignore": "*.log\n",
                "subdir/.gitignore": "!important.log\n",
                "subdir/important.log": "keep\n",
                "subdir/other.log": "drop\n",
                "top.log": "drop\n",
            }
        )
        resolver = GitignoreResolver(root)
        assert resolver.is_ignored("subdir/important.log") is False
        assert resolver.is_ignored("subdir/other.log") is True
        assert resolver.is_ignored("top.log") is True

    def test_unmatched_path_not_ignored(self, make_tree):
        root = make_tree({".gitignore": "*.log\n", "main.rs": ""})
        assert GitignoreResolver(root).is_ignored("main.rs") is False

    def test_deeper_file_can_ignore_what_root_allows(self, make_tree):
        root = make_tree({".gitignore": "!*.txt\n", "a/.gitignore": "*.txt\n"})
        resolver = GitignoreResolver(root)
        assert resolver.is_ignored("a/notes.txt") is True
        assert resolver.is_ignored("notes.txt") is False

    def test_anchored_pattern_is_relative_to_its_file(self, make_tree):
        root = make_tree({"sub/.gitignore": "/only.txt\n"})
        resolver = GitignoreResolver(root)
        assert resolver.is_ignored("sub/only.txt") is True
        assert resolver.is_ignored("sub/deeper/only.txt") is False
        assert resolver.is_ignored("only.txt") is False


class TestWithinOneFile:
    def test_last_matching_line_wins(self, make_tree):
        root = make_tree({".gitignore": "*.txt\n!a.txt\n"})
        resolver = GitignoreResolver(root)
        assert resolver.is_ignored("a.txt") is False
        assert resolver.is_ignored("b.txt") is True

    def test_order_matters(self, make_tree):
        root = make_tree({".gitignore": "!a.txt\n*.txt\n"})
        assert GitignoreResolver(root).is_ignored("a.txt") is True

    def test_comments_and_blank_lines(self, make_tree):
        root = make_tree({".gitignore": "# build output\n\nout/\n"})
        resolver = GitignoreResolver(root)
        assert resolver.is_ignored("out", is_dir=True) is True
        assert resolver.is_ignored("# build output") is False


class TestDirectories:
    def test_directory_pattern_only_matches_directories(self, make_tree):
        root = make_tree({".gitignore": "build/\n"})
        resolver = GitignoreResolver(root)
        assert resolver.is_ignored("build", is_dir=True) is True
        assert resolver.is_ignored("build") is False

    def test_ignored_ancestor_hides_descendants(self, make_tree):
        root = make_tree({".gitignore": "build/\n"})
        assert GitignoreResolver(root).is_ignored("build/out/app.bin") is True

    def test_negation_cannot_reinclude_below_ignored_directory(self, make_tree):
        root = make_tree({".gitignore": "build/\n!build/keep.txt\n"})
        assert GitignoreResolver(root).is_ignored("build/keep.txt") is True


class TestRobustness:
    def test_undecodable_bytes_are_tolerated(self, make_tree):
        root = make_tree({".gitignore": b"*.log\n\xff\xfe\n"})
        assert GitignoreResolver(root).is_ignored("x.log") is True

    def test_no_gitignore_anywhere(self, make_tree):
        root = make_tree({"a/b/c.txt": ""})
        assert GitignoreResolver(root).is_ignored("a/b/c.txt") is False

    def test_compile_of_only_comments_is_none(self):
        assert compile_ignore_lines(["# nothing", ""]) is None


class TestCustomIgnoreFile:
    def test_custom_file_applies(self, make_tree, tmp_path):
        root = make_tree({"a.tmp": ""})
        extra = tmp_path / "extra-ignore"
        extra.write_text("*.tmp\n")
        assert GitignoreResolver(root, ignore_file=extra).is_ignored("a.tmp") is True

    def test_custom_file_has_lowest_precedence(self, make_tree, tmp_path):
        root = make_tree({".gitignore": "!a.tmp\n"})
        extra = tmp_path / "extra-ignore"
        extra.write_text("*.tmp\n")
        resolver = GitignoreResolver(root, ignore_file=extra)
        assert resolver.is_ignored("a.tmp") is False
        assert resolver.is_ignored("b.tmp") is True

    def test_missing_custom_file_is_fatal(self, tmp_path):
        with pytest.raises(InvalidPathError):
            GitignoreResolver(tmp_path, ignore_file=tmp_path / "missing")
