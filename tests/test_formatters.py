"""Tests for the report formatters."""

import json
from datetime import datetime

import pytest

from workspace_aggregator import FilterConfiguration, __version__, scan
from workspace_aggregator.formatters import (
    FORMATTERS,
    FilesFormatter,
    LlmFormatter,
    MetaFormatter,
    StatsFormatter,
    SummaryFormatter,
    TreeFormatter,
    WorkspaceFormatter,
    get_formatter,
)
from workspace_aggregator.formatters.summary import bar_chart
from workspace_aggregator.formatters.workspace import _fence

STAMP = datetime(2024, 5, 17, 9, 30, 0)


@pytest.fixture
def result(sample_project):
    return scan(sample_project, FilterConfiguration.with_defaults())


class TestRegistry:
    def test_every_output_type(self):
        for name, cls in FORMATTERS.items():
            assert isinstance(get_formatter(name), cls)
            assert cls.name == name

    def test_unknown(self):
        with pytest.raises(ValueError):
            get_formatter("html")

    def test_llm_accepts_chunk_size(self):
        assert get_formatter("llm", chunk_size=123).chunk_size == 123


class TestTimestamps:
    @pytest.mark.parametrize("name", sorted(FORMATTERS))
    def test_absent_without_generated_at(self, result, name):
        text = get_formatter(name).format(result)
        assert "2024-05-17" not in text
        assert get_formatter(name).format(result) == text

    @pytest.mark.parametrize("name", ["workspace", "files", "stats", "summary", "llm", "meta"])
    def test_present_with_generated_at(self, result, name):
        assert "2024-05-17" in get_formatter(name, STAMP).format(result)


class TestWorkspace:
    def test_structure(self, result):
        text = WorkspaceFormatter().format(result)
        assert text.startswith("# Project Analysis Export\n")
        assert "## Project Overview" in text
        assert f"- Base Directory: {result.root}" in text
        assert "### File: src/main.rs" in text
        assert "```rs\nfn main() {" in text

    def test_files_in_path_order(self, result):
        text = WorkspaceFormatter().format(result)
        positions = [text.index(f"### File: {e.path}\n") for e in result.entries]
        assert positions == sorted(positions)

    def test_binary_content_omitted(self, result):
        text = WorkspaceFormatter().format(result)
        assert "### File: assets/logo.png" in text
        assert "(binary file, content omitted)" in text
        assert "PNG" not in text.split("### File: assets/logo.png", 1)[1].split("---", 1)[0]

    def test_sections_concatenate_to_format(self, result):
        formatter = WorkspaceFormatter()
        sections = formatter.sections(result)
        assert len(sections) == len(result.entries) + 2
        assert "".join(sections) == formatter.format(result)

    def test_fence_outgrows_backticks(self):
        assert _fence("plain") == "```"
        assert _fence("```python\n```") == "````"


class TestFiles:
    def test_grouped_by_extension(self, result):
        text = FilesFormatter().format(result)
        assert "# Processed Files List" in text
        assert "## MD files\nREADME.md\ndocs/guide.md" in text
        assert "## RS files\nsrc/main.rs" in text
        assert "md: 2 files" in text


class TestTree:
    def test_ascii_tree(self, make_tree):
        root = make_tree({"b.txt": "", "a/x.py": "", "a/sub/y.py": "", "c/z.md": ""}, name="proj")
        text = TreeFormatter().format(scan(root))
        assert text.splitlines()[:8] == [
            "proj/",
            "├── a/",
            "│   ├── sub/",
            "│   │   └── y.py",
            "│   └── x.py",
            "├── c/",
            "│   └── z.md",
            "└── b.txt",
        ]
        assert "3 directories, 4 files" in text


class TestStats:
    def test_sections(self, result):
        text = StatsFormatter().format(result)
        for heading in ("Totals", "Lines per text file", "Complexity per text file", "Languages", "Extensions"):
            assert f"\n{heading}\n" in text
        assert "Rust" in text


class TestSummary:
    def test_sections(self, result):
        text = SummaryFormatter().format(result)
        assert "Language Distribution" in text
        assert "Recommendations" in text
        assert f"Base Path: {result.root}" in text

    def test_bar_chart_scales_to_peak(self):
        lines = bar_chart("T", [("Rust", 50.0), ("Python", 25.0)], width=10)
        assert lines[2].endswith("█" * 10)
        assert lines[3].endswith(" " + "█" * 5)

    def test_recommendation_for_large_files(self, make_tree):
        root = make_tree({"big.txt": "x" * (101 * 1024)})
        recs = SummaryFormatter().recommendations(scan(root))
        assert any("large files" in r for r in recs)


class TestMeta:
    def test_document(self, result):
        data = json.loads(MetaFormatter().format(result))
        assert data["version"] == __version__
        assert "timestamp" not in data
        assert data["project"]["files"]["total"] == result.total_files
        assert data["project"]["files"]["lines"] == result.total_lines
        assert set(data["languages"]) == set(result.languages)
        assert set(data["complexity_metrics"]) >= {"average", "maximum", "minimum", "standard_deviation"}
        assert data["file_sizes"]["largest"][0]["path"] == "src/lib.py"
        assert data["configuration"]["exclude_directories"][0] == ".git"

    def test_timestamp(self, result):
        data = json.loads(MetaFormatter(STAMP).format(result))
        assert data["timestamp"] == "2024-05-17T09:30:00"


class TestLlm:
    def test_core_and_supporting_chunks(self, make_tree):
        branchy = "if a:\n    pass\n" * 12
        root = make_tree({"core.py": branchy, "plain.py": "x = 1\n"})
        formatter = LlmFormatter(chunk_size=16000)
        chunks = formatter.chunks(scan(root))
        assert [c.content_type for c in chunks] == ["core", "supporting"]
        assert chunks[0].filename == "chunk_1_of_2__core.md"
        assert "if a:" in chunks[0].content
        assert "plain.py" in chunks[1].content
        assert "x = 1" not in chunks[1].content
        assert chunks[1].document().startswith("# Code Analysis Chunk 2/2\nType: supporting\n")

    def test_index_lists_chunks(self, result):
        formatter = LlmFormatter(chunk_size=100)
        text = formatter.format(result)
        assert text.startswith("# Project Code Analysis\n")
        for chunk in formatter.chunks(result):
            assert chunk.filename in text
