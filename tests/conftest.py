"""Shared test fixtures for workspace-aggregator tests."""

from pathlib import Path
from typing import Dict, Union

import pytest


def write_tree(root: Path, files: Dict[str, Union[str, bytes]]) -> Path:
    """Create files below root; str content is written as UTF-8."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree(tmp_path):
    """Build a file tree under a fresh directory and return its root."""

    def _make(files: Dict[str, Union[str, bytes]], name: str = "project") -> Path:
        root = tmp_path / name
        root.mkdir(exist_ok=True)
        return write_tree(root, files)

    return _make


@pytest.fixture
def sample_project(make_tree):
    """A small mixed-language project."""
    return make_tree(
        {
            "README.md": "# Sample\n\nA sample project.\n",
            "src/main.rs": "fn main() {\n    // entry\n    if true && false {\n    }\n}\n",
            "src/lib.py": "import os\n\n\ndef run():\n    for x in range(3):\n        print(x)\n",
            "src/util/helpers.js": "function help() {\n  return 1;\n}\n",
            "docs/guide.md": "Guide\n",
            "node_modules/pkg/index.js": "module.exports = 1;\n",
            "assets/logo.png": b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR",
        }
    )
