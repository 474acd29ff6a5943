"""ASCII directory tree of the ingested files."""

from typing import Dict, List

from ..core.result import AggregationResult
from .base import BaseFormatter

BRANCH = "├── "
LAST = "└── "
PIPE = "│   "
SPACE = "    "

Node = Dict[str, "Node"]


def build_tree(paths) -> Node:
    """Nested dict of path components; files map to an empty dict."""
    root: Node = {}
    for path in paths:
        node = root
        for part in path.split("/"):
            node = node.setdefault(part, {})
    return root


class TreeFormatter(BaseFormatter):
    """Directories first, then files, each group sorted by name."""

    name = "tree"

    def _render(self, node: Node, files: set, prefix: str, out: List[str], path: str) -> None:
        def is_file(name: str) -> bool:
            return f"{path}{name}" in files

        dirs = sorted(n for n in node if not is_file(n))
        names = dirs + sorted(n for n in node if is_file(n))
        for i, name in enumerate(names):
            last = i == len(names) - 1
            directory = not is_file(name)
            out.append(f"{prefix}{LAST if last else BRANCH}{name}{'/' if directory else ''}")
            if directory:
                self._render(node[name], files, prefix + (SPACE if last else PIPE), out, f"{path}{name}/")

    def format(self, result: AggregationResult) -> str:
        files = {e.path for e in result.entries}
        tree = build_tree(sorted(files))
        lines = [f"{result.root.name or result.root}/"]
        self._render(tree, files, "", lines, "")

        directories = {p.rsplit("/", 1)[0] for p in files if "/" in p}
        for d in list(directories):
            parts = d.split("/")
            directories.update("/".join(parts[:i]) for i in range(1, len(parts)))
        lines += ["", f"{len(directories)} directories, {len(files)} files"]
        lines += self.generated_lines()
        return "\n".join(lines) + "\n"
