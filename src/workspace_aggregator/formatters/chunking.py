"""Size-bounded splitting of section-structured text.

Sections are packed greedily into chunks of at most ``limit`` UTF-8
bytes. A section is never split; one that alone exceeds the limit gets
a chunk of its own, flagged ``oversized``. Joining the chunk texts in
order gives back the input exactly.

For the workspace export only file sections are kept whole. The header
and footer are report framing, so when one of them exceeds the limit it
is cut at line boundaries first.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Sequence

from ..config import DEFAULT_CHUNK_SIZE
from ..core.result import AggregationResult
from .workspace import WorkspaceFormatter


@dataclass(frozen=True)
class Chunk:
    index: int  # 1-based
    total: int
    text: str
    oversized: bool = False

    @property
    def size(self) -> int:
        return len(self.text.encode("utf-8"))


def chunk_sections(sections: Sequence[str], limit: int = DEFAULT_CHUNK_SIZE) -> List[Chunk]:
    """Pack ordered sections into chunks of at most ``limit`` bytes.

    Raises:
        ValueError: If ``limit`` is not positive.
    """
    if limit < 1:
        raise ValueError(f"chunk limit must be positive, got {limit}")

    groups: List[List[str]] = []
    current: List[str] = []
    size = 0
    for section in sections:
        if not section:
            continue
        length = len(section.encode("utf-8"))
        if current and size + length > limit:
            groups.append(current)
            current, size = [], 0
        current.append(section)
        size += length
    if current:
        groups.append(current)

    total = len(groups)
    chunks = []
    for i, group in enumerate(groups, start=1):
        text = "".join(group)
        chunks.append(Chunk(index=i, total=total, text=text, oversized=len(text.encode("utf-8")) > limit))
    return chunks


def split_to_fit(text: str, limit: int) -> List[str]:
    """Cut ``text`` into pieces of at most ``limit`` bytes, preferring line ends.

    A single line longer than the limit is cut between characters.
    """
    if len(text.encode("utf-8")) <= limit:
        return [text]

    pieces: List[str] = []
    for line in text.split("\n"):
        line += "\n"
        while len(line.encode("utf-8")) > limit:
            head = line.encode("utf-8")[:limit].decode("utf-8", errors="ignore") or line[0]
            pieces.append(head)
            line = line[len(head):]
        pieces.append(line)
    # text.split leaves one piece past the last newline
    pieces[-1] = pieces[-1][:-1]
    return [p for p in pieces if p]


def chunk_workspace(
    result: AggregationResult,
    limit: int = DEFAULT_CHUNK_SIZE,
    generated_at: Optional[datetime] = None,
) -> List[Chunk]:
    """Split the workspace export on file boundaries.

    Only a file section larger than ``limit`` yields an oversized chunk.
    """
    if limit < 1:
        raise ValueError(f"chunk limit must be positive, got {limit}")
    formatter = WorkspaceFormatter(generated_at)
    sections = split_to_fit(formatter.header(result), limit)
    sections += [formatter.file_section(e) for e in result.entries]
    sections += split_to_fit(formatter.footer(result), limit)
    return chunk_sections(sections, limit)
