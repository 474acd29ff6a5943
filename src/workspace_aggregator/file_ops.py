"""
Report file operations for workspace-aggregator.

Maps output types to file names and writes reports atomically enough
for a CLI: parent directories are created and any OS failure surfaces
as FileAccessError.
"""

from datetime import datetime
from pathlib import Path
from typing import Optional

from .exceptions import FileAccessError

OUTPUT_FILENAMES = {
    "workspace": "workspace.txt",
    "files": "files.txt",
    "tree": "tree.txt",
    "stats": "stats.txt",
    "summary": "summary.txt",
    "meta": "meta.json",
    "llm": "llm.md",
}

TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def output_path(
    output_type: str,
    output_dir: Optional[Path] = None,
    timestamp: Optional[datetime] = None,
) -> Path:
    """
    Build the report path for an output type.

    Args:
        output_type: One of OUTPUT_FILENAMES
        output_dir: Target directory (current directory when None)
        timestamp: When given, ``_YYYYmmdd_HHMMSS`` is inserted before the suffix

    Returns:
        Path of the report file

    Raises:
        KeyError: If the output type is unknown
    """
    name = OUTPUT_FILENAMES[output_type]
    if timestamp is not None:
        stem, dot, suffix = name.rpartition(".")
        name = f"{stem}_{timestamp.strftime(TIMESTAMP_FORMAT)}{dot}{suffix}"
    return (output_dir or Path.cwd()) / name


def chunk_directory(index_path: Path) -> Path:
    """Directory holding the chunk files that belong to an llm index file."""
    return index_path.with_name(f"{index_path.stem}.chunks")


def chunk_filename(index: int, total: int, content_type: str) -> str:
    """File name of one chunk, numbered from 1."""
    return f"chunk_{index}_of_{total}__{content_type}.md"


def safe_write_file(filepath: Path, content: str, encoding: str = "utf-8") -> None:
    """
    Safely write to a file, creating parent directories.

    Args:
        filepath: File to write
        content: Content to write
        encoding: Text encoding

    Raises:
        FileAccessError: If file cannot be written
    """
    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)

        with open(filepath, "w", encoding=encoding, newline="") as f:
            f.write(content)

    except OSError as e:
        raise FileAccessError(filepath, f"Write failed: {e}")


def clear_chunk_directory(directory: Path) -> None:
    """Remove chunk files left by an earlier run.

    Raises:
        FileAccessError: If a stale chunk cannot be removed
    """
    if not directory.is_dir():
        return
    for stale in directory.glob("chunk_*_of_*__*.md"):
        try:
            stale.unlink()
        except OSError as e:
            raise FileAccessError(stale, f"Cannot remove stale chunk: {e}")
