"""Shared CLI helpers."""

from pathlib import Path
from typing import Iterable, Optional

from rich.console import Console

from ..config import AggregatorConfig, load_config

console = Console()


def split_list(values: Optional[Iterable[str]]) -> Optional[tuple]:
    """Flatten repeated and comma-separated option values; None when nothing was given."""
    if not values:
        return None
    items = tuple(item.strip() for value in values for item in value.split(",") if item.strip())
    return items or None


def resolve_config(
    config: Optional[Path] = None,
    generate: Optional[str] = None,
    output_dir: Optional[Path] = None,
    exclude: Optional[Iterable[str]] = None,
    exclude_dir: Optional[Iterable[str]] = None,
    exclude_pattern: Optional[Iterable[str]] = None,
    respect_gitignore: bool = False,
    ignore_file: Optional[Path] = None,
    no_default_excludes: bool = False,
    exclude_binary: bool = False,
    max_file_size: Optional[float] = None,
    chunk_size: Optional[int] = None,
    chunk_workspace: bool = False,
    workers: Optional[int] = None,
    timestamp: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> AggregatorConfig:
    """Build configuration from CLI options.

    Only options the user actually gave override file and environment values.
    """
    overrides = {}
    if generate is not None:
        overrides["generate"] = split_list([generate]) or ()
    if output_dir is not None:
        overrides["output_dir"] = str(output_dir)
    for key, values in (
        ("exclude_extensions", exclude),
        ("exclude_directories", exclude_dir),
        ("exclude_patterns", exclude_pattern),
    ):
        items = split_list(values)
        if items is not None:
            overrides[key] = items
    if ignore_file is not None:
        overrides["ignore_file"] = str(ignore_file)
        overrides["respect_gitignore"] = True
    if respect_gitignore:
        overrides["respect_gitignore"] = True
    if no_default_excludes:
        overrides["use_default_excludes"] = False
    if exclude_binary:
        overrides["exclude_binary"] = True
    if max_file_size is not None:
        overrides["max_file_size_mb"] = max_file_size
    if chunk_size is not None:
        overrides["chunk_size"] = chunk_size
    if chunk_workspace:
        overrides["chunk_workspace"] = True
    if workers is not None:
        overrides["workers"] = workers
    if timestamp:
        overrides["use_timestamp"] = True
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)
