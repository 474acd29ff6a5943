"""Configuration loading and management for workspace-aggregator.

The core consumes two immutable values built once at startup:

    FilterConfiguration  what to exclude (extensions, directories, globs, gitignore)
    IngestOptions        how to read admitted files (size cap, binary handling)

Both are derived from an AggregatorConfig, whose sources are merged in
priority order:
    1. Defaults (defined in AggregatorConfig)
    2. Global config (~/.workspace-aggregator.toml)
    3. Project config (./workspace-aggregator.toml)
    4. Explicit config file
    5. Environment variables (WORKSPACE_AGGREGATOR_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(verbose=True, chunk_size=8000)
    >>> config.verbosity
    'verbose'
    >>> config.filters().respect_gitignore
    False
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Iterable, Literal, Optional, get_type_hints

from .exceptions import InvalidConfigError, WorkspaceAggregatorError

Verbosity = Literal["quiet", "normal", "verbose"]

ENV_PREFIX = "WORKSPACE_AGGREGATOR_"
CONFIG_FILENAME = "workspace-aggregator.toml"

# Directory names skipped unless the user opts out with --no-default-excludes.
DEFAULT_EXCLUDED_DIRECTORIES: tuple[str, ...] = (
    # Version control
    ".git",
    ".hg",
    ".svn",
    # Virtual environments
    ".venv",
    "venv",
    "env",
    "virtualenv",
    # Build and cache
    "target",
    "dist",
    "build",
    "__pycache__",
    ".cache",
    ".next",
    ".mypy_cache",
    ".ruff_cache",
    ".tox",
    # Dependencies
    "node_modules",
    "site-packages",
    "vendor",
    # IDE
    ".idea",
    ".vscode",
    # Coverage and tests
    "coverage",
    ".pytest_cache",
    "test-results",
    # Infrastructure tooling
    ".terraform",
    ".serverless",
    ".aws-sam",
)

OUTPUT_TYPES: tuple[str, ...] = ("workspace", "files", "tree", "stats", "summary", "meta", "llm")
DEFAULT_OUTPUTS: tuple[str, ...] = ("workspace", "files", "tree", "stats", "summary", "meta")

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
DEFAULT_CHUNK_SIZE = 16000  # roughly 4000 tokens
BINARY_PROBE_SIZE = 8192


def normalize_extension(extension: str) -> str:
    """Normalise an extension for comparison: strip whitespace and dots, lower-case."""
    return extension.strip().lstrip(".").lower()


def _as_tuple(value: Any) -> tuple[str, ...]:
    """Accept a tuple/list/set or a comma-separated string."""
    if value is None:
        return ()
    if isinstance(value, str):
        value = value.split(",")
    return tuple(str(v).strip() for v in value if str(v).strip())


def _ordered_unique(values: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(values))


@dataclass(frozen=True)
class FilterConfiguration:
    """Immutable filter rules for one scan.

    Attributes:
        exclude_extensions: Extensions to skip, normalised to lower-case with no
            leading dot. Compound extensions such as ``min.js`` are allowed.
        exclude_directories: Directory names; any path with one of these in its
            parent chain is skipped and the directory is never descended into.
        exclude_patterns: Gitignore-style glob patterns matched against the
            path relative to the scan root.
        respect_gitignore: Consult ``.gitignore`` files found in the tree.
        ignore_file: Extra ignore file anchored at the scan root, consulted
            after every ``.gitignore`` (lowest precedence). Only used when
            ``respect_gitignore`` is on.
    """

    exclude_extensions: tuple[str, ...] = ()
    exclude_directories: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    respect_gitignore: bool = False
    ignore_file: Optional[Path] = None

    def __post_init__(self) -> None:
        extensions = (normalize_extension(e) for e in _as_tuple(self.exclude_extensions))
        object.__setattr__(self, "exclude_extensions", _ordered_unique(e for e in extensions if e))
        directories = (d.strip("/") for d in _as_tuple(self.exclude_directories))
        object.__setattr__(self, "exclude_directories", _ordered_unique(d for d in directories if d))
        object.__setattr__(self, "exclude_patterns", _ordered_unique(_as_tuple(self.exclude_patterns)))
        if self.ignore_file is not None and not isinstance(self.ignore_file, Path):
            object.__setattr__(self, "ignore_file", Path(self.ignore_file))

    @classmethod
    def with_defaults(cls, **kwargs: Any) -> FilterConfiguration:
        """Build a configuration that also excludes DEFAULT_EXCLUDED_DIRECTORIES."""
        extra = _as_tuple(kwargs.pop("exclude_directories", ()))
        return cls(exclude_directories=DEFAULT_EXCLUDED_DIRECTORIES + extra, **kwargs)

    def to_dict(self) -> dict[str, Any]:
        """JSON-serialisable view, used by the metadata report."""
        return {
            "exclude_extensions": list(self.exclude_extensions),
            "exclude_directories": list(self.exclude_directories),
            "exclude_patterns": list(self.exclude_patterns),
            "respect_gitignore": self.respect_gitignore,
            "ignore_file": str(self.ignore_file) if self.ignore_file else None,
        }


@dataclass(frozen=True)
class IngestOptions:
    """How admitted files are read.

    Attributes:
        max_file_size: Files larger than this many bytes are skipped unread.
        exclude_binary: Skip binary files instead of recording them without content.
        probe_size: Number of leading bytes inspected by the binary probe.
        binary_ratio: Fraction of non-text bytes in the probe above which a
            file counts as binary.
    """

    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    exclude_binary: bool = False
    probe_size: int = BINARY_PROBE_SIZE
    binary_ratio: float = 0.30

    def __post_init__(self) -> None:
        if self.max_file_size < 0:
            raise InvalidConfigError("max_file_size", self.max_file_size, "must be non-negative")
        if self.probe_size < 1:
            raise InvalidConfigError("probe_size", self.probe_size, "must be at least 1")
        if not 0.0 < self.binary_ratio <= 1.0:
            raise InvalidConfigError("binary_ratio", self.binary_ratio, "must be in (0, 1]")


@dataclass(frozen=True)
class AggregatorConfig:
    """Configuration for one aggregator invocation.

    Attributes:
        File filtering:
            exclude_extensions: Extensions to skip (comma-separated in env vars)
            exclude_directories: Directory names to skip
            exclude_patterns: Glob patterns to skip
            respect_gitignore: Consult .gitignore files
            ignore_file: Extra ignore file anchored at the scan root
            use_default_excludes: Also skip DEFAULT_EXCLUDED_DIRECTORIES

        Ingestion:
            max_file_size_mb: Maximum file size to read (MB)
            exclude_binary: Skip binary files entirely

        Performance tuning:
            workers: Number of parallel readers (None = auto-detect)

        Output control:
            generate: Report types to write (see OUTPUT_TYPES)
            output_dir: Directory for report files (None = current directory)
            use_timestamp: Add a timestamp to report names and headers
            chunk_size: Byte limit per chunk of the llm export and the
                chunked workspace export
            chunk_workspace: Also split the workspace report into chunk files
            verbosity: Logging verbosity level
    """

    # File filtering
    exclude_extensions: tuple[str, ...] = ()
    exclude_directories: tuple[str, ...] = ()
    exclude_patterns: tuple[str, ...] = ()
    respect_gitignore: bool = False
    ignore_file: Optional[str] = None
    use_default_excludes: bool = True

    # Ingestion
    max_file_size_mb: float = DEFAULT_MAX_FILE_SIZE / (1024 * 1024)
    exclude_binary: bool = False

    # Performance tuning
    workers: Optional[int] = None

    # Output control
    generate: tuple[str, ...] = field(default_factory=lambda: DEFAULT_OUTPUTS)
    output_dir: Optional[str] = None
    use_timestamp: bool = False
    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_workspace: bool = False
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Normalise list fields and validate values."""
        for name in ("exclude_extensions", "exclude_directories", "exclude_patterns", "generate"):
            object.__setattr__(self, name, _as_tuple(getattr(self, name)))

        if self.max_file_size_mb <= 0:
            raise InvalidConfigError("max_file_size_mb", self.max_file_size_mb, "must be positive")
        if self.workers is not None and self.workers < 1:
            raise InvalidConfigError("workers", self.workers, "must be at least 1")
        if self.chunk_size < 1:
            raise InvalidConfigError("chunk_size", self.chunk_size, "must be at least 1")
        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise InvalidConfigError("verbosity", self.verbosity, "expected quiet, normal or verbose")

        unknown = [name for name in self.generate if name not in OUTPUT_TYPES]
        if unknown:
            raise InvalidConfigError(
                "generate", ",".join(unknown), f"choose from {', '.join(OUTPUT_TYPES)}"
            )

    @property
    def max_file_size_bytes(self) -> int:
        """Get max file size in bytes."""
        return int(self.max_file_size_mb * 1024 * 1024)

    def filters(self) -> FilterConfiguration:
        """Build the immutable filter configuration handed to the core."""
        ignore_file = Path(self.ignore_file) if self.ignore_file else None
        kwargs = dict(
            exclude_extensions=self.exclude_extensions,
            exclude_directories=self.exclude_directories,
            exclude_patterns=self.exclude_patterns,
            respect_gitignore=self.respect_gitignore,
            ignore_file=ignore_file,
        )
        if self.use_default_excludes:
            return FilterConfiguration.with_defaults(**kwargs)
        return FilterConfiguration(**kwargs)

    def ingest_options(self) -> IngestOptions:
        """Build the immutable ingestion options handed to the core."""
        return IngestOptions(
            max_file_size=self.max_file_size_bytes,
            exclude_binary=self.exclude_binary,
        )

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for key, value in data.items():
            if isinstance(value, tuple):
                data[key] = list(value)
        return data


def load_config(config_file: Optional[Path] = None, **overrides: Any) -> AggregatorConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``verbose``
            and ``quiet`` booleans are folded into ``verbosity``.

    Returns:
        Validated AggregatorConfig instance

    Raises:
        WorkspaceAggregatorError: If a config file is invalid or missing
        InvalidConfigError: If a value fails validation
    """
    merged: dict[str, Any] = {}

    global_config = Path.home() / f".{CONFIG_FILENAME}"
    if global_config.exists():
        merged.update(_load_toml_file(global_config))

    project_config = Path.cwd() / CONFIG_FILENAME
    if project_config.exists():
        merged.update(_load_toml_file(project_config))

    if config_file is not None:
        if not config_file.exists():
            raise WorkspaceAggregatorError(f"Config file not found: {config_file}")
        merged.update(_load_toml_file(config_file))

    merged.update(_load_env_vars())

    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update(overrides)

    try:
        return AggregatorConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise WorkspaceAggregatorError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from WORKSPACE_AGGREGATOR_* environment variables.

    Every AggregatorConfig field can be set, e.g.:
        WORKSPACE_AGGREGATOR_RESPECT_GITIGNORE: bool (true/false/1/0)
        WORKSPACE_AGGREGATOR_WORKERS: int
        WORKSPACE_AGGREGATOR_MAX_FILE_SIZE_MB: float
        WORKSPACE_AGGREGATOR_EXCLUDE_DIRECTORIES: comma-separated list
        WORKSPACE_AGGREGATOR_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any variables found.
    """
    type_hints = get_type_hints(AggregatorConfig)

    result: dict[str, Any] = {}

    for field_name in AggregatorConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
        except ValueError as e:
            raise InvalidConfigError(env_key, env_value, str(e))
        if parsed is not None:
            result[field_name] = parsed

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Optional[X] is Union[X, None]
    args = getattr(type_hint, "__args__", ())
    if type(None) in args:
        non_none_types = [t for t in args if t is not type(None)]
        if non_none_types:
            type_hint = non_none_types[0]
            origin = getattr(type_hint, "__origin__", None)

    if origin is tuple:
        return _as_tuple(value)

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    # String (including Literal types like Verbosity)
    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    Raises:
        WorkspaceAggregatorError: If the file cannot be read or parsed
    """
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise WorkspaceAggregatorError(f"Invalid config file '{path}': {e}")
