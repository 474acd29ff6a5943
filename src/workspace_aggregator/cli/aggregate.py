"""The aggregate command: scan a tree and write the requested reports."""

from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from ..config import OUTPUT_TYPES, AggregatorConfig
from ..core import AggregationResult, ProgressReporter, SilentReporter, scan
from ..exceptions import ScanCancelledError, WorkspaceAggregatorError
from ..file_ops import (
    chunk_directory,
    chunk_filename,
    clear_chunk_directory,
    output_path,
    safe_write_file,
)
from ..formatters import LlmFormatter, chunk_workspace, get_formatter
from ..logging_config import setup_logging
from . import app
from ._common import console, resolve_config


def write_reports(
    result: AggregationResult,
    settings: AggregatorConfig,
    generated_at: Optional[datetime] = None,
) -> List[Path]:
    """Render and write every report in ``settings.generate``.

    Returns:
        Paths written, in generation order (chunk files included).

    Raises:
        FileAccessError: If a report cannot be written.
    """
    output_dir = Path(settings.output_dir) if settings.output_dir else Path.cwd()
    written: List[Path] = []

    for output_type in settings.generate:
        target = output_path(output_type, output_dir, generated_at)
        if output_type == "llm":
            formatter = LlmFormatter(generated_at, chunk_size=settings.chunk_size)
            safe_write_file(target, formatter.format(result))
            written.append(target)
            chunks_dir = chunk_directory(target)
            clear_chunk_directory(chunks_dir)
            for chunk in formatter.chunks(result):
                chunk_path = chunks_dir / chunk.filename
                safe_write_file(chunk_path, chunk.document())
                written.append(chunk_path)
        else:
            safe_write_file(target, get_formatter(output_type, generated_at).format(result))
            written.append(target)
            if output_type == "workspace" and settings.chunk_workspace:
                written += _write_workspace_chunks(result, target, settings.chunk_size, generated_at)

    return written


def _write_workspace_chunks(
    result: AggregationResult,
    target: Path,
    limit: int,
    generated_at: Optional[datetime],
) -> List[Path]:
    """Write the workspace export again as chunk files next to ``target``."""
    chunks_dir = chunk_directory(target)
    clear_chunk_directory(chunks_dir)
    written = []
    for chunk in chunk_workspace(result, limit, generated_at):
        chunk_path = chunks_dir / chunk_filename(chunk.index, chunk.total, "workspace")
        safe_write_file(chunk_path, chunk.text)
        written.append(chunk_path)
    return written


def _print_summary(result: AggregationResult, written: List[Path]) -> None:
    table = Table(title=f"Aggregated {result.root}", show_lines=False)
    table.add_column("Language", style="cyan")
    table.add_column("Files", justify="right")
    table.add_column("Lines", justify="right")
    table.add_column("Bytes", justify="right")
    for stat in result.languages_by_lines():
        table.add_row(stat.language, str(stat.file_count), str(stat.total_lines), str(stat.total_bytes))
    table.add_row(
        "[bold]Total[/bold]",
        f"[bold]{result.total_files}[/bold]",
        f"[bold]{result.total_lines}[/bold]",
        f"[bold]{result.total_bytes}[/bold]",
    )
    console.print(table)

    if result.skipped:
        counts = ", ".join(f"{r.value} {n}" for r, n in result.skip_counts().items() if n)
        console.print(f"[yellow]Skipped {len(result.skipped)} files[/yellow] ({counts})")
    reports = [p for p in written if not p.parent.name.endswith(".chunks")]
    chunks = len(written) - len(reports)
    console.print(f"[green]Wrote {len(reports)} reports[/green]" + (f" and {chunks} chunks" if chunks else ""))
    for report in reports:
        console.print(f"  [dim]{report}[/dim]")


@app.command()
def aggregate(
    path: Path = typer.Argument(
        Path("."),
        help="Directory to aggregate (default: current directory)",
    ),
    generate: Optional[str] = typer.Option(
        None,
        "--generate",
        "-g",
        help=f"Comma-separated reports to write: {', '.join(OUTPUT_TYPES)}",
    ),
    output_dir: Optional[Path] = typer.Option(
        None,
        "--output-dir",
        "-o",
        help="Directory for report files (default: current directory)",
        file_okay=False,
        dir_okay=True,
    ),
    exclude: Optional[List[str]] = typer.Option(
        None,
        "--exclude",
        "-e",
        help="File extensions to skip, e.g. 'lock,min.js' (repeatable)",
    ),
    exclude_dir: Optional[List[str]] = typer.Option(
        None,
        "--exclude-dir",
        "-d",
        help="Directory names to skip (repeatable)",
    ),
    exclude_pattern: Optional[List[str]] = typer.Option(
        None,
        "--exclude-pattern",
        "-p",
        help="Gitignore-style globs to skip, e.g. '*.min.*' (repeatable)",
    ),
    respect_gitignore: bool = typer.Option(
        False,
        "--respect-gitignore",
        help="Honour .gitignore files found in the tree",
    ),
    ignore_file: Optional[Path] = typer.Option(
        None,
        "--ignore-file",
        help="Extra ignore file anchored at PATH (implies --respect-gitignore)",
    ),
    no_default_excludes: bool = typer.Option(
        False,
        "--no-default-excludes",
        help="Do not skip .git, node_modules, target, __pycache__ and similar directories",
    ),
    exclude_binary: bool = typer.Option(
        False,
        "--exclude-binary",
        help="Skip binary files instead of listing them without content",
    ),
    max_file_size: Optional[float] = typer.Option(
        None,
        "--max-file-size",
        help="Largest file to read, in MB (default: 10)",
    ),
    chunk_size: Optional[int] = typer.Option(
        None,
        "--chunk-size",
        help="Byte limit per chunk file (default: 16000)",
        min=1,
    ),
    chunk_workspace: bool = typer.Option(
        False,
        "--chunk-workspace",
        help="Also split workspace.txt into chunk files under workspace.chunks/",
    ),
    workers: Optional[int] = typer.Option(
        None,
        "-w",
        "--workers",
        help="Parallel readers (default: auto-detect)",
        min=1,
        max=64,
    ),
    timestamp: bool = typer.Option(
        False,
        "--timestamp",
        "-t",
        help="Add a timestamp to report names and headers",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Log every skip decision",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="No progress bar or summary; errors only",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Aggregate a directory tree into text reports.

    Walks PATH, applies the exclusion rules, reads every remaining file in
    parallel and writes the requested reports.

    [bold cyan]Examples:[/bold cyan]

      workspace-aggregator

      workspace-aggregator src --generate workspace,tree -o out

      workspace-aggregator --respect-gitignore --exclude-pattern '*.min.*'

      workspace-aggregator --generate llm --chunk-size 8000
    """
    from .. import __version__

    if version:
        console.print(
            f"[bold cyan]Workspace Aggregator[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit(0)

    logger = setup_logging(verbose=verbose, quiet=quiet)

    try:
        settings = resolve_config(
            config=config,
            generate=generate,
            output_dir=output_dir,
            exclude=exclude,
            exclude_dir=exclude_dir,
            exclude_pattern=exclude_pattern,
            respect_gitignore=respect_gitignore,
            ignore_file=ignore_file,
            no_default_excludes=no_default_excludes,
            exclude_binary=exclude_binary,
            max_file_size=max_file_size,
            chunk_size=chunk_size,
            chunk_workspace=chunk_workspace,
            workers=workers,
            timestamp=timestamp,
            verbose=verbose,
            quiet=quiet,
        )
        quiet_mode = settings.verbosity == "quiet"
        generated_at = datetime.now() if settings.use_timestamp else None
        reporter = SilentReporter() if quiet_mode else ProgressReporter(console)

        result = reporter.run(
            lambda on_start, on_file: scan(
                path,
                settings.filters(),
                options=settings.ingest_options(),
                workers=settings.workers,
                progress=on_file,
                on_start=on_start,
            )
        )
        written = write_reports(result, settings, generated_at)

        if not quiet_mode:
            _print_summary(result, written)

    except typer.Exit:
        raise

    except ScanCancelledError as e:
        logger.info(f"Scan cancelled after {e.processed} files")
        console.print("\n[yellow]Aggregation interrupted[/yellow]")
        raise typer.Exit(130)

    except WorkspaceAggregatorError as e:
        logger.error(f"{e.__class__.__name__}: {e}")
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)

    except KeyboardInterrupt:
        logger.info("Aggregation interrupted by user")
        console.print("\n[yellow]Aggregation interrupted[/yellow]")
        raise typer.Exit(130)

    except Exception as e:
        logger.exception("Unexpected error during aggregation")
        console.print(f"[red]Unexpected error:[/red] {e}")
        if verbose:
            console.print_exception()
        raise typer.Exit(1)
