"""CLI entry point."""

import typer

from .. import __version__  # noqa: F401
from ._common import console  # noqa: F401

app = typer.Typer(
    name="workspace-aggregator",
    help="Workspace Aggregator - export a source tree as text reports for review and LLM context",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import the command to register it
from .aggregate import aggregate as _aggregate  # noqa: F401, E402


def main() -> None:
    app()
