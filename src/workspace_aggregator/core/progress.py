"""Progress reporting: wraps Rich or runs silently."""

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)


class ProgressReporter:
    """Rich progress bar wrapper.

    ``run`` hands the callback two hooks matching ``scan()``'s
    ``on_start`` and ``progress`` parameters. The bar is indeterminate
    while the tree is walked and becomes a counted bar once the number
    of admitted files is known.
    """

    def __init__(self, console: Console):
        self.console = console

    def run(self, callback):
        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.console,
            transient=True,
        ) as progress:
            task = progress.add_task("Walking directory tree", total=None)

            def on_start(total: int) -> None:
                progress.update(task, total=total, description="Reading files")

            def on_file(path: str) -> None:
                progress.advance(task)

            return callback(on_start, on_file)


class SilentReporter:
    """No-op reporter for tests and --quiet mode."""

    def run(self, callback):
        return callback(None, None)
