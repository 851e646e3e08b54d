"""
This module provides Rich-based progress bars and console output utilities
for the neurolens CLI.
"""

import sys
from contextlib import contextmanager
from typing import Iterator, Optional

from rich.console import Console
from rich.panel import Panel
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TaskID,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

# Global console instance
console = Console()


class ProgressBar:
    """
    Rich-based progress bar for bulk runs.

    Example:
        >>> with ProgressBar(total=len(images), description="Classifying") as pb:
        ...     service.set_progress_callback(lambda p: pb.update(completed=p.completed))
        ...     service.run(images, config)
    """

    def __init__(
        self,
        total: Optional[int] = None,
        description: str = "Processing",
        show_time: bool = True,
        transient: bool = False,
        disable: bool = False,
    ) -> None:
        self.total = total
        self.description = description
        self.show_time = show_time
        self.transient = transient
        self.disable = disable
        self._progress: Optional[Progress] = None
        self._task_id: Optional[TaskID] = None
        self._completed = 0

    def _create_progress(self) -> Progress:
        columns = [
            SpinnerColumn(),
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=40),
            TaskProgressColumn(),
            MofNCompleteColumn(),
        ]

        if self.show_time:
            columns.extend([TimeElapsedColumn(), TimeRemainingColumn()])

        return Progress(
            *columns,
            console=console,
            transient=self.transient,
            disable=self.disable,
        )

    def __enter__(self) -> "ProgressBar":
        self._progress = self._create_progress()
        self._progress.start()
        self._task_id = self._progress.add_task(self.description, total=self.total)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._progress:
            self._progress.stop()

    def update(self, completed: Optional[int] = None, description: Optional[str] = None) -> None:
        """Update the progress bar state."""
        if self._progress and self._task_id is not None:
            kwargs = {}
            if completed is not None:
                kwargs["completed"] = completed
                self._completed = completed
            if description is not None:
                kwargs["description"] = description
            if kwargs:
                self._progress.update(self._task_id, **kwargs)

    @property
    def completed(self) -> int:
        return self._completed


def print_success(message: str) -> None:
    """Print a success message in green."""
    console.print(f"[green]✓[/green] {message}")


def print_error(message: str) -> None:
    """Print an error message in red."""
    console.print(f"[red]✗[/red] {message}")


def print_warning(message: str) -> None:
    """Print a warning message in yellow."""
    console.print(f"[yellow]![/yellow] {message}")


def print_info(message: str) -> None:
    """Print an info message in blue."""
    console.print(f"[blue]ℹ[/blue] {message}")


def print_table(
    title: str,
    columns: list,
    rows: list,
    show_header: bool = True,
) -> None:
    """
    Print a formatted table.

    Args:
        title: Table title
        columns: List of column names
        rows: List of row data (each row is a list of values)
        show_header: Whether to show column headers
    """
    table = Table(title=title, show_header=show_header)

    for col in columns:
        table.add_column(col)

    for row in rows:
        table.add_row(*[str(v) for v in row])

    console.print(table)


def print_summary(
    title: str,
    stats: dict,
    style: str = "blue",
) -> None:
    """
    Print a summary panel with statistics.

    Args:
        title: Summary title
        stats: Dictionary of stat names to values
        style: Border style color
    """
    lines = []
    for key, value in stats.items():
        if isinstance(value, float):
            lines.append(f"[bold]{key}:[/bold] {value:.2f}")
        else:
            lines.append(f"[bold]{key}:[/bold] {value}")

    console.print(Panel("\n".join(lines), title=title, border_style=style))


def is_terminal() -> bool:
    """Check if we're running in a terminal (TTY)."""
    return sys.stdout.isatty()


@contextmanager
def status(message: str) -> Iterator[None]:
    """
    Show a status spinner while performing an operation.

    Example:
        >>> with status("Classifying scan.jpg..."):
        ...     result = service.predict("scan.jpg", config)
    """
    with console.status(f"[bold blue]{message}"):
        yield
