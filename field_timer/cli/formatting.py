"""
Formatting utilities for the field timer CLI.

This module renders ranked timing results with rich: one line per query with a
status badge and duration, followed by a response dump for failed queries.
"""

from typing import Iterable, Optional

from rich.console import Console
from rich.progress import (
    BarColumn,
    MofNCompleteColumn,
    Progress,
    SpinnerColumn,
    TextColumn,
    TimeElapsedColumn,
)
from rich.syntax import Syntax
from rich.text import Text

from ..graphql.models import Status, TimingResult


class Formatter:
    """Formatting utilities for CLI output."""

    def __init__(
        self,
        console: Optional[Console] = None,
        err_console: Optional[Console] = None,
    ):
        self.console = console or Console()
        self.err_console = err_console or Console(stderr=True)

    @staticmethod
    def render_status(status: Status) -> Text:
        """Render the status badge."""
        if status is Status.SUCCESS:
            return Text(" OK  ", style="bold bright_black on green")
        return Text(" ERR ", style="bold bright_white on red")

    @staticmethod
    def render_duration(duration: float) -> Text:
        return Text(f" {duration:.3f}s ", style="dim")

    def render_result(self, result: TimingResult) -> Text:
        line = Text()
        line.append_text(self.render_status(result.status))
        line.append(" ")
        line.append_text(self.render_duration(result.duration))
        line.append(" ")
        line.append(result.compact_query)
        return line

    def print_result(self, result: TimingResult) -> None:
        """Print a result line, plus the response for failures."""
        self.console.print(self.render_result(result), soft_wrap=True)
        if result.status is Status.FAILURE:
            self.print_json(result.dump_response())

    def print_results(self, results: Iterable[TimingResult]) -> None:
        for result in results:
            self.print_result(result)

    def print_json(self, json_str: str, title: Optional[str] = None) -> None:
        """Print JSON text with syntax highlighting."""
        if title:
            self.console.print(title, style="bold")
        self.console.print(Syntax(json_str, "json", theme="monokai", word_wrap=True))

    def print_summary(self, results: Iterable[TimingResult]) -> None:
        results = list(results)
        failed = sum(1 for result in results if result.status is Status.FAILURE)
        total = sum(result.duration for result in results)
        self.err_console.print(
            f"{len(results)} queries, {len(results) - failed} succeeded, "
            f"{failed} failed, {total:.3f}s total",
            style="dim",
        )

    def print_error(self, message: str) -> None:
        """Print an error message with red X."""
        self.err_console.print(f"✗ {message}", style="bold red", markup=False)

    def print_warning(self, message: str) -> None:
        """Print a warning message with yellow exclamation."""
        self.err_console.print(f"⚠ {message}", style="bold yellow", markup=False)

    def print_info(self, message: str) -> None:
        """Print an info message with blue info icon."""
        self.err_console.print(f"ℹ {message}", style="bold blue", markup=False)

    def create_progress(self) -> Progress:
        """Progress bar for the sequential run, drawn on stderr."""
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            MofNCompleteColumn(),
            TimeElapsedColumn(),
            console=self.err_console,
            transient=True,
        )
