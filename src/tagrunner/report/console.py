"""Colored console output of test outcomes."""

from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from tagrunner.errors import ClassRunError
from tagrunner.models import (
    AssertionFailure,
    MethodReport,
    OutcomeStatus,
    RunSummary,
    TimeoutFailure,
    UnhandledError,
)
from tagrunner.report.base import Reporter


class ConsoleReporter(Reporter):
    """Prints one green or red line per test, and a summary at the end."""

    def __init__(self, console: Optional[Console] = None, show_summary: bool = True):
        self.console = console or Console()
        self.show_summary = show_summary

    def class_started(self, test_class: type) -> None:
        name = getattr(test_class, "__qualname__", repr(test_class))
        self.console.print(f"\n[bold]{escape(name)}[/bold]")

    def test_finished(self, report: MethodReport) -> None:
        color = "green" if report.outcome.passed else "red"

        if report.description is not None:
            line = f"[Test method {report.method_name} description]  {report.description}"
            self.console.print(f"[{color}]{escape(line)}[/{color}]")
        self.console.print(f"[{color}]{escape(self.format_result(report))}[/{color}]")

    def class_aborted(self, error: ClassRunError) -> None:
        self.console.print(f"[bold red]Aborted:[/bold red] {escape(str(error))}")

    def run_finished(self, summary: RunSummary) -> None:
        if not self.show_summary:
            return

        self.console.print("\n" + "=" * 50)
        self.console.print("[bold]Test Results Summary[/bold]")
        self.console.print("=" * 50)

        table = Table(show_header=False, box=None)
        table.add_column("Metric", style="bold")
        table.add_column("Value", justify="right")

        table.add_row("Total Tests", str(summary.total))
        table.add_row("Passed", f"[green]{summary.passed}[/green]")
        table.add_row("Assertion Failures", f"[red]{summary.count(OutcomeStatus.ASSERTION_FAILURE)}[/red]")
        table.add_row("Timeouts", f"[red]{summary.count(OutcomeStatus.TIMEOUT_FAILURE)}[/red]")
        table.add_row("Errors", f"[red]{summary.count(OutcomeStatus.UNHANDLED_ERROR)}[/red]")
        table.add_row("Aborted Classes", f"[yellow]{len(summary.errors)}[/yellow]")

        if summary.total > 0:
            pass_rate = (summary.passed / summary.total) * 100
            table.add_row("Pass Rate", f"{pass_rate:.1f}%")

        self.console.print(table)

        if summary.success:
            self.console.print("\n[green]All tests passed![/green]")
        else:
            self.console.print("\n[red]Some tests failed![/red]")

    @staticmethod
    def format_result(report: MethodReport) -> str:
        """Format the plain-text result line of a test."""
        prefix = f"[Test method {report.method_name}]"
        outcome = report.outcome

        if isinstance(outcome, AssertionFailure):
            return f"{prefix} is failed. Expected = [{outcome.expected}]; actual = [{outcome.actual}]"
        if isinstance(outcome, TimeoutFailure):
            return f"{prefix} is failed. Execute exceeded maximum time = {outcome.limit_millis} ms"
        if isinstance(outcome, UnhandledError):
            return f"{prefix} raised {outcome.error_type}: {outcome.cause}"
        return f"{prefix} is successful"
