"""
Console reporters.

Formats validation results and pipeline reports using Rich tables.
"""

from rich.console import Console
from rich.table import Table

from salesdwh.cleansing.engine import CleansedRefreshReport
from salesdwh.curated.builder import CuratedBuildReport
from salesdwh.ingestion.raw import RawLoadReport
from salesdwh.validation.core import ValidationResult


class ConsoleReporter:
    """Formats and displays validation results to the console."""

    def __init__(self, console: Console) -> None:
        """
        Initialize console reporter.

        Args:
            console: Rich Console instance for output.
        """
        self.console = console

    def print_results(self, results: list[ValidationResult]) -> None:
        """
        Print validation results as a formatted table.

        Args:
            results: List of validation results to display.
        """
        table = Table(title="Source Validation Results", show_header=True)
        table.add_column("Table", style="cyan", no_wrap=True)
        table.add_column("File", style="blue")
        table.add_column("Status", justify="center")
        table.add_column("Rows", justify="right")
        table.add_column("Details", style="dim")

        for result in results:
            row_count = str(result.row_count) if result.row_count is not None else "-"
            table.add_row(
                result.table_name,
                result.file_path.name,
                self._format_status(result),
                row_count,
                self._format_details(result),
            )

        self.console.print(table)
        self._print_summary(results)
        self._print_detailed_errors(results)

    def _format_status(self, result: ValidationResult) -> str:
        if not result.exists:
            return "[yellow]Missing[/yellow]"
        if result.schema_valid:
            return "[green]Pass[/green]"
        return "[red]Fail[/red]"

    def _format_details(self, result: ValidationResult) -> str:
        if not result.exists:
            return "File not found"
        if result.schema_valid:
            return "OK"
        return "See errors below"

    def _print_summary(self, results: list[ValidationResult]) -> None:
        passed = sum(1 for r in results if r.schema_valid is True)
        failed = sum(1 for r in results if r.schema_valid is False)
        missing = sum(1 for r in results if not r.exists)

        self.console.print()
        self.console.print("[bold]Summary:[/bold]")
        self.console.print(f"  Total sources: {len(results)}")
        self.console.print(f"  [green]Passed: {passed}[/green]")
        self.console.print(f"  [red]Failed: {failed}[/red]")
        self.console.print(f"  [yellow]Missing: {missing}[/yellow]")

    def _print_detailed_errors(self, results: list[ValidationResult]) -> None:
        """
        Print detailed error messages for failed validations.

        Args:
            results: List of validation results.
        """
        failed = [r for r in results if r.schema_valid is False]
        if not failed:
            return

        self.console.print()
        self.console.print("[bold red]Validation Errors:[/bold red]")

        for result in failed:
            self.console.print()
            self.console.print(
                f"[bold]{result.table_name}[/bold] (schema: {result.schema_name}):"
            )
            self.console.print(f"  File: {result.file_path}")
            if result.error_message:
                for line in result.error_message.split("\n"):
                    self.console.print(f"  {line}")

    def print_raw_report(self, report: RawLoadReport) -> None:
        """
        Print the per-table outcome of a raw layer load.

        Args:
            report: Raw load report.
        """
        table = Table(title="Raw Layer Load", show_header=True)
        table.add_column("Table", style="cyan", no_wrap=True)
        table.add_column("Status", justify="center")
        table.add_column("Rows", justify="right")
        table.add_column("Seconds", justify="right")
        table.add_column("Error", style="dim")

        for result in report.results:
            table.add_row(
                result.table,
                "[green]Loaded[/green]" if result.success else "[red]Failed[/red]",
                str(result.rows) if result.success else "-",
                f"{result.duration_s:.2f}",
                result.error or "",
            )

        self.console.print(table)
        if report.degraded:
            self.console.print(
                f"[yellow]{len(report.failed)} table(s) failed; "
                "the raw layer is degraded[/yellow]"
            )

    def print_cleansed_report(self, report: CleansedRefreshReport) -> None:
        """Print row counts of a cleansed layer refresh."""
        table = Table(
            title=f"Cleansed Layer Refresh ({report.loaded_at:%Y-%m-%d %H:%M:%S})",
            show_header=True,
        )
        table.add_column("Table", style="cyan", no_wrap=True)
        table.add_column("Rows in", justify="right")
        table.add_column("Rows out", justify="right")
        table.add_column("Seconds", justify="right")

        for result in report.results:
            table.add_row(
                result.table,
                str(result.rows_in),
                str(result.rows_out),
                f"{result.duration_s:.2f}",
            )

        self.console.print(table)

    def print_curated_report(self, report: CuratedBuildReport) -> None:
        """Print row counts of a curated layer build."""
        table = Table(title="Curated Layer Build", show_header=True)
        table.add_column("Table", style="cyan", no_wrap=True)
        table.add_column("Rows", justify="right")

        for name, rows in report.rows.items():
            table.add_row(name, str(rows))

        self.console.print(table)
