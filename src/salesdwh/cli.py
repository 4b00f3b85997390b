"""Command-line interface for the sales warehouse pipeline."""

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from rich.console import Console
from rich.table import Table

if TYPE_CHECKING:
    from sqlalchemy import Engine

    from salesdwh.config.settings import PipelineConfig

app = typer.Typer(
    name="salesdwh",
    help="Medallion ETL for the CRM and ERP sales warehouse.",
    no_args_is_help=True,
)

console = Console()

ConfigOption = Annotated[
    Path,
    typer.Option(
        "--config",
        "-c",
        help="Path to configuration YAML file.",
        exists=True,
        dir_okay=False,
    ),
]


def _load(config: Path) -> "PipelineConfig":
    """Load configuration and configure logging from it."""
    from salesdwh.config.loader import load_config
    from salesdwh.utils.logging import configure_logging

    console.print(f"[blue]Loading configuration from {config}[/blue]")
    pipeline_config = load_config(config)
    configure_logging(
        level=pipeline_config.logging.level,
        json_output=pipeline_config.logging.json_output,
        log_file=pipeline_config.logging.file,
    )
    return pipeline_config


def _engine(pipeline_config: "PipelineConfig") -> "Engine":
    from salesdwh.warehouse.engine import create_warehouse_engine

    return create_warehouse_engine(pipeline_config.warehouse)


@app.command()
def init(config: ConfigOption) -> None:
    """Create the warehouse namespaces and tables if absent."""
    from salesdwh.warehouse.schema import initialize_warehouse

    pipeline_config = _load(config)

    try:
        created = initialize_warehouse(_engine(pipeline_config))
    except Exception as e:
        console.print(f"[red]Initialization failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    table = Table(title="Warehouse Initialization")
    table.add_column("Namespace", style="cyan")
    table.add_column("Created tables", style="green")
    for namespace, names in created.items():
        table.add_row(namespace, ", ".join(names) or "-")
    console.print(table)


@app.command("load-raw")
def load_raw(
    config: ConfigOption,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Exit with status 1 if any raw table fails to load.",
        ),
    ] = False,
) -> None:
    """Truncate and reload the raw layer from the source exports."""
    from salesdwh.ingestion import load_raw_layer
    from salesdwh.validation import ConsoleReporter
    from salesdwh.warehouse.schema import WarehouseNotInitializedError

    pipeline_config = _load(config)
    console.print(f"[blue]Loading raw layer from {pipeline_config.sources.root}[/blue]")

    try:
        report = load_raw_layer(
            _engine(pipeline_config), pipeline_config.sources.as_mapping()
        )
    except WarehouseNotInitializedError as e:
        console.print(f"[red]Error: {e}[/red]")
        console.print(f"[blue]Run: salesdwh init --config {config}[/blue]")
        raise typer.Exit(code=1) from e

    ConsoleReporter(console).print_raw_report(report)

    if strict and report.degraded:
        raise typer.Exit(code=1)


@app.command("load-cleansed")
def load_cleansed(config: ConfigOption) -> None:
    """Rebuild the cleansed layer from the raw layer."""
    from salesdwh.cleansing import load_cleansed_layer
    from salesdwh.validation import ConsoleReporter

    pipeline_config = _load(config)
    console.print("[blue]Refreshing cleansed layer[/blue]")

    try:
        report = load_cleansed_layer(
            _engine(pipeline_config), pipeline_config.cleansing
        )
    except Exception as e:
        console.print(f"[red]Cleansed refresh failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    ConsoleReporter(console).print_cleansed_report(report)


@app.command("build-curated")
def build_curated(config: ConfigOption) -> None:
    """Rebuild the curated dimensions and facts from the cleansed layer."""
    from salesdwh.curated import build_curated_layer
    from salesdwh.validation import ConsoleReporter

    pipeline_config = _load(config)
    console.print("[blue]Building curated layer[/blue]")

    try:
        report = build_curated_layer(
            _engine(pipeline_config), pipeline_config.cleansing
        )
    except Exception as e:
        console.print(f"[red]Curated build failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    ConsoleReporter(console).print_curated_report(report)


@app.command()
def run(
    config: ConfigOption,
    strict: Annotated[
        bool,
        typer.Option(
            "--strict",
            help="Exit with status 1 if any raw table failed to load.",
        ),
    ] = False,
) -> None:
    """Run the full pipeline: init, raw, cleansed, curated."""
    from salesdwh.etl import WarehousePipeline
    from salesdwh.validation import ConsoleReporter

    pipeline_config = _load(config)
    console.print(f"[blue]Running warehouse pipeline for {pipeline_config.project}[/blue]")

    try:
        result = WarehousePipeline(pipeline_config).run()
    except Exception as e:
        console.print(f"[red]Pipeline failed: {e}[/red]")
        raise typer.Exit(code=1) from e

    reporter = ConsoleReporter(console)
    reporter.print_raw_report(result.raw)
    reporter.print_cleansed_report(result.cleansed)
    reporter.print_curated_report(result.curated)
    console.print(f"\n[green]Completed in {result.duration_s:.1f}s[/green]")

    if strict and result.degraded:
        raise typer.Exit(code=1)


@app.command()
def validate(config: ConfigOption) -> None:
    """Validate the source exports against the raw schemas."""
    from salesdwh.validation import ConsoleReporter, ValidationRunner

    pipeline_config = _load(config)
    console.print("[blue]Running schema validation...[/blue]")

    results = ValidationRunner(pipeline_config).run()
    ConsoleReporter(console).print_results(results)

    has_failures = any(r.schema_valid is False for r in results)
    if has_failures:
        raise typer.Exit(code=1)


@app.command()
def version() -> None:
    """Show version information."""
    from salesdwh import __version__

    console.print(f"salesdwh version {__version__}")


if __name__ == "__main__":
    app()
