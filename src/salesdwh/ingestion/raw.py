"""
Raw layer load.

Truncates each raw table and bulk-loads it from its CSV export. Every table
is an independent unit of work: a failure is recorded in the report and the
next table is loaded anyway.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path

from sqlalchemy import Engine

from salesdwh.ingestion.sources import SourceFileLoader
from salesdwh.utils.logging import get_logger, log_context
from salesdwh.warehouse.io import truncate_table, write_frame
from salesdwh.warehouse.schema import ensure_initialized
from salesdwh.warehouse.tables import ENTITIES, RAW, get_table

log = get_logger(__name__)


@dataclass
class TableLoadResult:
    """Outcome of loading a single raw table."""

    table: str
    source: Path
    success: bool
    rows: int = 0
    error: str | None = None
    duration_s: float = 0.0


@dataclass
class RawLoadReport:
    """
    Batch report of a raw layer load.

    Attributes:
        results: One result per raw table, in load order.
    """

    results: list[TableLoadResult] = field(default_factory=list)

    @property
    def loaded(self) -> list[TableLoadResult]:
        """Tables that loaded successfully."""
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[TableLoadResult]:
        """Tables whose load failed (left empty)."""
        return [r for r in self.results if not r.success]

    @property
    def degraded(self) -> bool:
        """Whether at least one raw table failed to load."""
        return bool(self.failed)

    @property
    def total_rows(self) -> int:
        """Rows loaded across all tables."""
        return sum(r.rows for r in self.results)


def _load_table(engine: Engine, table_name: str, path: Path) -> TableLoadResult:
    """
    Truncate one raw table and import its export.

    The truncate commits on its own; the import runs in a single transaction,
    so a failed import leaves the table empty.
    """
    table = get_table(RAW, table_name)
    started = time.perf_counter()

    try:
        with engine.begin() as conn:
            log.info("Truncating table", table=table.fullname)
            truncate_table(conn, table)

        df = SourceFileLoader(table_name, path).load()

        with engine.begin() as conn:
            rows = write_frame(conn, table, df)

    except Exception as e:
        error = f"{type(e).__name__}: {e!s}"
        log.error("Failed to load table", table=table.fullname, error=error)
        return TableLoadResult(
            table=table_name,
            source=path,
            success=False,
            error=error,
            duration_s=time.perf_counter() - started,
        )

    log.info("Loaded table", table=table.fullname, rows=rows)
    return TableLoadResult(
        table=table_name,
        source=path,
        success=True,
        rows=rows,
        duration_s=time.perf_counter() - started,
    )


def load_raw_layer(engine: Engine, sources: dict[str, Path]) -> RawLoadReport:
    """
    Full refresh of the raw layer from the source exports.

    Args:
        engine: Warehouse engine.
        sources: Raw table name -> CSV export path. Tables are loaded in
            the canonical entity order; tables without a source are skipped.

    Returns:
        RawLoadReport with one result per loaded table. Per-table failures
        are reported, never raised.

    Raises:
        WarehouseNotInitializedError: If raw tables are missing.
    """
    ensure_initialized(engine, RAW)

    unknown = sorted(set(sources) - set(ENTITIES))
    if unknown:
        msg = f"Unknown raw tables: {', '.join(unknown)}"
        raise ValueError(msg)

    report = RawLoadReport()

    with log_context(layer=RAW):
        log.info("Starting raw layer load", tables=len(sources))

        for table_name in ENTITIES:
            if table_name not in sources:
                continue
            report.results.append(_load_table(engine, table_name, sources[table_name]))

        if report.degraded:
            log.warning(
                "Raw layer load completed with failures",
                loaded=len(report.loaded),
                failed=[r.table for r in report.failed],
            )
        else:
            log.info(
                "Raw layer load completed",
                loaded=len(report.loaded),
                rows=report.total_rows,
            )

    return report
