"""
Warehouse pipeline implementation.

Runs the layers in dependency order: schema initialization, raw load,
cleansed refresh, curated build.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import Engine

from salesdwh.cleansing.engine import CleansedRefreshReport, load_cleansed_layer
from salesdwh.config.settings import PipelineConfig
from salesdwh.curated.builder import CuratedBuildReport, build_curated_layer
from salesdwh.ingestion.raw import RawLoadReport, load_raw_layer
from salesdwh.utils.logging import get_logger
from salesdwh.warehouse.engine import create_warehouse_engine
from salesdwh.warehouse.schema import initialize_warehouse

log = get_logger(__name__)


@dataclass
class PipelineResult:
    """
    Result of a full pipeline run.

    Attributes:
        created_tables: Tables created by initialization, per namespace.
        raw: Raw load report (may be degraded).
        cleansed: Cleansed refresh report.
        curated: Curated build report.
        duration_s: Wall time of the run.
    """

    created_tables: dict[str, list[str]]
    raw: RawLoadReport
    cleansed: CleansedRefreshReport
    curated: CuratedBuildReport
    duration_s: float = 0.0

    @property
    def degraded(self) -> bool:
        """Whether any raw table failed to load."""
        return self.raw.degraded


class WarehousePipeline:
    """
    Full-refresh pipeline for the sales warehouse.

    Every run rebuilds all three layers from the source exports; there is no
    incremental or historized state.
    """

    def __init__(
        self,
        config: PipelineConfig,
        *,
        engine: Engine | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        """
        Initialize warehouse pipeline.

        Args:
            config: Pipeline configuration.
            engine: Warehouse engine (built from ``config.warehouse`` if None).
            clock: Run timestamp source passed to the cleansed refresh.
        """
        self.config = config
        self.engine = engine or create_warehouse_engine(config.warehouse)
        self.clock = clock

    def run(self) -> PipelineResult:
        """
        Run all layers.

        A degraded raw load is logged and the run continues; errors in the
        cleansed or curated stage propagate.

        Returns:
            PipelineResult with the report of each stage.
        """
        started = time.perf_counter()
        log.info("Starting warehouse pipeline", project=self.config.project)

        log.info("Step 1: Initializing warehouse")
        created = initialize_warehouse(self.engine)

        log.info("Step 2: Loading raw layer")
        raw = load_raw_layer(self.engine, self.config.sources.as_mapping())
        if raw.degraded:
            log.warning(
                "Continuing with degraded raw layer",
                failed=[r.table for r in raw.failed],
            )

        log.info("Step 3: Refreshing cleansed layer")
        cleansed = load_cleansed_layer(
            self.engine, self.config.cleansing, clock=self.clock
        )

        log.info("Step 4: Building curated layer")
        curated = build_curated_layer(self.engine, self.config.cleansing)

        result = PipelineResult(
            created_tables=created,
            raw=raw,
            cleansed=cleansed,
            curated=curated,
            duration_s=time.perf_counter() - started,
        )
        log.info(
            "Warehouse pipeline completed",
            degraded=result.degraded,
            duration_s=round(result.duration_s, 2),
        )
        return result


def run_pipeline(config: PipelineConfig) -> PipelineResult:
    """
    Convenience function to run the warehouse pipeline.

    Args:
        config: Pipeline configuration.

    Returns:
        PipelineResult with the report of each stage.
    """
    return WarehousePipeline(config).run()
