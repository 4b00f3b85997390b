"""
Cleansed layer refresh.

Rebuilds every cleansed table from the current raw layer. Each table is
replaced in its own transaction; any error aborts the refresh and
propagates, leaving already refreshed tables in place.
"""

import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from functools import partial

import pandas as pd
import pandera.pandas as pa
from sqlalchemy import Engine

from salesdwh.cleansing.crm import cleanse_customers, cleanse_products, cleanse_sales
from salesdwh.cleansing.erp import (
    cleanse_erp_categories,
    cleanse_erp_customers,
    cleanse_erp_locations,
)
from salesdwh.cleansing.vocabulary import vocabulary_labels
from salesdwh.config.settings import CleansingConfig
from salesdwh.schemas.cleansed import with_vocabulary
from salesdwh.schemas.registry import SchemaRegistry
from salesdwh.utils.logging import get_logger, log_context
from salesdwh.warehouse.io import read_frame, replace_table
from salesdwh.warehouse.schema import ensure_initialized
from salesdwh.warehouse.tables import CLEANSED, ENTITIES, RAW, get_table

log = get_logger(__name__)

Transform = Callable[[pd.DataFrame], pd.DataFrame]


@dataclass
class TableRefreshResult:
    """Row counts of one refreshed table."""

    table: str
    rows_in: int
    rows_out: int
    duration_s: float = 0.0


@dataclass
class CleansedRefreshReport:
    """
    Report of a cleansed layer refresh.

    Attributes:
        loaded_at: Audit timestamp written to every refreshed row.
        results: One result per table, in refresh order.
    """

    loaded_at: datetime
    results: list[TableRefreshResult] = field(default_factory=list)

    @property
    def total_rows(self) -> int:
        """Rows written across all tables."""
        return sum(r.rows_out for r in self.results)


def build_transforms(config: CleansingConfig, loaded_at: datetime) -> dict[str, Transform]:
    """Cleansing transform of each entity, bound to its settings."""
    return {
        "crm_cust_info": partial(cleanse_customers, config=config),
        "crm_prd_info": partial(cleanse_products, config=config),
        "crm_sales_details": cleanse_sales,
        "erp_cust_az12": partial(
            cleanse_erp_customers, config=config, today=loaded_at.date()
        ),
        "erp_loc_a101": partial(cleanse_erp_locations, config=config),
        "erp_px_cat_g1v2": cleanse_erp_categories,
    }


def build_contracts(config: CleansingConfig) -> dict[str, pa.DataFrameSchema]:
    """
    Cleansed schema of each entity, with vocabulary checks for mapped columns.

    Args:
        config: Cleansing vocabularies.

    Returns:
        Entity name -> schema validating its transform output.
    """
    na = config.not_available
    vocabularies: dict[str, dict[str, list[str]]] = {
        "crm_cust_info": {
            "cst_marital_status": vocabulary_labels(config.marital_status, na),
            "cst_gndr": vocabulary_labels(config.gender, na),
        },
        "crm_prd_info": {"prd_line": vocabulary_labels(config.product_line, na)},
        "erp_cust_az12": {"gen": vocabulary_labels(config.erp_gender, na)},
    }
    return {
        entity: with_vocabulary(
            SchemaRegistry.get(f"{CLEANSED}.{entity}"), vocabularies.get(entity, {})
        )
        for entity in ENTITIES
    }


def _refresh_table(
    engine: Engine,
    entity: str,
    transform: Transform,
    contract: pa.DataFrameSchema,
    loaded_at: datetime,
) -> TableRefreshResult:
    started = time.perf_counter()
    source = get_table(RAW, entity)
    target = get_table(CLEANSED, entity)

    with engine.connect() as conn:
        raw = read_frame(conn, source)

    cleansed = contract.validate(transform(raw))
    cleansed = cleansed.assign(dwh_create_date=pd.Timestamp(loaded_at))

    with engine.begin() as conn:
        rows = replace_table(conn, target, cleansed)

    log.info("Refreshed table", table=target.fullname, rows_in=len(raw), rows_out=rows)
    return TableRefreshResult(
        table=entity,
        rows_in=len(raw),
        rows_out=rows,
        duration_s=time.perf_counter() - started,
    )


def load_cleansed_layer(
    engine: Engine,
    config: CleansingConfig | None = None,
    *,
    clock: Callable[[], datetime] = datetime.now,
) -> CleansedRefreshReport:
    """
    Full refresh of the cleansed layer from the raw layer.

    Args:
        engine: Warehouse engine.
        config: Cleansing vocabularies (defaults when omitted).
        clock: Source of the run timestamp. It stamps ``dwh_create_date``
            and its date is the cutoff for future birth dates.

    Returns:
        CleansedRefreshReport with row counts per table.

    Raises:
        WarehouseNotInitializedError: If raw or cleansed tables are missing.
        pandera.errors.SchemaError: If a transform produces invalid rows.
    """
    config = config or CleansingConfig()
    ensure_initialized(engine, RAW)
    ensure_initialized(engine, CLEANSED)

    loaded_at = clock()
    transforms = build_transforms(config, loaded_at)
    contracts = build_contracts(config)
    report = CleansedRefreshReport(loaded_at=loaded_at)

    with log_context(layer=CLEANSED):
        log.info("Starting cleansed layer refresh", loaded_at=loaded_at.isoformat())

        for entity in ENTITIES:
            with log_context(table=entity):
                report.results.append(
                    _refresh_table(
                        engine, entity, transforms[entity], contracts[entity], loaded_at
                    )
                )

        log.info(
            "Cleansed layer refresh completed",
            tables=len(report.results),
            rows=report.total_rows,
        )

    return report
