"""
Curated layer build.

Joins cleansed entities into a customer dimension, a product dimension and
a sales fact table. Dimensions get surrogate keys numbered from 1; the fact
table references them instead of the natural keys.
"""

import time
from dataclasses import dataclass, field

import pandas as pd
from sqlalchemy import Engine

from salesdwh.config.settings import CleansingConfig
from salesdwh.utils.logging import get_logger, log_context
from salesdwh.warehouse.io import read_frame, replace_table
from salesdwh.warehouse.schema import ensure_initialized
from salesdwh.warehouse.tables import CLEANSED, CURATED, get_table

log = get_logger(__name__)


@dataclass
class CuratedBuildReport:
    """Rows written per curated table, in build order."""

    rows: dict[str, int] = field(default_factory=dict)
    duration_s: float = 0.0

    @property
    def total_rows(self) -> int:
        """Rows written across all tables."""
        return sum(self.rows.values())


def _lookup(df: pd.DataFrame, key: str) -> pd.DataFrame:
    """
    One row per non-null key.

    Duplicates are resolved by the smallest remaining column values, so a
    join against the lookup never multiplies rows.
    """
    present = df[df[key].notna()]
    ordered = present.sort_values(list(present.columns), kind="mergesort")
    return ordered.drop_duplicates(subset=[key], keep="first")


def _surrogate_keys(n: int) -> pd.Series:
    return pd.Series(range(1, n + 1), dtype="Int64")


def build_dim_customers(
    customers: pd.DataFrame,
    erp_customers: pd.DataFrame,
    locations: pd.DataFrame,
    not_available: str = "n/a",
) -> pd.DataFrame:
    """
    Build the customer dimension.

    CRM customers are enriched with ERP birth date, gender and country on
    ``cst_key = cid``. The CRM gender wins unless it is ``not_available``.

    Args:
        customers: Cleansed CRM customers.
        erp_customers: Cleansed ERP customers.
        locations: Cleansed ERP locations.
        not_available: Sentinel of unmapped codes.

    Returns:
        dim_customers rows keyed 1..n by customer id.
    """
    erp = _lookup(erp_customers[["cid", "bdate", "gen"]], "cid")
    loc = _lookup(locations[["cid", "cntry"]], "cid")

    merged = (
        customers.merge(erp, how="left", left_on="cst_key", right_on="cid")
        .drop(columns="cid")
        .merge(loc, how="left", left_on="cst_key", right_on="cid")
        .sort_values(["cst_id", "cst_key"], na_position="last", kind="mergesort")
        .reset_index(drop=True)
    )

    crm_gender = merged["cst_gndr"]
    gender = crm_gender.where(crm_gender != not_available, merged["gen"])

    return pd.DataFrame(
        {
            "customer_key": _surrogate_keys(len(merged)),
            "customer_id": merged["cst_id"],
            "customer_number": merged["cst_key"],
            "first_name": merged["cst_firstname"],
            "last_name": merged["cst_lastname"],
            "country": merged["cntry"],
            "marital_status": merged["cst_marital_status"],
            "gender": gender.fillna(not_available),
            "birthdate": merged["bdate"],
            "create_date": merged["cst_create_date"],
        }
    )


def build_dim_products(products: pd.DataFrame, categories: pd.DataFrame) -> pd.DataFrame:
    """
    Build the product dimension from current product versions.

    Args:
        products: Cleansed products; only rows without an end date are used.
        categories: Cleansed ERP categories, joined on ``cat_id = id``.

    Returns:
        dim_products rows keyed 1..n by start date, then product number.
    """
    current = products[products["prd_end_dt"].isna()]
    cats = _lookup(categories[["id", "cat", "subcat", "maintenance"]], "id")

    merged = (
        current.merge(cats, how="left", left_on="cat_id", right_on="id")
        .sort_values(
            ["prd_start_dt", "prd_key", "prd_id"], na_position="last", kind="mergesort"
        )
        .reset_index(drop=True)
    )

    return pd.DataFrame(
        {
            "product_key": _surrogate_keys(len(merged)),
            "product_id": merged["prd_id"],
            "product_number": merged["prd_key"],
            "product_name": merged["prd_nm"],
            "category_id": merged["cat_id"],
            "category": merged["cat"],
            "subcategory": merged["subcat"],
            "maintenance": merged["maintenance"],
            "cost": merged["prd_cost"],
            "product_line": merged["prd_line"],
            "start_date": merged["prd_start_dt"],
        }
    )


def build_fact_sales(
    sales: pd.DataFrame,
    dim_products: pd.DataFrame,
    dim_customers: pd.DataFrame,
) -> pd.DataFrame:
    """
    Build the sales fact table.

    Sales keep their grain: each line is matched to at most one product and
    one customer. Unmatched lines keep null surrogate keys.

    Args:
        sales: Cleansed sales lines.
        dim_products: Product dimension.
        dim_customers: Customer dimension.

    Returns:
        fact_sales rows in sales order.
    """
    product_keys = _lookup(dim_products[["product_number", "product_key"]], "product_number")
    customer_keys = _lookup(dim_customers[["customer_id", "customer_key"]], "customer_id")

    merged = sales.merge(
        product_keys, how="left", left_on="sls_prd_key", right_on="product_number"
    ).merge(customer_keys, how="left", left_on="sls_cust_id", right_on="customer_id")

    return pd.DataFrame(
        {
            "order_number": merged["sls_ord_num"],
            "product_key": merged["product_key"],
            "customer_key": merged["customer_key"],
            "order_date": merged["sls_order_dt"],
            "shipping_date": merged["sls_ship_dt"],
            "due_date": merged["sls_due_dt"],
            "sales_amount": merged["sls_sales"],
            "quantity": merged["sls_quantity"],
            "price": merged["sls_price"],
        }
    )


def build_curated_layer(
    engine: Engine,
    config: CleansingConfig | None = None,
) -> CuratedBuildReport:
    """
    Full rebuild of the curated layer from the cleansed layer.

    Args:
        engine: Warehouse engine.
        config: Supplies the "not available" sentinel (defaults when omitted).

    Returns:
        CuratedBuildReport with row counts per table.

    Raises:
        WarehouseNotInitializedError: If cleansed or curated tables are missing.
    """
    config = config or CleansingConfig()
    ensure_initialized(engine, CLEANSED)
    ensure_initialized(engine, CURATED)

    started = time.perf_counter()
    report = CuratedBuildReport()

    with log_context(layer=CURATED):
        log.info("Starting curated layer build")

        with engine.connect() as conn:
            cleansed = {
                name: read_frame(conn, get_table(CLEANSED, name))
                for name in (
                    "crm_cust_info",
                    "crm_prd_info",
                    "crm_sales_details",
                    "erp_cust_az12",
                    "erp_loc_a101",
                    "erp_px_cat_g1v2",
                )
            }

        dim_customers = build_dim_customers(
            cleansed["crm_cust_info"],
            cleansed["erp_cust_az12"],
            cleansed["erp_loc_a101"],
            not_available=config.not_available,
        )
        dim_products = build_dim_products(
            cleansed["crm_prd_info"], cleansed["erp_px_cat_g1v2"]
        )
        fact_sales = build_fact_sales(
            cleansed["crm_sales_details"], dim_products, dim_customers
        )

        for name, frame in (
            ("dim_customers", dim_customers),
            ("dim_products", dim_products),
            ("fact_sales", fact_sales),
        ):
            table = get_table(CURATED, name)
            with engine.begin() as conn:
                report.rows[name] = replace_table(conn, table, frame)
            log.info("Built table", table=table.fullname, rows=report.rows[name])

        report.duration_s = time.perf_counter() - started
        log.info("Curated layer build completed", rows=report.total_rows)

    return report
