"""
Cleansing rules for the CRM entities: customers, products and sales.

Each function is a pure transform from raw rows to cleansed rows (without
the audit column). Input row order does not affect the output.
"""

import pandas as pd

from salesdwh.cleansing.temporal import (
    as_date,
    day_before_next_start,
    keep_latest,
    parse_int_date,
)
from salesdwh.cleansing.vocabulary import map_codes, trim
from salesdwh.config.settings import CleansingConfig
from salesdwh.utils.logging import get_logger

log = get_logger(__name__)


def cleanse_customers(df: pd.DataFrame, config: CleansingConfig) -> pd.DataFrame:
    """
    Deduplicate and standardize CRM customers.

    One row per ``cst_id`` survives: the one with the latest creation date.
    Equal dates are decided by the greatest ``cst_key``, then by the remaining
    columns, so the winner never depends on input order.

    Args:
        df: Raw customer rows.
        config: Vocabularies for marital status and gender.

    Returns:
        Cleansed customers ordered by ``cst_id``.
    """
    dated = df.assign(cst_create_date=as_date(df["cst_create_date"]))
    latest = keep_latest(
        dated,
        key="cst_id",
        order_by=[
            "cst_create_date",
            "cst_key",
            "cst_firstname",
            "cst_lastname",
            "cst_marital_status",
            "cst_gndr",
        ],
    )
    if len(latest) < len(df):
        log.info("Dropped duplicate customers", rows=len(df) - len(latest))

    na = config.not_available
    return pd.DataFrame(
        {
            "cst_id": latest["cst_id"],
            "cst_key": latest["cst_key"],
            "cst_firstname": trim(latest["cst_firstname"]),
            "cst_lastname": trim(latest["cst_lastname"]),
            "cst_marital_status": map_codes(
                latest["cst_marital_status"], config.marital_status, na
            ),
            "cst_gndr": map_codes(latest["cst_gndr"], config.gender, na),
            "cst_create_date": latest["cst_create_date"],
        }
    ).reset_index(drop=True)


def cleanse_products(df: pd.DataFrame, config: CleansingConfig) -> pd.DataFrame:
    """
    Split product keys, fill costs, decode product lines and derive validity.

    The raw key ``CO-RF-FR-R92B-58`` yields category ``CO_RF`` and product
    key ``FR-R92B-58``. End dates are rebuilt from the start dates: each
    version ends the day before the next version of the same raw key starts.

    Args:
        df: Raw product rows.
        config: Product line vocabulary and category prefix width.

    Returns:
        Cleansed products ordered by raw key and start date.
    """
    width = config.category_id_length
    dated = df.assign(prd_start_dt=as_date(df["prd_start_dt"]))
    dated = dated.sort_values(
        ["prd_key", "prd_start_dt", "prd_id"], na_position="last", kind="mergesort"
    )
    raw_key = dated["prd_key"].astype(object)

    return pd.DataFrame(
        {
            "prd_id": dated["prd_id"],
            "cat_id": raw_key.str.slice(0, width).str.replace("-", "_", regex=False),
            "prd_key": raw_key.str.slice(width + 1),
            "prd_nm": dated["prd_nm"],
            "prd_cost": dated["prd_cost"].fillna(0).astype("Int64"),
            "prd_line": map_codes(
                dated["prd_line"], config.product_line, config.not_available
            ),
            "prd_start_dt": dated["prd_start_dt"],
            "prd_end_dt": day_before_next_start(
                dated, key="prd_key", start="prd_start_dt", tiebreak="prd_id"
            ),
        }
    ).reset_index(drop=True)


def cleanse_sales(df: pd.DataFrame) -> pd.DataFrame:
    """
    Convert integer dates and repair amounts and prices of sales lines.

    Price rule: a null or non-positive price becomes |sales| / quantity (null
    when quantity is 0). Amount rule: a null, non-positive or inconsistent
    amount becomes quantity * |raw price|; a consistent amount is kept.

    Args:
        df: Raw sales rows.

    Returns:
        Cleansed sales lines in input order.
    """
    quantity = df["sls_quantity"].astype("float64")
    raw_price = df["sls_price"].astype("float64")
    raw_sales = df["sls_sales"].astype("float64")

    bad_price = raw_price.isna() | (raw_price <= 0)
    derived_price = raw_sales.abs() / quantity.where(quantity != 0)
    price = raw_price.where(~bad_price, derived_price)

    expected = quantity * raw_price.abs()
    bad_sales = (
        raw_sales.isna()
        | (raw_sales <= 0)
        | (expected.notna() & (raw_sales != expected))
    )
    sales = raw_sales.where(~bad_sales, expected)

    log.debug(
        "Repaired sales lines",
        prices=int(bad_price.sum()),
        amounts=int(bad_sales.sum()),
    )

    return pd.DataFrame(
        {
            "sls_ord_num": df["sls_ord_num"],
            "sls_prd_key": df["sls_prd_key"],
            "sls_cust_id": df["sls_cust_id"],
            "sls_order_dt": parse_int_date(df["sls_order_dt"]),
            "sls_ship_dt": parse_int_date(df["sls_ship_dt"]),
            "sls_due_dt": parse_int_date(df["sls_due_dt"]),
            "sls_sales": sales.round().astype("Int64"),
            "sls_quantity": df["sls_quantity"],
            "sls_price": price,
        }
    ).reset_index(drop=True)
