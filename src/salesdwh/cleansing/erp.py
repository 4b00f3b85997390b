"""Cleansing rules for the ERP entities."""

from datetime import date

import pandas as pd

from salesdwh.cleansing.temporal import null_future_dates
from salesdwh.cleansing.vocabulary import map_codes, map_or_passthrough
from salesdwh.config.settings import CleansingConfig


def cleanse_erp_customers(
    df: pd.DataFrame,
    config: CleansingConfig,
    today: date,
) -> pd.DataFrame:
    """
    Standardize ERP customer demographics.

    Strips the legacy identifier prefix (``NAS123456`` -> ``123456``), drops
    birth dates after ``today`` and decodes gender.

    Args:
        df: Raw ERP customer rows.
        config: Identifier prefix and gender vocabulary.
        today: Run date; later birth dates become null.

    Returns:
        Cleansed ERP customers in input order.
    """
    prefix = config.customer_id_prefix
    cid = df["cid"].astype(object)
    prefixed = cid.str.startswith(prefix, na=False).astype(bool)

    return pd.DataFrame(
        {
            "cid": cid.where(~prefixed, cid.str.slice(len(prefix))),
            "bdate": null_future_dates(df["bdate"], today),
            "gen": map_codes(df["gen"], config.erp_gender, config.not_available),
        }
    ).reset_index(drop=True)


def cleanse_erp_locations(df: pd.DataFrame, config: CleansingConfig) -> pd.DataFrame:
    """Remove hyphens from customer ids and standardize country names."""
    return pd.DataFrame(
        {
            "cid": df["cid"].astype(object).str.replace("-", "", regex=False),
            "cntry": map_or_passthrough(
                df["cntry"], config.country, config.not_available
            ),
        }
    ).reset_index(drop=True)


def cleanse_erp_categories(df: pd.DataFrame) -> pd.DataFrame:
    """Categories are already clean; copied unchanged."""
    return df[["id", "cat", "subcat", "maintenance"]].reset_index(drop=True)
