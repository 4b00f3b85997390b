"""
Cleansing layer: standardization, deduplication and repair of raw data.

Transforms are pure functions over DataFrames; the engine persists them.
"""

from salesdwh.cleansing.crm import cleanse_customers, cleanse_products, cleanse_sales
from salesdwh.cleansing.engine import (
    CleansedRefreshReport,
    TableRefreshResult,
    load_cleansed_layer,
)
from salesdwh.cleansing.erp import (
    cleanse_erp_categories,
    cleanse_erp_customers,
    cleanse_erp_locations,
)

__all__ = [
    "CleansedRefreshReport",
    "TableRefreshResult",
    "cleanse_customers",
    "cleanse_erp_categories",
    "cleanse_erp_customers",
    "cleanse_erp_locations",
    "cleanse_products",
    "cleanse_sales",
    "load_cleansed_layer",
]
