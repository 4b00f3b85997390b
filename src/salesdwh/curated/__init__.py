"""Curated layer: dimensions and facts for reporting."""

from salesdwh.curated.builder import (
    CuratedBuildReport,
    build_curated_layer,
    build_dim_customers,
    build_dim_products,
    build_fact_sales,
)

__all__ = [
    "CuratedBuildReport",
    "build_curated_layer",
    "build_dim_customers",
    "build_dim_products",
    "build_fact_sales",
]
