"""
Schema definitions using Pandera for data validation.

All data contracts are defined here to ensure explicit,
validated data structures at every layer boundary.
"""

from salesdwh.schemas.cleansed import (
    CleansedCustomerSchema,
    CleansedErpCategorySchema,
    CleansedErpCustomerSchema,
    CleansedErpLocationSchema,
    CleansedProductSchema,
    CleansedSalesSchema,
    with_vocabulary,
)
from salesdwh.schemas.raw import (
    RawCustomerSchema,
    RawErpCategorySchema,
    RawErpCustomerSchema,
    RawErpLocationSchema,
    RawProductSchema,
    RawSalesSchema,
)
from salesdwh.schemas.registry import SchemaRegistry

__all__ = [
    "CleansedCustomerSchema",
    "CleansedErpCategorySchema",
    "CleansedErpCustomerSchema",
    "CleansedErpLocationSchema",
    "CleansedProductSchema",
    "CleansedSalesSchema",
    "RawCustomerSchema",
    "RawErpCategorySchema",
    "RawErpCustomerSchema",
    "RawErpLocationSchema",
    "RawProductSchema",
    "RawSalesSchema",
    "SchemaRegistry",
    "with_vocabulary",
]
