"""
Schema registry for versioning and discovery.

Provides centralized access to the raw and cleansed data contracts, keyed by
the qualified warehouse table name (``raw.crm_cust_info``).
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

import pandera.pandas as pa

from salesdwh.schemas.cleansed import (
    CleansedCustomerSchema,
    CleansedErpCategorySchema,
    CleansedErpCustomerSchema,
    CleansedErpLocationSchema,
    CleansedProductSchema,
    CleansedSalesSchema,
)
from salesdwh.schemas.raw import (
    RawCustomerSchema,
    RawErpCategorySchema,
    RawErpCustomerSchema,
    RawErpLocationSchema,
    RawProductSchema,
    RawSalesSchema,
)

if TYPE_CHECKING:
    import pandas as pd


class DataRole(Enum):
    """Warehouse layer a data contract belongs to."""

    RAW = "raw"
    CLEANSED = "cleansed"


@dataclass(frozen=True)
class SchemaInfo:
    """Metadata about a registered schema."""

    name: str
    schema: type[pa.DataFrameModel]
    version: str
    role: DataRole
    description: str


def _info(
    name: str,
    schema: type[pa.DataFrameModel],
    role: DataRole,
    description: str,
) -> tuple[str, SchemaInfo]:
    return name, SchemaInfo(
        name=name, schema=schema, version="1.0.0", role=role, description=description
    )


class SchemaRegistry:
    """
    Centralized registry for all data schemas.

    Provides version tracking and schema discovery.
    """

    _version = "1.0.0"

    _schemas: ClassVar[dict[str, SchemaInfo]] = dict(
        [
            _info(
                "raw.crm_cust_info",
                RawCustomerSchema,
                DataRole.RAW,
                "CRM customer master data",
            ),
            _info(
                "raw.crm_prd_info",
                RawProductSchema,
                DataRole.RAW,
                "CRM product history",
            ),
            _info(
                "raw.crm_sales_details",
                RawSalesSchema,
                DataRole.RAW,
                "CRM sales order lines",
            ),
            _info(
                "raw.erp_cust_az12",
                RawErpCustomerSchema,
                DataRole.RAW,
                "ERP customer demographics",
            ),
            _info(
                "raw.erp_loc_a101",
                RawErpLocationSchema,
                DataRole.RAW,
                "ERP customer locations",
            ),
            _info(
                "raw.erp_px_cat_g1v2",
                RawErpCategorySchema,
                DataRole.RAW,
                "ERP product categories",
            ),
            _info(
                "cleansed.crm_cust_info",
                CleansedCustomerSchema,
                DataRole.CLEANSED,
                "Latest record per CRM customer, standardized",
            ),
            _info(
                "cleansed.crm_prd_info",
                CleansedProductSchema,
                DataRole.CLEANSED,
                "CRM products with category id and validity range",
            ),
            _info(
                "cleansed.crm_sales_details",
                CleansedSalesSchema,
                DataRole.CLEANSED,
                "CRM sales with real dates and consistent amounts",
            ),
            _info(
                "cleansed.erp_cust_az12",
                CleansedErpCustomerSchema,
                DataRole.CLEANSED,
                "ERP demographics with canonical ids and genders",
            ),
            _info(
                "cleansed.erp_loc_a101",
                CleansedErpLocationSchema,
                DataRole.CLEANSED,
                "ERP locations with canonical country names",
            ),
            _info(
                "cleansed.erp_px_cat_g1v2",
                CleansedErpCategorySchema,
                DataRole.CLEANSED,
                "ERP product categories",
            ),
        ]
    )

    @classmethod
    def registry_version(cls) -> str:
        """Get the registry version."""
        return cls._version

    @classmethod
    def get(cls, name: str) -> type[pa.DataFrameModel]:
        """
        Get a schema by qualified table name.

        Args:
            name: Schema identifier, e.g. ``raw.crm_cust_info``.

        Returns:
            The Pandera DataFrameModel class.

        Raises:
            KeyError: If schema not found.
        """
        return cls.get_info(name).schema

    @classmethod
    def get_info(cls, name: str) -> SchemaInfo:
        """
        Get full schema info by name.

        Args:
            name: Schema identifier.

        Returns:
            SchemaInfo with metadata.
        """
        if name not in cls._schemas:
            available = ", ".join(cls._schemas.keys())
            msg = f"Unknown schema '{name}'. Available: {available}"
            raise KeyError(msg)
        return cls._schemas[name]

    @classmethod
    def list_schemas(cls) -> list[str]:
        """List all registered schema names."""
        return list(cls._schemas.keys())

    @classmethod
    def list_by_role(cls, role: DataRole) -> list[str]:
        """List schemas filtered by their data role."""
        return [name for name, info in cls._schemas.items() if info.role == role]

    @classmethod
    def validate(cls, df: "pd.DataFrame", schema_name: str) -> "pd.DataFrame":
        """
        Validate a DataFrame against a registered schema.

        Args:
            df: DataFrame to validate.
            schema_name: Name of schema to validate against.

        Returns:
            Validated DataFrame.

        Raises:
            pandera.errors.SchemaError: If validation fails.
        """
        schema = cls.get(schema_name)
        return schema.validate(df)
