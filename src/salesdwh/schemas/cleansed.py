"""
Pandera schemas for the cleansed layer.

Controlled vocabulary columns are declared non-nullable here; the allowed
labels depend on configuration and are attached with ``with_vocabulary``.
"""

import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series


class CleansedCustomerSchema(pa.DataFrameModel):
    """Deduplicated, standardized CRM customers."""

    cst_id: Series[pd.Int64Dtype] = pa.Field(
        nullable=True,
        unique=True,
        description="At most one row per customer identifier",
    )
    cst_key: Series[str] = pa.Field(nullable=True)
    cst_firstname: Series[str] = pa.Field(nullable=True)
    cst_lastname: Series[str] = pa.Field(nullable=True)
    cst_marital_status: Series[str] = pa.Field(nullable=False)
    cst_gndr: Series[str] = pa.Field(nullable=False)
    cst_create_date: Series[pa.DateTime] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "CleansedCustomerSchema"
        strict = False
        coerce = True


class CleansedProductSchema(pa.DataFrameModel):
    """Standardized CRM products with validity ranges."""

    prd_id: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    cat_id: Series[str] = pa.Field(nullable=True)
    prd_key: Series[str] = pa.Field(nullable=True)
    prd_nm: Series[str] = pa.Field(nullable=True)
    prd_cost: Series[pd.Int64Dtype] = pa.Field(nullable=False)
    prd_line: Series[str] = pa.Field(nullable=False)
    prd_start_dt: Series[pa.DateTime] = pa.Field(nullable=True)
    prd_end_dt: Series[pa.DateTime] = pa.Field(nullable=True)

    @pa.dataframe_check
    def end_not_before_start(cls, df: pd.DataFrame) -> Series[bool]:
        """A validity range never ends more than one day before it starts."""
        valid = df["prd_end_dt"] >= df["prd_start_dt"] - pd.Timedelta(days=1)
        return valid | df["prd_end_dt"].isna() | df["prd_start_dt"].isna()

    class Config:
        """Schema configuration."""

        name = "CleansedProductSchema"
        strict = False
        coerce = True


class CleansedSalesSchema(pa.DataFrameModel):
    """Cleansed CRM sales order lines with real dates."""

    sls_ord_num: Series[str] = pa.Field(nullable=True)
    sls_prd_key: Series[str] = pa.Field(nullable=True)
    sls_cust_id: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_order_dt: Series[pa.DateTime] = pa.Field(nullable=True)
    sls_ship_dt: Series[pa.DateTime] = pa.Field(nullable=True)
    sls_due_dt: Series[pa.DateTime] = pa.Field(nullable=True)
    sls_sales: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_quantity: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_price: Series[float] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "CleansedSalesSchema"
        strict = False
        coerce = True


class CleansedErpCustomerSchema(pa.DataFrameModel):
    """Standardized ERP customer demographics."""

    cid: Series[str] = pa.Field(nullable=True)
    bdate: Series[pa.DateTime] = pa.Field(nullable=True)
    gen: Series[str] = pa.Field(nullable=False)

    class Config:
        """Schema configuration."""

        name = "CleansedErpCustomerSchema"
        strict = False
        coerce = True


class CleansedErpLocationSchema(pa.DataFrameModel):
    """Standardized ERP customer locations."""

    cid: Series[str] = pa.Field(nullable=True)
    cntry: Series[str] = pa.Field(nullable=False, str_length={"min_value": 1})

    class Config:
        """Schema configuration."""

        name = "CleansedErpLocationSchema"
        strict = False
        coerce = True


class CleansedErpCategorySchema(pa.DataFrameModel):
    """ERP product categories (passed through)."""

    id: Series[str] = pa.Field(nullable=True)
    cat: Series[str] = pa.Field(nullable=True)
    subcat: Series[str] = pa.Field(nullable=True)
    maintenance: Series[str] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "CleansedErpCategorySchema"
        strict = False
        coerce = True


def with_vocabulary(
    model: type[pa.DataFrameModel],
    vocabularies: dict[str, list[str]],
) -> pa.DataFrameSchema:
    """
    Build a schema that restricts columns to fixed label sets.

    Args:
        model: Cleansed schema model.
        vocabularies: Column name -> allowed labels.

    Returns:
        DataFrameSchema with an ``isin`` check on each listed column.
    """
    schema = model.to_schema()
    for column, labels in vocabularies.items():
        existing = list(schema.columns[column].checks)
        schema = schema.update_column(
            column, checks=[*existing, pa.Check.isin(sorted(set(labels)))]
        )
    return schema
