"""
Pandera schemas for the raw layer.

Raw tables mirror the CRM and ERP exports one to one. Every column is
nullable; only the column set and the column types are enforced.
"""

import pandas as pd
import pandera.pandas as pa
from pandera.typing import Series


class RawCustomerSchema(pa.DataFrameModel):
    """CRM customer master data (``cust_info.csv``)."""

    cst_id: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    cst_key: Series[str] = pa.Field(nullable=True)
    cst_firstname: Series[str] = pa.Field(nullable=True)
    cst_lastname: Series[str] = pa.Field(nullable=True)
    cst_marital_status: Series[str] = pa.Field(nullable=True)
    cst_gndr: Series[str] = pa.Field(nullable=True)
    cst_create_date: Series[pa.DateTime] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "RawCustomerSchema"
        strict = True
        ordered = True
        coerce = True


class RawProductSchema(pa.DataFrameModel):
    """CRM product history (``prd_info.csv``)."""

    prd_id: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    prd_key: Series[str] = pa.Field(
        nullable=True,
        description="Composite key: category prefix, '-', product key",
    )
    prd_nm: Series[str] = pa.Field(nullable=True)
    prd_cost: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    prd_line: Series[str] = pa.Field(nullable=True)
    prd_start_dt: Series[pa.DateTime] = pa.Field(nullable=True)
    prd_end_dt: Series[pa.DateTime] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "RawProductSchema"
        strict = True
        ordered = True
        coerce = True


class RawSalesSchema(pa.DataFrameModel):
    """
    CRM sales order lines (``sales_details.csv``).

    Dates are integers in YYYYMMDD form; 0 marks a missing date.
    """

    sls_ord_num: Series[str] = pa.Field(nullable=True)
    sls_prd_key: Series[str] = pa.Field(nullable=True)
    sls_cust_id: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_order_dt: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_ship_dt: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_due_dt: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_sales: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_quantity: Series[pd.Int64Dtype] = pa.Field(nullable=True)
    sls_price: Series[pd.Int64Dtype] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "RawSalesSchema"
        strict = True
        ordered = True
        coerce = True


class RawErpCustomerSchema(pa.DataFrameModel):
    """ERP customer demographics (``CUST_AZ12.csv``)."""

    cid: Series[str] = pa.Field(nullable=True)
    bdate: Series[pa.DateTime] = pa.Field(nullable=True)
    gen: Series[str] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "RawErpCustomerSchema"
        strict = True
        ordered = True
        coerce = True


class RawErpLocationSchema(pa.DataFrameModel):
    """ERP customer locations (``LOC_A101.csv``)."""

    cid: Series[str] = pa.Field(nullable=True)
    cntry: Series[str] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "RawErpLocationSchema"
        strict = True
        ordered = True
        coerce = True


class RawErpCategorySchema(pa.DataFrameModel):
    """ERP product categories (``PX_CAT_G1V2.csv``)."""

    id: Series[str] = pa.Field(nullable=True)
    cat: Series[str] = pa.Field(nullable=True)
    subcat: Series[str] = pa.Field(nullable=True)
    maintenance: Series[str] = pa.Field(nullable=True)

    class Config:
        """Schema configuration."""

        name = "RawErpCategorySchema"
        strict = True
        ordered = True
        coerce = True
