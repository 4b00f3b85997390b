"""
Table definitions for the three warehouse layers.

One SQLAlchemy ``Table`` per entity and layer. The namespace of a table is
its SQL schema (an attached database when the warehouse is SQLite).
"""

from sqlalchemy import Column, Date, DateTime, Float, Integer, MetaData, String, Table

RAW = "raw"
CLEANSED = "cleansed"
CURATED = "curated"

NAMESPACES: tuple[str, ...] = (RAW, CLEANSED, CURATED)

metadata = MetaData()


def _text(name: str) -> Column:
    return Column(name, String(50), nullable=True)


def _audit() -> Column:
    return Column("dwh_create_date", DateTime, nullable=False)


# Raw layer: source data as ingested, column order matches the CSV exports

raw_crm_cust_info = Table(
    "crm_cust_info",
    metadata,
    Column("cst_id", Integer),
    _text("cst_key"),
    _text("cst_firstname"),
    _text("cst_lastname"),
    _text("cst_marital_status"),
    _text("cst_gndr"),
    Column("cst_create_date", Date),
    schema=RAW,
)

raw_crm_prd_info = Table(
    "crm_prd_info",
    metadata,
    Column("prd_id", Integer),
    _text("prd_key"),
    _text("prd_nm"),
    Column("prd_cost", Integer),
    _text("prd_line"),
    Column("prd_start_dt", DateTime),
    Column("prd_end_dt", DateTime),
    schema=RAW,
)

raw_crm_sales_details = Table(
    "crm_sales_details",
    metadata,
    _text("sls_ord_num"),
    _text("sls_prd_key"),
    Column("sls_cust_id", Integer),
    Column("sls_order_dt", Integer),
    Column("sls_ship_dt", Integer),
    Column("sls_due_dt", Integer),
    Column("sls_sales", Integer),
    Column("sls_quantity", Integer),
    Column("sls_price", Integer),
    schema=RAW,
)

raw_erp_cust_az12 = Table(
    "erp_cust_az12",
    metadata,
    _text("cid"),
    Column("bdate", Date),
    _text("gen"),
    schema=RAW,
)

raw_erp_loc_a101 = Table(
    "erp_loc_a101",
    metadata,
    _text("cid"),
    _text("cntry"),
    schema=RAW,
)

raw_erp_px_cat_g1v2 = Table(
    "erp_px_cat_g1v2",
    metadata,
    _text("id"),
    _text("cat"),
    _text("subcat"),
    _text("maintenance"),
    schema=RAW,
)

# Cleansed layer: standardized data plus load audit timestamp

cleansed_crm_cust_info = Table(
    "crm_cust_info",
    metadata,
    Column("cst_id", Integer),
    _text("cst_key"),
    _text("cst_firstname"),
    _text("cst_lastname"),
    _text("cst_marital_status"),
    _text("cst_gndr"),
    Column("cst_create_date", Date),
    _audit(),
    schema=CLEANSED,
)

cleansed_crm_prd_info = Table(
    "crm_prd_info",
    metadata,
    Column("prd_id", Integer),
    _text("cat_id"),
    _text("prd_key"),
    _text("prd_nm"),
    Column("prd_cost", Integer, nullable=False),
    _text("prd_line"),
    Column("prd_start_dt", Date),
    Column("prd_end_dt", Date),
    _audit(),
    schema=CLEANSED,
)

cleansed_crm_sales_details = Table(
    "crm_sales_details",
    metadata,
    _text("sls_ord_num"),
    _text("sls_prd_key"),
    Column("sls_cust_id", Integer),
    Column("sls_order_dt", Date),
    Column("sls_ship_dt", Date),
    Column("sls_due_dt", Date),
    Column("sls_sales", Integer),
    Column("sls_quantity", Integer),
    Column("sls_price", Float),
    _audit(),
    schema=CLEANSED,
)

cleansed_erp_cust_az12 = Table(
    "erp_cust_az12",
    metadata,
    _text("cid"),
    Column("bdate", Date),
    _text("gen"),
    _audit(),
    schema=CLEANSED,
)

cleansed_erp_loc_a101 = Table(
    "erp_loc_a101",
    metadata,
    _text("cid"),
    _text("cntry"),
    _audit(),
    schema=CLEANSED,
)

cleansed_erp_px_cat_g1v2 = Table(
    "erp_px_cat_g1v2",
    metadata,
    _text("id"),
    _text("cat"),
    _text("subcat"),
    _text("maintenance"),
    _audit(),
    schema=CLEANSED,
)

# Curated layer: denormalized dimensions and facts

curated_dim_customers = Table(
    "dim_customers",
    metadata,
    Column("customer_key", Integer, nullable=False),
    Column("customer_id", Integer),
    _text("customer_number"),
    _text("first_name"),
    _text("last_name"),
    _text("country"),
    _text("marital_status"),
    _text("gender"),
    Column("birthdate", Date),
    Column("create_date", Date),
    schema=CURATED,
)

curated_dim_products = Table(
    "dim_products",
    metadata,
    Column("product_key", Integer, nullable=False),
    Column("product_id", Integer),
    _text("product_number"),
    _text("product_name"),
    _text("category_id"),
    _text("category"),
    _text("subcategory"),
    _text("maintenance"),
    Column("cost", Integer),
    _text("product_line"),
    Column("start_date", Date),
    schema=CURATED,
)

curated_fact_sales = Table(
    "fact_sales",
    metadata,
    _text("order_number"),
    Column("product_key", Integer),
    Column("customer_key", Integer),
    Column("order_date", Date),
    Column("shipping_date", Date),
    Column("due_date", Date),
    Column("sales_amount", Integer),
    Column("quantity", Integer),
    Column("price", Float),
    schema=CURATED,
)

# Entities shared by the raw and cleansed layers, in load order
ENTITIES: tuple[str, ...] = (
    "crm_cust_info",
    "crm_prd_info",
    "crm_sales_details",
    "erp_cust_az12",
    "erp_loc_a101",
    "erp_px_cat_g1v2",
)


def get_table(namespace: str, name: str) -> Table:
    """
    Look up a table by namespace and name.

    Raises:
        KeyError: If the table is not defined.
    """
    key = f"{namespace}.{name}"
    if key not in metadata.tables:
        available = ", ".join(sorted(metadata.tables))
        msg = f"Unknown table '{key}'. Available: {available}"
        raise KeyError(msg)
    return metadata.tables[key]


def tables_in(namespace: str) -> list[Table]:
    """All tables of a namespace, in definition order."""
    return [t for t in metadata.tables.values() if t.schema == namespace]
