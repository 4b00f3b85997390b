"""
Warehouse storage layer.

Table definitions for the raw, cleansed and curated namespaces, engine
creation, schema initialization and DataFrame I/O.
"""

from salesdwh.warehouse.engine import create_warehouse_engine
from salesdwh.warehouse.io import read_frame, replace_table, truncate_table, write_frame
from salesdwh.warehouse.schema import (
    WarehouseNotInitializedError,
    ensure_initialized,
    initialize_warehouse,
)
from salesdwh.warehouse.tables import CLEANSED, CURATED, ENTITIES, RAW, get_table

__all__ = [
    "CLEANSED",
    "CURATED",
    "ENTITIES",
    "RAW",
    "WarehouseNotInitializedError",
    "create_warehouse_engine",
    "ensure_initialized",
    "get_table",
    "initialize_warehouse",
    "read_frame",
    "replace_table",
    "truncate_table",
    "write_frame",
]
