"""
Data ingestion layer for loading source exports into the raw layer.

All source files are read through this module to ensure consistent
column order and schema validation at the system boundary.
"""

from salesdwh.ingestion.raw import RawLoadReport, TableLoadResult, load_raw_layer
from salesdwh.ingestion.sources import SourceFileLoader, read_source_file

__all__ = [
    "RawLoadReport",
    "SourceFileLoader",
    "TableLoadResult",
    "load_raw_layer",
    "read_source_file",
]
