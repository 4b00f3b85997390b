"""
salesdwh: CRM/ERP Sales Data Warehouse Pipeline.

This package loads raw CSV exports into a raw layer, cleanses them into a
cleansed layer and builds curated dimension and fact tables.
"""

from importlib.metadata import version

__version__ = version("salesdwh")

__all__ = ["__version__"]
