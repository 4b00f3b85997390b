"""
Configuration management with typed Pydantic models.

Provides warehouse, source file and cleansing vocabulary configuration
with environment-aware YAML loading.
"""

from salesdwh.config.loader import load_config
from salesdwh.config.settings import (
    CleansingConfig,
    LoggingConfig,
    PipelineConfig,
    SourcesConfig,
    WarehouseConfig,
)

__all__ = [
    "CleansingConfig",
    "LoggingConfig",
    "PipelineConfig",
    "SourcesConfig",
    "WarehouseConfig",
    "load_config",
]
