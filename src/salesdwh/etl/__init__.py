"""
Warehouse pipeline.

Orchestrates initialization, raw ingestion, cleansing and curation.
"""

from salesdwh.etl.pipeline import PipelineResult, WarehousePipeline, run_pipeline

__all__ = ["PipelineResult", "WarehousePipeline", "run_pipeline"]
