"""
Core validation logic for source exports.

Checks the CSV exports against the raw schemas without touching the
warehouse.
"""

from dataclasses import dataclass
from pathlib import Path

import pandas as pd
import pandera.pandas as pa

from salesdwh.config.settings import PipelineConfig
from salesdwh.ingestion.sources import SourceFileLoader
from salesdwh.schemas.registry import SchemaRegistry
from salesdwh.utils.logging import get_logger
from salesdwh.warehouse.tables import RAW

log = get_logger(__name__)


@dataclass
class ValidationResult:
    """Result of validating a single source export."""

    table_name: str
    schema_name: str
    file_path: Path
    exists: bool
    schema_valid: bool | None
    row_count: int | None
    error_message: str | None


class ValidationRunner:
    """
    Runs validation for all configured source exports.

    Each export is parsed exactly as the raw loader parses it and then
    checked against its raw schema.
    """

    def __init__(self, config: PipelineConfig) -> None:
        """
        Initialize validation runner.

        Args:
            config: Pipeline configuration containing source paths.
        """
        self.config = config

    def run(self) -> list[ValidationResult]:
        """
        Run validation for every source export in config.

        Returns:
            List of validation results, one per raw table.
        """
        return [
            self._validate_source(table_name, path)
            for table_name, path in self.config.sources.as_mapping().items()
        ]

    def _validate_source(self, table_name: str, file_path: Path) -> ValidationResult:
        """
        Validate a single export.

        Args:
            table_name: Raw table the export feeds.
            file_path: Resolved export path.

        Returns:
            ValidationResult for the export.
        """
        schema_name = f"{RAW}.{table_name}"

        if not file_path.exists():
            log.warning("Source file not found", table=table_name, path=str(file_path))
            return ValidationResult(
                table_name=table_name,
                schema_name=schema_name,
                file_path=file_path,
                exists=False,
                schema_valid=None,
                row_count=None,
                error_message="File not found",
            )

        df: pd.DataFrame | None = None
        try:
            df = SourceFileLoader(table_name, file_path).load(validate=False)
            SchemaRegistry.validate(df, schema_name)

        except pa.errors.SchemaError as e:
            error_msg = self._format_schema_error(e)
            log.error(
                "Schema validation failed",
                table=table_name,
                schema=schema_name,
                error=error_msg,
            )
            return ValidationResult(
                table_name=table_name,
                schema_name=schema_name,
                file_path=file_path,
                exists=True,
                schema_valid=False,
                row_count=len(df) if df is not None else None,
                error_message=error_msg,
            )

        except Exception as e:
            # Unreadable file, column count mismatch, unparsable integers
            error_msg = f"{type(e).__name__}: {e!s}"
            log.error("Validation error", table=table_name, error=error_msg)
            return ValidationResult(
                table_name=table_name,
                schema_name=schema_name,
                file_path=file_path,
                exists=True,
                schema_valid=False,
                row_count=None,
                error_message=error_msg,
            )

        log.info("Validation passed", table=table_name, rows=len(df))
        return ValidationResult(
            table_name=table_name,
            schema_name=schema_name,
            file_path=file_path,
            exists=True,
            schema_valid=True,
            row_count=len(df),
            error_message=None,
        )

    def _format_schema_error(self, error: pa.errors.SchemaError) -> str:
        """
        Format schema error for display.

        Args:
            error: Pandera SchemaError.

        Returns:
            Failure cases (first 5) or the first line of the message.
        """
        failures = getattr(error, "failure_cases", None)
        if isinstance(failures, pd.DataFrame):
            n_failures = len(failures)
            if n_failures > 5:
                failures_str = failures.head(5).to_string(index=False)
                return f"{n_failures} validation errors (showing first 5):\n{failures_str}"
            return f"{n_failures} validation error(s):\n{failures.to_string(index=False)}"

        return str(error).split("\n")[0][:200]
