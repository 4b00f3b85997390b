"""
Source export ingestion.

Reads the CRM and ERP CSV exports. Each export has a header row and a fixed
column order matching its raw table; header names are not trusted, only the
column count is checked.
"""

import csv
from pathlib import Path
from typing import Any

import pandas as pd
import pandera.pandas as pa
from sqlalchemy import Integer, Table

from salesdwh.ingestion.base import DataLoader
from salesdwh.schemas.registry import SchemaRegistry
from salesdwh.utils.logging import get_logger
from salesdwh.warehouse.tables import RAW, get_table

log = get_logger(__name__)


def _check_field_counts(path: Path, expected: int, encoding: str) -> None:
    """Reject data rows whose field count differs from the header's."""
    with path.open(newline="", encoding=encoding) as f:
        reader = csv.reader(f)
        next(reader, None)
        for row in reader:
            # Blank lines are skipped by the frame reader as well
            if row and len(row) != expected:
                msg = (
                    f"{path.name} line {reader.line_num}: expected {expected} "
                    f"fields, saw {len(row)}"
                )
                raise ValueError(msg)


def _read_csv(
    path: Path,
    table: Table,
    dtypes: dict[str, Any],
    encoding: str,
) -> pd.DataFrame:
    columns = [column.name for column in table.columns]

    header = list(pd.read_csv(path, nrows=0, encoding=encoding).columns)
    if len(header) != len(columns):
        msg = (
            f"{path.name} has {len(header)} columns, "
            f"{table.fullname} expects {len(columns)}: {columns}"
        )
        raise ValueError(msg)

    _check_field_counts(path, len(columns), encoding)

    return pd.read_csv(
        path,
        header=0,
        names=columns,
        dtype=dtypes,
        encoding=encoding,
        keep_default_na=False,
        na_values=[""],
        index_col=False,
    )


def read_source_file(path: Path, table: Table) -> pd.DataFrame:
    """
    Read a CSV export positionally into the columns of a raw table.

    Empty unquoted fields become nulls; no other marker (such as ``NA``) is
    treated as null. Integer columns are parsed as nullable integers, every
    other column as text.

    Args:
        path: CSV file with a header row.
        table: Raw table whose column order the file follows.

    Returns:
        DataFrame with the table's column names.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the header or a row has the wrong field count, or a
            value cannot be parsed.
        pandas.errors.ParserError: If quoting is malformed.
    """
    if not path.exists():
        msg = f"Source file not found: {path}"
        raise FileNotFoundError(msg)

    dtypes: dict[str, Any] = {
        column.name: "Int64" if isinstance(column.type, Integer) else str
        for column in table.columns
    }

    # Try UTF-8 first, fall back to Latin-1 for legacy ERP exports
    try:
        return _read_csv(path, table, dtypes, "utf-8")
    except UnicodeDecodeError:
        log.warning("UTF-8 decode failed, retrying with Latin-1", path=str(path))
        return _read_csv(path, table, dtypes, "latin-1")


class SourceFileLoader(DataLoader[pa.DataFrameModel]):
    """Loader for one CSV export destined for one raw table."""

    def __init__(self, table_name: str, path: Path) -> None:
        """
        Initialize source file loader.

        Args:
            table_name: Raw table name, e.g. ``crm_cust_info``.
            path: Resolved path of the CSV export.
        """
        super().__init__(SchemaRegistry.get(f"{RAW}.{table_name}"))
        self.table = get_table(RAW, table_name)
        self.path = path

    def _load_raw(self) -> pd.DataFrame:
        """Load the CSV export positionally."""
        log.info("Reading source file", table=self.table.fullname, path=str(self.path))
        return read_source_file(self.path, self.table)
