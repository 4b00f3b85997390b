"""
DataFrame reads and writes against warehouse tables.

Frames inside the pipeline use one dtype per SQL type: ``Int64`` for
integers, ``float64`` for floats, ``datetime64[ns]`` for dates and
timestamps, and ``object`` with ``None`` for text.
"""

import pandas as pd
from sqlalchemy import Connection, Date, DateTime, Float, Integer, Table, select

from salesdwh.utils.logging import get_logger

log = get_logger(__name__)


def conform_frame(df: pd.DataFrame, table: Table) -> pd.DataFrame:
    """
    Select a table's columns from a frame and cast them to pipeline dtypes.

    Args:
        df: Frame holding at least the table's columns.
        table: Target table.

    Returns:
        New frame with exactly the table's columns, in table order.

    Raises:
        KeyError: If a table column is missing from the frame.
        TypeError: If an integer column holds non-integral values.
    """
    names = [column.name for column in table.columns]
    missing = [name for name in names if name not in df.columns]
    if missing:
        msg = f"Frame is missing columns for {table.fullname}: {missing}"
        raise KeyError(msg)

    out = pd.DataFrame(index=df.index)
    for column in table.columns:
        series = df[column.name]
        if isinstance(column.type, (Date, DateTime)):
            out[column.name] = pd.to_datetime(series)
        elif isinstance(column.type, Integer):
            out[column.name] = series.astype("Int64")
        elif isinstance(column.type, Float):
            out[column.name] = series.astype("float64")
        else:
            out[column.name] = series.astype(object).where(series.notna(), None)
    return out.reset_index(drop=True)


def _to_records(df: pd.DataFrame, table: Table) -> list[dict[str, object]]:
    """Convert a conformed frame to DBAPI-friendly row dictionaries."""
    values = pd.DataFrame(index=df.index)
    for column in table.columns:
        series = df[column.name]
        if isinstance(column.type, Date) and not isinstance(column.type, DateTime):
            values[column.name] = series.map(lambda v: v.date() if pd.notna(v) else None)
        elif isinstance(column.type, DateTime):
            values[column.name] = series.map(
                lambda v: v.to_pydatetime() if pd.notna(v) else None
            )
        else:
            values[column.name] = series.astype(object)
    values = values.astype(object).where(values.notna(), None)
    return values.to_dict(orient="records")


def truncate_table(conn: Connection, table: Table) -> None:
    """Delete every row of a table."""
    conn.execute(table.delete())


def write_frame(conn: Connection, table: Table, df: pd.DataFrame) -> int:
    """
    Insert the rows of a frame into a table.

    Args:
        conn: Open connection (the caller owns the transaction).
        table: Target table.
        df: Frame holding at least the table's columns.

    Returns:
        Number of rows inserted.
    """
    records = _to_records(conform_frame(df, table), table)
    if records:
        conn.execute(table.insert(), records)
    log.debug("Inserted rows", table=table.fullname, rows=len(records))
    return len(records)


def replace_table(conn: Connection, table: Table, df: pd.DataFrame) -> int:
    """Full refresh of a table: truncate, then insert the frame's rows."""
    log.info("Truncating table", table=table.fullname)
    truncate_table(conn, table)
    log.info("Inserting data", table=table.fullname)
    return write_frame(conn, table, df)


def read_frame(conn: Connection, table: Table) -> pd.DataFrame:
    """
    Read a whole table into a frame with pipeline dtypes.

    Args:
        conn: Open connection.
        table: Table to read.

    Returns:
        Frame with the table's columns.
    """
    df = pd.read_sql(select(table), conn)
    return conform_frame(df, table)
