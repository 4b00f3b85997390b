"""
Date handling for the cleansing rules.

Covers integer-encoded dates and validity ranges derived from the next
start date of the same key.
"""

from datetime import date

import pandas as pd


def as_date(series: pd.Series) -> pd.Series:
    """Cast to datetime64 truncated to the day; nulls become NaT."""
    return pd.to_datetime(series).dt.normalize()


def parse_int_date(series: pd.Series) -> pd.Series:
    """
    Convert YYYYMMDD integers to dates.

    Zero, null, anything not exactly eight characters long and values that
    are not calendar dates (``20230230``) become NaT.

    Args:
        series: Integer-encoded dates.

    Returns:
        datetime64 series.
    """
    text = series.astype("string")
    plausible = (series.notna() & (series != 0) & (text.str.len() == 8)).fillna(False)
    candidates = text.where(plausible.astype(bool))
    return pd.to_datetime(candidates, format="%Y%m%d", errors="coerce")


def null_future_dates(series: pd.Series, today: date) -> pd.Series:
    """Replace dates later than ``today`` with NaT."""
    dates = as_date(series)
    return dates.mask(dates > pd.Timestamp(today))


def day_before_next_start(
    df: pd.DataFrame,
    key: str,
    start: str,
    tiebreak: str,
) -> pd.Series:
    """
    End of each row's validity range: the next start date of the same key
    minus one day.

    Rows are ordered per key by start date ascending (null starts last, ties
    by ``tiebreak``). The last row of each key gets NaT. Null keys form one
    group of their own.

    Args:
        df: Frame with key, start and tiebreak columns.
        key: Grouping column.
        start: Start date column (datetime64).
        tiebreak: Column ordering rows with equal start dates.

    Returns:
        Series aligned to ``df.index``.
    """
    ordered = df.sort_values([key, start, tiebreak], na_position="last", kind="mergesort")
    next_start = ordered.groupby(key, dropna=False, sort=False)[start].shift(-1)
    return (next_start - pd.Timedelta(days=1)).reindex(df.index)


def keep_latest(df: pd.DataFrame, key: str, order_by: list[str]) -> pd.DataFrame:
    """
    Keep one row per key: the greatest by ``order_by``.

    Nulls sort before any value, so a null date only wins when every
    duplicate has a null date. Null keys are kept as one group.

    Args:
        df: Input rows.
        key: Deduplication column.
        order_by: Columns ranking duplicates, most significant first.

    Returns:
        Deduplicated frame sorted by key.
    """
    ordered = df.sort_values([key, *order_by], na_position="first", kind="mergesort")
    return ordered.drop_duplicates(subset=[key], keep="last")
