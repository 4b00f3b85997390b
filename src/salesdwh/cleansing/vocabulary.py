"""
Text standardization and controlled vocabularies.

Raw codes are matched after trimming and upper-casing, so ``' m '`` and
``'M'`` map to the same label.
"""

import pandas as pd

from salesdwh.utils.logging import get_logger

log = get_logger(__name__)


def trim(series: pd.Series) -> pd.Series:
    """Strip leading and trailing whitespace, keeping nulls."""
    return series.astype(object).str.strip()


def code_keys(series: pd.Series) -> pd.Series:
    """Lookup keys of raw codes: trimmed and upper-cased, nulls kept."""
    return trim(series).str.upper()


def map_codes(
    series: pd.Series,
    mapping: dict[str, str],
    default: str,
) -> pd.Series:
    """
    Map raw codes to labels of a controlled vocabulary.

    Args:
        series: Raw codes.
        mapping: Upper-case code -> label.
        default: Label for unknown, blank and null codes.

    Returns:
        Series holding only labels from ``mapping`` or ``default``.
    """
    labels = code_keys(series).map(mapping)
    unmapped = int(labels.isna().sum())
    if unmapped:
        log.debug("Unmapped codes set to default", column=series.name, rows=unmapped)
    return labels.fillna(default).astype(object)


def map_or_passthrough(
    series: pd.Series,
    mapping: dict[str, str],
    default: str,
) -> pd.Series:
    """
    Map known codes to labels and pass other values through trimmed.

    Blank and null values become ``default``.

    Args:
        series: Raw values.
        mapping: Upper-case code -> label.
        default: Value for blank and null inputs.

    Returns:
        Standardized series without nulls or blanks.
    """
    trimmed = trim(series)
    labels = trimmed.str.upper().map(mapping)
    result = labels.where(labels.notna(), trimmed)
    blank = trimmed.isna() | (trimmed == "")
    return result.where(~blank, default).astype(object)


def vocabulary_labels(mapping: dict[str, str], default: str) -> list[str]:
    """All labels a mapped column may hold."""
    return sorted({*mapping.values(), default})
