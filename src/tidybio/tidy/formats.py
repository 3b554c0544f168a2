"""
Tidy table formats: registry, detection and validation.

Four canonical long-format shapes carry every table tidybio produces:

    tall      one measurement per row
              sample_id, assayed_id, data_type, original, value
    response  same columns as tall, holding response/phenotype readouts
              (drug sensitivity, screen scores) rather than genetic features
    gvg       genetic-vs-genetic: two feature measurements of one sample
    rvg       response-vs-genetic: one response and one feature measurement

Matching is structural: a table is of a format when it has (at least) that
format's columns, whatever produced it. User-built tables interoperate with
the reshape engine as long as they carry the right columns. Because tall and
response share their columns, detection reports such tables as tall; the
response reading is the caller's intent.

Validation also rejects rows without a sample_id: every format joins on it,
and a null would otherwise be stringified into a shared fake sample.

Examples:
    >>> from tidybio.tidy.formats import TidyFormat, get_df_format, check_df_format
    >>> get_df_format(tall_table)
    FormatMatch(kind=<TidyFormat.TALL: 'tall'>, matched=True)
    >>> check_df_format(tall_table, TidyFormat.GVG)
    Traceback (most recent call last):
    ...
    SchemaMismatchError: Table is not in 'gvg' format; missing columns: ['gene1', ...]
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

import numpy as np
import pandas as pd

from tidybio.core.exceptions import SchemaMismatchError

__all__ = [
    'TidyFormat',
    'TidySchema',
    'FormatMatch',
    'SCHEMAS',
    'TALL_COLUMNS',
    'GVG_COLUMNS',
    'RVG_COLUMNS',
    'get_df_format',
    'check_df_format',
    'canonical_columns',
    'empty_table',
]


class TidyFormat(Enum):
    """Canonical tidy table shapes."""
    TALL = "tall"
    RESPONSE = "response"
    GVG = "gvg"
    RVG = "rvg"


@dataclass(frozen=True)
class TidySchema:
    """
    Column contract of one tidy format.

    Attributes:
        kind: Format this contract describes
        columns: Canonical column names, in output order
        numeric_columns: Subset of columns holding float values (may be NaN)
    """
    kind: TidyFormat
    columns: tuple[str, ...]
    numeric_columns: tuple[str, ...] = ()

    def missing_from(self, table: pd.DataFrame) -> list[str]:
        """Canonical columns absent from table, in contract order."""
        present = set(table.columns)
        return [c for c in self.columns if c not in present]

    def dtypes(self) -> dict[str, object]:
        return {
            c: (np.float64 if c in self.numeric_columns else object)
            for c in self.columns
        }


@dataclass(frozen=True)
class FormatMatch:
    """Result of format detection: which format matched, if any."""
    kind: Optional[TidyFormat]
    matched: bool


TALL_COLUMNS = ('sample_id', 'assayed_id', 'data_type', 'original', 'value')

GVG_COLUMNS = (
    'sample_id',
    'gene1', 'gene2',
    'feature_name1', 'feature_name2',
    'feature_type1', 'feature_type2',
    'feature_value1', 'feature_value2',
)

RVG_COLUMNS = (
    'sample_id',
    'resp_id', 'gene',
    'resp_name', 'feature_name',
    'resp_type', 'feature_type',
    'resp_value', 'feature_value',
)

SCHEMAS: dict[TidyFormat, TidySchema] = {
    TidyFormat.TALL: TidySchema(TidyFormat.TALL, TALL_COLUMNS, ('value',)),
    TidyFormat.RESPONSE: TidySchema(TidyFormat.RESPONSE, TALL_COLUMNS, ('value',)),
    TidyFormat.GVG: TidySchema(
        TidyFormat.GVG, GVG_COLUMNS, ('feature_value1', 'feature_value2')
    ),
    TidyFormat.RVG: TidySchema(
        TidyFormat.RVG, RVG_COLUMNS, ('resp_value', 'feature_value')
    ),
}

# RESPONSE is structurally TALL and never reported by detection.
_DETECTION_ORDER = (TidyFormat.GVG, TidyFormat.RVG, TidyFormat.TALL)


def _as_format(kind: Union[TidyFormat, str]) -> TidyFormat:
    if isinstance(kind, TidyFormat):
        return kind
    try:
        return TidyFormat(str(kind).lower())
    except ValueError:
        valid = [f.value for f in TidyFormat]
        raise ValueError(f"Unknown tidy format {kind!r}. Valid: {valid}") from None


def get_df_format(table: pd.DataFrame) -> FormatMatch:
    """
    Detect which canonical format a table is in.

    A table matches a format when its columns are exactly, or a superset of,
    that format's canonical columns.

    Args:
        table: Any DataFrame

    Returns:
        FormatMatch(kind, True) for the first matching format, or
        FormatMatch(None, False) when no format matches

    Examples:
        >>> get_df_format(pd.DataFrame({"x": [1]}))
        FormatMatch(kind=None, matched=False)
    """
    if not isinstance(table, pd.DataFrame):
        return FormatMatch(kind=None, matched=False)
    for kind in _DETECTION_ORDER:
        if not SCHEMAS[kind].missing_from(table):
            return FormatMatch(kind=kind, matched=True)
    return FormatMatch(kind=None, matched=False)


def check_df_format(table: pd.DataFrame, expected: Union[TidyFormat, str]) -> bool:
    """
    Validate that a table satisfies a format's column contract.

    Args:
        table: DataFrame to validate
        expected: TidyFormat or its name ("tall", "response", "gvg", "rvg")

    Returns:
        True when the contract holds

    Raises:
        SchemaMismatchError: If table is not a DataFrame, lacks canonical
            columns, or has a null sample_id
        ValueError: If expected is not a known format name
    """
    kind = _as_format(expected)
    if not isinstance(table, pd.DataFrame):
        raise SchemaMismatchError(
            f"Expected a pandas DataFrame in '{kind.value}' format, got {type(table).__name__}",
            kind=kind.value,
        )
    missing = SCHEMAS[kind].missing_from(table)
    if missing:
        raise SchemaMismatchError(
            f"Table is not in '{kind.value}' format; missing columns: {missing}. "
            f"Got columns: {list(table.columns)}",
            kind=kind.value,
            missing=missing,
        )
    n_null = int(table['sample_id'].isna().sum())
    if n_null:
        raise SchemaMismatchError(
            f"Table in '{kind.value}' format has {n_null} row(s) with a null sample_id",
            kind=kind.value,
        )
    return True


def canonical_columns(kind: Union[TidyFormat, str]) -> list[str]:
    """Canonical column names of a format, in output order."""
    return list(SCHEMAS[_as_format(kind)].columns)


def empty_table(kind: Union[TidyFormat, str]) -> pd.DataFrame:
    """
    Zero-row table carrying a format's canonical columns and dtypes.

    Filters and joins that select nothing return this, so an empty result is
    still a valid table of the requested format.
    """
    schema = SCHEMAS[_as_format(kind)]
    return pd.DataFrame(
        {c: pd.Series(dtype=t) for c, t in schema.dtypes().items()},
        columns=list(schema.columns),
    )
