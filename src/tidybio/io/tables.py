"""
CSV reading and writing for tidy tables.

Tidy tables are plain long-format frames, so CSV keeps them readable from R,
Excel and Python alike. Writing validates the format first; reading restores
float dtypes on numeric columns and string dtypes on identifier columns, so a
table read back is accepted by the reshape engine unchanged.

Examples:
    >>> from tidybio.io.tables import write_tidy_csv, read_tidy_csv
    >>> write_tidy_csv(gvg, Path("braf_vs_egfr.csv"), kind="gvg")
    >>> gvg = read_tidy_csv(Path("braf_vs_egfr.csv"), kind="gvg")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

import pandas as pd

from tidybio.tidy.formats import SCHEMAS, TidyFormat, check_df_format, get_df_format

logger = logging.getLogger(__name__)

__all__ = ['write_tidy_csv', 'read_tidy_csv']


def write_tidy_csv(
    table: pd.DataFrame,
    path: Path,
    kind: Optional[Union[TidyFormat, str]] = None,
) -> None:
    """
    Write a tidy table to CSV.

    Args:
        table: Tidy table
        path: Output CSV path (parent directories are created)
        kind: Format to validate against (None = detect; must be recognised)

    Raises:
        SchemaMismatchError: If the table does not satisfy its format
    """
    if kind is None:
        match = get_df_format(table)
        if not match.matched:
            check_df_format(table, TidyFormat.TALL)  # raises with missing columns
        kind = match.kind
    check_df_format(table, kind)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table.to_csv(path, index=False)
    logger.info(f"Wrote {len(table):,} rows to {path}")


def read_tidy_csv(path: Path, kind: Optional[Union[TidyFormat, str]] = None) -> pd.DataFrame:
    """
    Read a tidy table from CSV.

    Args:
        path: CSV path
        kind: Format to validate against (None = detect, unvalidated)

    Returns:
        Tidy table with numeric columns as float and other canonical columns
        as strings

    Raises:
        FileNotFoundError: If path does not exist
        SchemaMismatchError: If kind is given and the table does not satisfy it
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"CSV file not found: {path}")

    table = pd.read_csv(path, dtype=str, keep_default_na=False, na_values=[''])

    detected = kind if kind is not None else get_df_format(table).kind
    if detected is not None:
        check_df_format(table, detected)
        if not isinstance(detected, TidyFormat):
            detected = TidyFormat(str(detected).lower())
        schema = SCHEMAS[detected]
        for col in schema.columns:
            if col in schema.numeric_columns:
                table[col] = pd.to_numeric(table[col], errors='coerce')
            else:
                table[col] = table[col].astype(object).where(table[col].notna(), None)
    logger.info(f"Read {len(table):,} rows from {path}")
    return table
