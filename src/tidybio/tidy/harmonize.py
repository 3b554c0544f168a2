"""
Sample identifier harmonization for tidy tables.

Tables gathered from different resources name the same sample differently
(CCLE name vs stripped name vs display name). convert_ids rewrites the
``sample_id`` column through an identifier map so tables from several
sources can be joined on a common scheme.

Conversion is an inner join: rows whose sample_id is absent from the map are
dropped and counted in the log. An identifier map may hold several schemes
at once (see tidybio.io.reference); when the same id occurs under more than
one scheme with different targets, filter the map first, or pass
``id_type=`` to do so here. Ambiguous maps are rejected rather than
multiplying rows.

Examples:
    >>> from tidybio.tidy.harmonize import convert_ids
    >>> id_map = pd.DataFrame({
    ...     "ccle": ["A375_SKIN", "MCF7_BREAST"],
    ...     "name": ["A375", "MCF7"],
    ...     "tissue": ["skin", "breast"],
    ... })
    >>> convert_ids(tall, id_map, from_col="ccle", to_col="name",
    ...             extra_cols=["tissue"])
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import pandas as pd

from tidybio.core.exceptions import AmbiguousIdentifierError, SchemaMismatchError
from tidybio.tidy.formats import SCHEMAS

logger = logging.getLogger(__name__)

__all__ = ['convert_ids']

_CANONICAL = {c for schema in SCHEMAS.values() for c in schema.columns}


def convert_ids(
    table: pd.DataFrame,
    id_map: pd.DataFrame,
    from_col: str,
    to_col: str,
    extra_cols: Sequence[str] = (),
    id_type: Optional[str] = None,
    id_type_col: str = 'id_type',
) -> pd.DataFrame:
    """
    Replace sample_id values using an identifier map.

    Args:
        table: Any tidy table with a sample_id column
        id_map: Identifier map holding from_col and to_col
        from_col: Map column matching the table's current sample_id values
        to_col: Map column holding the replacement identifiers
        extra_cols: Further map columns to append to the result
        id_type: If given, keep only map rows whose id_type_col equals it
        id_type_col: Scheme discriminator column of the map

    Returns:
        New table with converted sample_id, unmatched rows dropped, row order
        otherwise preserved

    Raises:
        SchemaMismatchError: If table has no sample_id column
        KeyError: If a requested map column is missing
        ValueError: If an extra column would overwrite a column of the table
        AmbiguousIdentifierError: If one from_col value maps to several targets
    """
    if not isinstance(table, pd.DataFrame) or 'sample_id' not in table.columns:
        raise SchemaMismatchError(
            "convert_ids requires a table with a 'sample_id' column",
            missing=['sample_id'],
        )
    extra_cols = list(extra_cols)
    required = [from_col, to_col] + extra_cols + ([id_type_col] if id_type is not None else [])
    missing = [c for c in dict.fromkeys(required) if c not in id_map.columns]
    if missing:
        raise KeyError(f"Identifier map is missing columns {missing}. Available: {list(id_map.columns)}")
    clashing = [c for c in extra_cols if c in table.columns or c in _CANONICAL]
    if clashing:
        raise ValueError(f"extra_cols {clashing} would overwrite existing or canonical columns")

    if id_type is not None:
        id_map = id_map[id_map[id_type_col] == id_type]
        logger.debug(f"Filtered identifier map to id_type '{id_type}': {len(id_map)} rows")

    keys = id_map[from_col]
    mapping = pd.DataFrame({'_from': keys.astype(str), '_to': id_map[to_col].astype(str)})
    for col in extra_cols:
        mapping[col] = id_map[col].to_numpy()
    mapping = mapping[keys.notna().to_numpy() & id_map[to_col].notna().to_numpy()]
    mapping = mapping.drop_duplicates()

    targets = mapping[['_from', '_to']].drop_duplicates()
    conflicting = targets.loc[targets['_from'].duplicated(keep=False), '_from'].unique()
    if len(conflicting):
        shown = list(conflicting[:10])
        raise AmbiguousIdentifierError(
            f"{len(conflicting)} '{from_col}' value(s) map to more than one target: {shown}. "
            f"Filter the identifier map to a single scheme (e.g. id_type=...) first."
        )
    conflicting = mapping.loc[mapping['_from'].duplicated(keep=False), '_from'].unique()
    if len(conflicting):
        shown = list(conflicting[:10])
        raise AmbiguousIdentifierError(
            f"{len(conflicting)} '{from_col}' value(s) have one target but conflicting "
            f"values in extra_cols {extra_cols}: {shown}"
        )

    lookup = mapping.set_index('_from')
    sample_ids = table['sample_id'].astype(str)
    matched = table['sample_id'].notna() & sample_ids.isin(lookup.index)

    result = table.loc[matched].copy()
    result['sample_id'] = sample_ids[matched].map(lookup['_to'])
    for col in extra_cols:
        result[col] = sample_ids[matched].map(lookup[col])
    result = result.reset_index(drop=True)

    n_total = len(table)
    n_matched = int(matched.sum())
    if n_total:
        logger.info(
            f"Converted sample ids '{from_col}' -> '{to_col}': {n_matched}/{n_total} rows "
            f"({100 * n_matched / n_total:.1f}%), dropped {n_total - n_matched}"
        )
    return result
