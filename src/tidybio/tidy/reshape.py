"""
Reshape/join engine: pair tall measurements of the same sample.

Paired tables put two measurements of one sample on the same row, the shape
scatter plots and per-pair models want:

    gvg  genetic-vs-genetic   gene1/gene2, feature_value1/feature_value2
    rvg  response-vs-genetic  resp_id/gene, resp_value/feature_value

Join Semantics:
    Both sides are filtered (identifiers and data types, None = all) and then
    inner-joined on sample_id alone. Every feature of side A meets every
    feature of side B within a sample, so N × M requested identifiers yield
    up to N × M rows per sample. Samples missing from either side vanish.
    Pairing a table with itself keeps self pairs (gene1 == gene2) unless
    drop_self_pairs=True.

Labels:
    feature_name = "<assayed_id>_<data_type>", e.g. "BRAF_mutation"
    feature_type = data_type

Extra (non-canonical) columns of the left input, such as a ``tissue`` column
added by convert_ids, are carried through after the canonical columns.

Examples:
    >>> from tidybio.tidy.reshape import make_genetic_vs_genetic, make_response_vs_genetic
    >>> gvg = make_genetic_vs_genetic(tall, gene1_ids=["BRAF"], gene2_ids=["EGFR"])
    >>> rvg = make_response_vs_genetic(response, tall, resp_ids=["Erlotinib"],
    ...                                gene_ids=["EGFR"], gene_types=["rna"])
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional

import pandas as pd

from tidybio.tidy.formats import (
    GVG_COLUMNS,
    RVG_COLUMNS,
    TALL_COLUMNS,
    TidyFormat,
    check_df_format,
    empty_table,
)

logger = logging.getLogger(__name__)

__all__ = ['make_genetic_vs_genetic', 'make_response_vs_genetic', 'to_wide']


def _filter(
    table: pd.DataFrame,
    ids: Optional[Iterable[str]],
    data_types: Optional[Iterable[str]],
) -> pd.DataFrame:
    """Keep rows whose assayed_id/data_type are requested (None = all)."""
    mask = pd.Series(True, index=table.index)
    if ids is not None:
        mask &= table['assayed_id'].astype(str).isin([str(i) for i in ids])
    if data_types is not None:
        mask &= table['data_type'].astype(str).isin([str(t) for t in data_types])
    return table.loc[mask]


def _side(table: pd.DataFrame, names: dict[str, str], extra: list[str]) -> pd.DataFrame:
    """Rename one filtered tall table into the columns of one pair side."""
    side = pd.DataFrame({
        'sample_id': table['sample_id'].astype(str),
        names['id']: table['assayed_id'].astype(str),
        names['name']: table['assayed_id'].astype(str) + '_' + table['data_type'].astype(str),
        names['type']: table['data_type'].astype(str),
        names['value']: pd.to_numeric(table['value'], errors='coerce'),
    })
    for col in extra:
        side[col] = table[col]
    return side


def _pair(
    left: pd.DataFrame,
    right: pd.DataFrame,
    left_names: dict[str, str],
    right_names: dict[str, str],
    columns: tuple[str, ...],
    kind: TidyFormat,
) -> pd.DataFrame:
    extra = [c for c in left.columns if c not in TALL_COLUMNS]
    left_side = _side(left, left_names, extra)
    right_side = _side(right, right_names, [])

    if left_side.empty or right_side.empty:
        result = empty_table(kind)
        for col in extra:
            result[col] = pd.Series(dtype=left[col].dtype)
        return result

    paired = left_side.merge(right_side, on='sample_id', how='inner', sort=False)
    return paired[list(columns) + extra].reset_index(drop=True)


def make_genetic_vs_genetic(
    table_a: pd.DataFrame,
    gene1_ids: Optional[Iterable[str]] = None,
    gene2_ids: Optional[Iterable[str]] = None,
    table_b: Optional[pd.DataFrame] = None,
    data_types1: Optional[Iterable[str]] = None,
    data_types2: Optional[Iterable[str]] = None,
    drop_self_pairs: bool = False,
) -> pd.DataFrame:
    """
    Pair genetic measurements of the same sample (gvg format).

    Args:
        table_a: Tall table providing the first feature
        gene1_ids: assayed_ids kept from table_a (None = all)
        gene2_ids: assayed_ids kept from table_b (None = all)
        table_b: Tall table providing the second feature (None = table_a)
        data_types1: data_types kept from table_a (None = all)
        data_types2: data_types kept from table_b (None = all)
        drop_self_pairs: Drop rows pairing a feature with itself
            (same gene and same data type)

    Returns:
        gvg table, one row per (sample, feature A, feature B)

    Raises:
        SchemaMismatchError: If either input is not a tall table

    Examples:
        >>> a = pd.DataFrame({"sample_id": ["S1"], "assayed_id": ["geneA"],
        ...                   "data_type": ["rna"], "original": ["5.0"], "value": [5.0]})
        >>> b = a.assign(original="7.0", value=7.0)
        >>> make_genetic_vs_genetic(a, ["geneA"], ["geneA"], b)[["feature_value1", "feature_value2"]]
           feature_value1  feature_value2
        0             5.0             7.0
    """
    check_df_format(table_a, TidyFormat.TALL)
    if table_b is None:
        table_b = table_a
    else:
        check_df_format(table_b, TidyFormat.TALL)

    left = _filter(table_a, gene1_ids, data_types1)
    right = _filter(table_b, gene2_ids, data_types2)

    result = _pair(
        left, right,
        {'id': 'gene1', 'name': 'feature_name1', 'type': 'feature_type1', 'value': 'feature_value1'},
        {'id': 'gene2', 'name': 'feature_name2', 'type': 'feature_type2', 'value': 'feature_value2'},
        GVG_COLUMNS,
        TidyFormat.GVG,
    )

    if drop_self_pairs and len(result):
        same = (result['gene1'] == result['gene2']) & (result['feature_type1'] == result['feature_type2'])
        result = result.loc[~same].reset_index(drop=True)

    logger.info(
        f"Paired {len(left):,} x {len(right):,} rows into {len(result):,} gvg rows "
        f"({result['sample_id'].nunique() if len(result) else 0} samples)"
    )
    return result


def make_response_vs_genetic(
    table_a: pd.DataFrame,
    table_b: pd.DataFrame,
    resp_ids: Optional[Iterable[str]] = None,
    gene_ids: Optional[Iterable[str]] = None,
    resp_types: Optional[Iterable[str]] = None,
    gene_types: Optional[Iterable[str]] = None,
) -> pd.DataFrame:
    """
    Pair response measurements with genetic measurements (rvg format).

    Args:
        table_a: Response table (tall columns)
        table_b: Genetic tall table
        resp_ids: Response identifiers kept from table_a (None = all)
        gene_ids: assayed_ids kept from table_b (None = all)
        resp_types: data_types kept from table_a (None = all)
        gene_types: data_types kept from table_b (None = all)

    Returns:
        rvg table, one row per (sample, response, feature)

    Raises:
        SchemaMismatchError: If either input lacks the tall columns
    """
    check_df_format(table_a, TidyFormat.RESPONSE)
    check_df_format(table_b, TidyFormat.TALL)

    left = _filter(table_a, resp_ids, resp_types)
    right = _filter(table_b, gene_ids, gene_types)

    result = _pair(
        left, right,
        {'id': 'resp_id', 'name': 'resp_name', 'type': 'resp_type', 'value': 'resp_value'},
        {'id': 'gene', 'name': 'feature_name', 'type': 'feature_type', 'value': 'feature_value'},
        RVG_COLUMNS,
        TidyFormat.RVG,
    )
    logger.info(
        f"Paired {len(left):,} response x {len(right):,} genetic rows into {len(result):,} rvg rows"
    )
    return result


def to_wide(table: pd.DataFrame, index: str = 'sample_id') -> pd.DataFrame:
    """
    Pivot a tall table to a samples × feature_name matrix.

    Column labels are "<assayed_id>_<data_type>", matching feature_name in
    paired tables. Missing combinations are NaN.

    Raises:
        SchemaMismatchError: If table is not tall
        ValueError: If a (sample, feature, data_type) occurs more than once
    """
    check_df_format(table, TidyFormat.TALL)
    labels = table['assayed_id'].astype(str) + '_' + table['data_type'].astype(str)
    frame = pd.DataFrame({
        index: table[index].astype(str),
        'feature_name': labels,
        'value': pd.to_numeric(table['value'], errors='coerce'),
    })
    duplicated = frame.duplicated([index, 'feature_name'])
    if duplicated.any():
        raise ValueError(
            f"{int(duplicated.sum())} duplicate ({index}, feature) rows; "
            "a tall table must hold one measurement per sample and feature"
        )
    wide = frame.pivot(index=index, columns='feature_name', values='value')
    wide.columns.name = None
    return wide
