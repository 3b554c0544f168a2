"""
Extraction adapters: pull tall-format rows out of assay containers.

Each adapter selects features and samples from a source matrix and melts the
resulting sub-matrix into one row per measurement:

    sample_id | assayed_id | data_type | original | value

Feature Addressing:
    Matrices are keyed by internal identifiers (Ensembl ids, probe ids, drug
    indices) while analysts ask for aliases ("BRAF", "Erlotinib"). Passing
    ``feature_col`` names the alias column of ``feature_metadata`` used to
    resolve requested aliases to internal ids; the alias becomes the
    ``assayed_id`` label. Samples are addressed the same way through
    ``sample_col`` and ``sample_metadata``. A selector of None means "all".

Unresolved Identifiers:
    Every adapter takes ``on_unresolved``:
    - "warn" (default): drop unresolved identifiers, emit a UserWarning
    - "ignore": drop silently
    - "raise": raise UnresolvedIdentifierError, nothing is returned

Duplicate Aliases:
    When an alias column names several internal rows identically (two probes
    for one gene symbol), the first row wins and a UserWarning reports the
    collision, keeping (sample_id, assayed_id, data_type) unique per call.

Examples:
    >>> from tidybio.io.adapters import gather_assay, gather_experiments
    >>>
    >>> # One assay, addressed by gene symbol
    >>> tall = gather_assay(rna, sample_ids=["S1"], feature_ids=["BRAF"],
    ...                     feature_col="Symbol")
    >>>
    >>> # Several assays with their own alias columns, plus drug response
    >>> tall = gather_experiments(
    ...     experiment,
    ...     feature_ids=["BRAF", "EGFR"],
    ...     data_types=["rna", "mutation"],
    ...     feature_cols=["Symbol", "gene_name"],
    ...     resp_ids=["Erlotinib"],
    ...     resp_col="drug_name",
    ... )
"""

from __future__ import annotations

import logging
import warnings
from typing import Iterable, Literal, Optional, Sequence, Union

import numpy as np
import pandas as pd

from tidybio.core.biomatrix import BioMatrix
from tidybio.core.exceptions import ConfigurationMismatchError, UnresolvedIdentifierError
from tidybio.core.source import Source, SourceKind
from tidybio.tidy.formats import TALL_COLUMNS, TidyFormat, empty_table

logger = logging.getLogger(__name__)

__all__ = [
    'OnUnresolved',
    'UNRESOLVED_POLICIES',
    'gather_assay',
    'gather_response',
    'gather_experiments',
    'concat_tall',
]

OnUnresolved = Literal["warn", "ignore", "raise"]
UNRESOLVED_POLICIES = ("warn", "ignore", "raise")


def _check_policy(on_unresolved: str) -> None:
    if on_unresolved not in UNRESOLVED_POLICIES:
        raise ValueError(
            f"on_unresolved must be one of {UNRESOLVED_POLICIES}, got {on_unresolved!r}"
        )


def _resolve(
    aliases: pd.Series,
    requested: Optional[Iterable[str]],
    column: Optional[str],
    data_type: str,
    what: str,
    on_unresolved: str,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Map requested aliases to matrix positions.

    Args:
        aliases: Alias per matrix row/column, in matrix order
        requested: Aliases to select (None = every row with an alias)
        column: Alias column name (None = internal ids), for messages
        data_type: Assay tag, for messages
        what: "feature" or "sample", for messages
        on_unresolved: Unresolved identifier policy

    Returns:
        (positions, labels): integer positions into the matrix axis and the
        alias label of each selected position
    """
    if requested is not None:
        requested = [str(r) for r in requested]
    values = aliases.to_numpy()
    positions = np.flatnonzero(pd.notna(values))
    labels = np.array([str(v) for v in values[positions]], dtype=object)

    duplicated = pd.Index(labels).duplicated(keep='first')
    if duplicated.any():
        dup_labels = set(labels[duplicated])
        affected = dup_labels if requested is None else dup_labels & set(requested)
        if affected:
            source = f"column '{column}'" if column else "ids"
            warnings.warn(
                f"Found {len(affected)} duplicate {what} aliases in {source} of "
                f"'{data_type}'. Using first occurrence of each.",
                UserWarning
            )
        positions = positions[~duplicated]
        labels = labels[~duplicated]

    if requested is None:
        return positions, labels

    lookup = pd.Series(positions, index=pd.Index(labels))
    wanted = list(dict.fromkeys(requested))
    found = [r for r in wanted if r in lookup.index]
    missing = [r for r in wanted if r not in lookup.index]

    if missing:
        if on_unresolved == "raise":
            raise UnresolvedIdentifierError(missing, column=column, data_type=data_type)
        if on_unresolved == "warn":
            shown = missing[:10]
            more = f" (+{len(missing) - 10} more)" if len(missing) > 10 else ""
            warnings.warn(
                f"{len(missing)} {what} identifier(s) not found in "
                f"{'column ' + repr(column) if column else 'ids'} of '{data_type}', "
                f"dropping: {shown}{more}",
                UserWarning
            )
        logger.debug(f"Unresolved {what} ids in '{data_type}': {missing}")

    return lookup.loc[found].to_numpy(dtype=int), np.array(found, dtype=object)


def _melt(
    matrix: BioMatrix,
    feature_pos: np.ndarray,
    feature_labels: np.ndarray,
    sample_pos: np.ndarray,
    sample_labels: np.ndarray,
    data_type: str,
) -> pd.DataFrame:
    """Melt the selected sub-matrix into tall rows (feature-major order)."""
    if len(feature_pos) == 0 or len(sample_pos) == 0:
        return empty_table(TidyFormat.TALL)

    rows, cols = np.ix_(feature_pos, sample_pos)
    values = matrix.data[rows, cols].ravel()
    if matrix.original is not None:
        raw = matrix.original[rows, cols].ravel()
        original = [None if pd.isna(o) else str(o) for o in raw]
    else:
        original = [None if np.isnan(v) else str(v) for v in values]

    n_features, n_samples = len(feature_pos), len(sample_pos)
    return pd.DataFrame(
        {
            'sample_id': np.tile(sample_labels, n_features),
            'assayed_id': np.repeat(feature_labels, n_samples),
            'data_type': data_type,
            'original': pd.Series(original, dtype=object),
            'value': values.astype(float),
        },
        columns=list(TALL_COLUMNS),
    )


def concat_tall(tables: Sequence[pd.DataFrame]) -> pd.DataFrame:
    """Row-wise union of tall tables (no join); empty input gives an empty table."""
    non_empty = [t for t in tables if len(t)]
    if not non_empty:
        return empty_table(TidyFormat.TALL)
    return pd.concat(non_empty, ignore_index=True)


def gather_assay(
    matrix: BioMatrix,
    sample_ids: Optional[Iterable[str]] = None,
    feature_ids: Optional[Iterable[str]] = None,
    sample_col: Optional[str] = None,
    feature_col: Optional[str] = None,
    data_type: Optional[str] = None,
    on_unresolved: OnUnresolved = "warn",
) -> pd.DataFrame:
    """
    Gather one assay matrix into a tall table.

    Args:
        matrix: Single-assay source
        sample_ids: Samples to keep (None = all), as sample_col aliases
        feature_ids: Features to keep (None = all), as feature_col aliases
        sample_col: sample_metadata column naming samples (None = sample_ids)
        feature_col: feature_metadata alias column (None = internal feature ids)
        data_type: Tag for the data_type column (default: matrix.data_type)
        on_unresolved: "warn", "ignore" or "raise"

    Returns:
        Tall table, one row per selected (feature, sample)

    Raises:
        TypeError: If matrix is not a single-assay source
        KeyError: If sample_col/feature_col is not an annotation column
        UnresolvedIdentifierError: If on_unresolved="raise" and ids are missing

    Examples:
        >>> gather_assay(rna, ["S1"], ["BRAF"], feature_col="Symbol")
          sample_id assayed_id data_type original  value
        0        S1       BRAF       rna      1.0    1.0
    """
    _check_policy(on_unresolved)
    if getattr(matrix, 'kind', None) is not SourceKind.SINGLE_ASSAY:
        raise TypeError(
            f"gather_assay expects a single-assay source, got {type(matrix).__name__}"
        )
    data_type = data_type or matrix.data_type

    feature_pos, feature_labels = _resolve(
        matrix.feature_aliases(feature_col), feature_ids, feature_col,
        data_type, "feature", on_unresolved,
    )
    sample_pos, sample_labels = _resolve(
        matrix.sample_aliases(sample_col), sample_ids, sample_col,
        data_type, "sample", on_unresolved,
    )

    table = _melt(matrix, feature_pos, feature_labels, sample_pos, sample_labels, data_type)
    logger.info(
        f"Gathered {len(table):,} rows from '{data_type}' "
        f"({len(feature_pos)} features × {len(sample_pos)} samples)"
    )
    return table


def gather_response(
    source: Source,
    resp_ids: Optional[Iterable[str]] = None,
    resp_col: Optional[str] = None,
    sample_ids: Optional[Iterable[str]] = None,
    sample_col: Optional[str] = None,
    resp_types: Optional[Sequence[str]] = None,
    on_unresolved: OnUnresolved = "warn",
) -> pd.DataFrame:
    """
    Gather response/phenotype panels into a tall (response) table.

    A multi-assay source contributes its response panels; a single BioMatrix
    is treated as one response panel tagged with its data_type.

    Args:
        source: MultiAssayExperiment with responses, or a response BioMatrix
        resp_ids: Response identifiers to keep (None = all), as resp_col aliases
        resp_col: feature_metadata alias column of the panels (e.g. "drug_name")
        sample_ids: Samples to keep (None = all)
        sample_col: sample_metadata column naming samples
        resp_types: Panels to gather (None = all panels of the source)
        on_unresolved: "warn", "ignore" or "raise"

    Raises:
        ConfigurationMismatchError: If the source has no response panels
        KeyError: If a requested panel does not exist
    """
    _check_policy(on_unresolved)
    resp_ids = None if resp_ids is None else list(resp_ids)
    sample_ids = None if sample_ids is None else list(sample_ids)
    if resp_types is not None:
        resp_types = list(dict.fromkeys(resp_types))
    if source.kind is SourceKind.SINGLE_ASSAY:
        if resp_types is not None and list(resp_types) != [source.data_type]:
            raise KeyError(
                f"Unknown response type(s) {list(resp_types)}. "
                f"Available: {[source.data_type]}"
            )
        panels = [(source.data_type, source)]
    else:
        if not source.has_responses:
            raise ConfigurationMismatchError(
                "Response data requested but the source has no response panels"
            )
        names = list(resp_types) if resp_types is not None else source.response_types
        panels = [(name, source.response(name)) for name in names]

    tables = [
        gather_assay(panel, sample_ids, resp_ids, sample_col, resp_col, name, on_unresolved)
        for name, panel in panels
    ]
    return concat_tall(tables)


def _per_type_columns(
    feature_cols: Union[None, str, Sequence[Optional[str]]],
    data_types: Sequence[str],
) -> list[Optional[str]]:
    """Align alias columns with data types (None/str broadcast, list positional)."""
    if feature_cols is None or isinstance(feature_cols, str):
        return [feature_cols] * len(data_types)
    cols = list(feature_cols)
    if len(cols) != len(data_types):
        raise ConfigurationMismatchError(
            f"feature_cols has {len(cols)} entries but {len(data_types)} data types "
            f"were requested ({list(data_types)}). Supply one alias column per data type."
        )
    return cols


def _unique_requests(
    data_types: Sequence[str],
    columns: Sequence[Optional[str]],
) -> tuple[list[str], list[Optional[str]]]:
    """Collapse repeated (data_type, column) requests; one column per data type."""
    chosen: dict[str, Optional[str]] = {}
    for data_type, column in zip(data_types, columns):
        if data_type in chosen and chosen[data_type] != column:
            raise ConfigurationMismatchError(
                f"Data type '{data_type}' requested with alias columns "
                f"{chosen[data_type]!r} and {column!r}; gather it once per call"
            )
        chosen.setdefault(data_type, column)
    return list(chosen), list(chosen.values())


def gather_experiments(
    source: Source,
    sample_ids: Optional[Iterable[str]] = None,
    feature_ids: Optional[Iterable[str]] = None,
    data_types: Optional[Sequence[str]] = None,
    feature_cols: Union[None, str, Sequence[Optional[str]]] = None,
    resp_ids: Optional[Iterable[str]] = None,
    resp_col: Optional[str] = None,
    resp_types: Optional[Sequence[str]] = None,
    sample_col: Optional[str] = None,
    on_unresolved: OnUnresolved = "warn",
) -> pd.DataFrame:
    """
    Gather several assays (and optionally responses) of a multi-assay source.

    Runs gather_assay once per data type and concatenates the tall tables by
    row. Response panels are gathered too when resp_ids or resp_types is
    given.

    Args:
        source: MultiAssayExperiment
        sample_ids: Samples to keep (None = all)
        feature_ids: Features to keep in every assay (None = all)
        data_types: Assays to gather (None = all experiments, [] = none)
        feature_cols: Alias column(s): None (internal ids), one name for all
            data types, or a list aligned positionally with data_types
        resp_ids: Response identifiers to keep (None = all, when gathering)
        resp_col: Alias column of the response panels
        resp_types: Response panels to gather (None = all, when gathering)
        sample_col: sample_metadata column naming samples, shared by all assays
        on_unresolved: "warn", "ignore" or "raise"

    Returns:
        Tall table, union of every per-type gather

    Raises:
        TypeError: If source is not a multi-assay source
        ConfigurationMismatchError: If feature_cols and data_types disagree in length,
            or one data type is requested with two different alias columns
        KeyError: If a data type is not an experiment of the source
    """
    _check_policy(on_unresolved)
    if getattr(source, 'kind', None) is not SourceKind.MULTI_ASSAY:
        raise TypeError(
            f"gather_experiments expects a multi-assay source, got {type(source).__name__}"
        )
    types = list(data_types) if data_types is not None else source.data_types
    types, columns = _unique_requests(types, _per_type_columns(feature_cols, types))
    # Materialise selectors once; they are consumed by every per-type gather
    feature_ids = None if feature_ids is None else list(feature_ids)
    sample_ids = None if sample_ids is None else list(sample_ids)
    matrices = [source.experiment(t) for t in types]

    tables = []
    for data_type, matrix, column in zip(types, matrices, columns):
        logger.debug(f"Gathering '{data_type}' via feature column {column!r}")
        tables.append(gather_assay(
            matrix, sample_ids, feature_ids, sample_col, column, data_type, on_unresolved,
        ))

    if resp_ids is not None or resp_types is not None:
        tables.append(gather_response(
            source, resp_ids, resp_col, sample_ids, sample_col, resp_types, on_unresolved,
        ))

    table = concat_tall(tables)
    logger.info(f"Gathered {len(table):,} rows across {len(tables)} table(s)")
    return table
