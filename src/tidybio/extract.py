"""
Combined extraction facade.

``gather`` is the one call most analyses need: it looks at the source's
``kind`` and drives the matching extraction adapter, returning one tall table
holding every requested assay (and, when asked, response data) stacked by
row. It never pairs rows; build gvg/rvg tables from its output with
tidybio.tidy.reshape.

Examples:
    >>> from tidybio import gather, make_response_vs_genetic
    >>> tall = gather(
    ...     experiment,
    ...     feature_ids=["BRAF", "EGFR"],
    ...     data_types=["rna", "mutation"],
    ...     feature_col=["Symbol", "gene_name"],
    ...     resp_ids=["Erlotinib"],
    ...     resp_col="drug_name",
    ... )
    >>> response = tall[tall["data_type"] == "ic50"]
    >>> genetic = tall[tall["data_type"] != "ic50"]
    >>> rvg = make_response_vs_genetic(response, genetic)
"""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Sequence, Union

import pandas as pd

from tidybio.config import GatherConfig
from tidybio.core.exceptions import ConfigurationMismatchError
from tidybio.core.source import Source, SourceKind
from tidybio.io.adapters import OnUnresolved, gather_assay, gather_experiments
from tidybio.tidy.formats import TidyFormat, check_df_format

logger = logging.getLogger(__name__)

__all__ = ['gather', 'gather_from_config']


def gather(
    source: Source,
    sample_ids: Optional[Iterable[str]] = None,
    feature_ids: Optional[Iterable[str]] = None,
    *,
    sample_col: Optional[str] = None,
    feature_col: Union[None, str, Sequence[Optional[str]]] = None,
    data_types: Optional[Sequence[str]] = None,
    resp_ids: Optional[Iterable[str]] = None,
    resp_col: Optional[str] = None,
    resp_types: Optional[Sequence[str]] = None,
    on_unresolved: OnUnresolved = "warn",
) -> pd.DataFrame:
    """
    Gather any supported source into one tall table.

    Single-assay sources are gathered whole (tagged with their data_type).
    Multi-assay sources gather each requested data type with its own alias
    column, plus response panels when resp_ids or resp_types is given.

    Args:
        source: BioMatrix or MultiAssayExperiment
        sample_ids: Samples to keep (None = all)
        feature_ids: Features to keep (None = all)
        sample_col: sample_metadata column naming samples
        feature_col: Alias column, or one per data type (multi-assay only)
        data_types: Assays to gather (multi-assay only; None = all)
        resp_ids: Response identifiers (multi-assay only)
        resp_col: Alias column of the response panels
        resp_types: Response panels to gather
        on_unresolved: "warn", "ignore" or "raise"

    Returns:
        Tall table

    Raises:
        ConfigurationMismatchError: On inconsistent arguments, e.g. response
            selectors on a single-assay source or per-type columns whose
            length differs from data_types
        ValueError: If source.kind is not a known SourceKind
    """
    kind = getattr(source, 'kind', None)

    if kind is SourceKind.SINGLE_ASSAY:
        if resp_ids is not None or resp_types is not None:
            raise ConfigurationMismatchError(
                "Response selectors were given but a single-assay source has no response panels"
            )
        if data_types is not None and list(data_types) != [source.data_type]:
            raise ConfigurationMismatchError(
                f"data_types {list(data_types)} do not match the single-assay source "
                f"'{source.data_type}'"
            )
        if feature_col is not None and not isinstance(feature_col, str):
            columns = list(feature_col)
            if len(columns) != 1:
                raise ConfigurationMismatchError(
                    f"feature_col has {len(columns)} entries for a single-assay source"
                )
            feature_col = columns[0]
        table = gather_assay(
            source, sample_ids, feature_ids, sample_col, feature_col,
            on_unresolved=on_unresolved,
        )
    elif kind is SourceKind.MULTI_ASSAY:
        table = gather_experiments(
            source,
            sample_ids=sample_ids,
            feature_ids=feature_ids,
            data_types=data_types,
            feature_cols=feature_col,
            resp_ids=resp_ids,
            resp_col=resp_col,
            resp_types=resp_types,
            sample_col=sample_col,
            on_unresolved=on_unresolved,
        )
    else:
        raise ValueError(
            f"Unsupported source {type(source).__name__}: expected a 'kind' of "
            f"{[k.value for k in SourceKind]}"
        )

    check_df_format(table, TidyFormat.TALL)
    if table.empty:
        logger.info("Gather selected no rows")
    return table


def gather_from_config(source: Source, config: Union[GatherConfig, dict]) -> pd.DataFrame:
    """
    Run gather with arguments from a GatherConfig (or a plain mapping).

    Examples:
        >>> config = GatherConfig.from_file("gather.yaml")
        >>> tall = gather_from_config(experiment, config)
    """
    if not isinstance(config, GatherConfig):
        config = GatherConfig.from_dict(config)
    kwargs = config.as_kwargs()
    return gather(
        source,
        kwargs.pop('sample_ids'),
        kwargs.pop('feature_ids'),
        **kwargs,
    )
