"""
Bundled cell line identifier crosswalk.

Cell line names differ between resources: CCLE uses "A375_SKIN", most
screens use the stripped "A375", publications write "A-375". The packaged
crosswalk maps every scheme to one unified identifier:

    unified_id | id_type | id
    A375       | ccle    | A375_SKIN
    A375       | display | A-375

The same ``id`` can occur under several schemes, so filter on ``id_type``
(or pass ``id_type=`` to convert_ids) before converting.

The table is read from package data on first use and cached for the life of
the process; callers receive a copy so the cached table never changes.

Examples:
    >>> from tidybio.io.reference import load_cell_line_ids
    >>> from tidybio.tidy.harmonize import convert_ids
    >>> ids = load_cell_line_ids()
    >>> unified = convert_ids(tall, ids, from_col="id", to_col="unified_id",
    ...                       id_type="ccle")
"""

from __future__ import annotations

import logging
from functools import lru_cache
from importlib import resources

import pandas as pd

logger = logging.getLogger(__name__)

__all__ = ['ID_TYPES', 'load_cell_line_ids']

ID_TYPES = ('ccle', 'stripped', 'display')

_RESOURCE = 'data/cell_line_ids.csv'


@lru_cache(maxsize=1)
def _cell_line_ids() -> pd.DataFrame:
    path = resources.files('tidybio').joinpath(_RESOURCE)
    with path.open('r', encoding='utf-8') as handle:
        table = pd.read_csv(handle, dtype=str, keep_default_na=False)
    logger.debug(f"Loaded {len(table)} cell line identifiers from package data")
    return table


def load_cell_line_ids() -> pd.DataFrame:
    """
    Cell line identifier crosswalk (unified_id, id_type, id).

    Returns:
        A fresh copy of the bundled table
    """
    return _cell_line_ids().copy()
