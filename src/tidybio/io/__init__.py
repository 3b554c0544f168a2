"""
Extraction adapters and table I/O.

Key Functions:
    - gather_assay: One assay matrix -> tall table
    - gather_response: Response panels -> tall (response) table
    - gather_experiments: Several assays (+ responses) of a multi-assay source
    - load_cell_line_ids: Bundled cell line identifier crosswalk
    - write_tidy_csv / read_tidy_csv: Tidy tables to and from CSV

Examples:
    >>> from tidybio.io import gather_assay
    >>> tall = gather_assay(rna, feature_ids=["BRAF"], feature_col="Symbol")
"""

from tidybio.io.adapters import (
    UNRESOLVED_POLICIES,
    concat_tall,
    gather_assay,
    gather_experiments,
    gather_response,
)
from tidybio.io.reference import ID_TYPES, load_cell_line_ids
from tidybio.io.tables import read_tidy_csv, write_tidy_csv

__all__ = [
    'UNRESOLVED_POLICIES',
    'concat_tall',
    'gather_assay',
    'gather_experiments',
    'gather_response',
    'ID_TYPES',
    'load_cell_line_ids',
    'read_tidy_csv',
    'write_tidy_csv',
]
