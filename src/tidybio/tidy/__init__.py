"""
Tidy table formats and the operations over them.

Modules:
    formats: Format registry, detection (get_df_format) and validation
        (check_df_format)
    harmonize: Sample identifier conversion (convert_ids)
    reshape: Pairing tall tables into gvg/rvg tables
"""

from tidybio.tidy.formats import (
    SCHEMAS,
    FormatMatch,
    TidyFormat,
    TidySchema,
    canonical_columns,
    check_df_format,
    empty_table,
    get_df_format,
)
from tidybio.tidy.harmonize import convert_ids
from tidybio.tidy.reshape import make_genetic_vs_genetic, make_response_vs_genetic, to_wide

__all__ = [
    'SCHEMAS',
    'FormatMatch',
    'TidyFormat',
    'TidySchema',
    'canonical_columns',
    'check_df_format',
    'empty_table',
    'get_df_format',
    'convert_ids',
    'make_genetic_vs_genetic',
    'make_response_vs_genetic',
    'to_wide',
]
