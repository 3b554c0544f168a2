"""
tidybio - Tidy tables from bioinformatics assay containers

Flattens expression matrices, pharmacological response panels and
multi-assay bundles into four long-format table shapes (tall, response,
genetic-vs-genetic, response-vs-genetic) that generic data-frame, plotting
and modelling code can consume.
"""

__version__ = "0.1.0"

from tidybio.core.biomatrix import BioMatrix
from tidybio.core.experiment import MultiAssayExperiment
from tidybio.core.source import SourceKind
from tidybio.core.exceptions import (
    TidyError,
    SchemaMismatchError,
    ConfigurationMismatchError,
    UnresolvedIdentifierError,
    AmbiguousIdentifierError,
)
from tidybio.tidy.formats import TidyFormat, FormatMatch, get_df_format, check_df_format
from tidybio.tidy.harmonize import convert_ids
from tidybio.tidy.reshape import make_genetic_vs_genetic, make_response_vs_genetic, to_wide
from tidybio.io.adapters import gather_assay, gather_response, gather_experiments
from tidybio.io.reference import load_cell_line_ids
from tidybio.extract import gather, gather_from_config

__all__ = [
    "BioMatrix",
    "MultiAssayExperiment",
    "SourceKind",
    "TidyError",
    "SchemaMismatchError",
    "ConfigurationMismatchError",
    "UnresolvedIdentifierError",
    "AmbiguousIdentifierError",
    "TidyFormat",
    "FormatMatch",
    "get_df_format",
    "check_df_format",
    "convert_ids",
    "make_genetic_vs_genetic",
    "make_response_vs_genetic",
    "to_wide",
    "gather_assay",
    "gather_response",
    "gather_experiments",
    "load_cell_line_ids",
    "gather",
    "gather_from_config",
]
