"""
Core data structures for tidybio.

This module provides the source containers that extraction adapters read:

1. BioMatrix: Single assay matrix with sample and feature (alias) annotations
2. MultiAssayExperiment: Named assays plus optional response panels
3. SourceKind: Explicit discriminant used to dispatch extraction
4. Error types shared by every layer

Design Philosophy:
    - Immutability: All operations return new instances (functional style)
    - Explicit dispatch: adapters branch on ``source.kind``, not on class
    - Fail fast: constructors validate shapes and index alignment

Examples:
    >>> from tidybio.core import BioMatrix, MultiAssayExperiment, SourceKind
    >>> experiment = MultiAssayExperiment({"rna": rna_matrix})
    >>> experiment.kind is SourceKind.MULTI_ASSAY
    True
"""

from tidybio.core.biomatrix import BioMatrix
from tidybio.core.experiment import MultiAssayExperiment
from tidybio.core.source import SourceKind, Source
from tidybio.core.exceptions import (
    TidyError,
    SchemaMismatchError,
    ConfigurationMismatchError,
    UnresolvedIdentifierError,
    AmbiguousIdentifierError,
)

__all__ = [
    'BioMatrix',
    'MultiAssayExperiment',
    'SourceKind',
    'Source',
    'TidyError',
    'SchemaMismatchError',
    'ConfigurationMismatchError',
    'UnresolvedIdentifierError',
    'AmbiguousIdentifierError',
]
