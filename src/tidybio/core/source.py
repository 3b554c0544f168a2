"""
Source discriminant for extraction adapters.

Every container that can be gathered into a tidy table carries a ``kind``
attribute. Adapters select their code path from this tag rather than from
the runtime class of the source, so user-defined containers only need to
expose the same attributes and the right ``kind``.

Examples:
    >>> from tidybio.core.source import SourceKind
    >>> matrix.kind is SourceKind.SINGLE_ASSAY
    True
    >>> experiment.kind is SourceKind.MULTI_ASSAY
    True
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from tidybio.core.biomatrix import BioMatrix
    from tidybio.core.experiment import MultiAssayExperiment

__all__ = ['SourceKind', 'Source']


class SourceKind(Enum):
    """Shape of an extraction source."""
    SINGLE_ASSAY = "single_assay"  # one features x samples matrix
    MULTI_ASSAY = "multi_assay"    # named matrices plus optional response panels


Source = Union["BioMatrix", "MultiAssayExperiment"]
