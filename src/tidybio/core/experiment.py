"""
Multi-assay container: several named BioMatrix objects plus response panels.

A MultiAssayExperiment bundles the assays measured on one cohort (expression,
copy number, mutation calls, ...) together with optional pharmacological
response panels (IC50, AUC per drug and cell line). Each assay is addressed
by its data_type name, which becomes the ``data_type`` column of gathered
tidy tables.

Examples:
    >>> from tidybio.core.experiment import MultiAssayExperiment
    >>> experiment = MultiAssayExperiment(
    ...     experiments={"rna": rna_matrix, "mutation": mut_matrix},
    ...     responses={"ic50": ic50_matrix},
    ... )
    >>> experiment.data_types
    ['rna', 'mutation']
    >>> experiment.response("ic50").n_features
    24
"""

from __future__ import annotations

from typing import Mapping, Optional

from tidybio.core.biomatrix import BioMatrix
from tidybio.core.source import SourceKind

__all__ = ['MultiAssayExperiment']


class MultiAssayExperiment:
    """
    Immutable mapping of data_type -> BioMatrix, with optional response panels.

    Attributes:
        experiments: Genetic/molecular assays keyed by data_type
        responses: Response/phenotype panels keyed by response type
            (rows are response identifiers such as drugs)

    Invariants:
        - at least one experiment
        - experiment and response names are disjoint
        - every value is a BioMatrix
    """

    kind = SourceKind.MULTI_ASSAY

    def __init__(
        self,
        experiments: Mapping[str, BioMatrix],
        responses: Optional[Mapping[str, BioMatrix]] = None,
    ):
        responses = dict(responses or {})
        experiments = dict(experiments)

        if not experiments:
            raise ValueError("MultiAssayExperiment requires at least one experiment")

        for label, group in (("experiment", experiments), ("response", responses)):
            for name, matrix in group.items():
                if not isinstance(name, str) or not name:
                    raise TypeError(f"{label} names must be non-empty strings, got {name!r}")
                if not isinstance(matrix, BioMatrix):
                    raise TypeError(
                        f"{label} '{name}' must be BioMatrix, got {type(matrix)}"
                    )

        overlap = sorted(set(experiments) & set(responses))
        if overlap:
            raise ValueError(
                f"Names used for both experiments and responses: {overlap}. "
                "data_type tags must be unique across the container."
            )

        self._experiments = experiments
        self._responses = responses

    @property
    def data_types(self) -> list[str]:
        """Names of the genetic/molecular assays, in insertion order."""
        return list(self._experiments)

    @property
    def response_types(self) -> list[str]:
        """Names of the response panels, in insertion order."""
        return list(self._responses)

    @property
    def has_responses(self) -> bool:
        return bool(self._responses)

    def experiment(self, data_type: str) -> BioMatrix:
        """
        Look up one assay by name.

        Raises:
            KeyError: If data_type is not an experiment of this container
        """
        try:
            return self._experiments[data_type]
        except KeyError:
            raise KeyError(
                f"Unknown data type '{data_type}'. Available: {self.data_types}"
            ) from None

    def response(self, response_type: str) -> BioMatrix:
        """
        Look up one response panel by name.

        Raises:
            KeyError: If response_type is not a response panel of this container
        """
        try:
            return self._responses[response_type]
        except KeyError:
            raise KeyError(
                f"Unknown response type '{response_type}'. Available: {self.response_types}"
            ) from None

    def __repr__(self) -> str:
        lines = [f"MultiAssayExperiment({len(self._experiments)} experiments, "
                 f"{len(self._responses)} response panels)"]
        for name, matrix in self._experiments.items():
            lines.append(f"  [{name}] {matrix.n_features} features × {matrix.n_samples} samples")
        for name, matrix in self._responses.items():
            lines.append(f"  [{name}] (response) {matrix.n_features} × {matrix.n_samples}")
        return "\n".join(lines)
