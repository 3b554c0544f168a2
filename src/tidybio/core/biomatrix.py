"""
Core data structure for single-assay expression/feature matrices.

BioMatrix unifies numerical measurements with the annotations needed to
address them by human-facing names: per-sample metadata and per-feature
alias columns (gene symbol, gene name, drug name, ...).

Biological Context:
    Assay matrices are the fundamental data structure in genomics and
    pharmacogenomics:
    - Rows = features (genes, probes, drugs)
    - Columns = samples (cell lines, patients)
    - Values = measurements (expression, copy number, mutation calls, IC50)

    Rows are keyed by an internal identifier (Ensembl id, probe id, drug
    index) while analysts ask for features by alias ("BRAF", "Erlotinib").
    The feature_metadata table carries those aliases, one column per naming
    scheme, so the same row can be addressed as "Symbol" or "gene_name".

Engineering Design:
    - Immutable: Operations return new instances (functional style)
    - Type-safe: NumPy arrays for data, Pandas for metadata
    - Validated: Constructor checks shape and index consistency
    - Raw values: optional ``original`` array keeps the untransformed
      representation (e.g. "p.V600E" behind a binary mutation call)

Examples:
    >>> import numpy as np
    >>> import pandas as pd
    >>> from tidybio.core.biomatrix import BioMatrix
    >>>
    >>> matrix = BioMatrix(
    ...     data=np.array([[1.0, 2.0], [3.0, 4.0]]),
    ...     feature_ids=pd.Index(["ENSG00000157764", "ENSG00000146648"]),
    ...     sample_ids=pd.Index(["S1", "S2"]),
    ...     feature_metadata=pd.DataFrame(
    ...         {"Symbol": ["BRAF", "EGFR"]},
    ...         index=pd.Index(["ENSG00000157764", "ENSG00000146648"]),
    ...     ),
    ...     data_type="rna",
    ... )
    >>> matrix.feature_aliases("Symbol")["ENSG00000157764"]
    'BRAF'
"""

from __future__ import annotations

from typing import Optional
import numpy as np
import pandas as pd

from tidybio.core.source import SourceKind

__all__ = ['BioMatrix']


class BioMatrix:
    """
    Immutable container for an assay matrix + sample and feature annotations.

    Attributes:
        data: Numerical matrix (features × samples), float
        feature_ids: Internal row identifiers (e.g., Ensembl gene IDs)
        sample_ids: Column identifiers (e.g., cell line IDs)
        sample_metadata: Sample annotations, indexed by sample_ids
        feature_metadata: Feature alias columns, indexed by feature_ids
        original: Raw string representation per value (or None)
        data_type: Assay kind tag used when the matrix is gathered

    Shape Invariants:
        - data.shape[0] == len(feature_ids)
        - data.shape[1] == len(sample_ids)
        - original.shape == data.shape (when present)
        - sample_metadata.index equals sample_ids
        - feature_metadata.index equals feature_ids
    """

    kind = SourceKind.SINGLE_ASSAY

    def __init__(
        self,
        data: np.ndarray,
        feature_ids: pd.Index,
        sample_ids: pd.Index,
        sample_metadata: Optional[pd.DataFrame] = None,
        feature_metadata: Optional[pd.DataFrame] = None,
        original: Optional[np.ndarray] = None,
        data_type: str = "assay",
    ):
        """
        Initialize BioMatrix with validation.

        Args:
            data: Assay matrix (features × samples)
            feature_ids: Internal row identifiers
            sample_ids: Column identifiers
            sample_metadata: DataFrame indexed by sample_ids
                (default: empty frame with that index)
            feature_metadata: DataFrame of alias columns indexed by feature_ids
                (default: empty frame with that index)
            original: Raw value representations (same shape as data)
            data_type: Assay kind tag, e.g. "rna", "mutation", "ic50"

        Raises:
            ValueError: If shapes are inconsistent or indices don't match
            TypeError: If data types are incorrect
        """
        # Type validation
        if not isinstance(data, np.ndarray):
            raise TypeError(f"data must be np.ndarray, got {type(data)}")
        if not isinstance(feature_ids, pd.Index):
            raise TypeError(f"feature_ids must be pd.Index, got {type(feature_ids)}")
        if not isinstance(sample_ids, pd.Index):
            raise TypeError(f"sample_ids must be pd.Index, got {type(sample_ids)}")
        if sample_metadata is None:
            sample_metadata = pd.DataFrame(index=sample_ids)
        if feature_metadata is None:
            feature_metadata = pd.DataFrame(index=feature_ids)
        if not isinstance(sample_metadata, pd.DataFrame):
            raise TypeError(f"sample_metadata must be pd.DataFrame, got {type(sample_metadata)}")
        if not isinstance(feature_metadata, pd.DataFrame):
            raise TypeError(f"feature_metadata must be pd.DataFrame, got {type(feature_metadata)}")
        if original is not None and not isinstance(original, np.ndarray):
            raise TypeError(f"original must be np.ndarray, got {type(original)}")
        if not isinstance(data_type, str) or not data_type:
            raise TypeError(f"data_type must be a non-empty string, got {data_type!r}")

        # Shape validation
        if data.ndim != 2:
            raise ValueError(f"data must be 2D, got shape {data.shape}")

        n_features, n_samples = data.shape

        if len(feature_ids) != n_features:
            raise ValueError(
                f"feature_ids length ({len(feature_ids)}) must match data rows ({n_features})"
            )
        if len(sample_ids) != n_samples:
            raise ValueError(
                f"sample_ids length ({len(sample_ids)}) must match data columns ({n_samples})"
            )
        if original is not None and original.shape != data.shape:
            raise ValueError(
                f"original shape {original.shape} must match data shape {data.shape}"
            )

        # Index validation
        if not sample_metadata.index.equals(sample_ids):
            raise ValueError(
                "sample_metadata.index must match sample_ids exactly. "
                f"Got {len(sample_metadata.index)} metadata rows for {len(sample_ids)} samples."
            )
        if not feature_metadata.index.equals(feature_ids):
            raise ValueError(
                "feature_metadata.index must match feature_ids exactly. "
                f"Got {len(feature_metadata.index)} metadata rows for {len(feature_ids)} features."
            )

        # Store as private attributes (immutability by convention)
        self._data = data.astype(float, copy=False)
        self._feature_ids = feature_ids
        self._sample_ids = sample_ids
        self._sample_metadata = sample_metadata
        self._feature_metadata = feature_metadata
        self._original = original
        self._data_type = data_type

    @classmethod
    def from_frame(
        cls,
        frame: pd.DataFrame,
        feature_metadata: Optional[pd.DataFrame] = None,
        sample_metadata: Optional[pd.DataFrame] = None,
        data_type: str = "assay",
    ) -> BioMatrix:
        """
        Build a BioMatrix from a features × samples DataFrame.

        Examples:
            >>> frame = pd.DataFrame({"S1": [1.0, 3.0], "S2": [2.0, 4.0]},
            ...                      index=["g1", "g2"])
            >>> BioMatrix.from_frame(frame, data_type="rna").shape
            (2, 2)
        """
        feature_ids = pd.Index(frame.index)
        sample_ids = pd.Index(frame.columns)
        if feature_metadata is not None:
            feature_metadata = feature_metadata.loc[feature_ids]
        if sample_metadata is not None:
            sample_metadata = sample_metadata.loc[sample_ids]
        return cls(
            data=frame.to_numpy(dtype=float),
            feature_ids=feature_ids,
            sample_ids=sample_ids,
            sample_metadata=sample_metadata,
            feature_metadata=feature_metadata,
            data_type=data_type,
        )

    @property
    def data(self) -> np.ndarray:
        """Assay matrix (features × samples)."""
        return self._data

    @property
    def feature_ids(self) -> pd.Index:
        """Internal row identifiers."""
        return self._feature_ids

    @property
    def sample_ids(self) -> pd.Index:
        """Column identifiers."""
        return self._sample_ids

    @property
    def sample_metadata(self) -> pd.DataFrame:
        """Annotations for samples."""
        return self._sample_metadata

    @property
    def feature_metadata(self) -> pd.DataFrame:
        """Alias columns for features."""
        return self._feature_metadata

    @property
    def original(self) -> Optional[np.ndarray]:
        """Raw value representations, or None when data is already raw."""
        return self._original

    @property
    def data_type(self) -> str:
        """Assay kind tag."""
        return self._data_type

    @property
    def shape(self) -> tuple[int, int]:
        """Matrix dimensions (n_features, n_samples)."""
        return self._data.shape

    @property
    def n_features(self) -> int:
        return self._data.shape[0]

    @property
    def n_samples(self) -> int:
        return self._data.shape[1]

    def feature_aliases(self, column: Optional[str] = None) -> pd.Series:
        """
        Alias for every feature under one naming scheme.

        Args:
            column: Column of feature_metadata to read. None returns the
                internal ids themselves.

        Returns:
            Series indexed by internal feature id, values are aliases

        Raises:
            KeyError: If column is not in feature_metadata
        """
        if column is None:
            return pd.Series(self._feature_ids, index=self._feature_ids)
        if column not in self._feature_metadata.columns:
            raise KeyError(
                f"Feature column '{column}' not found. "
                f"Available: {list(self._feature_metadata.columns)}"
            )
        return self._feature_metadata[column]

    def sample_aliases(self, column: Optional[str] = None) -> pd.Series:
        """Alias for every sample under one naming scheme (see feature_aliases)."""
        if column is None:
            return pd.Series(self._sample_ids, index=self._sample_ids)
        if column not in self._sample_metadata.columns:
            raise KeyError(
                f"Sample column '{column}' not found. "
                f"Available: {list(self._sample_metadata.columns)}"
            )
        return self._sample_metadata[column]

    def select_samples(self, mask: np.ndarray | pd.Series) -> BioMatrix:
        """
        Subset matrix by samples (columns).

        Args:
            mask: Boolean array/Series or integer positions of samples to keep
                If Series, uses values and ignores index

        Returns:
            New BioMatrix with selected samples

        Raises:
            ValueError: If a boolean mask length doesn't match n_samples
        """
        mask = _as_indexer(mask, self.n_samples, "n_samples")
        return BioMatrix(
            data=self._data[:, mask],
            feature_ids=self._feature_ids,
            sample_ids=self._sample_ids[mask],
            sample_metadata=self._sample_metadata.iloc[mask],
            feature_metadata=self._feature_metadata,
            original=None if self._original is None else self._original[:, mask],
            data_type=self._data_type,
        )

    def select_features(self, mask: np.ndarray | pd.Series) -> BioMatrix:
        """
        Subset matrix by features (rows).

        Args:
            mask: Boolean array/Series or integer positions of features to keep

        Returns:
            New BioMatrix with selected features

        Raises:
            ValueError: If a boolean mask length doesn't match n_features

        Examples:
            >>> coding = matrix.select_features(matrix.feature_ids.str.startswith('ENSG'))
        """
        mask = _as_indexer(mask, self.n_features, "n_features")
        return BioMatrix(
            data=self._data[mask, :],
            feature_ids=self._feature_ids[mask],
            sample_ids=self._sample_ids,
            sample_metadata=self._sample_metadata,
            feature_metadata=self._feature_metadata.iloc[mask],
            original=None if self._original is None else self._original[mask, :],
            data_type=self._data_type,
        )

    def copy(self, deep: bool = True) -> BioMatrix:
        """
        Create a copy of this matrix.

        Args:
            deep: If True, copy all arrays. If False, share arrays (faster but mutable)
        """
        if deep:
            return BioMatrix(
                data=self._data.copy(),
                feature_ids=self._feature_ids.copy(),
                sample_ids=self._sample_ids.copy(),
                sample_metadata=self._sample_metadata.copy(),
                feature_metadata=self._feature_metadata.copy(),
                original=None if self._original is None else self._original.copy(),
                data_type=self._data_type,
            )
        return BioMatrix(
            data=self._data,
            feature_ids=self._feature_ids,
            sample_ids=self._sample_ids,
            sample_metadata=self._sample_metadata,
            feature_metadata=self._feature_metadata,
            original=self._original,
            data_type=self._data_type,
        )

    def __repr__(self) -> str:
        """String representation for debugging."""
        if self.n_features == 0 or self.n_samples == 0:
            return f"BioMatrix('{self.data_type}', {self.n_features} features × {self.n_samples} samples)"
        return (
            f"BioMatrix('{self.data_type}', {self.n_features} features × {self.n_samples} samples)\n"
            f"  Features: {self.feature_ids[0]}...{self.feature_ids[-1]}\n"
            f"  Samples: {self.sample_ids[0]}...{self.sample_ids[-1]}\n"
            f"  Feature columns: {list(self.feature_metadata.columns)}\n"
            f"  Metadata columns: {list(self.sample_metadata.columns)}"
        )

    def __str__(self) -> str:
        return self.__repr__()


def _as_indexer(mask: np.ndarray | pd.Series, n: int, label: str) -> np.ndarray:
    """Normalize a boolean mask or position list into an ndarray indexer."""
    if isinstance(mask, pd.Series):
        mask = mask.values
    mask = np.asarray(mask)
    if mask.size == 0 and mask.dtype != bool:
        mask = mask.astype(int)
    if mask.dtype == bool and len(mask) != n:
        raise ValueError(f"mask length ({len(mask)}) must match {label} ({n})")
    return mask
