"""
Tests for the source containers: BioMatrix and MultiAssayExperiment.
"""

import numpy as np
import pandas as pd
import pytest

from tidybio.core.biomatrix import BioMatrix
from tidybio.core.experiment import MultiAssayExperiment
from tidybio.core.source import SourceKind


class TestBioMatrixValidation:
    """Constructor checks."""

    def test_defaults_fill_empty_metadata(self):
        matrix = BioMatrix(
            data=np.zeros((2, 3)),
            feature_ids=pd.Index(["f1", "f2"]),
            sample_ids=pd.Index(["s1", "s2", "s3"]),
        )
        assert matrix.shape == (2, 3)
        assert list(matrix.sample_metadata.index) == ["s1", "s2", "s3"]
        assert list(matrix.feature_metadata.index) == ["f1", "f2"]
        assert matrix.data_type == "assay"
        assert matrix.original is None
        assert matrix.kind is SourceKind.SINGLE_ASSAY

    def test_rejects_non_array_data(self):
        with pytest.raises(TypeError):
            BioMatrix([[1, 2]], pd.Index(["f1"]), pd.Index(["s1", "s2"]))

    def test_rejects_feature_length_mismatch(self):
        with pytest.raises(ValueError, match="feature_ids length"):
            BioMatrix(np.zeros((2, 2)), pd.Index(["f1"]), pd.Index(["s1", "s2"]))

    def test_rejects_misaligned_feature_metadata(self):
        with pytest.raises(ValueError, match="feature_metadata.index"):
            BioMatrix(
                np.zeros((2, 1)),
                pd.Index(["f1", "f2"]),
                pd.Index(["s1"]),
                feature_metadata=pd.DataFrame({"Symbol": ["A", "B"]}, index=["f2", "f1"]),
            )

    def test_rejects_original_shape_mismatch(self):
        with pytest.raises(ValueError, match="original shape"):
            BioMatrix(
                np.zeros((2, 2)),
                pd.Index(["f1", "f2"]),
                pd.Index(["s1", "s2"]),
                original=np.array([["a", "b"]], dtype=object),
            )


class TestBioMatrixAccess:
    """Alias lookup and subsetting."""

    def test_feature_aliases(self, braf_egfr_matrix):
        aliases = braf_egfr_matrix.feature_aliases("Symbol")
        assert aliases["ENSG00000157764"] == "BRAF"

    def test_feature_aliases_none_returns_ids(self, braf_egfr_matrix):
        aliases = braf_egfr_matrix.feature_aliases(None)
        assert list(aliases) == ["ENSG00000157764", "ENSG00000146648"]

    def test_unknown_alias_column(self, braf_egfr_matrix):
        with pytest.raises(KeyError, match="Symbl"):
            braf_egfr_matrix.feature_aliases("Symbl")
        with pytest.raises(KeyError):
            braf_egfr_matrix.sample_aliases("missing")

    def test_select_samples_keeps_alignment(self, braf_egfr_matrix):
        subset = braf_egfr_matrix.select_samples(np.array([False, True]))
        assert list(subset.sample_ids) == ["S2"]
        assert subset.data.tolist() == [[2.0], [4.0]]
        assert list(subset.sample_metadata["cell_line"]) == ["MCF7_BREAST"]
        assert subset.data_type == "rna"

    def test_select_features_by_position(self, braf_egfr_matrix):
        subset = braf_egfr_matrix.select_features(np.array([1]))
        assert list(subset.feature_metadata["Symbol"]) == ["EGFR"]

    def test_select_mask_length_checked(self, braf_egfr_matrix):
        with pytest.raises(ValueError, match="mask length"):
            braf_egfr_matrix.select_samples(np.array([True]))

    def test_copy_is_independent(self, braf_egfr_matrix):
        copied = braf_egfr_matrix.copy()
        copied.data[0, 0] = 99.0
        assert braf_egfr_matrix.data[0, 0] == 1.0

    def test_from_frame(self):
        frame = pd.DataFrame({"S1": [1.0, 3.0], "S2": [2.0, 4.0]}, index=["g1", "g2"])
        annotations = pd.DataFrame({"Symbol": ["EGFR", "BRAF"]}, index=["g2", "g1"])
        matrix = BioMatrix.from_frame(frame, feature_metadata=annotations, data_type="rna")
        assert matrix.feature_aliases("Symbol").tolist() == ["BRAF", "EGFR"]
        assert matrix.data_type == "rna"


class TestMultiAssayExperiment:
    """Multi-assay container invariants."""

    def test_names_and_kind(self, experiment):
        assert experiment.data_types == ["rna", "mutation"]
        assert experiment.response_types == ["ic50"]
        assert experiment.has_responses
        assert experiment.kind is SourceKind.MULTI_ASSAY

    def test_unknown_experiment(self, experiment):
        with pytest.raises(KeyError, match="Available"):
            experiment.experiment("cnv")
        with pytest.raises(KeyError):
            experiment.response("auc")

    def test_requires_experiments(self):
        with pytest.raises(ValueError, match="at least one"):
            MultiAssayExperiment({})

    def test_overlapping_names_rejected(self, braf_egfr_matrix):
        with pytest.raises(ValueError, match="both experiments and responses"):
            MultiAssayExperiment({"rna": braf_egfr_matrix}, {"rna": braf_egfr_matrix})

    def test_values_must_be_biomatrix(self):
        with pytest.raises(TypeError):
            MultiAssayExperiment({"rna": pd.DataFrame()})
