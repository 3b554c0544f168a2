"""
Pytest configuration and shared fixtures.

Provides small synthetic sources: a single-assay BioMatrix addressed by two
alias schemes and a MultiAssayExperiment with RNA, mutation and IC50 panels.
"""

import numpy as np
import pandas as pd
import pytest

from tidybio.core.biomatrix import BioMatrix
from tidybio.core.experiment import MultiAssayExperiment


def make_matrix(
    values,
    feature_ids,
    sample_ids,
    aliases=None,
    sample_metadata=None,
    original=None,
    data_type="assay",
) -> BioMatrix:
    """
    Build a BioMatrix from nested lists.

    Args:
        values: Rows of values (features × samples)
        feature_ids: Internal feature ids
        sample_ids: Sample ids
        aliases: {column: [alias per feature]} for feature_metadata
        sample_metadata: {column: [value per sample]} for sample_metadata
        original: Rows of raw string values, or None
        data_type: Assay tag
    """
    feature_index = pd.Index(feature_ids)
    sample_index = pd.Index(sample_ids)
    return BioMatrix(
        data=np.array(values, dtype=float),
        feature_ids=feature_index,
        sample_ids=sample_index,
        sample_metadata=pd.DataFrame(sample_metadata or {}, index=sample_index),
        feature_metadata=pd.DataFrame(aliases or {}, index=feature_index),
        original=None if original is None else np.array(original, dtype=object),
        data_type=data_type,
    )


def generate_synthetic_experiment(n_genes: int = 6, n_samples: int = 4, seed: int = 42):
    """
    Generate a MultiAssayExperiment with RNA, mutation and IC50 panels.

    Genes are GENE0..GENEn under "Symbol" and gene0..genen under
    "gene_name"; internal ids are ENSG-like. Drugs are DRUG0..DRUG2 under
    "drug_name".
    """
    rng = np.random.RandomState(seed)
    feature_ids = [f"ENSG{i:011d}" for i in range(n_genes)]
    sample_ids = [f"S{i + 1}" for i in range(n_samples)]
    aliases = {
        "Symbol": [f"GENE{i}" for i in range(n_genes)],
        "gene_name": [f"gene{i}" for i in range(n_genes)],
    }
    samples = {"cell_line": [f"LINE{i + 1}" for i in range(n_samples)]}

    rna = make_matrix(
        rng.lognormal(mean=2, sigma=1, size=(n_genes, n_samples)),
        feature_ids, sample_ids, aliases, samples, data_type="rna",
    )
    calls = rng.randint(0, 2, size=(n_genes, n_samples)).astype(float)
    mutation = make_matrix(
        calls, feature_ids, sample_ids, aliases, samples,
        original=np.where(calls == 1, "p.V600E", "wt"),
        data_type="mutation",
    )
    ic50 = make_matrix(
        rng.uniform(0.01, 10, size=(3, n_samples)),
        [f"D{i}" for i in range(3)], sample_ids,
        {"drug_name": [f"DRUG{i}" for i in range(3)]}, samples,
        data_type="ic50",
    )
    return MultiAssayExperiment(
        experiments={"rna": rna, "mutation": mutation},
        responses={"ic50": ic50},
    )


def tall_row(sample_id, assayed_id, value, data_type="rna"):
    return {
        "sample_id": sample_id,
        "assayed_id": assayed_id,
        "data_type": data_type,
        "original": str(value),
        "value": value,
    }


@pytest.fixture
def braf_egfr_matrix():
    """Two genes (BRAF, EGFR) × two samples (S1, S2), internal Ensembl ids."""
    return make_matrix(
        [[1.0, 2.0], [3.0, 4.0]],
        ["ENSG00000157764", "ENSG00000146648"],
        ["S1", "S2"],
        aliases={"Symbol": ["BRAF", "EGFR"], "gene_name": ["B-Raf", "EGF receptor"]},
        sample_metadata={"cell_line": ["A375_SKIN", "MCF7_BREAST"]},
        data_type="rna",
    )


@pytest.fixture
def experiment():
    """Synthetic multi-assay experiment (6 genes × 4 samples, 3 drugs)."""
    return generate_synthetic_experiment()


@pytest.fixture
def tall_table():
    """Tall table: 3 samples × 2 genes, one measurement each."""
    rows = []
    for i, sample in enumerate(["S1", "S2", "S3"]):
        rows.append(tall_row(sample, "geneA", float(i)))
        rows.append(tall_row(sample, "geneB", float(10 + i)))
    return pd.DataFrame(rows)


@pytest.fixture
def response_table():
    """Response table: two drugs measured on S1 and S2 only."""
    rows = [
        tall_row("S1", "DRUG0", 0.5, data_type="ic50"),
        tall_row("S1", "DRUG1", 1.5, data_type="ic50"),
        tall_row("S2", "DRUG0", 2.5, data_type="ic50"),
        tall_row("S2", "DRUG1", 3.5, data_type="ic50"),
    ]
    return pd.DataFrame(rows)


@pytest.fixture
def matrix_factory():
    """Factory for ad-hoc BioMatrix sources (see make_matrix)."""
    return make_matrix
