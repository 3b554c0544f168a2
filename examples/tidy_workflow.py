"""
Example: From a multi-assay cell line panel to tidy plotting tables

This script walks through the usual tidybio workflow on a small synthetic
panel of cell lines named with CCLE identifiers:

    1. Build a MultiAssayExperiment (RNA, mutation calls, IC50 response)
    2. Gather genes and a drug into one tall table
    3. Harmonize CCLE names to unified cell line ids with the bundled crosswalk
    4. Pair features (gvg) and drug response with features (rvg)

The resulting tables plug straight into seaborn/matplotlib or statsmodels,
e.g. ``sns.scatterplot(rvg, x="feature_value", y="resp_value")``.
"""

import logging

import numpy as np
import pandas as pd

from tidybio import (
    BioMatrix,
    MultiAssayExperiment,
    convert_ids,
    gather,
    load_cell_line_ids,
    make_genetic_vs_genetic,
    make_response_vs_genetic,
)


CELL_LINES = ["A375_SKIN", "SKMEL28_SKIN", "MCF7_BREAST", "T47D_BREAST", "HT29_LARGE_INTESTINE"]
GENES = pd.DataFrame(
    {"Symbol": ["BRAF", "EGFR", "ESR1"], "gene_name": ["B-Raf", "EGF receptor", "Estrogen receptor"]},
    index=["ENSG00000157764", "ENSG00000146648", "ENSG00000091831"],
)
DRUGS = pd.DataFrame({"drug_name": ["Vemurafenib", "Erlotinib"]}, index=["D001", "D002"])


def build_panel(seed: int = 7) -> MultiAssayExperiment:
    """Synthetic panel: BRAF mutant melanoma lines respond to vemurafenib."""
    rng = np.random.RandomState(seed)
    samples = pd.Index(CELL_LINES)

    rna = BioMatrix(
        data=rng.lognormal(mean=3, sigma=0.5, size=(len(GENES), len(samples))),
        feature_ids=GENES.index,
        sample_ids=samples,
        feature_metadata=GENES,
        data_type="rna",
    )

    braf_mutant = np.array([1, 1, 0, 0, 1], dtype=float)
    calls = np.vstack([braf_mutant, np.zeros(len(samples)), np.zeros(len(samples))])
    mutation = BioMatrix(
        data=calls,
        feature_ids=GENES.index,
        sample_ids=samples,
        feature_metadata=GENES,
        original=np.where(calls == 1, "p.V600E", "wt").astype(object),
        data_type="mutation",
    )

    ic50 = np.vstack([
        np.where(braf_mutant == 1, 0.2, 8.0) + rng.uniform(0, 0.5, len(samples)),
        rng.uniform(2, 10, len(samples)),
    ])
    response = BioMatrix(
        data=ic50,
        feature_ids=DRUGS.index,
        sample_ids=samples,
        feature_metadata=DRUGS,
        data_type="ic50",
    )

    return MultiAssayExperiment(
        experiments={"rna": rna, "mutation": mutation},
        responses={"ic50": response},
    )


def main():
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    panel = build_panel()
    print(panel)

    print("\n" + "=" * 70)
    print("Step 1: Gather BRAF/EGFR (two alias schemes) plus vemurafenib IC50")
    print("=" * 70)
    tall = gather(
        panel,
        feature_ids=["BRAF", "EGFR", "B-Raf"],
        data_types=["rna", "mutation"],
        feature_col=["Symbol", "gene_name"],
        resp_ids=["Vemurafenib"],
        resp_col="drug_name",
        on_unresolved="ignore",
    )
    print(tall.head(10).to_string(index=False))

    print("\n" + "=" * 70)
    print("Step 2: Harmonize CCLE names to unified cell line ids")
    print("=" * 70)
    tall = convert_ids(tall, load_cell_line_ids(), from_col="id", to_col="unified_id",
                       id_type="ccle")
    print(sorted(tall["sample_id"].unique()))

    response = tall[tall["data_type"] == "ic50"]
    genetic = tall[tall["data_type"] != "ic50"]

    print("\n" + "=" * 70)
    print("Step 3: BRAF mutation vs BRAF expression (gvg)")
    print("=" * 70)
    gvg = make_genetic_vs_genetic(genetic, ["B-Raf"], ["BRAF"],
                                  data_types1=["mutation"], data_types2=["rna"])
    print(gvg.to_string(index=False))

    print("\n" + "=" * 70)
    print("Step 4: Vemurafenib IC50 vs BRAF mutation (rvg)")
    print("=" * 70)
    rvg = make_response_vs_genetic(response, genetic, ["Vemurafenib"], ["B-Raf"],
                                   gene_types=["mutation"])
    print(rvg.groupby("feature_value")["resp_value"].mean())


if __name__ == "__main__":
    main()
