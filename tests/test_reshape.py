"""
Tests for the reshape/join engine (gvg and rvg tables, wide pivot).
"""

import pandas as pd
import pytest

from conftest import tall_row
from tidybio.core.exceptions import SchemaMismatchError
from tidybio.tidy.formats import GVG_COLUMNS, RVG_COLUMNS, TidyFormat, get_df_format
from tidybio.tidy.reshape import make_genetic_vs_genetic, make_response_vs_genetic, to_wide


class TestGeneticVsGenetic:
    """Self-join and two-table joins keyed on sample_id."""

    def test_two_tables_same_gene(self):
        a = pd.DataFrame([tall_row("S1", "geneA", 5.0)])
        b = pd.DataFrame([tall_row("S1", "geneA", 7.0)])
        gvg = make_genetic_vs_genetic(a, ["geneA"], ["geneA"], table_b=b)
        assert len(gvg) == 1
        row = gvg.iloc[0]
        assert row["sample_id"] == "S1"
        assert row["feature_value1"] == 5.0
        assert row["feature_value2"] == 7.0

    def test_rows_without_sample_are_not_paired(self):
        table = pd.DataFrame([tall_row(None, "geneA", 1.0), tall_row(None, "geneB", 2.0)])
        with pytest.raises(SchemaMismatchError, match="null sample_id"):
            make_genetic_vs_genetic(table, ["geneA"], ["geneB"])

    def test_one_row_per_sample_for_distinct_genes(self, tall_table):
        gvg = make_genetic_vs_genetic(tall_table, ["geneA"], ["geneB"])
        assert len(gvg) == tall_table["sample_id"].nunique()
        assert list(gvg.columns) == list(GVG_COLUMNS)
        assert get_df_format(gvg).kind is TidyFormat.GVG

    def test_cross_product_cardinality(self, tall_table):
        gvg = make_genetic_vs_genetic(tall_table, ["geneA", "geneB"], ["geneA", "geneB"])
        assert len(gvg) == 2 * 2 * 3

    def test_labels(self, tall_table):
        gvg = make_genetic_vs_genetic(tall_table, ["geneA"], ["geneB"])
        row = gvg.iloc[0]
        assert row["gene1"] == "geneA"
        assert row["feature_name2"] == "geneB_rna"
        assert row["feature_type1"] == "rna"

    def test_values_follow_samples(self, tall_table):
        gvg = make_genetic_vs_genetic(tall_table, ["geneA"], ["geneB"]).set_index("sample_id")
        assert gvg.loc["S2", "feature_value1"] == 1.0
        assert gvg.loc["S2", "feature_value2"] == 11.0

    def test_self_pairs_kept_by_default(self, tall_table):
        gvg = make_genetic_vs_genetic(tall_table, ["geneA"], ["geneA"])
        assert len(gvg) == 3
        assert (gvg["gene1"] == gvg["gene2"]).all()

    def test_drop_self_pairs(self, tall_table):
        gvg = make_genetic_vs_genetic(tall_table, drop_self_pairs=True)
        assert len(gvg) == 2 * 3
        assert not (gvg["gene1"] == gvg["gene2"]).any()

    def test_inner_join_drops_unshared_samples(self, tall_table):
        other = pd.DataFrame([tall_row("S1", "geneC", 1.0), tall_row("S9", "geneC", 2.0)])
        gvg = make_genetic_vs_genetic(tall_table, ["geneA"], ["geneC"], table_b=other)
        assert gvg["sample_id"].tolist() == ["S1"]

    def test_data_type_filters(self):
        table = pd.DataFrame([
            tall_row("S1", "BRAF", 1.0, "mutation"),
            tall_row("S1", "BRAF", 8.0, "rna"),
        ])
        gvg = make_genetic_vs_genetic(table, data_types1=["mutation"], data_types2=["rna"])
        assert len(gvg) == 1
        assert gvg.iloc[0]["feature_name1"] == "BRAF_mutation"
        assert gvg.iloc[0]["feature_name2"] == "BRAF_rna"

    def test_empty_result_keeps_columns(self, tall_table):
        gvg = make_genetic_vs_genetic(tall_table, ["nothing"], ["geneA"])
        assert gvg.empty
        assert list(gvg.columns) == list(GVG_COLUMNS)

    def test_extra_columns_carried(self, tall_table):
        annotated = tall_table.assign(tissue="skin")
        gvg = make_genetic_vs_genetic(annotated, ["geneA"], ["geneB"])
        assert list(gvg.columns) == list(GVG_COLUMNS) + ["tissue"]
        assert set(gvg["tissue"]) == {"skin"}

    def test_schema_checked(self, tall_table):
        with pytest.raises(SchemaMismatchError):
            make_genetic_vs_genetic(tall_table.drop(columns=["sample_id"]))
        with pytest.raises(SchemaMismatchError):
            make_genetic_vs_genetic(tall_table, table_b=pd.DataFrame({"x": [1]}))

    def test_inputs_not_mutated(self, tall_table):
        before = tall_table.copy()
        make_genetic_vs_genetic(tall_table, drop_self_pairs=True)
        pd.testing.assert_frame_equal(tall_table, before)


class TestResponseVsGenetic:
    """Response rows paired with genetic rows."""

    def test_pairs_per_sample(self, response_table, tall_table):
        rvg = make_response_vs_genetic(response_table, tall_table, ["DRUG0"], ["geneA"])
        assert list(rvg.columns) == list(RVG_COLUMNS)
        assert rvg["sample_id"].tolist() == ["S1", "S2"]
        row = rvg.set_index("sample_id").loc["S2"]
        assert row["resp_value"] == 2.5
        assert row["feature_value"] == 1.0
        assert row["resp_name"] == "DRUG0_ic50"
        assert row["feature_type"] == "rna"

    def test_all_combinations(self, response_table, tall_table):
        rvg = make_response_vs_genetic(response_table, tall_table)
        # 2 drugs × 2 genes × 2 shared samples
        assert len(rvg) == 8
        assert get_df_format(rvg).kind is TidyFormat.RVG

    def test_type_filters(self, response_table, tall_table):
        rvg = make_response_vs_genetic(response_table, tall_table,
                                       resp_types=["auc"], gene_types=["rna"])
        assert rvg.empty
        assert list(rvg.columns) == list(RVG_COLUMNS)

    def test_schema_checked(self, response_table):
        with pytest.raises(SchemaMismatchError):
            make_response_vs_genetic(response_table, pd.DataFrame({"sample_id": ["S1"]}))


class TestToWide:
    """Pivot to samples × features."""

    def test_pivot(self, tall_table):
        wide = to_wide(tall_table)
        assert list(wide.columns) == ["geneA_rna", "geneB_rna"]
        assert wide.loc["S3", "geneB_rna"] == 12.0

    def test_duplicates_rejected(self, tall_table):
        doubled = pd.concat([tall_table, tall_table.iloc[[0]]], ignore_index=True)
        with pytest.raises(ValueError, match="duplicate"):
            to_wide(doubled)
