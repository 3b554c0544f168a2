"""
Tests for the tidy format registry: detection and validation.
"""

import pandas as pd
import pytest

from tidybio.core.exceptions import SchemaMismatchError
from tidybio.io.adapters import gather_assay
from tidybio.tidy.formats import (
    GVG_COLUMNS,
    RVG_COLUMNS,
    TALL_COLUMNS,
    FormatMatch,
    TidyFormat,
    canonical_columns,
    check_df_format,
    empty_table,
    get_df_format,
)


class TestGetDfFormat:
    """Structural format detection."""

    def test_tall_detected(self, tall_table):
        assert get_df_format(tall_table) == FormatMatch(TidyFormat.TALL, True)

    def test_superset_still_matches(self, tall_table):
        extended = tall_table.assign(tissue="skin")
        assert get_df_format(extended).kind is TidyFormat.TALL

    def test_gvg_and_rvg_detected(self):
        gvg = pd.DataFrame(columns=list(GVG_COLUMNS))
        rvg = pd.DataFrame(columns=list(RVG_COLUMNS))
        assert get_df_format(gvg).kind is TidyFormat.GVG
        assert get_df_format(rvg).kind is TidyFormat.RVG

    def test_unrecognized(self):
        result = get_df_format(pd.DataFrame({"x": [1]}))
        assert result.matched is False
        assert result.kind is None

    def test_non_dataframe_unrecognized(self):
        assert get_df_format([1, 2, 3]).matched is False

    def test_gathered_table_is_tall(self, braf_egfr_matrix):
        tall = gather_assay(braf_egfr_matrix, feature_col="Symbol")
        assert get_df_format(tall).kind is TidyFormat.TALL
        assert check_df_format(tall, TidyFormat.TALL)


class TestCheckDfFormat:
    """Contract validation."""

    def test_passes_silently(self, tall_table):
        assert check_df_format(tall_table, "tall") is True

    def test_response_accepts_tall_columns(self, response_table):
        assert check_df_format(response_table, TidyFormat.RESPONSE)

    def test_missing_columns_reported(self, tall_table):
        with pytest.raises(SchemaMismatchError) as excinfo:
            check_df_format(tall_table.drop(columns=["value"]), TidyFormat.TALL)
        assert excinfo.value.missing == ["value"]
        assert excinfo.value.kind == "tall"

    def test_tall_is_not_gvg(self, tall_table):
        with pytest.raises(SchemaMismatchError, match="gvg"):
            check_df_format(tall_table, TidyFormat.GVG)

    def test_schema_error_is_value_error(self, tall_table):
        with pytest.raises(ValueError):
            check_df_format(tall_table, "rvg")

    def test_non_dataframe(self):
        with pytest.raises(SchemaMismatchError):
            check_df_format({"sample_id": []}, TidyFormat.TALL)

    def test_unknown_format_name(self, tall_table):
        with pytest.raises(ValueError, match="Unknown tidy format"):
            check_df_format(tall_table, "wide")

    def test_null_sample_id_rejected(self, tall_table):
        table = tall_table.copy()
        table.loc[0, "sample_id"] = None
        with pytest.raises(SchemaMismatchError, match="null sample_id"):
            check_df_format(table, "tall")


class TestEmptyTable:
    """Zero-row canonical tables."""

    @pytest.mark.parametrize("kind", list(TidyFormat))
    def test_empty_table_has_contract(self, kind):
        table = empty_table(kind)
        assert table.empty
        assert list(table.columns) == canonical_columns(kind)
        assert check_df_format(table, kind)

    def test_numeric_columns_are_float(self):
        table = empty_table(TidyFormat.TALL)
        assert list(table.columns) == list(TALL_COLUMNS)
        assert table["value"].dtype == float
