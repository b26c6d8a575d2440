"""Tests for row queries: filtering, sorting, pagination and projection."""

import pytest

from tabular_insights.core.errors import InvalidArgumentError, InvalidLiteralError, UnknownColumnError
from tabular_insights.core.models import FilterCondition
from tabular_insights.core.query.plan import compare_cells, query_rows


def _f(column, operator, value):
    return FilterCondition(column, operator, value)


def _sales(result):
    return [row["sales"] for row in result.rows]


class TestFiltering:
    def test_no_filters_returns_all_rows(self, sales_table):
        result = query_rows(sales_table)
        assert result.total_matched == 7
        assert result.rows == list(sales_table.rows)
        assert result.columns == ["region", "product", "sales", "date"]

    def test_equals_is_case_insensitive(self, sales_table):
        result = query_rows(sales_table, filters=[_f("region", "equals", "NORTH")])
        assert [r["region"] for r in result.rows] == ["North", "north"]

    def test_contains(self, sales_table):
        result = query_rows(sales_table, filters=[_f("product", "contains", "WIDGET")])
        assert [r["product"] for r in result.rows] == ["Widget", "widget pro", "Widget"]

    def test_gt_skips_null_and_non_numeric_cells(self, sales_table):
        result = query_rows(sales_table, filters=[_f("sales", "gt", 90)])
        assert _sales(result) == [100, 250.5, 300]

    def test_filters_are_and_combined(self, sales_table):
        result = query_rows(
            sales_table,
            filters=[_f("region", "equals", "south"), _f("sales", "gt", 0)],
        )
        assert _sales(result) == [250.5]

    def test_not_equals_keeps_null_region(self, sales_table):
        result = query_rows(sales_table, filters=[_f("region", "notEquals", "south")])
        assert result.total_matched == 5
        assert None in [r["region"] for r in result.rows]

    def test_unknown_filter_column(self, sales_table):
        with pytest.raises(UnknownColumnError, match="revenue"):
            query_rows(sales_table, filters=[_f("revenue", "gt", 1)])


class TestSorting:
    def test_ascending_numbers_then_text_then_null(self, sales_table):
        result = query_rows(sales_table, sort_by="sales")
        assert _sales(result) == [40, 75, 100, 250.5, 300, "n/a", None]

    def test_descending_keeps_null_last(self, sales_table):
        result = query_rows(sales_table, sort_by="sales", sort_order="desc")
        assert _sales(result) == ["n/a", 300, 250.5, 100, 75, 40, None]

    def test_text_sort_uses_collation(self, sales_table):
        result = query_rows(sales_table, sort_by="region", columns=["region"])
        assert [r["region"] for r in result.rows] == [
            "East",
            "north",
            "North",
            "South",
            "South",
            "West",
            None,
        ]

    def test_sort_is_stable(self, sales_table):
        result = query_rows(sales_table, sort_by="product")
        gadgets = [r["sales"] for r in result.rows if r["product"] == "Gadget"]
        assert gadgets == [250.5, 40]

    def test_unknown_sort_column_is_ignored(self, sales_table):
        result = query_rows(sales_table, sort_by="revenue")
        assert result.rows == list(sales_table.rows)

    def test_invalid_sort_order(self, sales_table):
        with pytest.raises(InvalidLiteralError, match="sortOrder"):
            query_rows(sales_table, sort_by="sales", sort_order="up")

    def test_compare_cells_null_last_in_both_directions(self):
        assert compare_cells(None, 1) == 1
        assert compare_cells(None, 1, descending=True) == 1
        assert compare_cells(1, None, descending=True) == -1
        assert compare_cells(None, None) == 0


class TestPaginationAndProjection:
    def test_total_matched_counts_before_paging(self, sales_table):
        result = query_rows(sales_table, limit=2, offset=1)
        assert result.total_matched == 7
        assert len(result.rows) == 2
        assert result.rows[0] == sales_table.rows[1]

    def test_pages_reconstruct_full_result(self, sales_table):
        full = query_rows(sales_table, sort_by="sales", limit=100)
        pages = []
        for offset in range(0, 7, 3):
            pages.extend(query_rows(sales_table, sort_by="sales", limit=3, offset=offset).rows)
        assert pages == full.rows

    def test_offset_past_end(self, sales_table):
        result = query_rows(sales_table, offset=50)
        assert result.rows == []
        assert result.total_matched == 7

    def test_default_limit_is_fifty(self):
        from tabular_insights.core.models import Table

        table = Table.from_records(["n"], [{"n": i} for i in range(60)])
        assert len(query_rows(table).rows) == 50

    def test_projection_uses_header_order_and_drops_unknown(self, sales_table):
        result = query_rows(sales_table, columns=["sales", "nope", "region", "sales"])
        assert result.columns == ["region", "sales"]
        assert result.rows[0] == {"region": "North", "sales": 100}

    def test_projection_does_not_mutate_table(self, sales_table):
        query_rows(sales_table, columns=["region"])
        assert set(sales_table.rows[0]) == {"region", "product", "sales", "date"}

    def test_negative_limit_rejected(self, sales_table):
        with pytest.raises(InvalidArgumentError):
            query_rows(sales_table, limit=-1)


def test_query_is_deterministic(sales_table):
    kwargs = dict(filters=[_f("sales", "gte", 0)], sort_by="region", sort_order="desc", limit=4)
    assert query_rows(sales_table, **kwargs) == query_rows(sales_table, **kwargs)
