"""Tests for column statistics and value distributions."""

import pytest

from tabular_insights.core.errors import InvalidArgumentError, UnknownColumnError
from tabular_insights.core.models import Table
from tabular_insights.core.query.stats import column_stats, column_values


@pytest.fixture
def mixed_table():
    return Table.from_records(["v"], [{"v": 10}, {"v": 20}, {"v": 30}, {"v": None}, {"v": "x"}])


class TestColumnStats:
    def test_mixed_numeric_column(self, mixed_table):
        stats = column_stats(mixed_table, "v")
        assert stats.to_dict() == {
            "column": "v",
            "count": 5,
            "nullCount": 1,
            "uniqueCount": 5,
            "min": 10,
            "max": 30,
            "mean": 20.0,
            "median": 20.0,
            "stdDev": 8.16,
        }
        assert stats.is_numeric

    def test_sales_column(self, sales_table):
        stats = column_stats(sales_table, "sales")
        assert (stats.count, stats.null_count, stats.unique_count) == (7, 1, 7)
        assert (stats.min, stats.max) == (40, 300)
        assert stats.mean == pytest.approx(153.1)
        assert stats.median == 100
        assert stats.std_dev == pytest.approx(102.74)

    def test_text_column_has_no_numeric_fields(self, sales_table):
        stats = column_stats(sales_table, "region")
        assert stats.count == 7
        assert stats.null_count == 1
        assert stats.unique_count == 6
        assert not stats.is_numeric
        assert stats.min is None and stats.std_dev is None

    def test_numeric_text_counts_as_number(self):
        table = Table.from_records(["v"], [{"v": "1"}, {"v": " 3 "}, {"v": ""}])
        stats = column_stats(table, "v")
        assert stats.null_count == 1
        assert stats.mean == 2.0

    def test_number_text_beyond_float_range_is_not_numeric(self):
        table = Table.from_records(["v"], [{"v": "9" * 400}, {"v": 1}, {"v": "9" * 5000}])
        stats = column_stats(table, "v")
        assert (stats.min, stats.max, stats.mean) == (1, 1, 1.0)
        assert stats.unique_count == 3

    def test_median_of_even_count(self):
        table = Table.from_records(["v"], [{"v": 1}, {"v": 2}, {"v": 3}, {"v": 10}])
        assert column_stats(table, "v").median == 2.5

    def test_unknown_column(self, sales_table):
        with pytest.raises(UnknownColumnError):
            column_stats(sales_table, "revenue")


class TestColumnValues:
    def test_counts_descending_with_first_seen_ties(self, sales_table):
        dist = column_values(sales_table, "region")
        assert dist.unique_count == 6
        assert [(v.value, v.count) for v in dist.values] == [
            ("South", 2),
            ("North", 1),
            ("north", 1),
            ("East", 1),
            ("", 1),
            ("West", 1),
        ]
        assert dist.values[0].percentage == 28.57
        assert dist.values[1].percentage == 14.29

    def test_percentages_sum_to_hundred(self, sales_table):
        dist = column_values(sales_table, "product")
        total = sum(v.percentage for v in dist.values)
        assert abs(total - 100) <= len(dist.values) * 0.01

    def test_numbers_grouped_by_string_form(self):
        table = Table.from_records(["v"], [{"v": 10}, {"v": 10.0}, {"v": "10"}, {"v": 2.5}])
        dist = column_values(table, "v")
        assert dist.to_dict()["values"] == [
            {"value": "10", "count": 3, "percentage": 75.0},
            {"value": "2.5", "count": 1, "percentage": 25.0},
        ]

    def test_limit_truncates_but_unique_count_does_not(self, sales_table):
        dist = column_values(sales_table, "region", limit=2)
        assert len(dist.values) == 2
        assert dist.unique_count == 6

    def test_negative_limit(self, sales_table):
        with pytest.raises(InvalidArgumentError):
            column_values(sales_table, "region", limit=-1)

    def test_unknown_column(self, sales_table):
        with pytest.raises(UnknownColumnError):
            column_values(sales_table, "revenue")
