"""Tests for group-by aggregation."""

import pytest

from tabular_insights.core.errors import InvalidArgumentError, InvalidLiteralError, UnknownColumnError
from tabular_insights.core.query.aggregate import aggregate


def _pairs(result):
    return [(item.group, item.value) for item in result.results]


def test_sum_by_region(region_table):
    result = aggregate(region_table, group_by="region", aggregate_column="sales", operation="sum")
    assert result.to_dict() == {
        "groupBy": "region",
        "aggregateColumn": "sales",
        "operation": "sum",
        "results": [{"group": "N", "value": 30.0}, {"group": "S", "value": 5.0}],
    }


@pytest.mark.parametrize(
    "operation,expected",
    [
        ("sum", [("N", 30), ("S", 5)]),
        ("avg", [("N", 15), ("S", 5)]),
        ("count", [("N", 2), ("S", 1)]),
        ("min", [("N", 10), ("S", 5)]),
        ("max", [("N", 20), ("S", 5)]),
    ],
    ids=["sum", "avg", "count", "min", "max"],
)
def test_operations(region_table, operation, expected):
    result = aggregate(region_table, group_by="region", aggregate_column="sales", operation=operation)
    assert _pairs(result) == expected


def test_non_numeric_values_skipped_but_counted_as_rows(sales_table):
    by_sum = aggregate(sales_table, group_by="region", aggregate_column="sales", operation="sum")
    by_count = aggregate(sales_table, group_by="region", aggregate_column="sales", operation="count")
    assert dict(_pairs(by_sum))["South"] == 250.5
    assert dict(_pairs(by_count))["South"] == 2


def test_group_without_numbers_reduces_to_zero(sales_table):
    result = aggregate(sales_table, group_by="region", aggregate_column="sales", operation="avg")
    assert dict(_pairs(result))["north"] == 0


def test_group_order_uses_collation_and_null_key(sales_table):
    result = aggregate(sales_table, group_by="region", aggregate_column="sales", operation="sum")
    assert [g for g, _ in _pairs(result)] == ["", "East", "north", "North", "South", "West"]
    desc = aggregate(
        sales_table, group_by="region", aggregate_column="sales", operation="sum", sort_order="desc"
    )
    assert [g for g, _ in _pairs(desc)] == ["West", "South", "North", "north", "East", ""]


def test_sort_by_value_with_limit(sales_table):
    result = aggregate(
        sales_table,
        group_by="region",
        aggregate_column="sales",
        operation="sum",
        sort_by="value",
        sort_order="desc",
        limit=2,
    )
    assert _pairs(result) == [("West", 300), ("South", 250.5)]


def test_zero_limit_keeps_all_groups(region_table):
    result = aggregate(
        region_table, group_by="region", aggregate_column="sales", operation="sum", limit=0
    )
    assert len(result.results) == 2


def test_avg_is_rounded():
    from tabular_insights.core.models import Table

    table = Table.from_records(["g", "v"], [{"g": "a", "v": 1}, {"g": "a", "v": 2}, {"g": "a", "v": 2}])
    result = aggregate(table, group_by="g", aggregate_column="v", operation="avg")
    assert _pairs(result) == [("a", 1.67)]


@pytest.mark.parametrize(
    "kwargs,error",
    [
        ({"group_by": "nope"}, UnknownColumnError),
        ({"aggregate_column": "nope"}, UnknownColumnError),
        ({"operation": "median"}, InvalidLiteralError),
        ({"sort_by": "size"}, InvalidLiteralError),
        ({"sort_order": "up"}, InvalidLiteralError),
        ({"limit": -3}, InvalidArgumentError),
    ],
    ids=["group-by", "aggregate-column", "operation", "sort-by", "sort-order", "limit"],
)
def test_invalid_requests(region_table, kwargs, error):
    params = {"group_by": "region", "aggregate_column": "sales", "operation": "sum"}
    params.update(kwargs)
    with pytest.raises(error):
        aggregate(region_table, **params)


def test_number_text_beyond_float_range_is_skipped():
    from tabular_insights.core.models import Table

    table = Table.from_records(
        ["g", "v"], [{"g": "a", "v": "9" * 400}, {"g": "a", "v": 4}, {"g": "a", "v": "1" * 5000}]
    )
    assert _pairs(aggregate(table, group_by="g", aggregate_column="v", operation="sum")) == [("a", 4)]
    assert _pairs(aggregate(table, group_by="g", aggregate_column="v", operation="count")) == [("a", 3)]
