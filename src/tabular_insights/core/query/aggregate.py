"""Group-by aggregation."""

from __future__ import annotations

import functools
from typing import Callable, Dict, List, Optional, Union

from ..enums import AggregateOperation, AggregateSortKey, SortOrder, parse_literal
from ..errors import InvalidArgumentError
from ..models import AggregateItem, AggregateResult, Table
from ..values import Number, compare_text, round2, to_number, to_text

Reducer = Callable[[List[Number], int], float]


def _avg(values: List[Number], _row_count: int) -> float:
    return sum(values) / len(values) if values else 0


# Empty numeric sets reduce to 0 (not None) so every result value is a number
_REDUCERS: Dict[AggregateOperation, Reducer] = {
    AggregateOperation.SUM: lambda values, _n: sum(values),
    AggregateOperation.AVG: _avg,
    AggregateOperation.COUNT: lambda _values, n: n,
    AggregateOperation.MIN: lambda values, _n: min(values) if values else 0,
    AggregateOperation.MAX: lambda values, _n: max(values) if values else 0,
}


def group_numeric_values(table: Table, group_by: str, aggregate_column: str) -> Dict[str, List[Number]]:
    """Partition rows by the string form of `group_by`.

    Returns each group's coercible numbers from `aggregate_column`, groups in
    first-seen order. Null keys form the "" group.
    """
    groups: Dict[str, List[Number]] = {}
    for row in table.rows:
        bucket = groups.setdefault(to_text(row.get(group_by)), [])
        n = to_number(row.get(aggregate_column))
        if n is not None:
            bucket.append(n)
    return groups


def _group_sizes(table: Table, group_by: str) -> Dict[str, int]:
    sizes: Dict[str, int] = {}
    for row in table.rows:
        key = to_text(row.get(group_by))
        sizes[key] = sizes.get(key, 0) + 1
    return sizes


def aggregate(
    table: Table,
    *,
    group_by: str,
    aggregate_column: str,
    operation: Union[str, AggregateOperation],
    sort_by: Union[str, AggregateSortKey] = AggregateSortKey.GROUP,
    sort_order: Union[str, SortOrder] = SortOrder.ASC,
    limit: Optional[int] = None,
) -> AggregateResult:
    """Group rows by one column and reduce another column per group.

    Args:
        table: Table to read.
        group_by: Key column; values are grouped by string form.
        aggregate_column: Column reduced per group; only values that coerce to
            finite numbers take part in sum/avg/min/max.
        operation: sum, avg, count, min or max. count counts rows.
        sort_by: "group" (collation order of keys) or "value" (numeric).
        sort_order: "asc" or "desc".
        limit: Keep only the first `limit` results after sorting; None or 0
            keeps all.

    Returns:
        AggregateResult with one entry per group present in the data, values
        rounded to 2 decimals.

    Raises:
        UnknownColumnError: If either column is not a header.
        InvalidLiteralError: If operation, sort_by or sort_order is not recognized.

    Examples:
        >>> t = Table.from_records(
        ...     ["region", "sales"],
        ...     [{"region": "N", "sales": 10}, {"region": "N", "sales": 20}, {"region": "S", "sales": 5}],
        ... )
        >>> aggregate(t, group_by="region", aggregate_column="sales", operation="sum").to_dict()["results"]
        [{'group': 'N', 'value': 30.0}, {'group': 'S', 'value': 5.0}]
    """
    table.require_column(group_by)
    table.require_column(aggregate_column)
    op = parse_literal(AggregateOperation, operation, "operation")
    sort_key = parse_literal(AggregateSortKey, sort_by, "sortBy")
    descending = parse_literal(SortOrder, sort_order, "sortOrder") == SortOrder.DESC
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 0):
        raise InvalidArgumentError(f"limit must be a non-negative integer, got {limit!r}")

    groups = group_numeric_values(table, group_by, aggregate_column)
    sizes = _group_sizes(table, group_by)
    reduce = _REDUCERS[op]
    results = [
        AggregateItem(group=group, value=round2(reduce(values, sizes[group])))
        for group, values in groups.items()
    ]

    if sort_key == AggregateSortKey.VALUE:
        results.sort(key=lambda item: item.value, reverse=descending)
    else:
        results.sort(
            key=functools.cmp_to_key(lambda a, b: compare_text(a.group, b.group)),
            reverse=descending,
        )

    if limit:
        results = results[:limit]

    return AggregateResult(
        group_by=group_by,
        aggregate_column=aggregate_column,
        operation=op,
        results=results,
    )


__all__ = ["group_numeric_values", "aggregate"]
