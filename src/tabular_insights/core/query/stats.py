"""Column statistics and value distributions."""

from __future__ import annotations

from typing import Dict, List

import numpy as np

from ..config import DEFAULT_VALUES_LIMIT
from ..errors import InvalidArgumentError
from ..models import ColumnStats, Table, ValueCount, ValueDistribution
from ..values import Number, is_missing, round2, to_number, to_text


def numeric_values(values: List[object]) -> List[Number]:
    """Values that coerce to finite numbers, in row order."""
    out: List[Number] = []
    for v in values:
        if is_missing(v):
            continue
        n = to_number(v)
        if n is not None:
            out.append(n)
    return out


def column_stats(table: Table, column: str) -> ColumnStats:
    """Compute descriptive statistics for one column.

    count includes nulls; null_count counts None and empty text; unique_count
    counts distinct string forms with all nulls sharing the "" form. The
    numeric fields use only values that coerce to finite numbers and stay None
    when there are none. std_dev is the population standard deviation.

    Raises:
        UnknownColumnError: If `column` is not a header.

    Examples:
        >>> t = Table.from_records(["v"], [{"v": 10}, {"v": 20}, {"v": 30}, {"v": None}, {"v": "x"}])
        >>> s = column_stats(t, "v")
        >>> (s.count, s.null_count, s.unique_count, s.mean, s.std_dev)
        (5, 1, 5, 20.0, 8.16)
    """
    table.require_column(column)
    values = [row.get(column) for row in table.rows]
    null_count = sum(1 for v in values if is_missing(v))
    unique_count = len({to_text(v) for v in values})
    numbers = numeric_values(values)

    if not numbers:
        return ColumnStats(
            column=column,
            count=len(values),
            null_count=null_count,
            unique_count=unique_count,
        )

    ordered = sorted(numbers)
    arr = np.asarray(numbers, dtype=float)
    return ColumnStats(
        column=column,
        count=len(values),
        null_count=null_count,
        unique_count=unique_count,
        min=ordered[0],
        max=ordered[-1],
        mean=round2(float(arr.mean())),
        median=round2(float(np.median(arr))),
        std_dev=round2(float(arr.std(ddof=0))),
    )


def column_values(table: Table, column: str, limit: int = DEFAULT_VALUES_LIMIT) -> ValueDistribution:
    """Frequency table of a column's string forms.

    Entries are ordered by descending count; ties keep first-seen order.
    Percentages are relative to the total row count.

    Raises:
        UnknownColumnError: If `column` is not a header.
        InvalidArgumentError: If `limit` is negative.
    """
    table.require_column(column)
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise InvalidArgumentError(f"limit must be a non-negative integer, got {limit!r}")

    # dict keeps first-seen order, which the stable sort below preserves on ties
    counts: Dict[str, int] = {}
    for row in table.rows:
        key = to_text(row.get(column))
        counts[key] = counts.get(key, 0) + 1

    total = table.total_rows
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)[:limit]
    return ValueDistribution(
        column=column,
        unique_count=len(counts),
        values=[
            ValueCount(
                value=value,
                count=count,
                percentage=round2(count / total * 100) if total else 0.0,
            )
            for value, count in ranked
        ],
    )


__all__ = ["numeric_values", "column_stats", "column_values"]
