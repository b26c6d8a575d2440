from __future__ import annotations

import functools
from typing import List, Optional, Sequence, Union

from ..config import DEFAULT_QUERY_LIMIT, DEFAULT_QUERY_OFFSET
from ..enums import SortOrder, parse_literal
from ..models import FilterCondition, QueryResult, Row, Table
from ..values import compare_text, is_number, to_text
from .materialize import paginate, project, resolve_projection
from .predicates import matches_all


def _apply_filters(table: Table, filters: Optional[Sequence[FilterCondition]]) -> List[Row]:
    if not filters:
        return list(table.rows)
    for f in filters:
        table.require_column(f.column)
    return [row for row in table.rows if matches_all(row, filters)]


def compare_cells(a: object, b: object, descending: bool = False) -> int:
    """Three-way comparison used for row sorting.

    None sorts after everything in both directions. Two numbers compare
    numerically; anything else compares string forms by collation.
    """
    if a is None and b is None:
        return 0
    if a is None:
        return 1
    if b is None:
        return -1
    if is_number(a) and is_number(b):
        result = (a > b) - (a < b)
    else:
        result = compare_text(to_text(a), to_text(b))
    return -result if descending else result


def sort_rows(rows: Sequence[Row], sort_by: str, sort_order: Union[str, SortOrder] = SortOrder.ASC) -> List[Row]:
    """Stable sort of rows by one column."""
    descending = parse_literal(SortOrder, sort_order, "sortOrder") == SortOrder.DESC
    key = functools.cmp_to_key(lambda x, y: compare_cells(x.get(sort_by), y.get(sort_by), descending))
    return sorted(rows, key=key)


def query_rows(
    table: Table,
    *,
    filters: Optional[Sequence[FilterCondition]] = None,
    columns: Optional[Sequence[str]] = None,
    limit: int = DEFAULT_QUERY_LIMIT,
    offset: int = DEFAULT_QUERY_OFFSET,
    sort_by: Optional[str] = None,
    sort_order: Union[str, SortOrder] = SortOrder.ASC,
) -> QueryResult:
    """Filter, sort, count, paginate and project rows, in that order.

    Args:
        table: Table to read.
        filters: AND-combined conditions; a condition on an unknown column raises.
        columns: Columns to return (all when empty); unknown names are dropped.
        limit: Page size.
        offset: Rows to skip after filtering and sorting.
        sort_by: Column to sort by; ignored when it is not a header.
        sort_order: "asc" or "desc".

    Returns:
        QueryResult whose total_matched counts the filtered rows before paging.

    Raises:
        UnknownColumnError: A filter names a column absent from the table.
        InvalidLiteralError: sort_order or a filter operator is not recognized.
    """
    order = parse_literal(SortOrder, sort_order, "sortOrder")
    matched = _apply_filters(table, filters)

    if sort_by and table.has_column(sort_by):
        matched = sort_rows(matched, sort_by, order)

    total_matched = len(matched)
    page = paginate(matched, offset=offset, limit=limit)
    selected = resolve_projection(table.headers, columns)
    return QueryResult(rows=project(page, selected), total_matched=total_matched, columns=selected)


__all__ = ["compare_cells", "sort_rows", "query_rows"]
