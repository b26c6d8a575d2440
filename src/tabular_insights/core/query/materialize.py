from __future__ import annotations

from typing import List, Optional, Sequence

from ..config import DEFAULT_SAMPLE_ROWS
from ..errors import InvalidArgumentError
from ..models import DataSample, Row, Table


def _check_non_negative(name: str, value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(f"{name} must be a non-negative integer, got {value!r}")
    return value


def paginate(rows: Sequence[Row], *, offset: int = 0, limit: Optional[int] = None) -> List[Row]:
    """Return rows[offset:offset + limit]; no limit means to the end."""
    offset = _check_non_negative("offset", offset)
    if limit is None:
        return list(rows[offset:])
    limit = _check_non_negative("limit", limit)
    return list(rows[offset : offset + limit])


def resolve_projection(headers: Sequence[str], columns: Optional[Sequence[str]]) -> List[str]:
    """Requested columns that exist, in header order; all headers when none requested."""
    if not columns:
        return list(headers)
    wanted = set(columns)
    return [h for h in headers if h in wanted]


def project(rows: Sequence[Row], columns: Sequence[str]) -> List[Row]:
    """Copy each row keeping only `columns`."""
    return [{c: row.get(c) for c in columns} for row in rows]


def data_sample(table: Table, num_rows: int = DEFAULT_SAMPLE_ROWS) -> DataSample:
    """Return the first `num_rows` rows plus headers, row count and column types."""
    rows = paginate(table.rows, offset=0, limit=num_rows)
    return DataSample(
        headers=list(table.headers),
        rows=project(rows, table.headers),
        total_rows=table.total_rows,
        column_types={h: table.column_types[h] for h in table.headers},
    )


__all__ = ["paginate", "resolve_projection", "project", "data_sample"]
