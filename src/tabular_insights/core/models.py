"""Engine data models.

This module defines the table held by the store and the result structures
returned by engine operations:
- Table: the loaded dataset (headers, rows, column types)
- FilterCondition: one (column, operator, value) predicate
- QueryResult, ColumnStats, ValueDistribution, AggregateResult, DataSample

Result objects are created fresh per call and serialize to the camelCase
payloads of the tool boundary via `to_dict()`.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .config import EngineSettings
from .enums import AggregateOperation, ColumnType, FilterOperator, parse_literal
from .errors import InvalidArgumentError, UnknownColumnError
from .values import CellValue, Number

Row = Dict[str, CellValue]

# Older payloads call the text type "string"
_COLUMN_TYPE_ALIASES = {"string": ColumnType.TEXT}


def _normalize_cell(value: Any) -> CellValue:
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _parse_column_type(value: object) -> ColumnType:
    if isinstance(value, str) and value in _COLUMN_TYPE_ALIASES:
        return _COLUMN_TYPE_ALIASES[value]
    return parse_literal(ColumnType, value, "column type")


@dataclass(frozen=True)
class Table:
    """The in-memory dataset.

    Attributes:
        headers: Unique column names in first-seen order.
        rows: Records in source order; every record has exactly the keys in
            `headers` (absent values are None).
        column_types: Inferred type per header, fixed at load time.
        file_name: Name of the source file, when known.

    Examples:
        >>> t = Table.from_records(["a"], [{"a": 1}, {"a": None}])
        >>> t.total_rows
        2
        >>> t.column_types["a"]
        <ColumnType.NUMBER: 'number'>
    """

    headers: Tuple[str, ...]
    rows: Tuple[Row, ...]
    column_types: Mapping[str, ColumnType]
    file_name: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate field constraints."""
        dupes = [h for h, n in Counter(self.headers).items() if n > 1]
        if dupes:
            raise InvalidArgumentError(f"Duplicate column name(s): {', '.join(dupes)}")
        missing = [h for h in self.headers if h not in self.column_types]
        if missing:
            raise InvalidArgumentError(f"Missing column type(s) for: {', '.join(missing)}")

    @classmethod
    def from_records(
        cls,
        headers: Sequence[str],
        rows: Iterable[Mapping[str, Any]],
        *,
        column_types: Optional[Mapping[str, Union[str, ColumnType]]] = None,
        file_name: Optional[str] = None,
        settings: Optional[EngineSettings] = None,
    ) -> "Table":
        """Build a table, filling absent keys with None and inferring types when not given."""
        header_tuple = tuple(str(h) for h in headers)
        normalized = tuple(
            {h: _normalize_cell(record.get(h)) for h in header_tuple} for record in rows
        )
        if column_types is None:
            from .inference import infer_column_types

            types = infer_column_types(header_tuple, normalized, settings=settings)
        else:
            types = {h: _parse_column_type(t) for h, t in column_types.items() if h in header_tuple}
        return cls(headers=header_tuple, rows=normalized, column_types=types, file_name=file_name)

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    def has_column(self, name: str) -> bool:
        return name in self.column_types

    def require_column(self, name: str) -> str:
        """Return `name` if it is a header, else raise UnknownColumnError."""
        if not isinstance(name, str) or not self.has_column(name):
            raise UnknownColumnError(str(name), self.headers)
        return name

    def to_load_payload(self) -> Dict[str, Any]:
        """Serialize in the shape produced by the upload step."""
        return {
            "fileName": self.file_name,
            "headers": list(self.headers),
            "rows": [dict(r) for r in self.rows],
            "columnTypes": {h: self.column_types[h].value for h in self.headers},
            "totalRows": self.total_rows,
        }


@dataclass(frozen=True)
class FilterCondition:
    """A single filter predicate; lists of conditions are AND-combined."""

    column: str
    operator: FilterOperator
    value: Union[str, Number, None]

    def __post_init__(self) -> None:
        """Normalize the operator literal."""
        object.__setattr__(self, "operator", parse_literal(FilterOperator, self.operator, "operator"))
        if not isinstance(self.column, str) or not self.column:
            raise InvalidArgumentError("Filter condition requires a non-empty 'column'")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FilterCondition":
        if not isinstance(data, Mapping):
            raise InvalidArgumentError(f"Filter condition must be an object, got {type(data).__name__}")
        for key in ("column", "operator"):
            if key not in data:
                raise InvalidArgumentError(f"Filter condition is missing '{key}'")
        return cls(column=data["column"], operator=data["operator"], value=data.get("value"))

    def to_dict(self) -> Dict[str, Any]:
        return {"column": self.column, "operator": self.operator.value, "value": self.value}


@dataclass(frozen=True)
class QueryResult:
    rows: List[Row]
    total_matched: int
    columns: List[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rows": [dict(r) for r in self.rows],
            "totalMatched": self.total_matched,
            "columns": list(self.columns),
        }


@dataclass(frozen=True)
class ColumnStats:
    """Descriptive statistics for one column.

    The five numeric fields are None when no value coerces to a number.
    """

    column: str
    count: int
    null_count: int
    unique_count: int
    min: Optional[Number] = None
    max: Optional[Number] = None
    mean: Optional[float] = None
    median: Optional[float] = None
    std_dev: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.null_count > self.count:
            raise ValueError("null_count cannot exceed count")

    @property
    def is_numeric(self) -> bool:
        return self.mean is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column": self.column,
            "count": self.count,
            "nullCount": self.null_count,
            "uniqueCount": self.unique_count,
            "min": self.min,
            "max": self.max,
            "mean": self.mean,
            "median": self.median,
            "stdDev": self.std_dev,
        }


@dataclass(frozen=True)
class ValueCount:
    value: str
    count: int
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return {"value": self.value, "count": self.count, "percentage": self.percentage}


@dataclass(frozen=True)
class ValueDistribution:
    column: str
    unique_count: int
    values: List[ValueCount] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "column": self.column,
            "uniqueCount": self.unique_count,
            "values": [v.to_dict() for v in self.values],
        }


@dataclass(frozen=True)
class AggregateItem:
    group: str
    value: float

    def to_dict(self) -> Dict[str, Any]:
        return {"group": self.group, "value": self.value}


@dataclass(frozen=True)
class AggregateResult:
    group_by: str
    aggregate_column: str
    operation: AggregateOperation
    results: List[AggregateItem] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "groupBy": self.group_by,
            "aggregateColumn": self.aggregate_column,
            "operation": self.operation.value,
            "results": [r.to_dict() for r in self.results],
        }


@dataclass(frozen=True)
class DataSample:
    headers: List[str]
    rows: List[Row]
    total_rows: int
    column_types: Dict[str, ColumnType]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "headers": list(self.headers),
            "rows": [dict(r) for r in self.rows],
            "totalRows": self.total_rows,
            "columnTypes": {h: t.value for h, t in self.column_types.items()},
        }


__all__ = [
    "Row",
    "Table",
    "FilterCondition",
    "QueryResult",
    "ColumnStats",
    "ValueCount",
    "ValueDistribution",
    "AggregateItem",
    "AggregateResult",
    "DataSample",
]
