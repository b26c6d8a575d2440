"""Engine core: table model, store, type inference and the query engine."""

from .enums import AggregateOperation, AggregateSortKey, ColumnType, FilterOperator, SortOrder
from .errors import (
    DatasetLoadError,
    EmptyDatasetError,
    EngineError,
    InvalidArgumentError,
    InvalidLiteralError,
    NoDataLoadedError,
    UnknownColumnError,
    UnsupportedFileError,
)
from .inference import infer_column_types
from .models import FilterCondition, Table
from .store import TableStore

__all__ = [
    "AggregateOperation",
    "AggregateSortKey",
    "ColumnType",
    "FilterOperator",
    "SortOrder",
    "EngineError",
    "DatasetLoadError",
    "EmptyDatasetError",
    "InvalidArgumentError",
    "InvalidLiteralError",
    "NoDataLoadedError",
    "UnknownColumnError",
    "UnsupportedFileError",
    "infer_column_types",
    "FilterCondition",
    "Table",
    "TableStore",
]
