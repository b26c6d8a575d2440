"""Request/response tools exposed to the conversational agent.

Each tool takes the `TableStore` and a JSON-like payload (camelCase keys) and
returns a JSON-serializable dict. Payload validation happens here; the engine
functions below this layer assume well-typed arguments.

`call_tool()` wraps any tool in an explicit result envelope:
    {"ok": true, "data": {...}}
    {"ok": false, "error": {"kind": "unknown_column", "message": "..."}}

Usage:
    >>> store = TableStore()
    >>> store.load(["region", "sales"], [{"region": "N", "sales": 10}])
    >>> call_tool(store, "get_column_stats", {"column": "sales"}).ok
    True
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from tabular_insights.core.enums import SortOrder
from tabular_insights.core.errors import (
    DatasetLoadError,
    EngineError,
    InvalidArgumentError,
    InvalidLiteralError,
)
from tabular_insights.core.models import FilterCondition
from tabular_insights.core.query import (
    aggregate,
    column_stats,
    column_values,
    data_sample,
    query_rows,
)
from tabular_insights.core.store import TableStore
from tabular_insights.ingestion.loader import load_into_store

logger = logging.getLogger(__name__)

Payload = Mapping[str, Any]
Tool = Callable[[TableStore, Payload], Dict[str, Any]]


# -------------------------
# MARK: Payload helpers
# -------------------------


def _require_str(payload: Payload, key: str) -> str:
    value = payload.get(key)
    if value is None:
        raise InvalidArgumentError(f"Missing required field '{key}'")
    if not isinstance(value, str):
        raise InvalidArgumentError(f"Field '{key}' must be a string, got {type(value).__name__}")
    return value


def _optional_str(payload: Payload, key: str) -> Optional[str]:
    if payload.get(key) is None:
        return None
    return _require_str(payload, key)


def _optional_int(payload: Payload, key: str, default: Optional[int]) -> Optional[int]:
    """Non-negative integer field; absent or null gives `default`."""
    value = payload.get(key)
    if value is None:
        return default
    # JSON clients often send whole numbers as floats
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(f"Field '{key}' must be a non-negative integer, got {value!r}")
    return value


def _optional_str_list(payload: Payload, key: str) -> Optional[List[str]]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise InvalidArgumentError(f"Field '{key}' must be a list of strings")
    return list(value)


def _filters(payload: Payload, key: str = "filters") -> List[FilterCondition]:
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise InvalidArgumentError(f"Field '{key}' must be a list of filter conditions")
    return [FilterCondition.from_dict(item) for item in value]


# -------------------------
# MARK: Engine tools
# -------------------------


def get_column_stats(store: TableStore, payload: Payload) -> Dict[str, Any]:
    """Statistical summary for one column."""
    table = store.require()
    return column_stats(table, _require_str(payload, "column")).to_dict()


def query_data(store: TableStore, payload: Payload) -> Dict[str, Any]:
    """Filtered, sorted, paginated and projected rows."""
    table = store.require()
    filters = _filters(payload)
    if payload.get("useActiveFilters"):
        filters = list(store.active_filters) + filters
    settings = store.settings
    result = query_rows(
        table,
        filters=filters,
        columns=_optional_str_list(payload, "columns"),
        limit=_optional_int(payload, "limit", settings.default_query_limit),
        offset=_optional_int(payload, "offset", 0),
        sort_by=_optional_str(payload, "sortBy"),
        sort_order=payload.get("sortOrder") or SortOrder.ASC,
    )
    return result.to_dict()


def get_data_sample(store: TableStore, payload: Payload) -> Dict[str, Any]:
    table = store.require()
    num_rows = _optional_int(payload, "numRows", store.settings.default_sample_rows)
    return data_sample(table, num_rows).to_dict()


def get_column_values(store: TableStore, payload: Payload) -> Dict[str, Any]:
    """Distinct values of a column with counts and percentages."""
    table = store.require()
    column = _require_str(payload, "column")
    limit = _optional_int(payload, "limit", store.settings.default_values_limit)
    return column_values(table, column, limit).to_dict()


def aggregate_data(store: TableStore, payload: Payload) -> Dict[str, Any]:
    """Group by one column and reduce another."""
    table = store.require()
    result = aggregate(
        table,
        group_by=_require_str(payload, "groupBy"),
        aggregate_column=_require_str(payload, "aggregateColumn"),
        operation=_require_str(payload, "operation"),
        sort_by=payload.get("sortBy") or "group",
        sort_order=payload.get("sortOrder") or "asc",
        limit=_optional_int(payload, "limit", None),
    )
    return result.to_dict()


# -------------------------
# MARK: Store tools
# -------------------------


def load_dataset(store: TableStore, payload: Payload) -> Dict[str, Any]:
    """Parse a file and make it the current table; returns its shape without rows."""
    path = Path(_require_str(payload, "path"))
    try:
        table = load_into_store(store, path)
    except EngineError:
        raise
    except (OSError, ValueError) as e:
        raise DatasetLoadError(str(e)) from e
    summary = table.to_load_payload()
    summary.pop("rows")
    return summary


def clear_dataset(store: TableStore, payload: Payload) -> Dict[str, Any]:
    store.clear()
    return {"cleared": True}


def set_active_filters(store: TableStore, payload: Payload) -> Dict[str, Any]:
    """Replace the filter panel state; filters are validated against the table."""
    conditions = store.set_active_filters(_filters(payload))
    return {"filters": [f.to_dict() for f in conditions]}


def select_rows(store: TableStore, payload: Payload) -> Dict[str, Any]:
    indices = payload.get("indices")
    if not isinstance(indices, list):
        raise InvalidArgumentError("Field 'indices' must be a list of row indices")
    return {"selectedRows": list(store.select_rows(indices))}


def toggle_row_selection(store: TableStore, payload: Payload) -> Dict[str, Any]:
    index = _optional_int(payload, "index", None)
    if index is None:
        raise InvalidArgumentError("Missing required field 'index'")
    return {"selectedRows": list(store.toggle_row(index))}


def get_selected_rows(store: TableStore, payload: Payload) -> Dict[str, Any]:
    table = store.require()
    selected = list(store.selected_rows)
    return {"selectedRows": selected, "rows": [dict(table.rows[i]) for i in selected]}


TOOLS: Dict[str, Tool] = {
    "get_column_stats": get_column_stats,
    "query_data": query_data,
    "get_data_sample": get_data_sample,
    "get_column_values": get_column_values,
    "aggregate_data": aggregate_data,
    "load_dataset": load_dataset,
    "clear_dataset": clear_dataset,
    "set_active_filters": set_active_filters,
    "select_rows": select_rows,
    "toggle_row_selection": toggle_row_selection,
    "get_selected_rows": get_selected_rows,
}


# -------------------------
# MARK: Result envelope
# -------------------------


@dataclass(frozen=True)
class ToolResult:
    """Outcome of a tool call: either data or an error, never both.

    Attributes:
        ok: True on success.
        data: Tool output on success.
        error_kind: Stable error kind (see core.errors) on failure.
        error_message: Human-readable error on failure.
    """

    ok: bool
    data: Optional[Dict[str, Any]] = None
    error_kind: Optional[str] = None
    error_message: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if self.ok and self.error_kind is not None:
            raise ValueError("ok=True requires no error")
        if not self.ok and (self.error_kind is None or self.data is not None):
            raise ValueError("ok=False requires an error kind and no data")

    @classmethod
    def success(cls, data: Dict[str, Any]) -> "ToolResult":
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, error: EngineError) -> "ToolResult":
        return cls(ok=False, error_kind=error.kind, error_message=str(error))

    def to_dict(self) -> Dict[str, Any]:
        if self.ok:
            return {"ok": True, "data": self.data}
        return {"ok": False, "error": {"kind": self.error_kind, "message": self.error_message}}


def call_tool(store: TableStore, name: str, payload: Optional[Payload] = None) -> ToolResult:
    """Run a tool by name and wrap its outcome.

    Engine errors become failure results; any other exception propagates.
    """
    try:
        tool = TOOLS.get(name)
        if tool is None:
            raise InvalidLiteralError("tool", name, sorted(TOOLS))
        if payload is not None and not isinstance(payload, Mapping):
            raise InvalidArgumentError(f"Tool payload must be an object, got {type(payload).__name__}")
        return ToolResult.success(tool(store, payload or {}))
    except EngineError as e:
        logger.warning("Tool %s rejected: %s", name, e)
        return ToolResult.failure(e)


__all__ = ["TOOLS", "ToolResult", "call_tool"] + sorted(TOOLS)
