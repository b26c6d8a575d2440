"""
MCP server exposing the table engine to a conversational agent.

The server owns a single TableStore. Tools:
 - load_dataset / clear_dataset
 - get_column_stats, query_data, get_data_sample, get_column_values, aggregate_data
 - set_active_filters, select_rows, get_selected_rows

Every tool returns the result envelope produced by `call_tool`.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from tabular_insights.core.config import DEFAULT_SETTINGS, EngineSettings
from tabular_insights.core.store import TableStore
from tabular_insights.interfaces.tools import call_tool

try:
    from mcp.server.fastmcp import FastMCP
except Exception as exc:
    raise RuntimeError(
        "The 'mcp' package is required for the MCP server. Install with: pip install mcp"
    ) from exc


_SERVER = FastMCP("tabular-insights")
_STORE = TableStore()

# Configure logging for MCP server
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[
        logging.StreamHandler(sys.stderr)  # MCP uses stdout for protocol
    ],
)
logger = logging.getLogger(__name__)


def get_store() -> TableStore:
    """Return the store shared by all tools of this server."""
    return _STORE


def _call(name: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    return call_tool(_STORE, name, payload).to_dict()


def _drop_none(**fields: Any) -> Dict[str, Any]:
    # Absent and null arguments both mean "use the default"
    return {k: v for k, v in fields.items() if v is not None}


# -------------------------
# MARK: Dataset Tools
# -------------------------


@_SERVER.tool(
    "load_dataset",
    title="Load dataset",
    description=(
        "Parse a CSV or Excel file (first sheet) and make it the current table. "
        "Replaces any previously loaded table and resets filters and selection. "
        "Parameters: path (str)."
    ),
)
async def load_dataset(path: str) -> Dict[str, Any]:
    """Load a data file into the shared store."""
    return _call("load_dataset", {"path": path})


@_SERVER.tool("clear_dataset", title="Clear dataset", description="Unload the current table.")
async def clear_dataset() -> Dict[str, Any]:
    return _call("clear_dataset")


@_SERVER.tool(
    "get_data_sample",
    title="Get data sample",
    description=(
        "Return the headers, inferred column types, total row count and the first rows "
        "of the table. Parameters: numRows (int, default 10)."
    ),
)
async def get_data_sample(numRows: Optional[int] = None) -> Dict[str, Any]:  # pylint: disable=invalid-name
    return _call("get_data_sample", _drop_none(numRows=numRows))


# -------------------------
# MARK: Analysis Tools
# -------------------------


@_SERVER.tool(
    "get_column_stats",
    title="Get column statistics",
    description=(
        "Count, null count, unique count and, for numeric values, min, max, mean, "
        "median and population standard deviation of one column. Parameters: column (str)."
    ),
)
async def get_column_stats(column: str) -> Dict[str, Any]:
    return _call("get_column_stats", {"column": column})


@_SERVER.tool(
    "query_data",
    title="Query data",
    description=(
        "Filter, sort and paginate rows. filters is a list of {column, operator, value} "
        "with operator one of equals, notEquals, contains, gt, lt, gte, lte; all "
        "conditions must hold. Parameters: filters, columns, limit (default 50), "
        "offset (default 0), sortBy, sortOrder (asc|desc), useActiveFilters (bool)."
    ),
)
async def query_data(  # pylint: disable=invalid-name
    filters: Optional[List[Dict[str, Any]]] = None,
    columns: Optional[List[str]] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
    sortBy: Optional[str] = None,
    sortOrder: Optional[str] = None,
    useActiveFilters: bool = False,
) -> Dict[str, Any]:
    """Query rows of the current table."""
    payload = _drop_none(
        filters=filters,
        columns=columns,
        limit=limit,
        offset=offset,
        sortBy=sortBy,
        sortOrder=sortOrder,
    )
    payload["useActiveFilters"] = useActiveFilters
    return _call("query_data", payload)


@_SERVER.tool(
    "get_column_values",
    title="Get column values",
    description=(
        "Distinct values of a column with counts and percentages of all rows, most "
        "frequent first. Parameters: column (str), limit (int, default 50)."
    ),
)
async def get_column_values(column: str, limit: Optional[int] = None) -> Dict[str, Any]:
    return _call("get_column_values", _drop_none(column=column, limit=limit))


@_SERVER.tool(
    "aggregate_data",
    title="Aggregate data",
    description=(
        "Group rows by one column and compute sum, avg, count, min or max of another. "
        "Parameters: groupBy, aggregateColumn, operation, sortBy (group|value), "
        "sortOrder (asc|desc), limit."
    ),
)
async def aggregate_data(  # pylint: disable=invalid-name
    groupBy: str,
    aggregateColumn: str,
    operation: str,
    sortBy: Optional[str] = None,
    sortOrder: Optional[str] = None,
    limit: Optional[int] = None,
) -> Dict[str, Any]:
    """Group-by aggregation over the current table."""
    return _call(
        "aggregate_data",
        _drop_none(
            groupBy=groupBy,
            aggregateColumn=aggregateColumn,
            operation=operation,
            sortBy=sortBy,
            sortOrder=sortOrder,
            limit=limit,
        ),
    )


# -------------------------
# MARK: View State Tools
# -------------------------


@_SERVER.tool(
    "set_active_filters",
    title="Set active filters",
    description=(
        "Replace the active filter list used by query_data when useActiveFilters is true. "
        "Parameters: filters (list of {column, operator, value}); an empty list clears them."
    ),
)
async def set_active_filters(filters: List[Dict[str, Any]]) -> Dict[str, Any]:
    return _call("set_active_filters", {"filters": filters})


@_SERVER.tool(
    "select_rows",
    title="Select rows",
    description="Replace the row selection with the given zero-based row indices.",
)
async def select_rows(indices: List[int]) -> Dict[str, Any]:
    return _call("select_rows", {"indices": indices})


@_SERVER.tool(
    "get_selected_rows",
    title="Get selected rows",
    description="Return the selected row indices and the rows themselves.",
)
async def get_selected_rows() -> Dict[str, Any]:
    return _call("get_selected_rows")


# Transport functions
def _prepare(data_path: Optional[str], settings: Optional[EngineSettings]) -> None:
    global _STORE
    _STORE = TableStore(settings or DEFAULT_SETTINGS)
    if data_path:
        result = call_tool(_STORE, "load_dataset", {"path": str(Path(data_path))})
        if result.ok:
            logger.info("Preloaded %s", data_path)
        else:
            logger.error("Could not preload %s: %s", data_path, result.error_message)


def run(data_path: Optional[str] = None, *, settings: Optional[EngineSettings] = None) -> None:
    """Run MCP server over stdio."""
    _prepare(data_path, settings)
    logger.info("Starting MCP server over stdio")
    asyncio.run(_SERVER.run_stdio_async())


async def _run_http(host: str, port: int) -> None:
    """Start HTTP server with explicit uvicorn configuration."""
    try:
        import uvicorn
    except ImportError:
        raise RuntimeError("uvicorn is required for HTTP mode: pip install uvicorn")

    app = _SERVER.streamable_http_app()
    config = uvicorn.Config(
        app,
        host=host,
        port=int(port),
        log_level="info",
    )
    server = uvicorn.Server(config)
    await server.serve()


def run_http(
    data_path: Optional[str] = None,
    *,
    host: str = "127.0.0.1",
    port: int = 8765,
    settings: Optional[EngineSettings] = None,
) -> None:
    """Run MCP server over HTTP."""
    _prepare(data_path, settings)
    logger.info("Starting HTTP MCP server on %s:%d", host, port)
    asyncio.run(_run_http(host, port))
