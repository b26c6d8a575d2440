import argparse
import importlib
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import colorlog

from tabular_insights.core.config import EngineSettings, get_setting_names, load_settings
from tabular_insights.core.enums import AggregateOperation, AggregateSortKey, FilterOperator, SortOrder
from tabular_insights.core.errors import EngineError
from tabular_insights.core.store import TableStore
from tabular_insights.ingestion.loader import load_into_store, supported_extensions
from tabular_insights.interfaces.tools import ToolResult, call_tool

OPERATOR_CHOICES = [op.value for op in FilterOperator]
OPERATION_CHOICES = [op.value for op in AggregateOperation]
SORT_ORDER_CHOICES = [o.value for o in SortOrder]

try:
    # Prefer package-defined version
    from tabular_insights import __version__ as _PACKAGE_VERSION
except ImportError:  # pragma: no cover - defensive fallback
    _PACKAGE_VERSION = "unknown"  # type: ignore[assignment]


def setup_logging(
    verbose: bool = False, warnings_only: bool = False, errors_only: bool = False
) -> None:
    logger = logging.getLogger()
    for h in list(logger.handlers):
        logger.removeHandler(h)
    log_format = "%(asctime)s:%(levelname)s:%(name)s: %(message)s"
    log_colors = {
        "DEBUG": "cyan",
        "INFO": "green",
        "WARNING": "yellow",
        "ERROR": "red",
        "CRITICAL": "bold_red",
    }
    # colorlog writes to stderr, keeping stdout clean for JSON results
    stream_handler = colorlog.StreamHandler()
    formatter = colorlog.ColoredFormatter(f"%(log_color)s{log_format}", log_colors=log_colors)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)
    if errors_only:
        logger.setLevel(logging.ERROR)
    elif warnings_only:
        logger.setLevel(logging.WARNING)
    else:
        logger.setLevel(logging.DEBUG if verbose else logging.INFO)


# -------------------------
# MARK: Helpers
# -------------------------


def _settings(args: argparse.Namespace) -> Optional[EngineSettings]:
    """Load --config settings; None means the file was invalid (already logged)."""
    config_path = getattr(args, "config", None)
    try:
        return load_settings(Path(config_path) if config_path else None)
    except (FileNotFoundError, ValueError) as e:
        logging.error("Invalid settings file: %s (valid keys: %s)", e, ", ".join(get_setting_names()))
        return None


def _open_store(args: argparse.Namespace, settings: EngineSettings) -> Optional[TableStore]:
    """Build a store with the requested file loaded; None on failure (already logged)."""
    store = TableStore(settings)
    try:
        load_into_store(store, Path(args.file))
    except FileNotFoundError as e:
        logging.error("%s", e)
        return None
    except (EngineError, ValueError) as e:
        logging.error("Could not load %s: %s", args.file, e)
        return None
    return store


def _emit(result: ToolResult) -> int:
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0 if result.ok else 2


def _run_tool(args: argparse.Namespace, name: str, payload: Dict[str, Any]) -> int:
    settings = _settings(args)
    if settings is None:
        return 2
    store = _open_store(args, settings)
    if store is None:
        return 1
    return _emit(call_tool(store, name, payload))


def _parse_filter(spec: str) -> Dict[str, Any]:
    """Parse "column:operator:value"; the value may itself contain colons.

    Examples:
        >>> _parse_filter("price:gt:10")
        {'column': 'price', 'operator': 'gt', 'value': '10'}
    """
    parts = spec.split(":", 2)
    if len(parts) != 3 or not parts[0]:
        raise ValueError(f"Filter must look like column:operator:value, got {spec!r}")
    column, operator, value = parts
    return {"column": column, "operator": operator, "value": value}


def _collect_filters(args: argparse.Namespace) -> List[Dict[str, Any]]:
    filters: List[Dict[str, Any]] = []
    if getattr(args, "filters_json", None):
        loaded = json.loads(args.filters_json)
        if not isinstance(loaded, list):
            raise ValueError("--filters-json must be a JSON list of filter objects")
        filters.extend(loaded)
    for spec in getattr(args, "filter", None) or []:
        filters.append(_parse_filter(spec))
    return filters


def _split_columns(value: Optional[str]) -> Optional[List[str]]:
    if not value:
        return None
    return [c.strip() for c in value.split(",") if c.strip()]


# -------------------------
# MARK: Commands
# -------------------------


def cmd_sample(args: argparse.Namespace) -> int:
    """Print headers, column types and the first rows of a file."""
    return _run_tool(args, "get_data_sample", {"numRows": args.rows})


def cmd_stats(args: argparse.Namespace) -> int:
    return _run_tool(args, "get_column_stats", {"column": args.column})


def cmd_values(args: argparse.Namespace) -> int:
    return _run_tool(args, "get_column_values", {"column": args.column, "limit": args.limit})


def cmd_query(args: argparse.Namespace) -> int:
    """Filter, sort and page rows of a file.

    Filters from --filters-json come first, then each --filter in order; all
    of them must hold for a row to match.
    """
    try:
        filters = _collect_filters(args)
    except ValueError as e:  # json.JSONDecodeError is a ValueError
        logging.error("Invalid filter: %s", e)
        return 2
    payload = {
        "filters": filters,
        "columns": _split_columns(args.columns),
        "limit": args.limit,
        "offset": args.offset,
        "sortBy": args.sort_by,
        "sortOrder": args.sort_order,
    }
    return _run_tool(args, "query_data", payload)


def cmd_aggregate(args: argparse.Namespace) -> int:
    payload = {
        "groupBy": args.group_by,
        "aggregateColumn": args.column,
        "operation": args.operation,
        "sortBy": args.sort_by,
        "sortOrder": args.sort_order,
        "limit": args.limit,
    }
    return _run_tool(args, "aggregate_data", payload)


def cmd_mcp_server(args: argparse.Namespace) -> int:
    """Start the MCP server.

    Default: stdio. If --port is set, run HTTP transport at host:port.
    """
    try:
        mcp_server = importlib.import_module("tabular_insights.interfaces.mcp.server")
    except (ModuleNotFoundError, AttributeError, ImportError, RuntimeError) as e:
        logging.error(
            "Failed to import MCP server. Ensure 'mcp' is installed. Error: %s",
            e,
        )
        return 3
    settings = _settings(args)
    if settings is None:
        return 2
    data_file = getattr(args, "data_file", None)
    port = getattr(args, "port", None)
    host = getattr(args, "host", None) or "127.0.0.1"
    try:
        if port:
            logging.info("Starting MCP HTTP server on %s:%s", host, port)
            mcp_server.run_http(data_file, host=host, port=int(port), settings=settings)
        else:
            logging.info("Starting MCP stdio server")
            mcp_server.run(data_file, settings=settings)
    except KeyboardInterrupt:
        pass
    return 0


# -------------------------
# MARK: Parser
# -------------------------


def _add_file_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "file",
        help=f"Data file to analyze ({', '.join(supported_extensions())})",
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="tabular-insights",
        description=f"Tabular Insights (v{_PACKAGE_VERSION})",
    )
    p.add_argument("--verbose", action="store_true", help="Enable verbose logging")
    p.add_argument(
        "--warnings-only",
        action="store_true",
        help="Show only warnings and errors (overrides --verbose)",
    )
    p.add_argument(
        "--errors-only",
        action="store_true",
        help="Show only errors (overrides --warnings-only and --verbose)",
    )
    p.add_argument(
        "--config",
        default=None,
        help="YAML file overriding engine settings (e.g. default_query_limit: 100)",
    )

    sub = p.add_subparsers(dest="command", required=True)

    p_sample = sub.add_parser("sample", help="Show headers, column types and first rows")
    _add_file_argument(p_sample)
    p_sample.add_argument("--rows", type=int, default=None, help="Number of rows (default 10)")
    p_sample.set_defaults(func=cmd_sample)

    p_stats = sub.add_parser("stats", help="Descriptive statistics for one column")
    _add_file_argument(p_stats)
    p_stats.add_argument("--column", required=True, help="Column name")
    p_stats.set_defaults(func=cmd_stats)

    p_values = sub.add_parser("values", help="Distinct values of a column with frequencies")
    _add_file_argument(p_values)
    p_values.add_argument("--column", required=True, help="Column name")
    p_values.add_argument("--limit", type=int, default=None, help="Maximum entries (default 50)")
    p_values.set_defaults(func=cmd_values)

    p_query = sub.add_parser("query", help="Filter, sort and paginate rows")
    _add_file_argument(p_query)
    p_query.add_argument(
        "--filter",
        action="append",
        default=None,
        help=f"column:operator:value, repeatable; operators: {', '.join(OPERATOR_CHOICES)}",
    )
    p_query.add_argument(
        "--filters-json",
        default=None,
        help='JSON list of filters, e.g. \'[{"column": "a", "operator": "gt", "value": 5}]\'',
    )
    p_query.add_argument("--columns", default=None, help="Comma-separated columns to return")
    p_query.add_argument("--limit", type=int, default=None, help="Page size (default 50)")
    p_query.add_argument("--offset", type=int, default=None, help="Rows to skip (default 0)")
    p_query.add_argument("--sort-by", default=None, help="Column to sort by")
    p_query.add_argument("--sort-order", choices=SORT_ORDER_CHOICES, default=None)
    p_query.set_defaults(func=cmd_query)

    p_agg = sub.add_parser("aggregate", help="Group by a column and reduce another")
    _add_file_argument(p_agg)
    p_agg.add_argument("--group-by", required=True, help="Column to group by")
    p_agg.add_argument("--column", required=True, help="Column to aggregate")
    p_agg.add_argument("--operation", required=True, choices=OPERATION_CHOICES)
    p_agg.add_argument(
        "--sort-by", choices=[k.value for k in AggregateSortKey], default=None
    )
    p_agg.add_argument("--sort-order", choices=SORT_ORDER_CHOICES, default=None)
    p_agg.add_argument("--limit", type=int, default=None, help="Keep only the first N groups")
    p_agg.set_defaults(func=cmd_aggregate)

    p_mcp = sub.add_parser("mcp-server", help="Run the MCP server (stdio or HTTP)")
    p_mcp.add_argument(
        "--data-file",
        default=None,
        help="Optional data file to load before serving",
    )
    p_mcp.add_argument(
        "--port",
        default=None,
        help="If set, run HTTP transport on the given port",
    )
    p_mcp.add_argument(
        "--host",
        default=None,
        help="Host to bind for HTTP transport (default 127.0.0.1)",
    )
    p_mcp.set_defaults(func=cmd_mcp_server)

    return p


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(
        verbose=bool(args.verbose),
        warnings_only=bool(getattr(args, "warnings_only", False)),
        errors_only=bool(getattr(args, "errors_only", False)),
    )
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
