"""Core query engine public API.

Every operation here is a pure function over a `Table`: it reads the table and
returns a fresh result object without mutating anything. Implementations are
provided in sibling modules.
"""

from .predicates import evaluate, matches_all, parse_operator
from .plan import compare_cells, query_rows, sort_rows
from .materialize import data_sample, paginate, project, resolve_projection
from .stats import column_stats, column_values
from .aggregate import aggregate

__all__ = [
    "evaluate",
    "matches_all",
    "parse_operator",
    "compare_cells",
    "query_rows",
    "sort_rows",
    "data_sample",
    "paginate",
    "project",
    "resolve_projection",
    "column_stats",
    "column_values",
    "aggregate",
]
