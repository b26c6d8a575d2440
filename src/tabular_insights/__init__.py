"""Tabular Insights: in-memory query engine for uploaded tabular datasets.

The package loads a CSV or spreadsheet into a single in-memory table and
answers structured requests over it (column statistics, filtered row views,
value distributions, grouped aggregates). The request/response surface in
`interfaces.tools` is what a conversational agent calls; the CLI and the MCP
server are thin shells around it.
"""

__all__ = [
    "__version__",
]

__version__ = "0.3.0"
