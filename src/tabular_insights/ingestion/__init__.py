"""File ingestion: turn uploaded CSV/Excel files into tables."""

from .loader import load_into_store, load_table_file, normalize_cell, supported_extensions

__all__ = [
    "load_into_store",
    "load_table_file",
    "normalize_cell",
    "supported_extensions",
]
