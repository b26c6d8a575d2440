"""Load delimited text and spreadsheet files into a Table.

CSV files are read with pandas and typed dynamically: numeric-looking cells
become numbers even in otherwise textual columns, and only empty cells become
null. Spreadsheets are read from their first sheet; text cells stay text.
"""

from __future__ import annotations

import logging
import math
import re
from datetime import date, datetime, time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import numpy as np
import pandas as pd

from tabular_insights.core.config import CSV_EXTENSIONS, EXCEL_EXTENSIONS, EngineSettings
from tabular_insights.core.errors import EmptyDatasetError, UnsupportedFileError
from tabular_insights.core.models import Table
from tabular_insights.core.store import TableStore
from tabular_insights.core.values import CellValue, to_number

logger = logging.getLogger(__name__)

_NUMERIC_TEXT_RE = re.compile(r"^\s*-?([0-9]+\.?|\.[0-9]+|[0-9]+\.[0-9]+)([eE][-+]?[0-9]+)?\s*$")


def supported_extensions() -> List[str]:
    return list(CSV_EXTENSIONS + EXCEL_EXTENSIONS)


def normalize_cell(value: Any, *, dynamic_typing: bool = False) -> CellValue:
    """Convert a parsed cell to None, int, float or str.

    Examples:
        >>> normalize_cell(float("nan")) is None
        True
        >>> normalize_cell(3.0)
        3
        >>> normalize_cell(" 12 ", dynamic_typing=True)
        12
    """
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, np.datetime64):
        value = pd.Timestamp(value)
    elif isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, (datetime, date, time)):
        return None if pd.isna(value) else value.isoformat()
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        return int(value) if value.is_integer() else value
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        if dynamic_typing and _NUMERIC_TEXT_RE.match(value):
            number = to_number(value)
            # text too large for a float stays text
            return value if number is None else number
        return value
    return str(value)


def _frame_to_records(df: pd.DataFrame, *, dynamic_typing: bool) -> List[Dict[str, CellValue]]:
    headers = [str(c) for c in df.columns]
    records: List[Dict[str, CellValue]] = []
    for raw in df.itertuples(index=False, name=None):
        records.append(
            {h: normalize_cell(v, dynamic_typing=dynamic_typing) for h, v in zip(headers, raw)}
        )
    return records


def _read_frame(path: Path) -> pd.DataFrame:
    suffix = path.suffix.lower()
    if suffix in CSV_EXTENSIONS:
        try:
            return pd.read_csv(
                path,
                encoding="utf-8-sig",
                keep_default_na=False,
                na_values=[""],
                skip_blank_lines=True,
            )
        except pd.errors.EmptyDataError:
            raise EmptyDatasetError(path.name) from None
        except (UnicodeDecodeError, pd.errors.ParserError) as e:
            raise ValueError(f"Failed to parse CSV file {path.name}: {e}") from e
    if suffix in EXCEL_EXTENSIONS:
        try:
            return pd.read_excel(path, sheet_name=0)
        except ImportError as e:
            raise UnsupportedFileError(
                f"Reading {suffix} files requires an optional Excel engine: {e}"
            ) from e
        except (OSError, ValueError) as e:
            raise ValueError(f"Failed to read spreadsheet {path.name}: {e}") from e
    raise UnsupportedFileError(
        f"Unsupported file type: {path.name}. "
        f"Please upload one of: {', '.join(supported_extensions())}"
    )


def load_table_file(path: Union[str, Path], *, settings: Optional[EngineSettings] = None) -> Table:
    """Parse a CSV or Excel file into a Table with inferred column types.

    Args:
        path: File to read (.csv, .xlsx, .xls, .xlsb).
        settings: Engine settings used for type inference.

    Returns:
        Table whose file_name is the file's base name.

    Raises:
        FileNotFoundError: If `path` does not exist.
        UnsupportedFileError: If the extension is not supported.
        EmptyDatasetError: If the file has no data rows.
        ValueError: If the file content cannot be parsed.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Data file not found: {path}")

    logger.info("Parsing %s", path.name)
    df = _read_frame(path)
    if df.empty:
        raise EmptyDatasetError(path.name)

    dynamic_typing = path.suffix.lower() in CSV_EXTENSIONS
    records = _frame_to_records(df, dynamic_typing=dynamic_typing)
    table = Table.from_records(
        [str(c) for c in df.columns],
        records,
        file_name=path.name,
        settings=settings,
    )
    logger.debug("Column types for %s: %s", path.name, dict(table.column_types))
    return table


def load_into_store(store: TableStore, path: Union[str, Path]) -> Table:
    """Parse `path` and make it the store's current table."""
    return store.load_table(load_table_file(path, settings=store.settings))


__all__ = ["supported_extensions", "normalize_cell", "load_table_file", "load_into_store"]
