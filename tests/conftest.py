"""Shared pytest fixtures: a small sales table, a loaded store and data files."""

from pathlib import Path
from typing import Dict, List

import pandas as pd
import pytest

from tabular_insights.core.models import Table
from tabular_insights.core.store import TableStore

SALES_HEADERS = ["region", "product", "sales", "date"]

# Row 2 has a null sale, row 4 a non-numeric one, row 5 a null region.
SALES_ROWS: List[Dict[str, object]] = [
    {"region": "North", "product": "Widget", "sales": 100, "date": "2024-01-05"},
    {"region": "South", "product": "Gadget", "sales": 250.5, "date": "2024-01-06"},
    {"region": "north", "product": "Gizmo", "sales": None, "date": "2024-02-01"},
    {"region": "East", "product": "widget pro", "sales": 75, "date": "2024-02-10"},
    {"region": "South", "product": "Widget", "sales": "n/a", "date": "2024-03-01"},
    {"region": None, "product": "Gadget", "sales": 40, "date": "2024-03-15"},
    {"region": "West", "product": "Gizmo", "sales": 300, "date": "2024-03-20"},
]


@pytest.fixture
def sales_table() -> Table:
    return Table.from_records(SALES_HEADERS, SALES_ROWS, file_name="sales.csv")


@pytest.fixture
def region_table() -> Table:
    """Three-row table from the aggregation example (N: 10 + 20, S: 5)."""
    return Table.from_records(
        ["region", "sales"],
        [
            {"region": "N", "sales": 10},
            {"region": "N", "sales": 20},
            {"region": "S", "sales": 5},
        ],
    )


@pytest.fixture
def empty_store() -> TableStore:
    return TableStore()


@pytest.fixture
def store(sales_table) -> TableStore:
    s = TableStore()
    s.load_table(sales_table)
    return s


@pytest.fixture
def sales_csv(tmp_path) -> Path:
    path = tmp_path / "sales.csv"
    pd.DataFrame(
        {
            "region": ["North", "South", "North", "East"],
            "units": [10, 5, 20, 7],
            "price": [2.5, 4.0, 2.5, 10.0],
            "code": ["007", "A12", "", "42"],
        }
    ).to_csv(path, index=False)
    return path
