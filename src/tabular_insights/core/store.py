"""Table store: the single current-table slot plus its derived state.

The store is an explicit object handed to every entry point. Loading replaces
the table with one reference assignment, so a reader sees either the old table
or the new one, never a mix. Derived state that points into a table (active
filters, selected row indices) is reset whenever the table changes.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from .config import DEFAULT_SETTINGS, EngineSettings
from .errors import EmptyDatasetError, InvalidArgumentError, NoDataLoadedError
from .models import FilterCondition, Table

logger = logging.getLogger(__name__)


class TableStore:
    """Hold at most one table and the UI state that references it."""

    def __init__(self, settings: Optional[EngineSettings] = None) -> None:
        self.settings = settings or DEFAULT_SETTINGS
        self._table: Optional[Table] = None
        self._active_filters: Tuple[FilterCondition, ...] = ()
        self._selected_rows: Tuple[int, ...] = ()
        self._version = 0

    # -------------------------
    # MARK: Table lifecycle
    # -------------------------

    def load(
        self,
        headers: Sequence[str],
        rows: Sequence[Mapping[str, Any]],
        *,
        file_name: Optional[str] = None,
        column_types: Optional[Mapping[str, Any]] = None,
    ) -> Table:
        """Build a table from parsed records and make it current.

        Raises:
            EmptyDatasetError: If `rows` is empty.
            InvalidArgumentError: If headers repeat or column types are incomplete.
        """
        if not rows:
            raise EmptyDatasetError(file_name)
        table = Table.from_records(
            headers,
            rows,
            column_types=column_types,
            file_name=file_name,
            settings=self.settings,
        )
        return self.load_table(table)

    def load_table(self, table: Table) -> Table:
        """Make an already-built table current, superseding any previous one."""
        if table.total_rows == 0:
            raise EmptyDatasetError(table.file_name)
        self._table = table
        self._reset_derived_state()
        self._version += 1
        logger.info(
            "Loaded table %s: %d rows, %d columns (version %d)",
            table.file_name or "<memory>",
            table.total_rows,
            len(table.headers),
            self._version,
        )
        return table

    def current(self) -> Optional[Table]:
        """Return the current table, or None when nothing is loaded."""
        return self._table

    def require(self) -> Table:
        """Return the current table or raise NoDataLoadedError."""
        table = self._table
        if table is None:
            raise NoDataLoadedError()
        return table

    def clear(self) -> None:
        if self._table is not None:
            logger.info("Cleared table %s", self._table.file_name or "<memory>")
        self._table = None
        self._reset_derived_state()
        self._version += 1

    @property
    def version(self) -> int:
        """Monotonic counter bumped on every load or clear."""
        return self._version

    @property
    def is_loaded(self) -> bool:
        return self._table is not None

    def _reset_derived_state(self) -> None:
        self._active_filters = ()
        self._selected_rows = ()

    # -------------------------
    # MARK: Active filters
    # -------------------------

    @property
    def active_filters(self) -> Tuple[FilterCondition, ...]:
        return self._active_filters

    def set_active_filters(self, filters: Iterable[FilterCondition]) -> Tuple[FilterCondition, ...]:
        """Replace the active filter set; every filter must name a current header."""
        table = self.require()
        conditions = tuple(filters)
        for f in conditions:
            table.require_column(f.column)
        self._active_filters = conditions
        logger.debug("Active filters set: %s", [f.to_dict() for f in conditions])
        return conditions

    def clear_active_filters(self) -> None:
        self._active_filters = ()

    # -------------------------
    # MARK: Row selection
    # -------------------------

    @property
    def selected_rows(self) -> Tuple[int, ...]:
        """Selected canonical row indices, in selection order."""
        return self._selected_rows

    def _check_index(self, table: Table, index: object) -> int:
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidArgumentError(f"Row index must be an integer, got {index!r}")
        if not 0 <= index < table.total_rows:
            raise InvalidArgumentError(
                f"Row index {index} out of range (table has {table.total_rows} rows)"
            )
        return index

    def select_rows(self, indices: Iterable[int]) -> Tuple[int, ...]:
        """Replace the selection; duplicates are collapsed, order is kept."""
        table = self.require()
        selected: List[int] = []
        for i in indices:
            i = self._check_index(table, i)
            if i not in selected:
                selected.append(i)
        self._selected_rows = tuple(selected)
        return self._selected_rows

    def toggle_row(self, index: int) -> Tuple[int, ...]:
        """Add `index` to the selection, or remove it if already selected."""
        table = self.require()
        index = self._check_index(table, index)
        if index in self._selected_rows:
            self._selected_rows = tuple(i for i in self._selected_rows if i != index)
        else:
            self._selected_rows = self._selected_rows + (index,)
        return self._selected_rows

    def clear_selection(self) -> None:
        self._selected_rows = ()


__all__ = ["TableStore"]
