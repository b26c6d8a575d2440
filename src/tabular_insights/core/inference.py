"""Column type inference.

Classifies each column as number, date or text from a sample of leading rows.
The classification is a heuristic: a mixed-type column can land on either side
of the threshold, and that is accepted rather than corrected afterwards.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Mapping, Optional, Sequence

from .config import DEFAULT_SETTINGS, EngineSettings
from .enums import ColumnType
from .values import is_missing, to_number, to_text

logger = logging.getLogger(__name__)


_DATE_PATTERNS = (
    re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}"),  # ISO
    re.compile(r"^[0-9]{1,2}/[0-9]{1,2}/[0-9]{2,4}"),  # US slash
    re.compile(r"^[0-9]{1,2}-[0-9]{1,2}-[0-9]{2,4}"),  # dash
)


def looks_like_date(text: str) -> bool:
    """True if the trimmed text starts with one of the supported date shapes."""
    s = text.strip()
    return any(p.match(s) for p in _DATE_PATTERNS)


def classify_values(values: Sequence[object], threshold: float) -> ColumnType:
    """Classify one column from its sampled values."""
    numeric_count = 0
    date_count = 0
    total_non_null = 0

    for val in values:
        if is_missing(val):
            continue
        total_non_null += 1

        text = to_text(val).strip()
        if to_number(text) is not None:
            numeric_count += 1
            continue
        if looks_like_date(text):
            date_count += 1

    if total_non_null == 0:
        return ColumnType.TEXT
    if numeric_count / total_non_null > threshold:
        return ColumnType.NUMBER
    if date_count / total_non_null > threshold:
        return ColumnType.DATE
    return ColumnType.TEXT


def infer_column_types(
    headers: Sequence[str],
    rows: Sequence[Mapping[str, object]],
    *,
    settings: Optional[EngineSettings] = None,
) -> Dict[str, ColumnType]:
    """Infer a ColumnType for every header.

    Args:
        headers: Column names.
        rows: Records; only the first `settings.type_sample_size` are inspected.
        settings: Engine settings (defaults when omitted).

    Returns:
        Mapping of header to ColumnType, in header order.

    Examples:
        >>> rows = [{"n": "1", "d": "2024-01-05", "t": "x"}]
        >>> infer_column_types(["n", "d", "t"], rows)["d"]
        <ColumnType.DATE: 'date'>
    """
    settings = settings or DEFAULT_SETTINGS
    sample = rows[: settings.type_sample_size]
    types = {
        h: classify_values([r.get(h) for r in sample], settings.type_match_threshold)
        for h in headers
    }
    logger.debug("Inferred column types from %d sampled rows: %s", len(sample), types)
    return types


__all__ = ["looks_like_date", "classify_values", "infer_column_types"]
