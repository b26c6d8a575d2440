"""Engine configuration constants.

This module centralizes the sampling, threshold and default-limit settings used
by the engine. The constants are the defaults; a YAML file can override any of
them through `load_settings()`.

Example YAML:
    type_sample_size: 200
    type_match_threshold: 0.9
    default_query_limit: 25
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

# ============================================================================
# TYPE INFERENCE
# ============================================================================

# Rows inspected from the top of the table when classifying columns
TYPE_SAMPLE_SIZE = 100

# Share of non-null sampled values that must match for number/date (strictly greater)
TYPE_MATCH_THRESHOLD = 0.8


# ============================================================================
# REQUEST DEFAULTS
# ============================================================================

DEFAULT_QUERY_LIMIT = 50
DEFAULT_QUERY_OFFSET = 0
DEFAULT_VALUES_LIMIT = 50
DEFAULT_SAMPLE_ROWS = 10

# Decimal places for derived statistics, percentages and aggregate values
ROUND_DIGITS = 2


# ============================================================================
# FILE LOADING
# ============================================================================

CSV_EXTENSIONS = (".csv",)
EXCEL_EXTENSIONS = (".xlsx", ".xls", ".xlsb")


@dataclass(frozen=True)
class EngineSettings:
    """Effective engine settings.

    Attributes:
        type_sample_size: Number of leading rows sampled by type inference.
        type_match_threshold: Fraction in [0, 1] a column must exceed to be
            classified as number or date.
        default_query_limit: Page size for row queries when none is given.
        default_values_limit: Entry cap for value distributions.
        default_sample_rows: Rows returned by the data sample operation.

    Examples:
        >>> EngineSettings().type_sample_size
        100
        >>> EngineSettings(default_query_limit=10).default_query_limit
        10
    """

    type_sample_size: int = TYPE_SAMPLE_SIZE
    type_match_threshold: float = TYPE_MATCH_THRESHOLD
    default_query_limit: int = DEFAULT_QUERY_LIMIT
    default_values_limit: int = DEFAULT_VALUES_LIMIT
    default_sample_rows: int = DEFAULT_SAMPLE_ROWS

    def __post_init__(self) -> None:
        """Validate field constraints."""
        if not 0.0 <= float(self.type_match_threshold) <= 1.0:
            raise ValueError(
                f"type_match_threshold must be within [0, 1], got {self.type_match_threshold}"
            )
        for name in (
            "type_sample_size",
            "default_query_limit",
            "default_values_limit",
            "default_sample_rows",
        ):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value < 0:
                raise ValueError(f"{name} must be a non-negative integer, got {value!r}")


DEFAULT_SETTINGS = EngineSettings()


def get_setting_names() -> List[str]:
    """Return the keys accepted in a settings YAML file."""
    return [f.name for f in fields(EngineSettings)]


def settings_from_mapping(data: Dict[str, Any], base: Optional[EngineSettings] = None) -> EngineSettings:
    """Apply a mapping of overrides on top of `base` (defaults when omitted).

    Raises:
        ValueError: If a key is unknown or a value violates the field constraints.
    """
    known = set(get_setting_names())
    unknown = sorted(k for k in data if k not in known)
    if unknown:
        raise ValueError(
            f"Unknown setting(s): {', '.join(unknown)}. "
            f"Valid settings: {', '.join(sorted(known))}"
        )
    return replace(base or DEFAULT_SETTINGS, **data)


def load_settings(path: Optional[Path] = None) -> EngineSettings:
    """Load settings from a YAML file, or return the defaults.

    Args:
        path: Optional path to a YAML mapping of setting overrides.

    Returns:
        EngineSettings with overrides applied.

    Raises:
        FileNotFoundError: If `path` is given but does not exist.
        ValueError: If the YAML is malformed, not a mapping, or holds invalid settings.
    """
    if path is None:
        return DEFAULT_SETTINGS
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Settings file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Failed to parse settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping, got {type(data).__name__}")
    return settings_from_mapping(data)


__all__ = [
    "TYPE_SAMPLE_SIZE",
    "TYPE_MATCH_THRESHOLD",
    "DEFAULT_QUERY_LIMIT",
    "DEFAULT_QUERY_OFFSET",
    "DEFAULT_VALUES_LIMIT",
    "DEFAULT_SAMPLE_ROWS",
    "ROUND_DIGITS",
    "CSV_EXTENSIONS",
    "EXCEL_EXTENSIONS",
    "EngineSettings",
    "DEFAULT_SETTINGS",
    "get_setting_names",
    "settings_from_mapping",
    "load_settings",
]
