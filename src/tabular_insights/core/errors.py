"""Engine error hierarchy.

Every error raised by the engine derives from `EngineError` and carries a
stable `kind` string. The tool boundary turns these into failure envelopes;
anything that is not an `EngineError` is a bug and propagates.
"""

from __future__ import annotations

from typing import Iterable, Optional, Sequence


class EngineError(RuntimeError):
    """Base class for clean, user-facing engine failures."""

    kind = "engine_error"


class NoDataLoadedError(EngineError):
    kind = "no_data"

    def __init__(self, message: Optional[str] = None) -> None:
        super().__init__(message or "No data loaded. Please upload a file first.")


class UnknownColumnError(EngineError):
    """A request referenced a header that is not in the current table."""

    kind = "unknown_column"

    def __init__(self, column: str, available: Sequence[str]) -> None:
        self.column = column
        self.available = list(available)
        super().__init__(
            f'Column "{column}" not found. Available columns: {", ".join(self.available)}'
        )


class InvalidLiteralError(EngineError, ValueError):
    """An enumerated literal (operator, operation, sort key...) was not recognized."""

    kind = "invalid_literal"

    def __init__(self, field: str, value: object, allowed: Iterable[str]) -> None:
        self.field = field
        self.value = value
        self.allowed = list(allowed)
        super().__init__(
            f"Invalid {field} {value!r}. Use one of: {', '.join(self.allowed)}"
        )


class InvalidArgumentError(EngineError, ValueError):
    kind = "invalid_argument"


class EmptyDatasetError(EngineError):
    """Raised at load time when the parsed dataset has no rows."""

    kind = "empty_dataset"

    def __init__(self, file_name: Optional[str] = None) -> None:
        self.file_name = file_name
        where = f" ({file_name})" if file_name else ""
        super().__init__(f"The dataset appears to be empty{where}.")


class UnsupportedFileError(EngineError, ValueError):
    kind = "unsupported_file"


class DatasetLoadError(EngineError):
    """A data file could not be read or parsed."""

    kind = "load_failed"


__all__ = [
    "EngineError",
    "NoDataLoadedError",
    "UnknownColumnError",
    "InvalidLiteralError",
    "InvalidArgumentError",
    "EmptyDatasetError",
    "UnsupportedFileError",
    "DatasetLoadError",
]
