"""Core enumerations used across the package."""

from __future__ import annotations

from enum import Enum
from typing import Type, TypeVar

from .errors import InvalidLiteralError


class ColumnType(str, Enum):
    """Inferred classification of a column.

    Values are strings to ease serialization and CLI interchange.
    """

    TEXT = "text"
    NUMBER = "number"
    DATE = "date"


class FilterOperator(str, Enum):
    """Comparison operators accepted in a filter condition."""

    EQUALS = "equals"
    NOT_EQUALS = "notEquals"
    CONTAINS = "contains"
    GT = "gt"
    LT = "lt"
    GTE = "gte"
    LTE = "lte"


class AggregateOperation(str, Enum):
    """Per-group reductions supported by the aggregation engine."""

    SUM = "sum"
    AVG = "avg"
    COUNT = "count"
    MIN = "min"
    MAX = "max"


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"


class AggregateSortKey(str, Enum):
    """What aggregate results are ordered by."""

    GROUP = "group"
    VALUE = "value"


E = TypeVar("E", bound=Enum)


def parse_literal(enum_cls: Type[E], value: object, field: str) -> E:
    """Resolve a request literal to an enum member.

    Args:
        enum_cls: Target enumeration.
        value: Raw literal from a request (or an existing member).
        field: Request field name, used in the error message.

    Raises:
        InvalidLiteralError: If `value` is not one of the enumeration's values.

    Examples:
        >>> parse_literal(SortOrder, "desc", "sortOrder")
        <SortOrder.DESC: 'desc'>
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        raise InvalidLiteralError(field, value, [m.value for m in enum_cls]) from None


__all__ = [
    "parse_literal",
    "ColumnType",
    "FilterOperator",
    "AggregateOperation",
    "SortOrder",
    "AggregateSortKey",
]
