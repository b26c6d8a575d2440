from __future__ import annotations

import operator as _op
from typing import Callable, Dict, Mapping, Sequence, Union

from ..enums import FilterOperator, parse_literal
from ..models import FilterCondition
from ..values import Number, to_number, to_text

_NUMERIC_COMPARISONS: Dict[FilterOperator, Callable[[Number, Number], bool]] = {
    FilterOperator.GT: _op.gt,
    FilterOperator.LT: _op.lt,
    FilterOperator.GTE: _op.ge,
    FilterOperator.LTE: _op.le,
}


def parse_operator(literal: object) -> FilterOperator:
    """Resolve an operator literal; unknown literals raise InvalidLiteralError."""
    return parse_literal(FilterOperator, literal, "operator")


def evaluate(row_value: object, operator: Union[str, FilterOperator], filter_value: object) -> bool:
    """Evaluate one filter condition against a cell value.

    equals/notEquals/contains compare lower-cased string forms (null is "").
    gt/lt/gte/lte compare numbers and are False when either side does not
    coerce to a finite number.

    Examples:
        >>> evaluate("North", "equals", "north")
        True
        >>> evaluate(None, "contains", "")
        True
        >>> evaluate("abc", "gt", 1)
        False
    """
    op = parse_operator(operator)

    if op in _NUMERIC_COMPARISONS:
        left = to_number(row_value)
        right = to_number(filter_value)
        if left is None or right is None:
            return False
        return _NUMERIC_COMPARISONS[op](left, right)

    left_text = to_text(row_value).lower()
    right_text = to_text(filter_value).lower()
    if op == FilterOperator.EQUALS:
        return left_text == right_text
    if op == FilterOperator.NOT_EQUALS:
        return left_text != right_text
    return right_text in left_text


def matches_all(row: Mapping[str, object], filters: Sequence[FilterCondition]) -> bool:
    """True when the row passes every condition (an empty list passes)."""
    return all(evaluate(row.get(f.column), f.operator, f.value) for f in filters)


__all__ = ["parse_operator", "evaluate", "matches_all"]
