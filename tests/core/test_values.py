"""Tests for cell value coercions in `tabular_insights.core.values`."""

import math

import pytest

from tabular_insights.core.values import (
    compare_text,
    is_missing,
    is_number,
    round_half_up,
    to_number,
    to_text,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        (42, 42),
        (2.5, 2.5),
        (" 42 ", 42),
        ("-3.5", -3.5),
        ("1e3", 1000.0),
        ("abc", None),
        ("", None),
        ("   ", None),
        (None, None),
        (True, None),
        ("1_000", None),
        (float("nan"), None),
        ("inf", None),
        ("9" * 400, None),
        ("9" * 5000, None),
        ("0" * 5000 + "7", 7.0),
        (10**400, None),
        ("\uff11\uff12", None),
        ("\u0661\u0662.5", None),
    ],
    ids=[
        "int",
        "float",
        "padded-int-text",
        "negative-float-text",
        "exponent",
        "word",
        "empty",
        "whitespace",
        "none",
        "bool",
        "digit-separator",
        "nan",
        "infinity-text",
        "integer-text-beyond-float-range",
        "integer-text-past-conversion-limit",
        "zero-padded-past-conversion-limit",
        "int-beyond-float-range",
        "full-width-digits",
        "arabic-indic-digits",
    ],
)
def test_to_number(value, expected):
    """to_number() returns a finite number or None, never raises."""
    assert to_number(value) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        (None, ""),
        ("North", "North"),
        (10, "10"),
        (10.0, "10"),
        (2.5, "2.5"),
        (True, "true"),
        (float("inf"), "Infinity"),
        (1.5e-07, "1.5e-7"),
        (1e-07, "1e-7"),
        (1e-05, "0.00001"),
        (-0.000123, "-0.000123"),
        (123.456, "123.456"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1.25e22, "1.25e+22"),
        (-0.0, "0"),
    ],
    ids=[
        "none",
        "text",
        "int",
        "integral-float",
        "float",
        "bool",
        "infinity",
        "small-exponent-unpadded",
        "small-power-of-ten",
        "plain-small-fraction",
        "negative-small-fraction",
        "plain-fraction",
        "largest-plain-integral",
        "large-exponent",
        "large-exponent-with-fraction",
        "negative-zero",
    ],
)
def test_to_text(value, expected):
    assert to_text(value) == expected


def test_is_missing_and_is_number():
    """Only None and empty text are missing; booleans are not numbers."""
    assert is_missing(None)
    assert is_missing("")
    assert not is_missing(" ")
    assert not is_missing(0)
    assert is_number(0)
    assert is_number(1.5)
    assert not is_number(True)
    assert not is_number("1")


@pytest.mark.parametrize(
    "value,expected",
    [(2.346, 2.35), (2.5, 2.5), (-0.125, -0.12), (8.16496580927726, 8.16), (0.125, 0.13)],
    ids=["up", "exact", "negative-half-toward-positive", "sqrt-200-over-3", "positive-half"],
)
def test_round_half_up(value, expected):
    assert math.isclose(round_half_up(value, 2), expected)


def test_round_half_up_whole_numbers():
    """Halves at zero digits round toward positive infinity."""
    assert round_half_up(2.5, 0) == 3
    assert round_half_up(-2.5, 0) == -2


def test_compare_text_ignores_case_and_accents_at_primary_level():
    assert compare_text("apple", "Banana") == -1
    assert compare_text("éclair", "eclairs") == -1
    assert compare_text("b", "a") == 1
    assert compare_text("same", "same") == 0


def test_compare_text_breaks_case_ties_lowercase_first():
    assert compare_text("north", "North") == -1
    assert compare_text("North", "north") == 1


def test_round_half_up_leaves_unscalable_values():
    assert round_half_up(1.7e308, 2) == 1.7e308
    assert round_half_up(10**400, 2) == math.inf
