"""Cell value coercions.

A stored cell is one of: `None`, a number (`int`/`float`), or text (`str`).
Every coercion here is a total function: failure to coerce is reported as
`None` rather than as NaN, so callers branch on it explicitly.
"""

from __future__ import annotations

import math
import re
import unicodedata
from decimal import Decimal
from typing import Optional, Tuple, Union

from .config import ROUND_DIGITS

Number = Union[int, float]
CellValue = Union[None, int, float, str]

_INT_RE = re.compile(r"^[+-]?[0-9]+$")


def is_number(value: object) -> bool:
    """True for int/float cells (booleans excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def is_missing(value: object) -> bool:
    """True for null cells and empty text."""
    return value is None or (isinstance(value, str) and value == "")


def to_number(value: object) -> Optional[Number]:
    """Coerce a cell (or filter operand) to a finite number.

    Returns None for nulls, empty or whitespace-only text, unparseable text and
    non-finite values.

    Examples:
        >>> to_number(" 42 ")
        42
        >>> to_number("1e3")
        1000.0
        >>> to_number("abc") is None
        True
        >>> to_number(None) is None
        True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if _fits_float(value) else None
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    s = str(value).strip()
    # float() also accepts digit separators and non-ASCII digits, which
    # numeric text does not
    if not s or "_" in s or not s.isascii():
        return None
    try:
        number = float(s)
    except ValueError:
        return None
    if not math.isfinite(number):
        return None
    if not _INT_RE.match(s):
        return number
    try:
        return int(s)
    except ValueError:
        # zero-padded text past the integer string conversion limit
        return number


def _fits_float(value: int) -> bool:
    try:
        return math.isfinite(float(value))
    except OverflowError:
        return False


def to_text(value: object) -> str:
    """Return the string form used for equality, grouping and distinct counts.

    Nulls become "" and integral floats drop their fractional part so 10 and
    10.0 share one form.

    Examples:
        >>> to_text(None)
        ''
        >>> to_text(10.0)
        '10'
        >>> to_text(2.5)
        '2.5'
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "Infinity" if value > 0 else "-Infinity"
        return _float_text(value)
    return str(value)


def _float_text(value: float) -> str:
    """Format a finite float the way the upload UI stringifies numbers.

    Uses the shortest round-trip digits. Plain notation covers decimal
    exponents from -6 to 20; anything else is written as `d.ddde+n` with no
    exponent padding.

    Examples:
        >>> _float_text(1.5e-07)
        '1.5e-7'
        >>> _float_text(1e-05)
        '0.00001'
        >>> _float_text(1e21)
        '1e+21'
    """
    if value == 0:
        return "0"
    sign, digit_tuple, exponent = Decimal(repr(value)).as_tuple()
    digits = "".join(str(d) for d in digit_tuple).rstrip("0")
    # position of the decimal point relative to the first digit
    point = exponent + len(digit_tuple)
    prefix = "-" if sign else ""
    k = len(digits)
    if k <= point <= 21:
        return prefix + digits + "0" * (point - k)
    if 0 < point <= 21:
        return prefix + digits[:point] + "." + digits[point:]
    if -6 < point <= 0:
        return prefix + "0." + "0" * -point + digits
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    shift = point - 1
    return f"{prefix}{mantissa}e{'+' if shift > 0 else '-'}{abs(shift)}"


def round_half_up(value: float, digits: int = ROUND_DIGITS) -> float:
    """Round halves toward positive infinity.

    Python's round() uses banker's rounding; 2.5 must become 3 here and -2.5
    must become -2. Values too large to scale come back unrounded.
    """
    factor = 10**digits
    try:
        scaled = float(value) * factor
    except OverflowError:
        return math.inf if value > 0 else -math.inf
    if not math.isfinite(scaled):
        return float(value)
    return math.floor(scaled + 0.5) / factor


def round2(value: float) -> float:
    return round_half_up(value, ROUND_DIGITS)


def collation_key(text: str) -> Tuple[str, str]:
    """Locale-style sort key for text.

    Primary level ignores case and accents; ties are broken with lowercase
    before uppercase and unaccented before accented.
    """
    decomposed = unicodedata.normalize("NFKD", text)
    primary = "".join(ch for ch in decomposed if unicodedata.category(ch) != "Mn").casefold()
    return primary, decomposed.swapcase()


def compare_text(a: str, b: str) -> int:
    """Three-way collation comparison of two strings."""
    ka, kb = collation_key(a), collation_key(b)
    if ka < kb:
        return -1
    if ka > kb:
        return 1
    return 0


__all__ = [
    "Number",
    "CellValue",
    "is_number",
    "is_missing",
    "to_number",
    "to_text",
    "round_half_up",
    "round2",
    "collation_key",
    "compare_text",
]
