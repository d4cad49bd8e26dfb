"""
Formatter Module

Turns doubles into display text and display text back into numbers.

- format_result(): the canonical display form of a result
- number_to_string(): shortest round-trip decimal rendering
- parse_number(): lenient parse of the leading number in display text
"""

import math
import re
from decimal import Decimal
from typing import Optional

DEFAULT_SIGNIFICANT_DIGITS = 12

# Fixed notation is used while the decimal exponent stays in (-6, 21]
_MAX_FIXED_EXPONENT = 21
_MIN_FIXED_EXPONENT = -6

_LEADING_NUMBER_RE = re.compile(
    r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)"
)


def number_to_string(x: float) -> str:
    """
    Render a double as the shortest decimal string that round-trips.

    Integers print without a decimal point, values with a decimal
    exponent outside (-6, 21] switch to exponential notation.

    Example:
        >>> number_to_string(0.25)
        '0.25'
        >>> number_to_string(1e21)
        '1e+21'
    """
    if math.isnan(x):
        return "NaN"
    if math.isinf(x):
        return "Infinity" if x > 0 else "-Infinity"
    if x == 0:
        return "0"

    sign = "-" if x < 0 else ""
    _, digit_tuple, exponent = Decimal(repr(abs(x))).as_tuple()
    digits = "".join(str(d) for d in digit_tuple)
    # n is the position of the decimal point relative to the digit string
    n = len(digits) + exponent
    digits = digits.rstrip("0")
    k = len(digits)

    if k <= n <= _MAX_FIXED_EXPONENT:
        return sign + digits + "0" * (n - k)
    if 0 < n <= _MAX_FIXED_EXPONENT:
        return sign + digits[:n] + "." + digits[n:]
    if _MIN_FIXED_EXPONENT < n <= 0:
        return sign + "0." + "0" * (-n) + digits

    e = n - 1
    mantissa = digits if k == 1 else digits[0] + "." + digits[1:]
    return f"{sign}{mantissa}e{'+' if e >= 0 else '-'}{abs(e)}"


def format_result(x: float, significant_digits: int = DEFAULT_SIGNIFICANT_DIGITS) -> str:
    """
    Format a calculation result for display.

    Integral values are shown as-is. Anything else is rounded to
    ``significant_digits`` significant digits first, which hides
    binary noise such as 0.1 + 0.2 = 0.30000000000000004.

    Args:
        x: Value to format
        significant_digits: Rounding budget for non-integers

    Returns:
        Display string with no trailing zeros
    """
    if not math.isfinite(x) or x.is_integer():
        return number_to_string(x)
    rounded = float(f"{x:.{significant_digits}g}")
    return number_to_string(rounded)


def parse_number(text: str) -> Optional[float]:
    """
    Parse the number at the start of display text.

    Leading whitespace is skipped and anything after the longest numeric
    prefix is ignored, so "3+4" parses as 3.0.

    Returns:
        The parsed value, or None if the text does not start with a number
    """
    match = _LEADING_NUMBER_RE.match(text.lstrip())
    if match is None:
        return None
    literal = match.group(0)
    if literal.endswith("Infinity"):
        return -math.inf if literal.startswith("-") else math.inf
    return float(literal)
