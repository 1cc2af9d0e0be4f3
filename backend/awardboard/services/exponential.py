"""
AwardBoard Backend - Exponential Notation Formatter
=====================================================

Backs GET /exponential/{x}/{f}. Output follows the browser convention
(`1.23e+5`, `0.0e+0`, `NaN`, `Infinity`) rather than Python's padded
exponent (`1.23e+05`).

    x  parsed like a lenient float: the longest numeric prefix is used and
       no numeric prefix at all yields NaN
    f  fraction digits, an integer in [0, 100]; anything else raises
       ValueError and the route answers award 500
"""

import math
import re

MAX_FRACTION_DIGITS = 100

_NUMERIC_PREFIX = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?))"
)


def parse_float_prefix(text: str) -> float:
    match = _NUMERIC_PREFIX.match(text)
    if match is None:
        return math.nan
    return float(match.group(1).replace("Infinity", "inf"))


def parse_fraction_digits(text: str) -> int:
    digits = int(text.strip())
    if not 0 <= digits <= MAX_FRACTION_DIGITS:
        raise ValueError(f"fraction digits must be between 0 and {MAX_FRACTION_DIGITS}, got {digits}")
    return digits


def to_exponential(value: float, digits: int) -> str:
    if not 0 <= digits <= MAX_FRACTION_DIGITS:
        raise ValueError(f"fraction digits must be between 0 and {MAX_FRACTION_DIGITS}, got {digits}")
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    mantissa, exponent = f"{value:.{digits}e}".split("e")
    return f"{mantissa}e{int(exponent):+d}"
