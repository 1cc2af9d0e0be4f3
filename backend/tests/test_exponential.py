"""
AwardBoard Backend - Exponential Formatter Unit Tests
=======================================================
"""

import math

import pytest

from awardboard.services.exponential import (
    parse_float_prefix,
    parse_fraction_digits,
    to_exponential,
)


class TestToExponential:

    def test_positive_exponent_is_unpadded(self):
        assert to_exponential(12345, 2) == "1.23e+4"

    def test_negative_exponent(self):
        assert to_exponential(0.00123, 1) == "1.2e-3"

    def test_zero(self):
        assert to_exponential(0, 1) == "0.0e+0"

    def test_rounds_to_requested_digits(self):
        assert to_exponential(1234.5678, 3) == "1.235e+3"

    def test_nan_and_infinity(self):
        assert to_exponential(math.nan, 2) == "NaN"
        assert to_exponential(math.inf, 2) == "Infinity"
        assert to_exponential(-math.inf, 2) == "-Infinity"

    def test_digits_out_of_range(self):
        with pytest.raises(ValueError):
            to_exponential(1.0, 101)


class TestParsing:

    def test_numeric_prefix_is_used(self):
        assert parse_float_prefix("12abc") == 12.0
        assert parse_float_prefix("-1.5e3x") == -1500.0

    def test_no_numeric_prefix_is_nan(self):
        assert math.isnan(parse_float_prefix("abc"))

    def test_infinity(self):
        assert parse_float_prefix("Infinity") == math.inf

    def test_fraction_digits_bounds(self):
        assert parse_fraction_digits("0") == 0
        assert parse_fraction_digits("100") == 100
        for bad in ("101", "-1", "two"):
            with pytest.raises(ValueError):
                parse_fraction_digits(bad)
