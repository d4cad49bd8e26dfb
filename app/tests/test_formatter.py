"""
Tests for result formatting and display-text parsing.
"""

import math

import pytest

from scicalc.formatter import format_result, number_to_string, parse_number


class TestNumberToString:
    """Tests for shortest round-trip rendering."""

    @pytest.mark.parametrize("value, expected", [
        (0.0, "0"),
        (-0.0, "0"),
        (3.0, "3"),
        (100.0, "100"),
        (-0.25, "-0.25"),
        (123.456, "123.456"),
        (0.000001, "0.000001"),
        (1e-7, "1e-7"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1.5e300, "1.5e+300"),
        (-2.5e-10, "-2.5e-10"),
    ])
    def test_rendering(self, value, expected):
        assert number_to_string(value) == expected

    def test_non_finite(self):
        assert number_to_string(math.nan) == "NaN"
        assert number_to_string(math.inf) == "Infinity"
        assert number_to_string(-math.inf) == "-Infinity"


class TestFormatResult:
    """Tests for format_result()."""

    def test_integers_unadorned(self):
        assert format_result(3.0) == "3"
        assert format_result(-42.0) == "-42"
        assert format_result(1024.0) == "1024"

    def test_twelve_significant_digits(self):
        assert format_result(1 / 3) == "0.333333333333"
        assert format_result(2 / 3) == "0.666666666667"
        assert format_result(2 ** 0.5) == "1.41421356237"

    def test_binary_noise_removed(self):
        assert format_result(0.1 + 0.2) == "0.3"
        assert format_result(math.sin(math.radians(30))) == "0.5"

    def test_no_trailing_zeros(self):
        assert format_result(0.25) == "0.25"
        assert format_result(123456.789) == "123456.789"

    def test_custom_digit_budget(self):
        assert format_result(2 ** 0.5, significant_digits=4) == "1.414"

    def test_large_factorial(self):
        result = 1.0
        for i in range(2, 171):
            result *= i
        assert format_result(result) == "7.257415615307994e+306"


class TestParseNumber:
    """Tests for parse_number()."""

    @pytest.mark.parametrize("text, expected", [
        ("42", 42.0),
        ("  3.5abc", 3.5),
        ("3+4", 3.0),
        ("-2.5e3x", -2500.0),
        (".5", 0.5),
        ("1e", 1.0),
        ("+7", 7.0),
    ])
    def test_leading_number(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["", "   ", "abc", "-", ".", "(5)"])
    def test_no_number(self, text):
        assert parse_number(text) is None

    def test_only_ascii_digits(self):
        assert parse_number("\u0663") is None
        assert parse_number("7\u0663") == 7.0

    def test_infinity(self):
        assert parse_number("Infinity") == math.inf
        assert parse_number("-Infinity") == -math.inf
