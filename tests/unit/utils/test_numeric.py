"""Tests for numeric helpers."""

import math

import pytest

from paidsearch_recommender.utils.numeric import (
    clean_numeric_value,
    format_currency,
    percentage_change,
    safe_divide,
)


class TestCleanNumericValue:
    """Test parsing of platform export values."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("4,894", 4894),
            ("$1,234.56", 1234.56),
            ("12.5%", 12.5),
            ("(12.00)", -12.0),
            (" 42 ", 42),
            (7, 7),
            (3.5, 3.5),
            (True, 1),
        ],
    )
    def test_parses_values(self, raw, expected):
        """Test supported formats."""
        assert clean_numeric_value(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "n/a", "N/A", "--", "-", "null", "abc", math.nan])
    def test_invalid_values(self, raw):
        """Test missing or unparseable values become None."""
        assert clean_numeric_value(raw) is None

    def test_integer_strings_stay_integers(self):
        """Test values without a decimal point parse as int."""
        assert isinstance(clean_numeric_value("1,000"), int)
        assert isinstance(clean_numeric_value("1,000.0"), float)


class TestArithmetic:
    """Test arithmetic helpers."""

    def test_safe_divide(self):
        """Test zero denominators resolve to zero."""
        assert safe_divide(10, 4) == 2.5
        assert safe_divide(10, 0) == 0.0

    def test_percentage_change(self):
        """Test percentage change, zero when there is no baseline."""
        assert percentage_change(120, 100) == pytest.approx(20.0)
        assert percentage_change(50, 100) == pytest.approx(-50.0)
        assert percentage_change(50, 0) == 0.0

    def test_format_currency(self):
        """Test dollar formatting."""
        assert format_currency(1234.5) == "$1,234.50"
        assert format_currency(0) == "$0.00"
