"""Shared utilities."""

from paidsearch_recommender.utils.numeric import (
    clean_numeric_value,
    format_currency,
    percentage_change,
    safe_divide,
)

__all__ = [
    "clean_numeric_value",
    "format_currency",
    "percentage_change",
    "safe_divide",
]
