"""Numeric helpers shared by the data models and analyzers."""

import logging
import re
from typing import Any

import pandas as pd

logger = logging.getLogger(__name__)

_INVALID_TOKENS = ("n/a", "na", "--", "-", "null", "none")


def clean_numeric_value(value: Any) -> int | float | None:
    """Parse a numeric value as reported by ad platform exports.

    Handles the formats the platforms emit:
    - Comma-separated numbers: "4,894" → 4894
    - Currency symbols: "$1,234.56" → 1234.56
    - Percentage values: "12.5%" → 12.5
    - Accounting negatives: "(12.00)" → -12.0
    - Empty/null values: "" → None

    Args:
        value: Raw value that should be numeric

    Returns:
        Cleaned numeric value (int/float) or None if invalid
    """
    if value is None or (not isinstance(value, str) and pd.isna(value)) or value == "":
        return None

    if isinstance(value, bool):
        return int(value)

    if isinstance(value, (int, float)):
        return value

    if isinstance(value, str):
        cleaned = value.strip()

        if cleaned.lower() in _INVALID_TOKENS:
            return None

        cleaned = re.sub(r"[,$%\s]", "", cleaned)

        if cleaned.startswith("(") and cleaned.endswith(")"):
            cleaned = "-" + cleaned[1:-1]

        try:
            if "." not in cleaned:
                return int(float(cleaned))
            return float(cleaned)
        except (ValueError, OverflowError):
            logger.debug(f"Unable to parse numeric value: '{value}', returning None")
            return None

    logger.debug(f"Unable to convert value to numeric: '{value}' (type: {type(value)})")
    return None


def safe_divide(numerator: float, denominator: float) -> float:
    """Divide, resolving a zero denominator to 0."""
    return numerator / denominator if denominator else 0.0


def percentage_change(current: float, previous: float) -> float:
    """Calculate percentage change between two values (0 when previous is 0)."""
    if previous == 0:
        return 0.0
    return (current - previous) / previous * 100


def format_currency(amount: float) -> str:
    """Format dollar amounts consistently.

    Args:
        amount: Dollar amount to format

    Returns:
        Formatted currency string (e.g., "$1,234.56")
    """
    return f"${amount:,.2f}"
