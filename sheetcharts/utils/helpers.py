# utils/helpers.py

import math
import re
import logging
from typing import Any, Optional
from datetime import date, datetime

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "Unknown"

# Leading number as read by a lenient float parser ("12.5% growth" -> 12.5)
_LEADING_NUMBER = re.compile(r'^\s*[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?')

# A date string names at least a day or a year
_HAS_DIGIT = re.compile(r"\d")

# =============================================================================
# CELL UTILITIES
# =============================================================================

def is_blank(value: Any) -> bool:
    """
    True for cells a spreadsheet would show as empty: None, NaN and
    whitespace-only strings
    """
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def is_real_number(value: Any) -> bool:
    """Numbers proper, excluding bools"""
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def to_finite_number(value: Any) -> Optional[float]:
    """
    Coerce a raw cell to a finite float, or None when it is not numeric
    """
    if value is None:
        return None

    if isinstance(value, bool):
        return float(value)

    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None

    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
        return number if math.isfinite(number) else None

    return None


def to_number_or_zero(value: Any) -> float:
    """Numeric coercion used by every series: failures contribute 0"""
    number = to_finite_number(value)
    return number if number is not None else 0.0


def parse_percentage(value: Any) -> float:
    """
    Convert a percentage cell to a 0-100 scale value.

    "12.5%" -> 12.5, 0.125 -> 12.5, anything unparseable -> 0
    """
    if isinstance(value, str) and "%" in value:
        match = _LEADING_NUMBER.match(value.replace("%", ""))
        if not match:
            return 0.0
        number = float(match.group(0))
        return number if math.isfinite(number) else 0.0

    number = to_finite_number(value)
    if number is None:
        return 0.0
    return number * 100


def is_date_value(value: Any) -> bool:
    """
    Check if a cell holds a calendar date or a string that parses as one
    """
    if isinstance(value, (datetime, date)):
        return True

    if not isinstance(value, str):
        return False

    text = value.strip()
    if not text:
        return False

    if not _HAS_DIGIT.search(text):
        return False

    try:
        date_parser.parse(text)
    except (ValueError, OverflowError):
        return False
    return True

# =============================================================================
# FORMATTING UTILITIES
# =============================================================================

def format_label(value: Any) -> str:
    """
    Format a label cell for display, missing cells become "Unknown"
    """
    if is_blank(value):
        return UNKNOWN_LABEL

    if isinstance(value, float) and value.is_integer():
        return str(int(value))

    if isinstance(value, (datetime, date)):
        return value.isoformat()

    return str(value)


def format_number(value: float, max_decimals: int = 3) -> str:
    """
    Format numbers with thousands separators and at most `max_decimals`
    fraction digits (12345.5 -> "12,345.5")
    """
    text = f"{value:,.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def chart_type_key(chart_type_label: str) -> str:
    """
    Normalize a chart-type label to its storage key ("Bar Chart" -> "bar")
    """
    return chart_type_label.lower().replace(" chart", "")
