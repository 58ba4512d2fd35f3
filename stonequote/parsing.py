"""
Lenient parsers for wizard input.

The wizard sends most numbers as strings typed by the customer ("3.2",
"AED 1,450", "", None). Every parser here returns a default instead of raising.
"""

import math
import re

_PRICE_JUNK = re.compile(r"[^\d.]")


def parse_number(value, default: float = 0.0) -> float:
    """Parse a numeric value from user input."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = float(str(value).strip())
    except (ValueError, TypeError):
        return default
    if not math.isfinite(number):
        return default
    return number


def parse_int(value, default: int = 0) -> int:
    """Parse an integer from user input. '3.7' becomes 3."""
    number = parse_number(value, default=None)
    if number is None:
        return default
    return int(number)


def parse_price(value, default: float = 0.0) -> float:
    """
    Extract a price from free text like 'AED 1,450.50 per slab'.
    Keeps digits and dots only, so '1,450.50' parses as 1450.50.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        return parse_number(value, default)
    digits = _PRICE_JUNK.sub("", str(value))
    return parse_number(digits, default)


def parse_flag(value) -> bool:
    """Parse a checkbox value. Anything unrecognised is False."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1", "on")
    return False


def as_text(value):
    """Coerce scalar input to a stripped string; blank becomes None."""
    if value is None:
        return None
    if isinstance(value, (dict, list, tuple, set)):
        return None
    text = str(value).strip()
    return text or None
