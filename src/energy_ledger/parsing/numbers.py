"""Number parsing for bill figures (US formats only)."""
from __future__ import annotations
import re

# Figures as they appear on the three supported bills: "$1,234.56", "-$12.00", "-1,200"
_CURRENCY_SYMBOLS = re.compile(r'[$\s]')


def parse_amount(raw_string: str) -> float:
    """Parse a monetary amount string to float.

    Handles:
    - Thousands separators: "1,234.56" → 1234.56
    - Currency symbol: "$1,234.56", "-$ 12.00"
    - Negative: "-23.66", "(23.66)"
    """
    if not raw_string or not raw_string.strip():
        raise ValueError("Empty amount string")

    cleaned = raw_string.strip()

    negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        negative = True
        cleaned = cleaned[1:-1].strip()
    elif cleaned.startswith("-"):
        negative = True
        cleaned = cleaned[1:]

    cleaned = _CURRENCY_SYMBOLS.sub('', cleaned).replace(',', '')

    if not re.fullmatch(r'\d+(?:\.\d+)?', cleaned):
        raise ValueError(f"No numeric content in: {raw_string}")

    result = float(cleaned)
    return -result if negative else result


def parse_energy(raw_string: str) -> float:
    """Parse a signed whole-unit energy figure such as "-1,200" or "845".

    Bills print kWh and therms as integers; a fragment left with no digits
    after stripping separators (a lone "-" or ",") is malformed.
    """
    if not raw_string or not raw_string.strip():
        raise ValueError("Empty energy string")

    cleaned = raw_string.strip().replace(',', '')
    if not re.fullmatch(r'-?\d+', cleaned):
        raise ValueError(f"Not an energy quantity: {raw_string}")
    return float(cleaned)
