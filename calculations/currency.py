"""
Currency Conversion Module
Parses and formats Brazilian currency values with Decimal arithmetic

Formula Summary:
- "1.234,56" -> 1234.56 (dots are thousands separators, comma is the decimal point)
- "1.234"    -> 1234 (dots grouping exactly three digits are thousands separators)
- "1234.56"  -> 1234.56 (machine format, any other single dot and no comma)
- "", "abc", None, NaN -> 0 (parsing never raises)
- Bonus amounts round to cents with an exact half rounding DOWN (x.xx5 -> x.xx)
"""

import logging
import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_DOWN, ROUND_HALF_UP
from typing import Any

from .entities import ZERO

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

_NON_NUMERIC = re.compile(r"[^\d,.\-]")
_GROUPED_THOUSANDS = re.compile(r"^-?\d{1,3}(\.\d{3})+$")


def parse_currency(value: Any) -> Decimal:
    """
    Convert a raw currency value into a Decimal

    Args:
        value: number, Decimal or string in Brazilian ("1.234,56") or machine ("1234.56") format

    Returns:
        Parsed Decimal, or 0 for empty / malformed input
    """
    if value is None or isinstance(value, bool):
        return ZERO

    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO

    if isinstance(value, (int, float)):
        parsed = Decimal(str(value))
        return parsed if parsed.is_finite() else ZERO

    if not isinstance(value, str):
        return ZERO

    cleaned = _NON_NUMERIC.sub("", value)
    if not cleaned:
        return ZERO

    if "," in cleaned:
        cleaned = cleaned.replace(".", "").replace(",", ".")
    elif cleaned.count(".") > 1 or _GROUPED_THOUSANDS.match(cleaned):
        cleaned = cleaned.replace(".", "")

    try:
        parsed = Decimal(cleaned)
    except InvalidOperation:
        logger.debug(f"Unparseable currency value {value!r} - using 0")
        return ZERO

    return parsed if parsed.is_finite() else ZERO


def format_currency(value: Any) -> str:
    """Format a value as Brazilian currency text without symbol, e.g. 1.234,56"""
    amount = parse_currency(value).quantize(CENT, rounding=ROUND_HALF_UP)
    formatted = f"{amount:,.2f}"
    return formatted.replace(",", "_").replace(".", ",").replace("_", ".")


def round_currency(value: Any) -> Decimal:
    """Round to cents: above half goes up, an exact half or below goes down"""
    return parse_currency(value).quantize(CENT, rounding=ROUND_HALF_DOWN)
