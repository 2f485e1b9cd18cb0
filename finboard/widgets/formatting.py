"""
Display formatting for widget field values.

Values come from arbitrary APIs, so anything may arrive here: numbers,
numeric strings, booleans, nested structures or nothing at all. Formatting
never raises; values that cannot be formatted numerically are shown in
their plain string form.
"""

import json
import math
from decimal import ROUND_HALF_UP, Context, Decimal, InvalidOperation
from typing import Any

from django.conf import settings
from django.utils import numberformat

from finboard.widgets.types import FieldFormat

NOT_AVAILABLE = "N/A"

DEFAULT_CURRENCY_SYMBOL = "₹"
# Indian digit grouping: 12,34,567.00
DEFAULT_NUMBER_GROUPING = (3, 2, 0)
NUMBER_MAX_FRACTION_DIGITS = 3


def _currency_symbol() -> str:
    return getattr(settings, "WIDGET_CURRENCY_SYMBOL", DEFAULT_CURRENCY_SYMBOL)


def _grouping():
    return getattr(settings, "WIDGET_NUMBER_GROUPING", DEFAULT_NUMBER_GROUPING)


def coerce_number(value: Any) -> int | float | None:
    """
    Return ``value`` as a finite number, or None if it is not numeric.

    Booleans are not numbers. Strings must parse completely, "12abc" is not
    numeric.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return None
        try:
            parsed = float(text)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None
    return None


def _context(number: Decimal, places: int) -> Context:
    # enough precision for every integer digit plus the requested places
    return Context(prec=max(number.adjusted(), 0) + places + 2, rounding=ROUND_HALF_UP)


def _quantize(value: int | float, places: int) -> Decimal:
    number = Decimal(str(value))
    return number.quantize(Decimal(1).scaleb(-places), context=_context(number, places))


def _group(number: Decimal | int, decimal_pos: int | None = None) -> str:
    return numberformat.format(
        number,
        decimal_sep=".",
        decimal_pos=decimal_pos,
        grouping=_grouping(),
        thousand_sep=",",
        force_grouping=True,
    )


def format_currency(value: int | float) -> str:
    amount = _group(_quantize(abs(value), 2), decimal_pos=2)
    sign = "-" if value < 0 else ""
    return f"{sign}{_currency_symbol()}{amount}"


def format_percentage(value: int | float) -> str:
    """Format a value that is already in percentage points (12.3 -> 12.30%)."""
    return f"{_group(_quantize(value, 2), decimal_pos=2)}%"


def format_number(value: int | float) -> str:
    rounded = _quantize(value, NUMBER_MAX_FRACTION_DIGITS)
    rounded = rounded.normalize(context=_context(rounded, NUMBER_MAX_FRACTION_DIGITS))
    return _group(rounded)


def format_compact_number(value: int | float) -> str:
    if value >= 1_000_000:
        return f"{value / 1_000_000:.1f}M"
    if value >= 1_000:
        return f"{value / 1_000:.1f}K"
    return plain_string(value)


def format_compact_currency(value: int | float) -> str:
    """Crore/lakh abbreviations used on the portfolio summary."""
    if value >= 10_000_000:
        return f"{value / 10_000_000:.2f} Cr"
    if value >= 100_000:
        return f"{value / 100_000:.2f} L"
    if value >= 1_000:
        return f"{value / 1_000:.2f} K"
    return format_currency(value)


def plain_string(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, dict | list):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


_NUMERIC_FORMATTERS = {
    FieldFormat.currency: format_currency,
    FieldFormat.percentage: format_percentage,
    FieldFormat.number: format_number,
    FieldFormat.compact: format_compact_number,
}


def format_value(value: Any, format: FieldFormat | str | None = None) -> str:
    """
    Render a raw field value under a named format.

    Args:
        value: Raw value resolved from an API response
        format: One of FieldFormat, None behaves like "none"

    Returns:
        Display string, "N/A" for missing values
    """
    if value is None:
        return NOT_AVAILABLE

    number = coerce_number(value)
    if number is None:
        return plain_string(value)

    try:
        formatter = _NUMERIC_FORMATTERS.get(FieldFormat(format)) if format else None
    except ValueError:
        formatter = None
    if formatter is None:
        return plain_string(value)
    try:
        return formatter(number)
    except (InvalidOperation, OverflowError):
        return plain_string(value)
