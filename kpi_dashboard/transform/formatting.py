from __future__ import annotations

import math
from decimal import ROUND_HALF_UP, Decimal

"""Display formatting for summary indicator values.

Only KPI card values are rendered here; every other output stays numeric
at full precision.
"""

__all__ = [
    "CURRENCY_SYMBOL",
    "format_decimal",
    "format_currency",
    "format_count",
    "format_percentage",
    "format_percent_change",
    "format_plain_number",
]

CURRENCY_SYMBOL = "฿"


def format_decimal(
    value: float,
    min_fraction: int = 0,
    max_fraction: int = 3,
    signed: bool = False,
) -> str:
    """Thousands-grouped decimal with between ``min_fraction`` and ``max_fraction`` digits.

    >>> format_decimal(1234.5, 2)
    '1,234.50'
    >>> format_decimal(3, signed=True)
    '+3'
    """
    quantum = Decimal(1).scaleb(-max_fraction)
    d = Decimal(repr(float(value))).quantize(quantum, rounding=ROUND_HALF_UP)
    if d == 0:
        d = abs(d)
    text = f"{abs(d):,.{max_fraction}f}"
    if max_fraction > min_fraction:
        whole, _, frac = text.partition(".")
        frac = frac.rstrip("0")
        if len(frac) < min_fraction:
            frac = frac + "0" * (min_fraction - len(frac))
        text = f"{whole}.{frac}" if frac else whole
    if d < 0:
        return f"-{text}"
    if signed:
        return f"+{text}"
    return text


def format_currency(value: float, min_fraction: int = 2, max_fraction: int = 3, signed: bool = False) -> str:
    # 符号は通貨記号の後ろ (฿+1,000.00)
    return f"{CURRENCY_SYMBOL}{format_decimal(value, min_fraction, max_fraction, signed)}"


def format_count(value: int, signed: bool = False) -> str:
    return format_decimal(value, 0, 0, signed)


def format_percentage(percentage: float) -> str:
    """0 decimals when integral, 2 otherwise (``85%``, ``85.25%``)."""
    if math.isnan(percentage):
        return "N/A"
    if float(percentage).is_integer():
        return f"{percentage:.0f}%"
    return f"{percentage:.2f}%"


def format_percent_change(percentage: float) -> str:
    return f"{percentage:.1f}%"


def format_plain_number(value: float) -> str:
    """Number without grouping; integral floats drop the ``.0``."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
