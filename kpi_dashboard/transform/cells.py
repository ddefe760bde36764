from __future__ import annotations

import math
import re
from collections.abc import Sequence
from datetime import date, datetime, timedelta
from typing import Any

import numpy as np

"""Cell value normalization.

Raw cells arrive as whatever the workbook decoder produced: int/float, str,
datetime/date, None (blank) or float NaN (pandas blank). Everything in this
module maps those onto either a number, ``None`` (absent) or display text.
"""

__all__ = [
    "DIV_ERROR_MARKERS",
    "EXCEL_EPOCH",
    "cell_at",
    "is_blank",
    "leading_number",
    "parse_value",
    "number_or",
    "cell_text",
    "excel_serial_to_date",
    "format_date_cell",
]

# Excel の 1900 年うるう年バグを吸収するため基準日は 1899-12-30
EXCEL_EPOCH = date(1899, 12, 30)

DIV_ERROR_MARKERS = frozenset({"#DIV/0!"})

_NON_NUMERIC = re.compile(r"[^0-9.\-]")
# parseFloat 互換: 先頭から読める数値部分のみ採用
_LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")


def cell_at(row: Sequence[Any], index: int) -> Any:
    """Cell at ``index`` or None past the end of a short row."""
    return row[index] if index < len(row) else None


def is_blank(cell: Any) -> bool:
    """True for None, NaN and whitespace-only strings."""
    if cell is None:
        return True
    if isinstance(cell, float) and math.isnan(cell):
        return True
    if isinstance(cell, str) and cell.strip() == "":
        return True
    return False


def leading_number(text: str) -> float | None:
    """Strip non-numeric characters and read the leading decimal, parseFloat style."""
    m = _LEADING_NUMBER.match(_NON_NUMERIC.sub("", text))
    if m is None:
        return None
    return float(m.group(0))


def parse_value(cell: Any) -> float | None:
    """Normalize a raw cell into a number or ``None`` (absent).

    Order of rules:
    1. ``"-"``, ``#DIV/0!``, blank → None
    2. numbers pass through unchanged
    3. text: strip everything except digits, ``.`` and ``-`` then parse the
       leading decimal; nothing parseable → None
    4. anything else → None
    """
    if is_blank(cell):
        return None
    if isinstance(cell, str) and (cell == "-" or cell in DIV_ERROR_MARKERS):
        return None
    if isinstance(cell, bool):
        return None
    if isinstance(cell, (int, float)):
        if isinstance(cell, float) and math.isinf(cell):
            return None
        return cell
    if isinstance(cell, str):
        return leading_number(cell)
    return None


def number_or(cell: Any, default: float = 0) -> float:
    """parse_value with an explicit fallback for fields that default (e.g. hours → 0)."""
    value = parse_value(cell)
    return default if value is None else value


def _number_text(value: int | float) -> str:
    if isinstance(value, float):
        if value.is_integer():
            return str(int(value))
        # 固定小数表記 (5e-05 → 0.00005)
        return np.format_float_positional(value, trim="-")
    return str(value)


def cell_text(cell: Any, default: str = "") -> str:
    """Render a cell as text; blank cells yield ``default``.

    Integral floats (pandas reads ``1`` as ``1.0`` in mixed columns) lose the
    trailing ``.0``.
    """
    if cell is None:
        return default
    if isinstance(cell, float) and math.isnan(cell):
        return default
    if isinstance(cell, str):
        return cell if cell != "" else default
    if isinstance(cell, bool):
        return str(cell).upper()
    if isinstance(cell, (int, float)):
        return _number_text(cell)
    if isinstance(cell, datetime):
        return cell.isoformat(sep=" ")
    return str(cell)


def excel_serial_to_date(serial: float) -> date:
    """Convert a spreadsheet day serial (day 0 = 1899-12-30) to a calendar date.

    The fractional (time of day) part is dropped.
    """
    return EXCEL_EPOCH + timedelta(days=int(math.floor(serial)))


def format_date_cell(cell: Any) -> str:
    """Render a date-ish cell as ``DD/MM/YYYY``.

    Positive numeric serials and native date values are converted; any other
    representation keeps its textual form.
    """
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        if isinstance(cell, float) and math.isnan(cell):
            return ""
        if cell > 0:
            try:
                return excel_serial_to_date(cell).strftime("%d/%m/%Y")
            except OverflowError:
                return cell_text(cell)
        return cell_text(cell)
    if isinstance(cell, datetime):
        return cell.strftime("%d/%m/%Y")
    if isinstance(cell, date):
        return cell.strftime("%d/%m/%Y")
    return cell_text(cell)
