from __future__ import annotations

import math
from datetime import datetime
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

"""Workbook decoding: file -> raw grids.

Sheets are read with ``header=None`` so every row (header included) stays a
positional list of cells. Blank cells become ``None``; pandas timestamps become
plain ``datetime``; numpy scalars become Python numbers.
"""

__all__ = [
    "WorkbookReadError",
    "SUPPORTED_SUFFIXES",
    "read_workbook",
    "frame_to_grid",
]

SUPPORTED_SUFFIXES = frozenset({".xlsx", ".xlsm", ".xls", ".csv"})

Grid = list[list[Any]]


class WorkbookReadError(Exception):
    """Raised when the file cannot be decoded into sheets."""


def _plain_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        return None if pd.isna(value) else value.to_pydatetime()
    if value is pd.NaT:
        return None
    if isinstance(value, np.generic):
        value = value.item()
    if isinstance(value, float) and math.isnan(value):
        return None
    if isinstance(value, datetime):
        return value
    return value


def frame_to_grid(df: pd.DataFrame) -> Grid:
    """DataFrame (header=None) -> list of rows of plain Python cells.

    Trailing rows that are entirely blank are dropped; rows inside the sheet
    keep their position so blank separator rows survive.
    """
    grid = [[_plain_cell(v) for v in row] for row in df.itertuples(index=False, name=None)]
    while grid and all(c is None for c in grid[-1]):
        grid.pop()
    return grid


def read_workbook(path: Path) -> list[Grid]:
    """Read every sheet of ``path`` in workbook order.

    CSV files are treated as a single-sheet workbook.
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise WorkbookReadError(f"unsupported file type: {path.name}")
    if not path.exists():
        raise WorkbookReadError(f"file not found: {path}")
    try:
        if suffix == ".csv":
            return [frame_to_grid(pd.read_csv(path, header=None, keep_default_na=False, na_values=[""]))]
        grids: list[Grid] = []
        with pd.ExcelFile(path) as xls:
            for name in xls.sheet_names:
                # ヘッダなしで生読み (列位置で参照するため)。"N/A" 等の文字列は NaN 化しない
                df = xls.parse(name, header=None, keep_default_na=False, na_values=[""])
                grids.append(frame_to_grid(df))
        return grids
    except WorkbookReadError:
        raise
    except Exception as e:
        raise WorkbookReadError(f"failed to read {path.name}: {e}") from e
