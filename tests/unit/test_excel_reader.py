from __future__ import annotations

from datetime import datetime
from pathlib import Path

import numpy as np
import pandas as pd
import pytest

from kpi_dashboard.excel.reader import WorkbookReadError, frame_to_grid, read_workbook


def test_read_workbook_all_sheets_in_order(tmp_path: Path, write_workbook):
    path = write_workbook(
        tmp_path / "book.xlsx",
        {
            "First": [["No", "KPI"], [1, "Delivery"]],
            "Second": [["x"], ["y"]],
        },
    )
    grids = read_workbook(path)
    assert len(grids) == 2
    assert grids[0][0] == ["No", "KPI"]
    assert grids[0][1][0] == 1
    assert grids[0][1][1] == "Delivery"
    assert grids[1] == [["x"], ["y"]]


def test_blank_cells_become_none_and_na_text_survives(tmp_path: Path, write_workbook):
    path = write_workbook(tmp_path / "blanks.xlsx", {"S": [["a", None, "N/A"], ["-", "text", None]]})
    grid = read_workbook(path)[0]
    assert grid[0] == ["a", None, "N/A"]
    assert grid[1] == ["-", "text", None]


def test_dates_become_plain_datetime(tmp_path: Path, write_workbook):
    path = write_workbook(tmp_path / "dates.xlsx", {"S": [["date"], [datetime(2024, 3, 1)]]})
    cell = read_workbook(path)[0][1][0]
    assert type(cell) is datetime
    assert cell == datetime(2024, 3, 1)


def test_csv_is_single_sheet(tmp_path: Path):
    path = tmp_path / "ot.csv"
    path.write_text("id,name\n1,Alice\n", encoding="utf-8")
    grids = read_workbook(path)
    assert len(grids) == 1
    assert grids[0][0] == ["id", "name"]


def test_unsupported_suffix(tmp_path: Path):
    path = tmp_path / "notes.txt"
    path.write_text("hello", encoding="utf-8")
    with pytest.raises(WorkbookReadError, match="unsupported file type"):
        read_workbook(path)


def test_missing_file(tmp_path: Path):
    with pytest.raises(WorkbookReadError, match="file not found"):
        read_workbook(tmp_path / "absent.xlsx")


def test_corrupt_workbook(tmp_path: Path):
    path = tmp_path / "broken.xlsx"
    path.write_bytes(b"not a zip archive")
    with pytest.raises(WorkbookReadError, match="failed to read broken.xlsx"):
        read_workbook(path)


def test_frame_to_grid_plain_values_and_trailing_blank_rows():
    df = pd.DataFrame(
        [
            [np.int64(3), np.float64(1.5), pd.Timestamp("2024-01-02")],
            [np.nan, None, pd.NaT],
            ["x", np.nan, None],
            [np.nan, np.nan, np.nan],
        ]
    )
    grid = frame_to_grid(df)
    assert len(grid) == 3
    assert grid[0] == [3, 1.5, datetime(2024, 1, 2)]
    assert type(grid[0][0]) is int
    # 途中の空行は位置を保つ
    assert grid[1] == [None, None, None]
    assert grid[2] == ["x", None, None]
