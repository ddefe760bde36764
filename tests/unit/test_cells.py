from __future__ import annotations

import math
from datetime import date, datetime

import pytest

from kpi_dashboard.transform.cells import (
    cell_at,
    cell_text,
    excel_serial_to_date,
    format_date_cell,
    is_blank,
    number_or,
    parse_value,
)


@pytest.mark.parametrize("cell", ["-", "#DIV/0!", None, "", "   ", float("nan")])
def test_parse_value_absent_markers(cell):
    assert parse_value(cell) is None


def test_parse_value_numbers_pass_through():
    assert parse_value(12.5) == 12.5
    assert parse_value(0) == 0
    assert parse_value(-3) == -3


def test_parse_value_text_strips_non_numeric():
    assert parse_value("1,234.5") == 1234.5
    assert parse_value("฿ 99") == 99
    assert parse_value("85%") == 85
    # 先頭の数値だけを読む
    assert parse_value("1.2.3") == 1.2


def test_parse_value_unparseable_text_is_absent():
    assert parse_value("abc") is None
    assert parse_value("--") is None


def test_parse_value_other_types_are_absent():
    assert parse_value(True) is None
    assert parse_value(datetime(2024, 1, 1)) is None
    assert parse_value(float("inf")) is None


def test_number_or_defaults_absent_to_zero():
    assert number_or("-") == 0
    assert number_or("#DIV/0!") == 0
    assert number_or("7.5") == 7.5
    assert number_or(None, default=-1) == -1


def test_cell_at_short_row_is_none():
    assert cell_at(["a"], 0) == "a"
    assert cell_at(["a"], 5) is None


def test_is_blank():
    assert is_blank(None)
    assert is_blank(math.nan)
    assert is_blank("  ")
    assert not is_blank(0)
    assert not is_blank("x")


def test_cell_text_numbers_and_blanks():
    assert cell_text(5.0) == "5"
    assert cell_text(0.85) == "0.85"
    assert cell_text(0.00005) == "0.00005"
    assert cell_text(1.5e-07) == "0.00000015"
    assert cell_text(7) == "7"
    assert cell_text(None, "N/A") == "N/A"
    assert cell_text("", "N/A") == "N/A"
    assert cell_text(True) == "TRUE"
    assert cell_text(" keep ") == " keep "


def test_excel_serial_to_date_epoch():
    assert excel_serial_to_date(1) == date(1899, 12, 31)
    assert excel_serial_to_date(44932) == date(2023, 1, 6)
    assert excel_serial_to_date(45000) == date(2023, 3, 15)
    # 時刻部分は切り捨て
    assert excel_serial_to_date(44932.75) == date(2023, 1, 6)


def test_format_date_cell_serials():
    assert format_date_cell(44932) == "06/01/2023"
    assert format_date_cell(45000.0) == "15/03/2023"


def test_format_date_cell_native_dates():
    assert format_date_cell(datetime(2024, 2, 29, 13, 0)) == "29/02/2024"
    assert format_date_cell(date(2024, 12, 1)) == "01/12/2024"


def test_format_date_cell_keeps_other_representations():
    assert format_date_cell("2024-01-05") == "2024-01-05"
    assert format_date_cell("05/01/2024") == "05/01/2024"
    assert format_date_cell(0) == "0"
    assert format_date_cell(-4) == "-4"
    assert format_date_cell(None) == ""
