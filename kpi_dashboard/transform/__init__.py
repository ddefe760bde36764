"""Spreadsheet-to-report transformation pipeline.

``parse_report`` is the entry point: it takes a report type identifier and
the decoded workbook sheets and returns the report bundle for that type.
"""

from .assembler import (
    EmptySheetError,
    NoSheetsError,
    ReportStructureError,
    ReportType,
    UnsupportedReportTypeError,
    parse_grid,
    parse_report,
)
from .cells import format_date_cell, parse_value

__all__ = [
    "EmptySheetError",
    "NoSheetsError",
    "ReportStructureError",
    "ReportType",
    "UnsupportedReportTypeError",
    "format_date_cell",
    "parse_grid",
    "parse_report",
    "parse_value",
]
