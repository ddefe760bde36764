from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from datetime import date
from enum import Enum
from typing import Any

from ..models.report import ReportBundle
from . import accidents, consumables, kpi, leave, overtime, workload

"""Report assembler: (report type, workbook sheets) -> report bundle.

Only the first sheet is read. Row 0 is the header and never projected.
Structural problems raise ``ReportStructureError``; bad rows and cells are
absorbed by the per-report pipelines.
"""

__all__ = [
    "ReportType",
    "ReportStructureError",
    "NoSheetsError",
    "EmptySheetError",
    "UnsupportedReportTypeError",
    "parse_report",
    "parse_grid",
]

logger = logging.getLogger(__name__)

Grid = Sequence[Sequence[Any]]


class ReportStructureError(Exception):
    """Workbook shape prevents building a report (whole invocation fails)."""


class NoSheetsError(ReportStructureError):
    pass


class EmptySheetError(ReportStructureError):
    pass


class UnsupportedReportTypeError(ReportStructureError):
    pass


class ReportType(Enum):
    KPI = "kpiReport"
    CONSUMABLES = "consumablesReport"
    OT = "otReport"
    LEAVE = "leaveReport"
    ACCIDENT = "accidentReport"
    WORKLOAD = "workloadReport"

    @classmethod
    def parse(cls, value: ReportType | str) -> ReportType:
        if isinstance(value, ReportType):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnsupportedReportTypeError(f"No parser available for {value}") from None


# シート名表示用 (エラーメッセージ)
_SHEET_LABELS = {
    ReportType.KPI: "KPI",
    ReportType.CONSUMABLES: "Consumables",
    ReportType.OT: "OT Report",
    ReportType.LEAVE: "Leave Report",
    ReportType.ACCIDENT: "Accident Report",
    ReportType.WORKLOAD: "Workload Report",
}

_PIPELINES: dict[ReportType, Callable[[Grid, date | None], ReportBundle]] = {
    ReportType.KPI: lambda rows, today: kpi.build_report(rows),
    ReportType.CONSUMABLES: consumables.build_report,
    ReportType.OT: lambda rows, today: overtime.build_report(rows),
    ReportType.LEAVE: lambda rows, today: leave.build_report(rows),
    ReportType.ACCIDENT: lambda rows, today: accidents.build_report(rows),
    ReportType.WORKLOAD: lambda rows, today: workload.build_report(rows),
}


def parse_grid(report_type: ReportType | str, grid: Grid, today: date | None = None) -> ReportBundle:
    """Build the bundle for one sheet grid (header row included)."""
    rtype = ReportType.parse(report_type)
    if len(grid) < 2:
        raise EmptySheetError(f"{_SHEET_LABELS[rtype]} sheet is empty or has no data rows.")
    bundle = _PIPELINES[rtype](grid[1:], today)
    logger.debug("%s: %d rows in bundle", rtype.value, bundle.row_count)
    return bundle


def parse_report(
    report_type: ReportType | str,
    sheets: Sequence[Grid],
    today: date | None = None,
) -> ReportBundle:
    """Parse the first sheet of a workbook into the bundle for ``report_type``.

    Raises:
        UnsupportedReportTypeError: unknown report identifier
        NoSheetsError: the workbook has no sheets
        EmptySheetError: the first sheet has no data row after the header
    """
    rtype = ReportType.parse(report_type)
    if not sheets:
        raise NoSheetsError("No sheets found in the Excel file.")
    return parse_grid(rtype, sheets[0], today)
