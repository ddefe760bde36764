from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import pandas as pd

from ..models.report import Kpi, LeaveReport
from ..models.rows import LeaveRow
from .aggregation import (
    NO_DATA,
    group_totals,
    monthly_series,
    rank_groups,
    sum_by_month,
    top_group,
    top_month_label,
)
from .cells import cell_text, number_or
from .columns import MONTH_COUNT
from .columns import LeaveColumns as C
from .formatting import format_decimal

"""Leave days pipeline."""

logger = logging.getLogger(__name__)

# 休暇種別 -> 集計対象フィールド
LEAVE_TYPES: tuple[tuple[str, str], ...] = (
    ("Sick", "sick_leave"),
    ("Personal", "personal_leave"),
    ("Birthday", "birthday_leave"),
    ("Other", "other_leave"),
    ("Vacation", "vacation_used"),
)


def project_row(row: Sequence[Any], position: int) -> LeaveRow | None:
    """``position`` is the 1-based data row index, used when the id cell is blank."""
    if not row or len(row) < C.MIN_LENGTH:
        return None
    employee_id = cell_text(row[C.EMPLOYEE_ID])
    if not employee_id.strip():
        return None
    return LeaveRow(
        id=cell_text(row[C.ID], str(position)),
        employee_id=employee_id,
        name=cell_text(row[C.NAME]),
        position=cell_text(row[C.POSITION]),
        department=cell_text(row[C.DEPARTMENT]),
        grade=cell_text(row[C.GRADE]),
        status=cell_text(row[C.STATUS]),
        monthly_leave=[number_or(row[C.FIRST_MONTH + i]) for i in range(MONTH_COUNT)],
        leave_without_vacation=number_or(row[C.LEAVE_WITHOUT_VACATION]),
        total_leave_with_vacation=number_or(row[C.TOTAL_LEAVE_WITH_VACATION]),
        vacation_carried_over=number_or(row[C.VACATION_CARRIED_OVER]),
        vacation_entitlement=number_or(row[C.VACATION_ENTITLEMENT]),
        total_vacation=number_or(row[C.TOTAL_VACATION]),
        vacation_used=number_or(row[C.VACATION_USED]),
        vacation_accrued=number_or(row[C.VACATION_ACCRUED]),
        sick_leave=number_or(row[C.SICK_LEAVE]),
        personal_leave=number_or(row[C.PERSONAL_LEAVE]),
        birthday_leave=number_or(row[C.BIRTHDAY_LEAVE]),
        other_leave=number_or(row[C.OTHER_LEAVE]),
        total_leave=number_or(row[C.TOTAL_LEAVE]),
    )


def leave_type_totals(rows: Sequence[LeaveRow]) -> pd.Series:
    frame = pd.DataFrame(
        {label: [getattr(r, attr) for r in rows] for label, attr in LEAVE_TYPES},
        dtype="float64",
    )
    return frame.sum()


def build_report(data_rows: Sequence[Sequence[Any]]) -> LeaveReport:
    table = [
        r for r in (project_row(row, i + 1) for i, row in enumerate(data_rows)) if r is not None
    ]
    logger.debug("leave: %d/%d rows valid", len(table), len(data_rows))

    monthly = sum_by_month(r.monthly_leave for r in table)
    by_department = group_totals((r.department, r.total_leave) for r in table)
    by_type = leave_type_totals(table)
    total_days = sum(r.total_leave for r in table)

    kpis = [
        Kpi(title="totalLeaveDays", value=format_decimal(total_days, 2), icon="CalendarDaysIcon", color="text-brand-primary"),
        Kpi(title="topLeaveType", value=top_group(by_type) if table else NO_DATA, icon="ClipboardDocumentCheckIcon", color="text-brand-secondary"),
        Kpi(title="topDepartmentLeave", value=top_group(by_department), icon="BuildingOfficeIcon", color="text-brand-warning"),
        Kpi(title="topMonthLeave", value=top_month_label(monthly), icon="ChartBarIcon", color="text-brand-success"),
    ]
    return LeaveReport(
        table_data=table,
        kpis=kpis,
        chart_data=monthly_series(monthly),
        leave_by_type=rank_groups(by_type),
        leave_by_department=rank_groups(by_department),
    )
