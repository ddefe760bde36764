from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import pandas as pd

from ..models.report import ChartPoint, Kpi, OtReport
from ..models.rows import OtRow
from .aggregation import (
    group_totals,
    monthly_series,
    rank_frame,
    rank_groups,
    sum_by_month,
    top_group,
    top_month_label,
)
from .cells import cell_text, number_or
from .columns import MONTH_COUNT
from .columns import OtColumns as C
from .formatting import format_count, format_decimal

"""Overtime hours pipeline."""

logger = logging.getLogger(__name__)

TOP_LIMIT = 10


def project_row(row: Sequence[Any]) -> OtRow | None:
    if not row or len(row) < C.MIN_LENGTH:
        return None
    employee_id = cell_text(row[C.EMPLOYEE_ID])
    if not employee_id.strip():
        return None
    return OtRow(
        id=cell_text(row[C.ID]),
        employee_id=employee_id,
        name=cell_text(row[C.NAME]),
        position=cell_text(row[C.POSITION]),
        department=cell_text(row[C.DEPARTMENT]),
        grade=cell_text(row[C.GRADE]),
        status=cell_text(row[C.STATUS]),
        monthly_ot=[number_or(row[C.FIRST_MONTH + i]) for i in range(MONTH_COUNT)],
        total_ot=number_or(row[C.TOTAL_OT]),
    )


def top_employees(rows: Sequence[OtRow], limit: int = TOP_LIMIT) -> list[ChartPoint]:
    frame = pd.DataFrame(
        {
            "employee_id": [r.employee_id for r in rows],
            "label": [r.name or r.employee_id for r in rows],
            "total_ot": [r.total_ot for r in rows],
        }
    )
    ranked = rank_frame(frame, "total_ot", "employee_id", limit)
    return [ChartPoint(name=n, value=v) for n, v in zip(ranked["label"].tolist(), ranked["total_ot"].tolist())]


def build_report(data_rows: Sequence[Sequence[Any]]) -> OtReport:
    table = [r for r in (project_row(row) for row in data_rows) if r is not None]
    logger.debug("ot: %d/%d rows valid", len(table), len(data_rows))

    monthly = sum_by_month(r.monthly_ot for r in table)
    by_department = group_totals((r.department, r.total_ot) for r in table)
    total_hours = sum(r.total_ot for r in table)

    kpis = [
        Kpi(title="totalOtHours", value=format_decimal(total_hours, 2), icon="ClockIcon", color="text-brand-primary"),
        Kpi(title="totalEmployeesOt", value=format_count(len(table)), icon="UsersIcon", color="text-brand-secondary"),
        Kpi(title="topDepartmentOt", value=top_group(by_department), icon="BuildingOfficeIcon", color="text-brand-warning"),
        Kpi(title="topMonthOt", value=top_month_label(monthly), icon="ChartBarIcon", color="text-brand-success"),
    ]
    return OtReport(
        table_data=table,
        kpis=kpis,
        chart_data=monthly_series(monthly),
        top_employees=top_employees(table),
        top_departments=rank_groups(by_department, limit=TOP_LIMIT),
    )
