from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import pandas as pd

from ..models.report import AccidentReport, ChartPoint, Kpi
from ..models.rows import AccidentRow
from .aggregation import group_totals, rank_groups, top_group
from .cells import cell_text, format_date_cell, number_or
from .columns import AccidentColumns as C
from .formatting import format_count, format_currency

"""Workplace accident pipeline. Group totals here are incident counts."""

logger = logging.getLogger(__name__)

SEVERITY_ORDER: tuple[str, ...] = ("S", "M", "L")


def project_row(row: Sequence[Any]) -> AccidentRow | None:
    if not row or len(row) < C.MIN_LENGTH:
        return None
    incident_id = cell_text(row[C.ID])
    if not incident_id.strip():
        return None
    return AccidentRow(
        id=incident_id,
        incident_date=format_date_cell(row[C.INCIDENT_DATE]),
        incident_time=cell_text(row[C.INCIDENT_TIME]),
        severity=cell_text(row[C.SEVERITY]),
        occurrence=cell_text(row[C.OCCURRENCE]),
        department=cell_text(row[C.DEPARTMENT]),
        employee_id=cell_text(row[C.EMPLOYEE_ID]),
        employee_name=cell_text(row[C.EMPLOYEE_NAME]),
        position=cell_text(row[C.POSITION]),
        details=cell_text(row[C.DETAILS]),
        cause=cell_text(row[C.CAUSE]),
        prevention=cell_text(row[C.PREVENTION]),
        damage_value=number_or(row[C.DAMAGE_VALUE]),
        insurance_claim=cell_text(row[C.INSURANCE_CLAIM]),
        action_taken=cell_text(row[C.ACTION_TAKEN]),
        penalty=cell_text(row[C.PENALTY]),
        remarks=cell_text(row[C.REMARKS]),
        accident_location=cell_text(row[C.ACCIDENT_LOCATION]),
    )


def severity_breakdown(counts: pd.Series | Mapping[str, float]) -> list[ChartPoint]:
    """S, M, L first, then any other severity alphabetically."""
    def order(key: str) -> tuple[int, str]:
        if key in SEVERITY_ORDER:
            return SEVERITY_ORDER.index(key), ""
        return len(SEVERITY_ORDER), key

    series = counts if isinstance(counts, pd.Series) else pd.Series(counts)
    ordered = series.reindex(sorted(series.index, key=order))
    return [ChartPoint(name=k, value=v) for k, v in zip(ordered.index.tolist(), ordered.tolist())]


def build_report(data_rows: Sequence[Sequence[Any]]) -> AccidentReport:
    table = [r for r in (project_row(row) for row in data_rows) if r is not None]
    logger.debug("accident: %d/%d rows valid", len(table), len(data_rows))

    by_department = group_totals((r.department, 1) for r in table)
    by_severity = group_totals((r.severity, 1) for r in table)
    total_damage = sum(r.damage_value for r in table)

    kpis = [
        Kpi(title="totalIncidents", value=format_count(len(table)), icon="ExclamationTriangleIcon", color="text-brand-danger"),
        Kpi(title="totalDamage", value=format_currency(total_damage, 0), icon="CurrencyDollarIcon", color="text-brand-warning"),
        Kpi(title="topDepartmentAccident", value=top_group(by_department), icon="BuildingOfficeIcon", color="text-brand-primary"),
        Kpi(title="topSeverity", value=top_group(by_severity), icon="ClipboardDocumentCheckIcon", color="text-brand-secondary"),
    ]
    return AccidentReport(
        table_data=table,
        kpis=kpis,
        chart_data=rank_groups(by_department),
        severity_counts=severity_breakdown(by_severity),
    )
