from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from ..models.report import Kpi, KpiReport
from ..models.rows import KpiTableRow
from .aggregation import MONTH_LABELS
from .cells import cell_at, cell_text
from .columns import KpiColumns as C
from .rules import kpi_color, kpi_icon, transform_kpi_score

"""KPI scorecard pipeline.

Summary cards are derived from the projected table rows, not the raw cells,
so the card and the detail table always agree.
"""

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"


def project_row(row: Sequence[Any]) -> KpiTableRow | None:
    title = cell_text(cell_at(row, C.TITLE))
    if not title.strip():
        return None
    monthly = {
        label: cell_text(cell_at(row, C.FIRST_MONTH + i))
        for i, label in enumerate(MONTH_LABELS)
    }
    return KpiTableRow(
        kpi_no=cell_text(cell_at(row, C.SEQUENCE)),
        title=title,
        measurement=cell_text(cell_at(row, C.MEASUREMENT)),
        target=cell_text(cell_at(row, C.TARGET)),
        score=cell_text(cell_at(row, C.SCORE), NOT_AVAILABLE),
        result=cell_text(cell_at(row, C.RESULT), NOT_AVAILABLE),
        monthly_data=monthly,
        description=cell_text(cell_at(row, C.DESCRIPTION)),
        objective=cell_text(cell_at(row, C.OBJECTIVE)),
        measurement_method=cell_text(cell_at(row, C.METHOD)),
        responsible=cell_text(cell_at(row, C.RESPONSIBLE)),
        improvement_plan=cell_text(cell_at(row, C.IMPROVEMENT_PLAN)),
    )


def summary_card(row: KpiTableRow, index: int) -> Kpi:
    return Kpi(
        title=row.title,
        value=transform_kpi_score(row.title, row.score),
        target=row.target,
        trend=row.result,
        trend_direction="up" if row.result.upper() == "PASS" else "down",
        icon=kpi_icon(row.title),
        color=kpi_color(index),
    )


def build_report(data_rows: Sequence[Sequence[Any]]) -> KpiReport:
    table_rows = [r for r in (project_row(row) for row in data_rows) if r is not None]
    logger.debug("kpi: %d/%d rows valid", len(table_rows), len(data_rows))
    kpis = [summary_card(row, i) for i, row in enumerate(table_rows)]
    return KpiReport(kpis=kpis, table_rows=table_rows)
