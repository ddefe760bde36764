from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Any

import pandas as pd

from ..models.report import (
    ChartPoint,
    Comparison,
    ComparisonData,
    ConsumablesReport,
    DepartmentCost,
    Kpi,
    MonthlyGroup,
    PeriodTotals,
    TopItem,
)
from ..models.rows import ConsumableRow
from .aggregation import (
    category_key,
    monthly_series,
    percent_change,
    rank_frame,
    rank_groups,
)
from .cells import cell_at, cell_text, format_date_cell, is_blank, number_or
from .columns import MONTH_COUNT
from .columns import ConsumableColumns as C
from .formatting import format_count, format_currency, format_percent_change

"""Consumables spend pipeline.

Year and month comparisons are relative to ``today``. Rows are placed in a
period by the day/month/year parts of their normalized date; a row whose
date does not split into three numeric parts takes part in totals by
material and department but in no period (year, month, monthly chart).
"""

logger = logging.getLogger(__name__)

TOP_ITEM_LIMIT = 5

_FRAME_COLUMNS = [
    "material", "description", "department",
    "material_key", "department_key",
    "cost", "month", "year",
]


def project_row(row: Sequence[Any]) -> ConsumableRow | None:
    if not row or is_blank(cell_at(row, C.DATE)):
        return None
    formatted = format_date_cell(cell_at(row, C.DATE))
    if formatted == "":
        return None
    return ConsumableRow(
        date=formatted,
        material=cell_text(cell_at(row, C.MATERIAL)),
        description=cell_text(cell_at(row, C.DESCRIPTION)),
        quantity=cell_text(cell_at(row, C.QUANTITY), "0"),
        unit=cell_text(cell_at(row, C.UNIT)),
        price=cell_text(cell_at(row, C.PRICE), "0"),
        total_price=cell_text(cell_at(row, C.TOTAL_PRICE), "0"),
        cost_center=cell_text(cell_at(row, C.COST_CENTER)),
        department=cell_text(cell_at(row, C.DEPARTMENT)),
    )


def row_cost(row: ConsumableRow) -> float:
    return number_or(row.total_price, 0)


def date_parts(text: str) -> tuple[int, int, int] | None:
    """``DD/MM/YYYY`` → (day, month 0-11, year); None when not three numeric parts."""
    parts = text.split("/")
    if len(parts) != 3:
        return None
    try:
        day, month, year = (int(p.strip()) for p in parts)
    except ValueError:
        return None
    return day, month - 1, year


def cost_frame(rows: Sequence[ConsumableRow]) -> pd.DataFrame:
    """One line per table row. ``month`` (0-11) and ``year`` are NA for undated rows."""
    records = []
    for row in rows:
        parts = date_parts(row.date)
        _, month, year = parts if parts is not None else (None, None, None)
        records.append(
            {
                "material": row.material,
                "description": row.description,
                "department": row.department,
                "material_key": category_key(row.material),
                "department_key": category_key(row.department),
                "cost": row_cost(row),
                "month": month,
                "year": year,
            }
        )
    frame = pd.DataFrame.from_records(records, columns=_FRAME_COLUMNS)
    return frame.astype({"cost": "float64", "month": "Int64", "year": "Int64"})


def dated_frame(frame: pd.DataFrame) -> pd.DataFrame:
    return frame.dropna(subset=["month", "year"]).astype({"month": "int64", "year": "int64"})


def previous_month(today: date) -> tuple[int, int]:
    """(month 0-11, year) of the month before ``today``; January wraps to December."""
    if today.month == 1:
        return 11, today.year - 1
    return today.month - 2, today.year


def top_items(frame: pd.DataFrame, limit: int = TOP_ITEM_LIMIT) -> list[TopItem]:
    if frame.empty:
        return []
    grouped = (
        frame.groupby("material_key", sort=False)
        .agg(label=("description", "first"), frequency=("cost", "size"), total=("cost", "sum"))
        .reset_index()
    )
    by_dept = frame.groupby(["material_key", "department_key"])["cost"].sum()
    items = []
    for rec in rank_frame(grouped, "total", "material_key", limit).to_dict("records"):
        material = rec["material_key"]
        items.append(
            TopItem(
                name=rec["label"] or material,
                frequency=int(rec["frequency"]),
                total_cost=float(rec["total"]),
                material=material,
                cost_by_department=[
                    DepartmentCost(department=p.name, total_cost=p.value)
                    for p in rank_groups(by_dept.loc[material])
                ],
            )
        )
    return items


def monthly_groups(dated: pd.DataFrame) -> list[MonthlyGroup]:
    if dated.empty:
        return []
    month_key = dated["year"].map("{:04d}".format) + "-" + (dated["month"] + 1).map("{:02d}".format)
    grouped = (
        dated.assign(month_key=month_key)
        .groupby("month_key")
        .agg(total_cost=("cost", "sum"), total_items=("cost", "size"))
        .sort_index(ascending=False)
        .reset_index()
    )
    return [
        MonthlyGroup(month_key=rec["month_key"], total_cost=float(rec["total_cost"]), total_items=int(rec["total_items"]))
        for rec in grouped.to_dict("records")
    ]


def monthly_chart(dated: pd.DataFrame, today: date) -> list[ChartPoint]:
    totals = dated.loc[dated["year"] == today.year].groupby("month")["cost"].sum()
    return monthly_series(totals.reindex(range(MONTH_COUNT), fill_value=0.0).tolist())


def _total(frame: pd.DataFrame) -> float:
    return float(frame["cost"].sum())


def compare_periods(dated: pd.DataFrame, today: date) -> ComparisonData:
    this_year = dated.loc[dated["year"] == today.year]
    last_year = dated.loc[dated["year"] == today.year - 1]
    last_month, last_month_year = previous_month(today)
    # 前月は年をまたぐ可能性があるため全行から抽出
    previous = dated.loc[(dated["year"] == last_month_year) & (dated["month"] == last_month)]
    return ComparisonData(
        year_over_year=PeriodTotals(current_total=_total(this_year), previous_total=_total(last_year)),
        month_over_month=PeriodTotals(
            current_total=_total(this_year.loc[this_year["month"] == today.month - 1]),
            previous_total=_total(previous),
        ),
    )


def _count_card(title: str, icon: str, color: str, current: int, previous: int, direction: str | None = None) -> Kpi:
    diff = current - previous
    return Kpi(
        title=title,
        value=format_count(current),
        icon=icon,
        color=color,
        trend_direction=direction or ("down" if diff > 0 else "up"),
        comparison=Comparison(
            value=format_count(diff, signed=True),
            percentage=format_percent_change(percent_change(current, previous)),
            period="year",
        ),
    )


def summary_cards(dated: pd.DataFrame, today: date) -> list[Kpi]:
    this_year = dated.loc[dated["year"] == today.year]
    last_year = dated.loc[dated["year"] == today.year - 1]
    cost_now = _total(this_year)
    cost_prev = _total(last_year)
    cost_diff = cost_now - cost_prev
    return [
        Kpi(
            title="kpiTotalCost",
            value=format_currency(cost_now),
            icon="CurrencyDollarIcon",
            color="text-brand-success",
            trend_direction="down" if cost_diff > 0 else "up",  # 支出増は悪化
            comparison=Comparison(
                value=format_currency(cost_diff, signed=True),
                percentage=format_percent_change(percent_change(cost_now, cost_prev)),
                period="year",
            ),
        ),
        _count_card(
            "kpiTransactions", "DocumentTextIcon", "text-brand-secondary",
            len(this_year), len(last_year),
        ),
        _count_card(
            "kpiTotalItems", "ArchiveBoxIcon", "text-brand-primary",
            int(this_year["material"].nunique()), int(last_year["material"].nunique()),
        ),
        _count_card(
            "kpiDepartments", "BuildingOfficeIcon", "text-brand-warning",
            int(this_year["department"].nunique()), int(last_year["department"].nunique()),
            direction="neutral",
        ),
    ]


def build_report(data_rows: Sequence[Sequence[Any]], today: date | None = None) -> ConsumablesReport:
    today = today or date.today()
    table = [r for r in (project_row(row) for row in data_rows) if r is not None]
    logger.debug("consumables: %d/%d rows valid", len(table), len(data_rows))
    frame = cost_frame(table)
    dated = dated_frame(frame)

    return ConsumablesReport(
        table_data=table,
        kpis=summary_cards(dated, today),
        chart_data=monthly_chart(dated, today),
        top_items=top_items(frame),
        cost_by_dept=rank_groups(frame.groupby("department_key", sort=False)["cost"].sum()),
        monthly_groups=monthly_groups(dated),
        comparison_data=compare_periods(dated, today),
    )
