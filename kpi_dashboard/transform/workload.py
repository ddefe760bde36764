from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from functools import reduce
from typing import Any

from ..models.report import ChartPoint, ChartSeries, Kpi, WorkloadReport
from ..models.rows import WorkloadDetailRow, WorkloadProductSection
from .aggregation import MONTH_LABELS
from .cells import cell_at, cell_text, is_blank, parse_value
from .columns import MONTH_COUNT
from .columns import WorkloadColumns as C

"""Workload-per-person pipeline.

The sheet is a flat list of rows that encodes a two-level structure:

    Raw Material | <blank>        | ...      <- section header (col 0 text)
    <blank>      | Sum            | Ton ...  <- detail row (col 1 text)
    <blank>      | Forklift A     | Ton ...
    Ton/Person/Hr.|Sum            | ...      <- header and detail on one row

Sections are rebuilt with a single left fold carrying one pending section.
A detail row seen before any header has nowhere to go and is dropped.
"""

logger = logging.getLogger(__name__)

SUB_PRODUCT_LABEL = "Ton/Person/Hr."
SUMMARY_PREFIXES: tuple[str, ...] = ("Sum", "Manpower", "Workday", "Working Hours", "OT")

# (product label, KPI title key, chart series key, card colour)
HEADLINE_PRODUCTS: tuple[tuple[str, str, str, str], ...] = (
    ("Raw Material", "avgWorkloadRaw", "chartRawMaterial", "text-brand-success"),
    ("Coil", "avgWorkloadCoil", "chartCoil", "text-brand-primary"),
    ("Film&Scrap", "avgWorkloadFilm", "chartFilmScrap", "text-brand-warning"),
)


@dataclass(frozen=True)
class _ScanState:
    emitted: tuple[WorkloadProductSection, ...] = ()
    current: WorkloadProductSection | None = None


def _text_cell(cell: Any) -> str | None:
    if isinstance(cell, str) and cell.strip():
        return cell.strip()
    return None


def detail_row(row: Sequence[Any], description: str) -> WorkloadDetailRow:
    values = [parse_value(cell_at(row, C.FIRST_MONTH + i)) for i in range(MONTH_COUNT)]
    return WorkloadDetailRow(
        description=description,
        is_sub_row=not description.startswith(SUMMARY_PREFIXES),
        unit=cell_text(cell_at(row, C.UNIT)),
        values=values,
        average=parse_value(cell_at(row, C.AVERAGE)),
        min=parse_value(cell_at(row, C.MIN)),
        max=parse_value(cell_at(row, C.MAX)),
    )


def _step(state: _ScanState, row: Sequence[Any]) -> _ScanState:
    if not row or all(is_blank(cell) for cell in row):
        return state

    emitted, current = state.emitted, state.current
    label = _text_cell(cell_at(row, C.PRODUCT))
    if label is not None:
        if current is not None:
            emitted = emitted + (current,)
        current = WorkloadProductSection(product=label, is_sub_product=label == SUB_PRODUCT_LABEL, rows=[])

    description = _text_cell(cell_at(row, C.DESCRIPTION))
    if description is not None and current is not None:
        current = replace(current, rows=[*current.rows, detail_row(row, description)])

    return _ScanState(emitted=emitted, current=current)


def parse_sections(data_rows: Sequence[Sequence[Any]]) -> list[WorkloadProductSection]:
    final = reduce(_step, data_rows, _ScanState())
    sections = list(final.emitted)
    if final.current is not None:
        sections.append(final.current)
    logger.debug("workload: %d sections from %d rows", len(sections), len(data_rows))
    return sections


def ton_per_hour_sum(sections: Sequence[WorkloadProductSection], product: str) -> list[float | None]:
    """``Sum`` values of the Ton/Person/Hr. section that directly follows ``product``."""
    for i, section in enumerate(sections):
        if section.product != product:
            continue
        if i + 1 >= len(sections):
            return []
        following = sections[i + 1]
        if following.product == SUB_PRODUCT_LABEL and following.is_sub_product:
            for r in following.rows:
                if r.description == "Sum":
                    return list(r.values)
        return []
    return []


def average_present(values: Sequence[float | None]) -> float:
    present = [v for v in values if v is not None]
    if not present:
        return 0.0
    return sum(present) / len(present)


def build_report(data_rows: Sequence[Sequence[Any]]) -> WorkloadReport:
    sections = parse_sections(data_rows)
    if not sections:
        return WorkloadReport(data=sections)

    kpis = []
    series = []
    for product, title, chart_key, color in HEADLINE_PRODUCTS:
        values = ton_per_hour_sum(sections, product)
        kpis.append(Kpi(title=title, value=f"{average_present(values):.2f}", icon="UserGroupIcon", color=color))
        points = []
        for i, month in enumerate(MONTH_LABELS):
            v = values[i] if i < len(values) else None
            points.append(ChartPoint(name=month, value=v or 0))
        series.append(ChartSeries(name=chart_key, points=points))
    return WorkloadReport(data=sections, kpis=kpis, chart_data=series)
