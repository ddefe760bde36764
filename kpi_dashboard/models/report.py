from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, field
from typing import Any, ClassVar

from .rows import (
    AccidentRow,
    ConsumableRow,
    KpiTableRow,
    LeaveRow,
    OtRow,
    WorkloadProductSection,
)

"""Report bundle models handed to the presentation / persistence side.

Every bundle is plain data: ``to_dict()`` yields only dicts, lists, str,
numbers, bools and None so the result can be stored verbatim as JSON.
"""

__all__ = [
    "Comparison",
    "Kpi",
    "ChartPoint",
    "ChartSeries",
    "DepartmentCost",
    "TopItem",
    "MonthlyGroup",
    "PeriodTotals",
    "ComparisonData",
    "ReportBundle",
    "KpiReport",
    "ConsumablesReport",
    "OtReport",
    "LeaveReport",
    "AccidentReport",
    "WorkloadReport",
]


@dataclass(frozen=True)
class Comparison:
    value: str  # signed delta (display)
    percentage: str  # e.g. "12.5%"
    period: str  # "month" | "year"


@dataclass(frozen=True)
class Kpi:
    """Summary indicator (KPI card). ``title`` is a translation key or KPI title."""
    title: str
    value: str
    icon: str
    color: str
    target: str | None = None
    trend: str | None = None
    trend_direction: str | None = None  # "up" | "down" | "neutral"
    comparison: Comparison | None = None


@dataclass(frozen=True)
class ChartPoint:
    name: str
    value: float


@dataclass(frozen=True)
class ChartSeries:
    name: str
    points: list[ChartPoint]


@dataclass(frozen=True)
class DepartmentCost:
    department: str
    total_cost: float


@dataclass(frozen=True)
class TopItem:
    name: str
    frequency: int
    total_cost: float
    material: str
    cost_by_department: list[DepartmentCost] = field(default_factory=list)


@dataclass(frozen=True)
class MonthlyGroup:
    month_key: str  # "YYYY-MM"
    total_cost: float
    total_items: int


@dataclass(frozen=True)
class PeriodTotals:
    current_total: float
    previous_total: float


@dataclass(frozen=True)
class ComparisonData:
    year_over_year: PeriodTotals
    month_over_month: PeriodTotals


@dataclass(frozen=True)
class ReportBundle(ABC):
    report_type: ClassVar[str] = ""

    @property
    @abstractmethod
    def row_count(self) -> int:
        """Number of table rows the bundle holds."""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class KpiReport(ReportBundle):
    report_type: ClassVar[str] = "kpiReport"
    kpis: list[Kpi] = field(default_factory=list)
    table_rows: list[KpiTableRow] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.table_rows)


@dataclass(frozen=True)
class ConsumablesReport(ReportBundle):
    report_type: ClassVar[str] = "consumablesReport"
    table_data: list[ConsumableRow] = field(default_factory=list)
    kpis: list[Kpi] = field(default_factory=list)
    chart_data: list[ChartPoint] = field(default_factory=list)
    top_items: list[TopItem] = field(default_factory=list)
    cost_by_dept: list[ChartPoint] = field(default_factory=list)
    monthly_groups: list[MonthlyGroup] = field(default_factory=list)
    comparison_data: ComparisonData = field(
        default_factory=lambda: ComparisonData(PeriodTotals(0, 0), PeriodTotals(0, 0))
    )

    @property
    def row_count(self) -> int:
        return len(self.table_data)


@dataclass(frozen=True)
class OtReport(ReportBundle):
    report_type: ClassVar[str] = "otReport"
    table_data: list[OtRow] = field(default_factory=list)
    kpis: list[Kpi] = field(default_factory=list)
    chart_data: list[ChartPoint] = field(default_factory=list)
    top_employees: list[ChartPoint] = field(default_factory=list)
    top_departments: list[ChartPoint] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.table_data)


@dataclass(frozen=True)
class LeaveReport(ReportBundle):
    report_type: ClassVar[str] = "leaveReport"
    table_data: list[LeaveRow] = field(default_factory=list)
    kpis: list[Kpi] = field(default_factory=list)
    chart_data: list[ChartPoint] = field(default_factory=list)
    leave_by_type: list[ChartPoint] = field(default_factory=list)
    leave_by_department: list[ChartPoint] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.table_data)


@dataclass(frozen=True)
class AccidentReport(ReportBundle):
    report_type: ClassVar[str] = "accidentReport"
    table_data: list[AccidentRow] = field(default_factory=list)
    kpis: list[Kpi] = field(default_factory=list)
    chart_data: list[ChartPoint] = field(default_factory=list)
    severity_counts: list[ChartPoint] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return len(self.table_data)


@dataclass(frozen=True)
class WorkloadReport(ReportBundle):
    report_type: ClassVar[str] = "workloadReport"
    data: list[WorkloadProductSection] = field(default_factory=list)
    kpis: list[Kpi] = field(default_factory=list)
    chart_data: list[ChartSeries] = field(default_factory=list)

    @property
    def row_count(self) -> int:
        return sum(len(section.rows) for section in self.data)
