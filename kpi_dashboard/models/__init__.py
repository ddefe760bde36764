"""Domain models for the reporting dashboard.

Projected rows and report bundles are produced by ``kpi_dashboard.transform``;
the remaining models describe a refresh run.
"""

from .error_record import ErrorRecord
from .processing_result import FileStat, ProcessingResult
from .report import (
    AccidentReport,
    ChartPoint,
    ChartSeries,
    Comparison,
    ComparisonData,
    ConsumablesReport,
    DepartmentCost,
    Kpi,
    KpiReport,
    LeaveReport,
    MonthlyGroup,
    OtReport,
    PeriodTotals,
    ReportBundle,
    TopItem,
    WorkloadReport,
)
from .report_file import FileStatus, ReportFile
from .rows import (
    AccidentRow,
    ConsumableRow,
    KpiTableRow,
    LeaveRow,
    OtRow,
    WorkloadDetailRow,
    WorkloadProductSection,
)

__all__ = [
    # Projected rows
    "AccidentRow",
    "ConsumableRow",
    "KpiTableRow",
    "LeaveRow",
    "OtRow",
    "WorkloadDetailRow",
    "WorkloadProductSection",
    # Report bundles
    "AccidentReport",
    "ChartPoint",
    "ChartSeries",
    "Comparison",
    "ComparisonData",
    "ConsumablesReport",
    "DepartmentCost",
    "Kpi",
    "KpiReport",
    "LeaveReport",
    "MonthlyGroup",
    "OtReport",
    "PeriodTotals",
    "ReportBundle",
    "TopItem",
    "WorkloadReport",
    # Run models
    "ErrorRecord",
    "FileStat",
    "FileStatus",
    "ProcessingResult",
    "ReportFile",
]
