from __future__ import annotations

from typing import Any

from ..models.report import (
    AccidentReport,
    ConsumablesReport,
    KpiReport,
    LeaveReport,
    OtReport,
    ReportBundle,
    WorkloadReport,
)
from ..transform.assembler import ReportType

"""Application-wide data object.

The data object maps each report identifier to that report's bundle as plain
data. All operations here return a new object and leave their input intact.
"""

__all__ = [
    "empty_app_data",
    "merge_app_data",
    "apply_report",
    "clear_report",
]

_BUNDLE_TYPES: dict[ReportType, type[ReportBundle]] = {
    ReportType.KPI: KpiReport,
    ReportType.CONSUMABLES: ConsumablesReport,
    ReportType.OT: OtReport,
    ReportType.LEAVE: LeaveReport,
    ReportType.ACCIDENT: AccidentReport,
    ReportType.WORKLOAD: WorkloadReport,
}


def _empty_report(report_type: ReportType) -> dict[str, Any]:
    return _BUNDLE_TYPES[report_type]().to_dict()


def empty_app_data() -> dict[str, Any]:
    return {rt.value: _empty_report(rt) for rt in ReportType}


def merge_app_data(loaded: dict[str, Any] | None) -> dict[str, Any]:
    """Overlay stored data on the empty shape so every report key and field exists.

    Unknown top-level keys in ``loaded`` are dropped.
    """
    loaded = loaded or {}
    merged = {}
    for rt in ReportType:
        stored = loaded.get(rt.value)
        merged[rt.value] = {**_empty_report(rt), **(stored if isinstance(stored, dict) else {})}
    return merged


def apply_report(app_data: dict[str, Any], report_type: ReportType | str, bundle: ReportBundle) -> dict[str, Any]:
    rtype = ReportType.parse(report_type)
    if bundle.report_type != rtype.value:
        raise ValueError(f"bundle {bundle.report_type} cannot be stored under {rtype.value}")
    return {**app_data, rtype.value: bundle.to_dict()}


def clear_report(app_data: dict[str, Any], report_type: ReportType | str) -> dict[str, Any]:
    rtype = ReportType.parse(report_type)
    return {**app_data, rtype.value: _empty_report(rtype)}
