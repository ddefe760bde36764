from __future__ import annotations

from dataclasses import dataclass, field

"""Projected row models, one per report layout.

A projected row is the typed record built from one raw sheet row using the
fixed column positions in ``kpi_dashboard.transform.columns``.
"""

__all__ = [
    "KpiTableRow",
    "ConsumableRow",
    "OtRow",
    "LeaveRow",
    "AccidentRow",
    "WorkloadDetailRow",
    "WorkloadProductSection",
]


@dataclass(frozen=True)
class KpiTableRow:
    kpi_no: str
    title: str
    measurement: str
    target: str
    score: str  # 空セル -> "N/A"
    result: str  # 空セル -> "N/A"
    monthly_data: dict[str, str]  # "Jan".."Dec" -> raw text
    description: str
    objective: str
    measurement_method: str
    responsible: str
    improvement_plan: str


@dataclass(frozen=True)
class ConsumableRow:
    """Consumables spend line. Amounts stay textual; aggregation parses them."""
    date: str  # DD/MM/YYYY (or source text)
    material: str
    description: str
    quantity: str
    unit: str
    price: str
    total_price: str
    cost_center: str
    department: str


@dataclass(frozen=True)
class OtRow:
    id: str
    employee_id: str
    name: str
    position: str
    department: str
    grade: str
    status: str
    monthly_ot: list[float]  # 12 slots, absent -> 0
    total_ot: float


@dataclass(frozen=True)
class LeaveRow:
    id: str
    employee_id: str
    name: str
    position: str
    department: str
    grade: str
    status: str
    monthly_leave: list[float]
    leave_without_vacation: float
    total_leave_with_vacation: float
    vacation_carried_over: float
    vacation_entitlement: float
    total_vacation: float
    vacation_used: float
    vacation_accrued: float
    sick_leave: float
    personal_leave: float
    birthday_leave: float
    other_leave: float
    total_leave: float


@dataclass(frozen=True)
class AccidentRow:
    id: str
    incident_date: str
    incident_time: str
    severity: str
    occurrence: str
    department: str
    employee_id: str
    employee_name: str
    position: str
    details: str
    cause: str
    prevention: str
    damage_value: float
    insurance_claim: str
    action_taken: str
    penalty: str
    remarks: str
    accident_location: str


@dataclass(frozen=True)
class WorkloadDetailRow:
    """One detail line under a workload product section.

    ``is_sub_row`` is False for summary lines (Sum / Manpower / Workday /
    Working Hours / OT prefixes) and True for item lines.
    """
    description: str
    is_sub_row: bool
    unit: str
    values: list[float | None]  # 12 slots, absent -> None
    average: float | None
    min: float | None
    max: float | None


@dataclass(frozen=True)
class WorkloadProductSection:
    product: str
    is_sub_product: bool = False
    rows: list[WorkloadDetailRow] = field(default_factory=list)
