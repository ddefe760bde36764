from __future__ import annotations

"""Fixed column positions per report layout.

Each sheet layout is a contract with the exported workbook: positions are
never discovered from the header row. ``MIN_LENGTH`` is the shortest row a
projector accepts; shorter rows are skipped, not errors.
"""

__all__ = [
    "MONTH_COUNT",
    "KpiColumns",
    "ConsumableColumns",
    "OtColumns",
    "LeaveColumns",
    "AccidentColumns",
    "WorkloadColumns",
]

MONTH_COUNT = 12


class KpiColumns:
    SEQUENCE = 0
    TITLE = 1
    TARGET = 2
    MEASUREMENT = 3
    FIRST_MONTH = 4  # 4..15
    SCORE = 16
    RESULT = 17
    DESCRIPTION = 18
    OBJECTIVE = 19
    METHOD = 20
    RESPONSIBLE = 21
    IMPROVEMENT_PLAN = 22
    MIN_LENGTH = TITLE + 1


class ConsumableColumns:
    DATE = 0
    MATERIAL = 1
    DESCRIPTION = 2
    QUANTITY = 3
    UNIT = 4
    PRICE = 5
    TOTAL_PRICE = 6
    COST_CENTER = 7
    DEPARTMENT = 8
    MIN_LENGTH = DATE + 1


class OtColumns:
    ID = 0
    EMPLOYEE_ID = 1
    NAME = 2
    POSITION = 3
    DEPARTMENT = 4
    GRADE = 5
    STATUS = 6
    FIRST_MONTH = 7  # 7..18
    TOTAL_OT = 19
    MIN_LENGTH = TOTAL_OT + 1


class LeaveColumns:
    ID = 0
    EMPLOYEE_ID = 1
    NAME = 2
    POSITION = 3
    DEPARTMENT = 4
    GRADE = 5
    STATUS = 6
    FIRST_MONTH = 7  # 7..18
    LEAVE_WITHOUT_VACATION = 19
    TOTAL_LEAVE_WITH_VACATION = 20
    VACATION_CARRIED_OVER = 21
    VACATION_ENTITLEMENT = 22
    TOTAL_VACATION = 23
    VACATION_USED = 24
    VACATION_ACCRUED = 25
    SICK_LEAVE = 26
    PERSONAL_LEAVE = 27
    BIRTHDAY_LEAVE = 28
    OTHER_LEAVE = 29
    TOTAL_LEAVE = 30
    MIN_LENGTH = TOTAL_LEAVE + 1


class AccidentColumns:
    ID = 0
    INCIDENT_DATE = 1
    INCIDENT_TIME = 2
    SEVERITY = 3
    OCCURRENCE = 4
    DEPARTMENT = 5
    EMPLOYEE_ID = 6
    EMPLOYEE_NAME = 7
    POSITION = 8
    DETAILS = 9
    CAUSE = 10
    PREVENTION = 11
    DAMAGE_VALUE = 12
    INSURANCE_CLAIM = 13
    ACTION_TAKEN = 14
    PENALTY = 15
    REMARKS = 16
    ACCIDENT_LOCATION = 17
    MIN_LENGTH = ACCIDENT_LOCATION + 1


class WorkloadColumns:
    PRODUCT = 0
    DESCRIPTION = 1
    UNIT = 2
    FIRST_MONTH = 3  # 3..14 (15 = 年間合計, 未使用)
    AVERAGE = 16
    MIN = 17
    MAX = 18
