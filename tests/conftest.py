# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from kpi_dashboard.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # capsys は毎テスト stdout を差し替えるため logger を作り直す
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.setenv("DISABLE_DB_CONNECT", "1")
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
reports:
  - report_type: kpiReport
    file: kpi.xlsx
  - report_type: otReport
    file: overtime.xlsx
store_path: ./store/dashboard.json
remote:
  enabled: false
  collection: reports
database:
  host: localhost
  port: 5432
  user: appuser
  password: secret
  database: appdb
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "dashboard.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_workbook() -> Callable[..., Path]:
    """Write a real .xlsx (openpyxl) from {sheet name: rows}; rows are written without a header."""
    def _write(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            for sheet_name, rows in sheets.items():
                pd.DataFrame(rows).to_excel(writer, sheet_name=sheet_name, header=False, index=False)
        return path
    return _write


# ---- grid builders -------------------------------------------------------

KPI_HEADER = ["No", "KPI", "Target", "Unit"] + [f"M{i}" for i in range(1, 13)] + [
    "Score", "Result", "Description", "Objective", "Method", "Responsible", "Plan",
]


@pytest.fixture()
def make_kpi_row() -> Callable[..., list[Any]]:
    def _row(title: str, score: Any = "", result: Any = "", target: str = "", seq: Any = 1) -> list[Any]:
        row: list[Any] = [seq, title, target, "%"] + [""] * 12 + [score, result, "", "", "", "", ""]
        return row
    return _row


@pytest.fixture()
def make_consumable_row() -> Callable[..., list[Any]]:
    def _row(
        when: Any,
        material: str = "M-001",
        total: Any = 100,
        department: str = "Production",
        description: str = "Gloves",
    ) -> list[Any]:
        return [when, material, description, 1, "pcs", total, total, "CC-1", department]
    return _row


@pytest.fixture()
def make_ot_row() -> Callable[..., list[Any]]:
    def _row(
        employee_id: Any,
        name: str = "",
        department: str = "",
        monthly: Sequence[Any] = (),
        total: Any = 0,
    ) -> list[Any]:
        months = list(monthly) + [""] * (12 - len(monthly))
        return [1, employee_id, name, "Operator", department, "G1", "Active"] + months + [total]
    return _row


@pytest.fixture()
def make_leave_row() -> Callable[..., list[Any]]:
    def _row(
        employee_id: Any,
        department: str = "",
        monthly: Sequence[Any] = (),
        sick: Any = 0,
        personal: Any = 0,
        birthday: Any = 0,
        other: Any = 0,
        vacation_used: Any = 0,
        total: Any = 0,
        row_id: Any = "",
    ) -> list[Any]:
        months = list(monthly) + [""] * (12 - len(monthly))
        tail = [0, 0, 0, 6, 6, vacation_used, 0, sick, personal, birthday, other, total]
        return [row_id, employee_id, "Name", "Staff", department, "G2", "Active"] + months + tail
    return _row


@pytest.fixture()
def make_accident_row() -> Callable[..., list[Any]]:
    def _row(
        incident_id: Any,
        severity: str = "S",
        department: str = "",
        damage: Any = 0,
        when: Any = 45000,
    ) -> list[Any]:
        return [
            incident_id, when, "10:30", severity, "Slip", department, "E001", "Somchai", "Operator",
            "details", "wet floor", "signage", damage, "No", "Training", "-", "", "Warehouse",
        ]
    return _row
