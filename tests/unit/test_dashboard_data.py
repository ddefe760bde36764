from __future__ import annotations

import copy

import pytest

from kpi_dashboard.models.report import KpiReport, OtReport
from kpi_dashboard.services.dashboard import (
    apply_report,
    clear_report,
    empty_app_data,
    merge_app_data,
)
from kpi_dashboard.transform import UnsupportedReportTypeError
from kpi_dashboard.transform.kpi import build_report as build_kpi

REPORT_KEYS = {
    "kpiReport",
    "consumablesReport",
    "otReport",
    "leaveReport",
    "accidentReport",
    "workloadReport",
}


def test_empty_app_data_shape():
    data = empty_app_data()
    assert set(data) == REPORT_KEYS
    assert data["kpiReport"] == {"kpis": [], "table_rows": []}
    assert data["consumablesReport"]["comparison_data"] == {
        "year_over_year": {"current_total": 0, "previous_total": 0},
        "month_over_month": {"current_total": 0, "previous_total": 0},
    }


def test_merge_fills_missing_fields_and_drops_unknown_keys():
    merged = merge_app_data({"otReport": {"kpis": [{"title": "x"}]}, "legacy": {}, "leaveReport": "bad"})
    assert set(merged) == REPORT_KEYS
    assert merged["otReport"]["kpis"] == [{"title": "x"}]
    assert merged["otReport"]["table_data"] == []
    assert merged["leaveReport"] == empty_app_data()["leaveReport"]
    assert merge_app_data(None) == empty_app_data()


def test_apply_report_replaces_only_that_key(make_kpi_row):
    before = empty_app_data()
    snapshot = copy.deepcopy(before)
    bundle = build_kpi([make_kpi_row("Delivery", score=0.9, result="PASS")])
    after = apply_report(before, "kpiReport", bundle)
    assert before == snapshot
    assert after["kpiReport"]["kpis"][0]["value"] == "90%"
    assert after["kpiReport"]["kpis"][0]["trend_direction"] == "up"
    assert after["otReport"] == before["otReport"]


def test_apply_report_rejects_mismatched_bundle():
    with pytest.raises(ValueError, match="cannot be stored under otReport"):
        apply_report(empty_app_data(), "otReport", KpiReport())


def test_apply_report_unknown_key():
    with pytest.raises(UnsupportedReportTypeError):
        apply_report(empty_app_data(), "salesReport", OtReport())


def test_clear_report(make_kpi_row):
    data = apply_report(empty_app_data(), "kpiReport", build_kpi([make_kpi_row("Delivery")]))
    cleared = clear_report(data, "kpiReport")
    assert cleared["kpiReport"] == {"kpis": [], "table_rows": []}
    assert data["kpiReport"]["kpis"]  # 元データは変更しない
