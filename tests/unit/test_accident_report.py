from __future__ import annotations

from kpi_dashboard.transform.accidents import build_report, severity_breakdown


def _kpi(report, title):
    return next(k for k in report.kpis if k.title == title).value


def _rows(make_accident_row):
    return [
        make_accident_row("A1", "S", "Prod", 1000),
        make_accident_row("A2", "M", "Prod", "2,500"),
        make_accident_row("A3", "S", "", "-"),
        make_accident_row("", "L", "QA", 50),
        make_accident_row("A5", "L", "QA", 50)[:10],
    ]


def test_invalid_rows_are_dropped(make_accident_row):
    report = build_report(_rows(make_accident_row))
    assert [r.id for r in report.table_data] == ["A1", "A2", "A3"]


def test_row_projection(make_accident_row):
    report = build_report(_rows(make_accident_row))
    first = report.table_data[0]
    assert first.incident_date == "15/03/2023"
    assert first.accident_location == "Warehouse"
    assert report.table_data[1].damage_value == 2500
    assert report.table_data[2].damage_value == 0


def test_summary_cards(make_accident_row):
    report = build_report(_rows(make_accident_row))
    assert _kpi(report, "totalIncidents") == "3"
    assert _kpi(report, "totalDamage") == "฿3,500"
    assert _kpi(report, "topDepartmentAccident") == "Prod"
    assert _kpi(report, "topSeverity") == "S"


def test_counts_by_department_and_severity(make_accident_row):
    report = build_report(_rows(make_accident_row))
    assert [(p.name, p.value) for p in report.chart_data] == [("Prod", 2), ("Unknown", 1)]
    assert [(p.name, p.value) for p in report.severity_counts] == [("S", 2), ("M", 1)]
    assert sum(p.value for p in report.chart_data) == report.row_count


def test_severity_breakdown_fixed_order_first():
    points = severity_breakdown({"X": 1, "L": 2, "B": 1, "S": 4})
    assert [p.name for p in points] == ["S", "L", "B", "X"]


def test_empty_table():
    report = build_report([])
    assert _kpi(report, "totalIncidents") == "0"
    assert _kpi(report, "totalDamage") == "฿0"
    assert _kpi(report, "topSeverity") == "N/A"


def test_damage_keeps_three_fraction_digits(make_accident_row):
    report = build_report([make_accident_row("A1", "S", "Prod", 1234.567)])
    assert _kpi(report, "totalDamage") == "฿1,234.567"
