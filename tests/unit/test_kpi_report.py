from __future__ import annotations

from kpi_dashboard.transform.kpi import build_report, project_row
from kpi_dashboard.transform.rules import KPI_COLORS


def test_summary_card_percentage_and_pass(make_kpi_row):
    report = build_report([make_kpi_row("On-time delivery", score=0.85, result="PASS", target="90%")])
    card = report.kpis[0]
    assert card.value == "85%"
    assert card.trend == "PASS"
    assert card.trend_direction == "up"
    assert card.target == "90%"
    assert card.icon == "ChartBarIcon"
    assert card.color == KPI_COLORS[0]


def test_forklift_score_is_raw_number(make_kpi_row):
    report = build_report([make_kpi_row("Forklift Availability", score=5, result="Fail")])
    card = report.kpis[0]
    assert card.value == "5"
    assert card.icon == "CubeIcon"
    assert card.trend_direction == "down"


def test_blank_score_and_result_default_to_na(make_kpi_row):
    report = build_report([make_kpi_row("Training hours")])
    row = report.table_rows[0]
    assert row.score == "N/A"
    assert row.result == "N/A"
    assert report.kpis[0].value == "N/A"
    assert report.kpis[0].trend_direction == "down"


def test_rows_without_title_are_skipped(make_kpi_row):
    rows = [
        make_kpi_row("First", score=1, result="pass"),
        make_kpi_row("", score=0.5),
        [None] * 5,
        make_kpi_row("Second", score=0.5, seq=2),
    ]
    report = build_report(rows)
    assert [r.title for r in report.table_rows] == ["First", "Second"]
    assert len(report.kpis) == len(report.table_rows)
    # 色は有効行の順番で割り当て
    assert report.kpis[1].color == KPI_COLORS[1]
    # 大文字小文字を問わず PASS
    assert report.kpis[0].trend_direction == "up"


def test_project_row_monthly_and_details(make_kpi_row):
    raw = make_kpi_row("Scrap rate", score="3%", result="PASS", seq=7)
    raw[4] = 0.5
    raw[15] = "-"
    raw[21] = "QA team"
    row = project_row(raw)
    assert row is not None
    assert row.kpi_no == "7"
    assert row.monthly_data["Jan"] == "0.5"
    assert row.monthly_data["Dec"] == "-"
    assert list(row.monthly_data)[0] == "Jan"
    assert row.responsible == "QA team"


def test_short_row_is_padded_with_blanks():
    row = project_row([1, "Only a title"])
    assert row is not None
    assert row.score == "N/A"
    assert row.monthly_data["Mar"] == ""
