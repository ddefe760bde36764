from __future__ import annotations

from datetime import date, datetime

from kpi_dashboard.models.report import ChartPoint
from kpi_dashboard.transform.consumables import build_report, date_parts, previous_month


def _kpi(report, title):
    return next(k for k in report.kpis if k.title == title)


def _sample_rows(make_consumable_row):
    return [
        make_consumable_row(datetime(2024, 3, 1), "M-1", 100, "A"),
        make_consumable_row("05/02/2024", "M-2", 50, "B", description="Tape"),
        make_consumable_row(datetime(2023, 3, 2), "M-1", 200, "A"),
        make_consumable_row("sometime", "M-3", 30, "", description="Mask"),
        make_consumable_row(None, "M-9", 999, "Z"),
    ]


def test_table_skips_rows_without_date(make_consumable_row):
    report = build_report(_sample_rows(make_consumable_row), today=date(2024, 3, 10))
    assert report.row_count == 4
    assert report.table_data[0].date == "01/03/2024"
    assert report.table_data[3].date == "sometime"


def test_year_cards(make_consumable_row):
    report = build_report(_sample_rows(make_consumable_row), today=date(2024, 3, 10))
    cost = _kpi(report, "kpiTotalCost")
    assert cost.value == "฿150.00"
    assert cost.comparison.value == "฿-50.00"
    assert cost.comparison.percentage == "-25.0%"
    assert cost.comparison.period == "year"
    assert cost.trend_direction == "up"

    tx = _kpi(report, "kpiTransactions")
    assert (tx.value, tx.comparison.value, tx.comparison.percentage) == ("2", "+1", "100.0%")
    assert tx.trend_direction == "down"

    items = _kpi(report, "kpiTotalItems")
    assert items.value == "2"

    depts = _kpi(report, "kpiDepartments")
    assert depts.value == "2"
    assert depts.trend_direction == "neutral"


def test_period_comparisons(make_consumable_row):
    report = build_report(_sample_rows(make_consumable_row), today=date(2024, 3, 10))
    cmp = report.comparison_data
    assert (cmp.year_over_year.current_total, cmp.year_over_year.previous_total) == (150, 200)
    assert (cmp.month_over_month.current_total, cmp.month_over_month.previous_total) == (100, 50)


def test_month_over_month_wraps_january(make_consumable_row):
    rows = [
        make_consumable_row("10/01/2024", "M-1", 10, "A"),
        make_consumable_row("20/12/2023", "M-1", 40, "A"),
        make_consumable_row("20/12/2022", "M-1", 99, "A"),
    ]
    report = build_report(rows, today=date(2024, 1, 15))
    mom = report.comparison_data.month_over_month
    assert (mom.current_total, mom.previous_total) == (10, 40)


def test_zero_prior_year_reports_full_increase(make_consumable_row):
    rows = [make_consumable_row("01/02/2024", "M-1", 80, "A")]
    report = build_report(rows, today=date(2024, 6, 1))
    assert _kpi(report, "kpiTotalCost").comparison.percentage == "100.0%"


def test_serial_date_lands_in_its_month(make_consumable_row):
    rows = [make_consumable_row(45000, "M-1", 70, "A")]
    report = build_report(rows, today=date(2023, 6, 1))
    assert report.table_data[0].date == "15/03/2023"
    assert report.chart_data[2] == ChartPoint(name="Mar", value=70)


def test_chart_covers_current_year_only(make_consumable_row):
    report = build_report(_sample_rows(make_consumable_row), today=date(2024, 3, 10))
    assert [p.name for p in report.chart_data][:3] == ["Jan", "Feb", "Mar"]
    assert report.chart_data[1].value == 50
    assert report.chart_data[2].value == 100
    assert sum(p.value for p in report.chart_data) == 150


def test_department_totals_and_top_items(make_consumable_row):
    report = build_report(_sample_rows(make_consumable_row), today=date(2024, 3, 10))
    assert [(p.name, p.value) for p in report.cost_by_dept] == [("A", 300), ("B", 50), ("Unknown", 30)]

    first = report.top_items[0]
    assert (first.material, first.name, first.frequency, first.total_cost) == ("M-1", "Gloves", 2, 300)
    assert [(d.department, d.total_cost) for d in first.cost_by_department] == [("A", 300)]
    assert [i.material for i in report.top_items] == ["M-1", "M-2", "M-3"]


def test_monthly_groups_newest_first(make_consumable_row):
    report = build_report(_sample_rows(make_consumable_row), today=date(2024, 3, 10))
    assert [(g.month_key, g.total_cost, g.total_items) for g in report.monthly_groups] == [
        ("2024-03", 100, 1),
        ("2024-02", 50, 1),
        ("2023-03", 200, 1),
    ]


def test_text_amounts_are_parsed(make_consumable_row):
    rows = [make_consumable_row("01/01/2024", "M-1", "1,250.50", "A")]
    report = build_report(rows, today=date(2024, 1, 2))
    assert report.table_data[0].total_price == "1,250.50"
    assert report.cost_by_dept[0].value == 1250.5


def test_date_parts():
    assert date_parts("06/01/2023") == (6, 0, 2023)
    assert date_parts("2023-01-06") is None
    assert date_parts("a/b/c") is None


def test_previous_month():
    assert previous_month(date(2024, 1, 5)) == (11, 2023)
    assert previous_month(date(2024, 7, 5)) == (5, 2024)


def test_empty_table_has_zeroed_cards():
    report = build_report([], today=date(2024, 1, 1))
    assert report.row_count == 0
    assert _kpi(report, "kpiTotalCost").value == "฿0.00"
    assert _kpi(report, "kpiTotalCost").comparison.percentage == "0.0%"
    assert len(report.chart_data) == 12
    assert report.top_items == []


def test_small_amounts_keep_their_value(make_consumable_row):
    rows = [make_consumable_row("01/01/2024", "M-1", 0.00005, "A")]
    report = build_report(rows, today=date(2024, 1, 2))
    assert report.table_data[0].total_price == "0.00005"
    assert report.cost_by_dept == [ChartPoint(name="A", value=0.00005)]
    assert report.top_items[0].total_cost == 0.00005


def test_top_items_equal_cost_ordered_by_material(make_consumable_row):
    rows = [
        make_consumable_row("01/01/2024", "M-B", 40, "A"),
        make_consumable_row("02/01/2024", "M-A", 40, "B"),
        make_consumable_row("03/01/2024", "M-C", 10, "A"),
        make_consumable_row("04/01/2024", "M-A", 0, "A"),
    ]
    report = build_report(rows, today=date(2024, 1, 5))
    assert [(i.material, i.frequency, i.total_cost) for i in report.top_items] == [
        ("M-A", 2, 40), ("M-B", 1, 40), ("M-C", 1, 10),
    ]
    assert [(d.department, d.total_cost) for d in report.top_items[0].cost_by_department] == [("B", 40), ("A", 0)]
