from datetime import date

import pytest

from propdesk.reporting.aggregation import (
    FinancialSummary,
    compute_by_property,
    compute_by_provider,
    compute_invoice_stats,
    compute_property_stats,
    compute_summary,
    compute_time_series,
    filter_invoices,
)


def inv(total, status="paid", issue_date="2024-01-15", property_id="p1", provider_id="v1"):
    return {
        "total": total,
        "status": status,
        "issue_date": issue_date,
        "property_id": property_id,
        "provider_id": provider_id,
    }


# -----------------------------
# Summary
# -----------------------------
def test_summary_paid_and_sent():
    summary = compute_summary([inv(100, "paid"), inv(50, "sent")])
    assert summary.revenue == 150.0
    assert summary.expenses == 45.0
    assert summary.profit == 105.0
    assert summary.margin_pct == 70.0
    assert summary.invoices_paid_pct == 66.7
    assert summary.total_invoices == 2
    assert summary.paid_invoices == 1
    assert summary.paid_amount == 100.0
    assert summary.pending_amount == 50.0
    assert summary.expenses_estimated is True
    assert summary.estimated_fields == ["expenses", "profit", "margin_pct"]


def test_summary_empty_is_all_zero():
    summary = compute_summary([])
    assert summary == FinancialSummary(estimated_fields=["expenses", "profit", "margin_pct"])
    assert summary.margin_pct == 0.0
    assert summary.invoices_paid_pct == 0.0


def test_summary_counts_overdue_and_pending_separately():
    summary = compute_summary([
        inv(100, "overdue"), inv(40, "draft"), inv(60, "sent"), inv(25, "paid"),
    ])
    assert summary.overdue_invoices == 1
    assert summary.overdue_amount == 100.0
    assert summary.pending_amount == 100.0
    assert summary.revenue == 225.0


def test_malformed_totals_count_as_zero():
    summary = compute_summary([
        inv("abc"), inv(None), {"status": "paid"}, inv("12.50"),
        inv("NaN"), inv("Infinity"), inv(float("inf")),
    ])
    assert summary.revenue == 12.5
    assert summary.total_invoices == 7
    assert summary.invoices_paid_pct == 100.0


def test_nan_total_never_leaks_into_percentages():
    summary = compute_summary([inv("NaN", "paid"), inv(10, "sent")])
    assert summary.revenue == 10.0
    assert summary.invoices_paid_pct == 0.0
    assert summary.margin_pct == 70.0


@pytest.mark.parametrize("invoices, expected", [
    ([inv(100, "paid"), inv(-50, "sent")], 100.0),
    ([inv(50, "paid"), inv(-100, "sent")], 0.0),
])
def test_paid_share_stays_within_bounds(invoices, expected):
    assert compute_summary(invoices).invoices_paid_pct == expected


def test_works_with_model_instances(make_invoice):
    invoices = [make_invoice(100, "paid"), make_invoice(50, "sent")]
    assert compute_summary(invoices).invoices_paid_pct == 66.7


def test_percentages_round_half_up():
    # 1 of 16 paid is 6.25%
    summary = compute_summary([inv(1, "paid"), inv(15, "sent")])
    assert summary.invoices_paid_pct == 6.3


# -----------------------------
# Per property / provider
# -----------------------------
def test_by_property_sorted_by_revenue_with_names():
    invoices = [inv(100, property_id="p1"), inv(300, property_id="p2"), inv(50, property_id="p1")]
    properties = [{"id": "p1", "name": "Alpha"}, {"id": "p2", "name": "Beta"}]
    rows = compute_by_property(invoices, properties)
    assert [(r.property_id, r.property_name, r.revenue) for r in rows] == [
        ("p2", "Beta", 300.0),
        ("p1", "Alpha", 150.0),
    ]


def test_unknown_property_is_kept_as_na():
    invoices = [inv(100, property_id="p1"), inv(40, property_id="ghost"), inv(10, property_id=None)]
    rows = compute_by_property(invoices, [{"id": "p1", "name": "Alpha"}])
    names = {r.property_id: r.property_name for r in rows}
    assert names == {"p1": "Alpha", "ghost": "N/A", None: "N/A"}


def test_property_revenue_adds_up_to_summary():
    invoices = [
        inv(100.10, property_id="p1"), inv(33.33, property_id="p2"),
        inv(66.67, property_id="p3"), inv(12, property_id="p1", status="overdue"),
    ]
    rows = compute_by_property(invoices)
    assert sum(r.revenue for r in rows) == pytest.approx(compute_summary(invoices).revenue)


def test_revenue_ties_break_on_name():
    invoices = [inv(10, property_id="b"), inv(10, property_id="a")]
    rows = compute_by_property(invoices, [{"id": "a", "name": "Zulu"}, {"id": "b", "name": "Alpha"}])
    assert [r.property_name for r in rows] == ["Alpha", "Zulu"]


def test_by_provider_prefers_business_name():
    invoices = [inv(80, provider_id="v1"), inv(20, provider_id="v2")]
    providers = [
        {"id": "v1", "name": "Sam", "business_name": "Sam's Sparkies"},
        {"id": "v2", "name": "Lee"},
    ]
    rows = compute_by_provider(invoices, providers)
    assert [(r.provider_name, r.revenue) for r in rows] == [("Sam's Sparkies", 80.0), ("Lee", 20.0)]


def test_property_filter_narrows_summary():
    invoices = [inv(100, property_id="p1"), inv(50, property_id="p2")]
    filtered = filter_invoices(invoices, property_id="p1")
    summary = compute_summary(filtered)
    assert summary.revenue == 100.0
    assert summary.total_invoices == 1


def test_filter_by_date_range_drops_undated():
    invoices = [
        inv(1, issue_date="2024-01-01"), inv(2, issue_date="2024-02-15"),
        inv(3, issue_date=None), inv(4, issue_date="2024-04-01"),
    ]
    kept = filter_invoices(invoices, date_from=date(2024, 1, 1), date_to=date(2024, 3, 31))
    assert [i["total"] for i in kept] == [1, 2]
    assert len(filter_invoices(invoices)) == 4


# -----------------------------
# Time series
# -----------------------------
def test_time_series_zero_fills_gaps():
    invoices = [inv(100, issue_date="2024-01-10"), inv(50, issue_date="2024-03-02")]
    points = compute_time_series(invoices, date(2024, 1, 1), date(2024, 3, 31), "MONTH")
    assert [p.period for p in points] == ["2024-01", "2024-02", "2024-03"]
    assert [p.revenue for p in points] == [100.0, 0.0, 50.0]
    assert points[1].label == "February 2024"
    assert points[0].expenses == 30.0
    assert points[0].profit == 70.0
    assert points[2].invoice_count == 1


def test_time_series_empty_input():
    assert compute_time_series([]) == []
    points = compute_time_series([], date(2024, 1, 1), date(2024, 2, 29), "MONTH")
    assert [(p.period, p.revenue) for p in points] == [("2024-01", 0.0), ("2024-02", 0.0)]


def test_time_series_bounds_default_to_invoice_dates():
    invoices = [inv(5, issue_date="2023-11-20"), inv(7, issue_date="2024-01-03"), inv(9, issue_date=None)]
    points = compute_time_series(invoices, granularity="MONTH")
    assert [p.period for p in points] == ["2023-11", "2023-12", "2024-01"]


def test_time_series_by_week_and_year():
    invoices = [inv(10, issue_date="2024-01-02"), inv(20, issue_date="2024-01-08")]
    weeks = compute_time_series(invoices, date(2024, 1, 1), date(2024, 1, 13), "WEEK")
    assert [(p.period, p.revenue) for p in weeks] == [("2024-W01", 10.0), ("2024-W02", 20.0)]
    years = compute_time_series(invoices, date(2023, 6, 1), date(2024, 6, 1), "YEAR")
    assert [(p.label, p.revenue) for p in years] == [("2023", 0.0), ("2024", 30.0)]


def test_time_series_ignores_out_of_range_invoices():
    invoices = [inv(10, issue_date="2023-12-31"), inv(20, issue_date="2024-01-08")]
    points = compute_time_series(invoices, date(2024, 1, 1), date(2024, 1, 31), "MONTH")
    assert sum(p.revenue for p in points) == 20.0


# -----------------------------
# Stats
# -----------------------------
def test_invoice_stats():
    stats = compute_invoice_stats([inv(100, "paid"), inv(40, "overdue"), inv(10, "draft"), inv(5, "void")])
    assert stats["total_invoices"] == 4
    assert stats["total_amount"] == 155.0
    assert stats["paid_count"] == 1
    assert stats["overdue_amount"] == 40.0
    assert stats["draft_count"] == 1
    assert stats["sent_count"] == 0


def test_property_stats():
    stats = compute_property_stats([
        {"status": "active", "property_type": "residential"},
        {"status": "maintenance", "property_type": "commercial"},
        {"status": "active"},
    ])
    assert stats["total"] == 3
    assert stats["active"] == 2
    assert stats["maintenance"] == 1
    assert stats["by_type"] == {"residential": 1, "commercial": 1, "Unknown": 1}
