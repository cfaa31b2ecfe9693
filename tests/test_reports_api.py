from datetime import date, timedelta

import pytest

RANGE = "from=2024-01-01&to=2024-03-31"


@pytest.fixture
def ledger(make_property, make_provider, make_invoice):
    make_property("p1", name="Harbor View")
    make_property("p2", name="Dockside")
    make_provider("v1", name="Sam", business_name="Sam Fix")
    make_provider("v2", name="Lee")
    make_invoice(100, "paid", date(2024, 1, 10), "p1", "v1")
    make_invoice(50, "sent", date(2024, 3, 2), "p1", "v1")
    make_invoice(200, "paid", date(2024, 2, 5), "p2", "v2")
    make_invoice(999, "paid", date(2023, 12, 31), "p1", "v1")


def test_financial_report(client, admin_headers, ledger):
    r = client.get(f"/api/reports/financial?{RANGE}&g=MONTH", headers=admin_headers)
    assert r.status_code == 200
    body = r.get_json()

    assert body["range"] == {"from": "2024-01-01", "to": "2024-03-31", "granularity": "MONTH", "explicit": True}
    assert body["currency"] == "USD"
    assert body["summary"]["revenue"] == 350.0
    assert body["summary"]["total_invoices"] == 3
    assert body["summary"]["expenses_estimated"] is True
    assert body["display"]["revenue"] == "$350.00"
    assert body["display"]["profit"] == "$245.00"
    assert body["display"]["margin_pct"] == "70.0%"
    assert [(row["property_name"], row["revenue"]) for row in body["by_property"]] == [
        ("Dockside", 200.0),
        ("Harbor View", 150.0),
    ]
    assert [(p["period"], p["revenue"]) for p in body["series"]] == [
        ("2024-01", 100.0), ("2024-02", 200.0), ("2024-03", 50.0),
    ]
    assert {g: (r["from"], r["to"]) for g, r in body["granularity_ranges"].items()} == {
        "WEEK": ("2024-01-01", "2024-03-31"),
        "MONTH": ("2024-01-01", "2024-03-31"),
        "YEAR": ("2024-01-01", "2024-03-31"),
    }


def test_financial_report_filters(client, admin_headers, ledger):
    body = client.get(f"/api/reports/financial?{RANGE}&propertyId=p1", headers=admin_headers).get_json()
    assert body["summary"]["revenue"] == 150.0
    assert body["summary"]["invoices_paid_pct"] == 66.7
    assert body["filters"]["property_id"] == "p1"
    assert [row["property_id"] for row in body["by_property"]] == ["p1"]

    body = client.get(f"/api/reports/financial?{RANGE}&providerId=v2", headers=admin_headers).get_json()
    assert body["summary"]["revenue"] == 200.0

    body = client.get(f"/api/reports/financial?{RANGE}&status=paid", headers=admin_headers).get_json()
    assert body["summary"]["revenue"] == 300.0


def test_explicit_range_kept_when_granularity_changes(client, admin_headers, ledger):
    body = client.get(f"/api/reports/financial?{RANGE}&g=WEEK", headers=admin_headers).get_json()
    assert body["range"]["from"] == "2024-01-01"
    assert body["range"]["to"] == "2024-03-31"
    assert body["series"][0]["period"] == "2024-W01"
    assert sum(p["revenue"] for p in body["series"]) == 350.0


def test_default_range(client, admin_headers):
    body = client.get("/api/reports/financial?g=YEAR", headers=admin_headers).get_json()
    assert body["range"]["explicit"] is False
    assert body["range"]["from"] == date(date.today().year, 1, 1).isoformat()
    assert body["summary"]["revenue"] == 0.0
    assert body["by_property"] == []
    assert body["granularity_ranges"]["YEAR"] == body["range"]
    week_start = date.today() - timedelta(days=83)
    assert body["granularity_ranges"]["WEEK"]["from"] == week_start.isoformat()


@pytest.mark.parametrize("query", ["g=DAILY", "from=yesterday", "to=2024-13"])
def test_bad_query_is_400(client, admin_headers, query):
    r = client.get(f"/api/reports/financial?{query}", headers=admin_headers)
    assert r.status_code == 400
    assert r.get_json()["error"] == "validation_error"


def test_provider_report(client, admin_headers, ledger):
    body = client.get(f"/api/reports/financial/providers?{RANGE}", headers=admin_headers).get_json()
    assert [(row["provider_name"], row["revenue"]) for row in body["by_provider"]] == [
        ("Lee", 200.0),
        ("Sam Fix", 150.0),
    ]


def test_financial_csv_export(client, admin_headers, ledger):
    r = client.get(f"/api/reports/financial/export.csv?{RANGE}", headers=admin_headers)
    assert r.status_code == 200
    assert r.content_type.startswith("text/csv")
    assert r.headers["Content-Disposition"] == \
        "attachment; filename=financial-report-2024-01-01-to-2024-03-31.csv"
    assert r.get_data(as_text=True).splitlines() == [
        "Property,Revenue,Profit,Margin%,Invoices Paid%",
        "Dockside,200.00,140.00,70.0,100.0",
        "Harbor View,150.00,105.00,70.0,66.7",
    ]


def test_all_reports_csv_export(client, admin_headers, ledger):
    r = client.get(f"/api/reports/all/export.csv?{RANGE}&g=WEEK", headers=admin_headers)
    assert r.status_code == 200
    assert r.headers["Content-Disposition"] == \
        "attachment; filename=all-reports-week-2024-01-01-to-2024-03-31.csv"


def test_reports_are_admin_only(client, auth_headers):
    assert client.get("/api/reports/financial").status_code == 401
    r = client.get("/api/reports/financial", headers=auth_headers("service_provider", "v1"))
    assert r.status_code == 403
    assert r.get_json() == {"error": "forbidden", "message": "Insufficient permissions"}


def test_store_outage_is_503(client, admin_headers, store, monkeypatch):
    def broken(*args, **kwargs):
        raise ConnectionError("backend down")

    monkeypatch.setattr(store, "_records", broken)
    r = client.get(f"/api/reports/financial?{RANGE}", headers=admin_headers)
    assert r.status_code == 503
    assert r.get_json()["error"] == "store_unavailable"


def test_data_integrity(client, admin_headers, make_property, make_provider, make_invoice):
    make_property("p1")
    make_provider("v1", property_ids=["p1"])
    make_invoice(10, invoice_number="INV-1")
    make_invoice(20, invoice_number="INV-1")
    make_invoice(30, invoice_number="INV-2", property_id="p9")

    r = client.get("/api/reports/integrity", headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json() == {
        "is_valid": False,
        "errors": ["Invoice INV-2: Property ID p9 not found"],
        "has_duplicates": True,
        "duplicate_invoice_numbers": ["INV-1"],
    }


def test_data_integrity_on_clean_store(client, admin_headers, auth_headers):
    body = client.get("/api/reports/integrity", headers=admin_headers).get_json()
    assert body["is_valid"] is True
    r = client.get("/api/reports/integrity", headers=auth_headers("service_provider", "v1"))
    assert r.status_code == 403
