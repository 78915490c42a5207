from datetime import date
from decimal import Decimal

from conftest import create_property, create_rental
from models.utils import build_payment_schedule, month_key


def test_quarter_lease_generates_three_months():
    rows = build_payment_schedule(
        date(2024, 1, 1), date(2024, 4, 1), 10000, 500, due_day=5
    )

    assert [r["month"] for r in rows] == ["2024-01", "2024-02", "2024-03"]
    assert [r["due_date"] for r in rows] == [
        date(2024, 1, 5),
        date(2024, 2, 5),
        date(2024, 3, 5),
    ]
    assert all(r["amount"] == Decimal("10500") for r in rows)


def test_end_date_is_exclusive_but_partial_month_counts():
    rows = build_payment_schedule(date(2024, 1, 15), date(2024, 3, 1), 8000)
    assert [r["month"] for r in rows] == ["2024-01", "2024-02"]


def test_month_end_start_does_not_drift():
    rows = build_payment_schedule(date(2024, 1, 31), date(2024, 6, 30), 5000)
    assert [r["month"] for r in rows] == [
        "2024-01",
        "2024-02",
        "2024-03",
        "2024-04",
        "2024-05",
    ]


def test_year_rollover():
    rows = build_payment_schedule(date(2024, 11, 1), date(2025, 2, 1), 7000)
    assert [r["month"] for r in rows] == ["2024-11", "2024-12", "2025-01"]


def test_month_key_is_zero_padded():
    assert month_key(date(2024, 3, 9)) == "2024-03"


def test_rental_creation_persists_schedule(client, admin_headers, tenant):
    tenant_user, _ = tenant
    prop = create_property(client, admin_headers)

    res = create_rental(client, admin_headers, prop["id"], tenant_user["id"])
    assert res.status_code == 201, res.text
    rental = res.json()["rental"]

    assert rental["status"] == "active"
    payments = rental["payments"]
    assert len(payments) == 3
    assert [p["month"] for p in payments] == ["2024-01", "2024-02", "2024-03"]
    for p in payments:
        assert p["dueDate"].endswith("-05")
        assert p["amount"] == 10500
        assert p["status"] == "pending"
    assert rental["totalDue"] == 31500
    assert rental["landlord"]["email"] == "admin@ramakuti.in"


def test_rental_requires_end_after_start(client, admin_headers, tenant):
    tenant_user, _ = tenant
    prop = create_property(client, admin_headers)

    res = create_rental(
        client,
        admin_headers,
        prop["id"],
        tenant_user["id"],
        startDate="2024-04-01",
        endDate="2024-01-01",
    )
    assert res.status_code == 400
    assert res.json()["success"] is False
