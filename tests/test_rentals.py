import uuid

import pytest

from conftest import create_property, create_rental, register_tenant


@pytest.fixture
def setup(client, admin_headers, tenant):
    tenant_user, tenant_headers = tenant
    prop = create_property(client, admin_headers)
    res = create_rental(client, admin_headers, prop["id"], tenant_user["id"])
    assert res.status_code == 201, res.text
    return {
        "property": prop,
        "rental": res.json()["rental"],
        "tenant": tenant_user,
        "tenant_headers": tenant_headers,
    }


def test_property_becomes_unavailable(client, setup):
    prop_id = setup["property"]["id"]
    listing = client.get("/api/properties").json()["properties"]
    assert prop_id not in [p["id"] for p in listing]


def test_second_booking_of_same_property_is_rejected(client, admin_headers, setup):
    other, _ = register_tenant(client, name="Meera Joshi", email="meera@example.com")
    res = create_rental(client, admin_headers, setup["property"]["id"], other["id"])
    assert res.status_code == 400
    assert res.json()["message"] == "Property not available for rent"

    rentals = client.get("/api/admin/rentals", headers=admin_headers).json()
    assert rentals["pagination"]["totalRentals"] == 1


def test_rental_for_unknown_tenant_is_404(client, admin_headers):
    prop = create_property(client, admin_headers)
    res = create_rental(client, admin_headers, prop["id"], str(uuid.uuid4()))
    assert res.status_code == 404

    still_listed = client.get(f"/api/properties/{prop['id']}").json()["property"]
    assert still_listed["availability"]["isAvailable"] is True


def test_rental_for_unknown_property_is_400(client, admin_headers, tenant):
    tenant_user, _ = tenant
    res = create_rental(client, admin_headers, str(uuid.uuid4()), tenant_user["id"])
    assert res.status_code == 400


def test_my_rentals_returns_own_rentals(client, setup):
    res = client.get("/api/rentals/my-rentals", headers=setup["tenant_headers"])
    assert res.status_code == 200
    rentals = res.json()["rentals"]
    assert [r["id"] for r in rentals] == [setup["rental"]["id"]]
    assert rentals[0]["property"]["title"] == setup["property"]["title"]


def test_other_tenant_cannot_view_rental(client, setup):
    _, other_headers = register_tenant(
        client, name="Meera Joshi", email="meera@example.com"
    )
    res = client.get(f"/api/rentals/{setup['rental']['id']}", headers=other_headers)
    assert res.status_code == 403
    assert res.json()["message"] == "Access denied"

    own = client.get(
        f"/api/rentals/{setup['rental']['id']}", headers=setup["tenant_headers"]
    )
    assert own.status_code == 200


def test_missing_rental_is_404(client, admin_headers):
    res = client.get(f"/api/rentals/{uuid.uuid4()}", headers=admin_headers)
    assert res.status_code == 404
    assert res.json()["message"] == "Rental not found"


def test_maintenance_lifecycle(client, admin_headers, setup):
    rental_id = setup["rental"]["id"]
    res = client.post(
        f"/api/rentals/{rental_id}/maintenance",
        json={"issue": "Leaking tap", "description": "Kitchen tap drips all night"},
        headers=setup["tenant_headers"],
    )
    assert res.status_code == 201, res.text
    ticket = res.json()["maintenanceRequest"]
    assert ticket["status"] == "reported"
    assert ticket["reportedDate"] is not None

    # Any status may be set directly, no workflow ordering.
    res = client.patch(
        f"/api/rentals/{rental_id}/maintenance/{ticket['id']}",
        json={"status": "completed", "assignedTo": "Suresh Plumbing", "cost": 450},
        headers=admin_headers,
    )
    assert res.status_code == 200, res.text
    done = res.json()["maintenanceRequest"]
    assert done["status"] == "completed"
    assert done["completedDate"] is not None
    assert done["assignedTo"] == "Suresh Plumbing"
    assert done["cost"] == 450

    listed = client.get(
        f"/api/rentals/{rental_id}/maintenance", headers=setup["tenant_headers"]
    ).json()["maintenanceRequests"]
    assert [t["id"] for t in listed] == [ticket["id"]]


def test_maintenance_rejects_unknown_status(client, setup):
    rental_id = setup["rental"]["id"]
    ticket = client.post(
        f"/api/rentals/{rental_id}/maintenance",
        json={"issue": "Fan", "description": "Ceiling fan wobbles"},
        headers=setup["tenant_headers"],
    ).json()["maintenanceRequest"]

    res = client.patch(
        f"/api/rentals/{rental_id}/maintenance/{ticket['id']}",
        json={"status": "escalated"},
        headers=setup["tenant_headers"],
    )
    assert res.status_code == 400


def test_stranger_cannot_file_maintenance(client, setup):
    _, other_headers = register_tenant(
        client, name="Meera Joshi", email="meera@example.com"
    )
    res = client.post(
        f"/api/rentals/{setup['rental']['id']}/maintenance",
        json={"issue": "Door", "description": "Front door lock broken"},
        headers=other_headers,
    )
    assert res.status_code == 403


def test_notice_and_acknowledge(client, admin_headers, setup):
    rental_id = setup["rental"]["id"]
    res = client.post(
        f"/api/rentals/{rental_id}/notices",
        json={"type": "rent_due", "message": "January rent is due on the 5th"},
        headers=admin_headers,
    )
    assert res.status_code == 201, res.text
    notice = res.json()["notice"]
    assert notice["type"] == "rent_due"
    assert notice["acknowledged"] is False

    ack = client.patch(
        f"/api/rentals/{rental_id}/notices/{notice['id']}/acknowledge",
        headers=setup["tenant_headers"],
    )
    assert ack.status_code == 200
    assert ack.json()["notice"]["acknowledged"] is True

    admin_ack = client.patch(
        f"/api/rentals/{rental_id}/notices/{notice['id']}/acknowledge",
        headers=admin_headers,
    )
    assert admin_ack.status_code == 403


def test_terminating_rental_releases_property(client, admin_headers, setup):
    rental_id = setup["rental"]["id"]
    res = client.patch(
        f"/api/rentals/{rental_id}/status",
        json={"status": "terminated"},
        headers=admin_headers,
    )
    assert res.status_code == 200
    assert res.json()["rental"]["status"] == "terminated"

    listing = client.get("/api/properties").json()["properties"]
    assert setup["property"]["id"] in [p["id"] for p in listing]


def test_stats_overview(client, admin_headers, setup):
    res = client.get("/api/rentals/stats/overview", headers=admin_headers)
    assert res.status_code == 200
    assert res.json()["stats"] == {
        "totalRentals": 1,
        "activeRentals": 1,
        "pendingRentals": 0,
        "totalDueAmount": 31500,
    }

    denied = client.get("/api/rentals/stats/overview", headers=setup["tenant_headers"])
    assert denied.status_code == 403


def set_status(client, headers, rental_id, status):
    return client.patch(
        f"/api/rentals/{rental_id}/status", json={"status": status}, headers=headers
    )


def active_rentals_on(client, headers, property_id):
    rentals = client.get(
        "/api/admin/rentals?status=active&limit=100", headers=headers
    ).json()["rentals"]
    return [r["id"] for r in rentals if r["property"]["id"] == property_id]


def test_reopening_rental_cannot_double_book(client, admin_headers, setup):
    prop_id = setup["property"]["id"]
    first = setup["rental"]["id"]
    assert set_status(client, admin_headers, first, "terminated").status_code == 200

    other, _ = register_tenant(client, name="Meera Joshi", email="meera@example.com")
    second = create_rental(client, admin_headers, prop_id, other["id"])
    assert second.status_code == 201

    res = set_status(client, admin_headers, first, "active")
    assert res.status_code == 400
    assert res.json()["message"] == "Property not available for rent"
    assert active_rentals_on(client, admin_headers, prop_id) == [
        second.json()["rental"]["id"]
    ]


def test_closing_an_already_closed_rental_keeps_property_booked(
    client, admin_headers, setup
):
    prop_id = setup["property"]["id"]
    first = setup["rental"]["id"]
    set_status(client, admin_headers, first, "terminated")

    other, _ = register_tenant(client, name="Meera Joshi", email="meera@example.com")
    assert create_rental(client, admin_headers, prop_id, other["id"]).status_code == 201

    assert set_status(client, admin_headers, first, "expired").status_code == 200

    listing = client.get("/api/properties/").json()["properties"]
    assert prop_id not in [p["id"] for p in listing]
    second_booking = create_rental(client, admin_headers, prop_id, setup["tenant"]["id"])
    assert second_booking.status_code == 400


def test_reopening_rental_reclaims_free_property(client, admin_headers, setup):
    prop_id = setup["property"]["id"]
    rental_id = setup["rental"]["id"]
    set_status(client, admin_headers, rental_id, "expired")

    res = set_status(client, admin_headers, rental_id, "active")
    assert res.status_code == 200
    assert res.json()["rental"]["status"] == "active"

    listing = client.get("/api/properties/").json()["properties"]
    assert prop_id not in [p["id"] for p in listing]


def test_pending_rental_still_holds_property(client, admin_headers, setup):
    prop_id = setup["property"]["id"]
    rental_id = setup["rental"]["id"]

    assert set_status(client, admin_headers, rental_id, "pending").status_code == 200
    assert set_status(client, admin_headers, rental_id, "active").status_code == 200

    listing = client.get("/api/properties/").json()["properties"]
    assert prop_id not in [p["id"] for p in listing]
