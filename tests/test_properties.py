import uuid

from conftest import create_property, property_payload


def rent(amount, deposit=10000):
    return {"amount": amount, "deposit": deposit, "maintenance": 0}


def test_create_requires_admin(client, tenant):
    _, tenant_headers = tenant
    res = client.post("/api/properties", json=property_payload(), headers=tenant_headers)
    assert res.status_code == 403
    assert res.json() == {"success": False, "message": "Admin access required"}


def test_create_requires_token(client):
    res = client.post("/api/properties", json=property_payload())
    assert res.status_code == 401
    assert res.json()["success"] is False


def test_create_validates_payload(client, admin_headers):
    bad = property_payload(title="Tiny", rent=rent(100))
    res = client.post("/api/properties", json=bad, headers=admin_headers)
    assert res.status_code == 400
    locs = {tuple(d["loc"]) for d in res.json()["details"]}
    assert ("body", "title") in locs
    assert ("body", "rent", "amount") in locs


def test_created_property_shape(client, admin_headers):
    prop = create_property(client, admin_headers)
    assert prop["location"]["state"] == "Rajasthan"
    assert prop["rent"]["amount"] == 10000
    assert prop["rent"]["currency"] == "INR"
    assert sorted(prop["amenities"]) == ["parking", "wifi"]
    assert prop["specifications"]["area"] == {"value": 850, "unit": "sqft"}
    assert prop["availability"]["isAvailable"] is True
    assert prop["featured"] is False
    assert prop["views"] == 0


def test_rent_range_filter_is_inclusive(client, admin_headers):
    for amount in (4000, 5000, 9000, 15000, 16000):
        create_property(
            client,
            admin_headers,
            title=f"Listing at {amount} rupees",
            rent=rent(amount),
        )

    res = client.get("/api/properties?minRent=5000&maxRent=15000&limit=50")
    assert res.status_code == 200
    amounts = sorted(p["rent"]["amount"] for p in res.json()["properties"])
    assert amounts == [5000, 9000, 15000]


def test_filters_combine(client, admin_headers):
    create_property(client, admin_headers, title="Udaipur lake villa", type="villa",
                    location={"address": "1 Lake Rd", "city": "Udaipur", "pincode": "313001"},
                    amenities=["swimming_pool"])
    create_property(client, admin_headers, title="Jaipur flat one")

    by_city = client.get("/api/properties?city=udai").json()["properties"]
    assert [p["title"] for p in by_city] == ["Udaipur lake villa"]

    by_type = client.get("/api/properties?type=villa").json()["properties"]
    assert len(by_type) == 1

    by_amenity = client.get("/api/properties?amenities=gym,swimming_pool").json()
    assert [p["title"] for p in by_amenity["properties"]] == ["Udaipur lake villa"]

    by_bedrooms = client.get("/api/properties?bedrooms=3").json()["properties"]
    assert by_bedrooms == []


def test_unknown_sort_field_is_rejected(client, admin_headers):
    create_property(client, admin_headers)
    res = client.get("/api/properties?sort=owner.phone")
    assert res.status_code == 400
    assert "Invalid sort field" in res.json()["message"]


def test_sort_by_rent_ascending(client, admin_headers):
    for amount in (12000, 6000, 9000):
        create_property(client, admin_headers, title=f"Flat for {amount}", rent=rent(amount))
    res = client.get("/api/properties?sort=rent.amount&order=asc")
    amounts = [p["rent"]["amount"] for p in res.json()["properties"]]
    assert amounts == [6000, 9000, 12000]


def test_pagination_block(client, admin_headers):
    for i in range(5):
        create_property(client, admin_headers, title=f"Paged listing {i}")

    first = client.get("/api/properties?page=1&limit=2").json()
    assert len(first["properties"]) == 2
    assert first["pagination"] == {
        "currentPage": 1,
        "totalPages": 3,
        "totalProperties": 5,
        "hasNext": True,
        "hasPrev": False,
    }

    last = client.get("/api/properties?page=3&limit=2").json()
    assert len(last["properties"]) == 1
    assert last["pagination"]["hasNext"] is False
    assert last["pagination"]["hasPrev"] is True


def test_get_increments_views(client, admin_headers):
    prop = create_property(client, admin_headers)
    client.get(f"/api/properties/{prop['id']}")
    res = client.get(f"/api/properties/{prop['id']}")
    assert res.status_code == 200
    assert res.json()["property"]["views"] == 2


def test_get_missing_is_404(client):
    res = client.get(f"/api/properties/{uuid.uuid4()}")
    assert res.status_code == 404
    assert res.json()["message"] == "Property not found"


def test_soft_delete_hides_listing(client, admin_headers):
    prop = create_property(client, admin_headers)

    res = client.delete(f"/api/properties/{prop['id']}", headers=admin_headers)
    assert res.status_code == 200

    assert client.get(f"/api/properties/{prop['id']}").status_code == 404
    assert client.get("/api/properties").json()["properties"] == []

    admin_view = client.get(
        "/api/admin/properties?status=inactive", headers=admin_headers
    ).json()
    assert [p["id"] for p in admin_view["properties"]] == [prop["id"]]
    assert admin_view["properties"][0]["isActive"] is False


def test_update_replaces_fields(client, admin_headers):
    prop = create_property(client, admin_headers)
    payload = property_payload(
        title="Renovated 2BHK near Bapu Bazaar", amenities=["ac"], rent=rent(12000)
    )
    res = client.put(f"/api/properties/{prop['id']}", json=payload, headers=admin_headers)
    assert res.status_code == 200
    updated = res.json()["property"]
    assert updated["title"] == "Renovated 2BHK near Bapu Bazaar"
    assert updated["amenities"] == ["ac"]
    assert updated["rent"]["amount"] == 12000


def test_update_missing_is_404(client, admin_headers):
    res = client.put(
        f"/api/properties/{uuid.uuid4()}", json=property_payload(), headers=admin_headers
    )
    assert res.status_code == 404


def test_toggle_featured_twice_restores_flag(client, admin_headers):
    prop = create_property(client, admin_headers)
    url = f"/api/properties/{prop['id']}/featured"

    first = client.patch(url, headers=admin_headers).json()
    assert first["property"]["featured"] is True
    assert first["message"] == "Property featured successfully"

    second = client.patch(url, headers=admin_headers).json()
    assert second["property"]["featured"] is False
    assert second["message"] == "Property unfeatured successfully"


def test_featured_list_only_returns_featured(client, admin_headers):
    plain = create_property(client, admin_headers, title="Plain listing one")
    star = create_property(client, admin_headers, title="Star listing one")
    client.patch(f"/api/properties/{star['id']}/featured", headers=admin_headers)

    res = client.get("/api/properties/featured/list")
    ids = [p["id"] for p in res.json()["properties"]]
    assert ids == [star["id"]]
    assert plain["id"] not in ids


def test_city_filter_matches_wildcards_literally(client, admin_headers):
    create_property(client, admin_headers)

    assert client.get("/api/properties/?city=%25").json()["properties"] == []
    assert client.get("/api/properties/?city=_").json()["properties"] == []
    assert len(client.get("/api/properties/?city=jai").json()["properties"]) == 1
