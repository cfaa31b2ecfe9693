NEW_PROPERTY = {
    "name": "Harbor View",
    "address": "1 Harbor Way",
    "property_type": "commercial",
    "financial_info": {"monthly_rent": 1200},
    "metadata": {"units": 4},
}


def test_create_property(client, admin_headers):
    r = client.post("/api/properties", json=NEW_PROPERTY, headers=admin_headers)
    assert r.status_code == 201
    prop = r.get_json()["property"]
    assert prop["id"]
    assert prop["status"] == "active"
    assert prop["property_type"] == "commercial"
    assert prop["metadata"] == {"units": 4}
    assert prop["created_by"]


def test_create_property_validation(client, admin_headers):
    r = client.post("/api/properties", json={"property_type": "castle"}, headers=admin_headers)
    assert r.status_code == 400
    errors = r.get_json()["errors"]
    assert "Property name is required" in errors
    assert "Property address is required" in errors


def test_list_and_filter(client, admin_headers, make_property):
    make_property(name="Harbor View", property_type="commercial")
    make_property(name="Riverside Lofts", status="maintenance", address="9 River Road")
    make_property(name="Old Mill", status="inactive", address="3 Mill Lane", description="Near the harbor")

    body = client.get("/api/properties", headers=admin_headers).get_json()
    assert body["count"] == 3

    body = client.get("/api/properties?q=harbor", headers=admin_headers).get_json()
    assert sorted(p["name"] for p in body["properties"]) == ["Harbor View", "Old Mill"]

    body = client.get("/api/properties?status=maintenance", headers=admin_headers).get_json()
    assert [p["name"] for p in body["properties"]] == ["Riverside Lofts"]

    body = client.get("/api/properties?type=commercial", headers=admin_headers).get_json()
    assert [p["name"] for p in body["properties"]] == ["Harbor View"]

    body = client.get("/api/properties?limit=2", headers=admin_headers).get_json()
    assert body["count"] == 2


def test_get_update_delete(client, admin_headers, make_property):
    prop = make_property(name="Harbor View")
    url = f"/api/properties/{prop.id}"

    assert client.get(url, headers=admin_headers).get_json()["property"]["name"] == "Harbor View"

    r = client.put(url, json={"status": "maintenance", "name": "Harbour View"}, headers=admin_headers)
    assert r.status_code == 200
    assert r.get_json()["property"]["status"] == "maintenance"
    assert r.get_json()["property"]["name"] == "Harbour View"

    r = client.put(url, json={"status": "sold"}, headers=admin_headers)
    assert r.status_code == 400

    assert client.delete(url, headers=admin_headers).status_code == 200
    r = client.get(url, headers=admin_headers)
    assert r.status_code == 404
    assert r.get_json() == {"error": "not_found", "message": "Property not found"}


def test_property_stats(client, admin_headers, make_property):
    make_property(property_type="commercial")
    make_property(status="maintenance")
    body = client.get("/api/properties/stats", headers=admin_headers).get_json()
    assert body["total"] == 2
    assert body["active"] == 1
    assert body["maintenance"] == 1
    assert body["by_type"] == {"commercial": 1, "residential": 1}


def test_provider_can_read_but_not_write(client, auth_headers, make_property):
    headers = auth_headers("service_provider", "v1")
    make_property()
    assert client.get("/api/properties", headers=headers).status_code == 200
    assert client.post("/api/properties", json=NEW_PROPERTY, headers=headers).status_code == 403
    assert client.get("/api/properties/stats", headers=headers).status_code == 403
