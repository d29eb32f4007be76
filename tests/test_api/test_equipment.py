"""API testy pro /api/equipment."""


def test_create_equipment(client, equipment):
    assert equipment["qr_code"] == "QR_BRASS_001"
    assert equipment["status"] == "available"
    assert equipment["is_active"] is True
    assert "id" in equipment


def test_create_duplicate_qr(client, equipment):
    res = client.post("/api/equipment", json={
        "qr_code": "QR_BRASS_001", "make": "Bach", "model": "TR300", "category": "brass",
    })
    assert res.status_code == 409


def test_create_invalid_category(client):
    res = client.post("/api/equipment", json={
        "qr_code": "QR_X_001", "make": "Bach", "model": "TR300", "category": "kazoo",
    })
    assert res.status_code == 422


def test_list_and_filters(client, equipment):
    client.post("/api/equipment", json={
        "qr_code": "QR_PERCUSSION_001", "make": "Pearl", "model": "Snare", "category": "percussion",
    })
    data = client.get("/api/equipment").json()
    assert data["total"] == 2
    assert client.get("/api/equipment", params={"category": "brass"}).json()["total"] == 1
    assert client.get("/api/equipment", params={"search": "pearl"}).json()["total"] == 1
    assert len(client.get("/api/equipment/available", params={"category": "percussion"}).json()) == 1
    assert len(client.get("/api/equipment/search", params={"q": "YTR"}).json()) == 1


def test_get_by_qr_code(client, equipment):
    res = client.get("/api/equipment/qr/QR_BRASS_001")
    assert res.status_code == 200
    assert res.json()["id"] == equipment["id"]
    assert client.get("/api/equipment/qr/QR_NIC").status_code == 404


def test_get_not_found(client):
    assert client.get("/api/equipment/99999").status_code == 404


def test_update_descriptive_fields(client, equipment):
    res = client.put(f"/api/equipment/{equipment['id']}", json={"location": "Sklad"})
    assert res.status_code == 200
    assert res.json()["location"] == "Sklad"
    assert client.get("/api/equipment/location/Sklad").json()[0]["id"] == equipment["id"]


def test_manual_status_change(client, equipment):
    res = client.put(f"/api/equipment/{equipment['id']}/status", json={"status": "missing"})
    assert res.status_code == 200
    assert res.json()["status"] == "missing"
    res = client.put(f"/api/equipment/{equipment['id']}/status", json={"status": "checked_out"})
    assert res.status_code == 409


def test_condition_update(client, equipment):
    res = client.put(f"/api/equipment/{equipment['id']}/condition", json={"condition": "fair", "notes": "Škrábance"})
    assert res.json()["condition"] == "fair"
    assert res.json()["notes"] == "Škrábance"
    assert len(client.get("/api/equipment/condition/fair").json()) == 1


def test_bulk_status(client, equipment):
    other = client.post("/api/equipment", json={
        "qr_code": "QR_BRASS_002", "make": "Bach", "model": "TR300", "category": "brass",
    }).json()
    res = client.put("/api/equipment/bulk/status", json={
        "equipment_ids": [equipment["id"], other["id"]], "status": "in_maintenance",
    })
    assert res.status_code == 200
    assert len(client.get("/api/equipment/status/in_maintenance").json()) == 2

    res = client.put("/api/equipment/bulk/status", json={"equipment_ids": [equipment["id"], 99999], "status": "available"})
    assert res.status_code == 404


def test_stats(client, equipment):
    assert client.get("/api/equipment/stats/category").json() == [{"key": "brass", "count": 1}]
    assert client.get("/api/equipment/stats/condition").json() == [{"key": "good", "count": 1}]
    value = client.get("/api/equipment/stats/value").json()
    assert float(value["total_value"]) == 18500.0
    per_category = client.get("/api/equipment/stats/value-by-category").json()
    assert float(per_category["brass"]) == 18500.0
    assert float(per_category["string"]) == 0.0


def test_qr_code_validate_and_generate(client, equipment):
    assert client.get("/api/equipment/qr-code/validate/QR_BRASS_001").json()["unique"] is False
    assert client.get("/api/equipment/qr-code/validate/QR_BRASS_999").json()["unique"] is True
    res = client.post("/api/equipment/qr-code/generate", params={"category": "brass"})
    assert res.json() == {"qr_code": "QR_BRASS_002"}


def test_maintenance_views(client, equipment):
    client.put(f"/api/equipment/{equipment['id']}", json={"next_maintenance_date": "2000-01-01"})
    due = client.get("/api/equipment/maintenance/due").json()
    assert [e["id"] for e in due] == [equipment["id"]]
    assert client.get("/api/equipment/maintenance/upcoming", params={"days": 30}).json() == []
    assert len(client.get("/api/equipment/maintenance/overdue").json()) == 1
