"""API testy pro /api/maintenance."""


def _schedule(client, equipment_id):
    return client.post("/api/maintenance", json={
        "equipment_id": equipment_id,
        "maintenance_type": "cleaning",
        "priority": "high",
        "technician_name": "Servis Hudba s.r.o.",
    })


def test_full_cycle(client, login_as, user_ids, equipment):
    login_as("spravce")
    res = _schedule(client, equipment["id"])
    assert res.status_code == 201
    record = res.json()
    assert record["status"] == "scheduled"
    assert record["created_by"] == user_ids["spravce"]

    res = client.put(f"/api/maintenance/{record['id']}/start")
    assert res.json()["status"] == "in_progress"
    assert client.get(f"/api/equipment/{equipment['id']}").json()["status"] == "in_maintenance"

    res = client.put(f"/api/maintenance/{record['id']}/complete", json={
        "condition_after": "excellent", "actual_cost": "850.00", "work_description": "Vyčištění ventilů",
    })
    assert res.status_code == 200
    assert res.json()["status"] == "completed"

    eq = client.get(f"/api/equipment/{equipment['id']}").json()
    assert eq["status"] == "available"
    assert eq["condition"] == "excellent"
    assert eq["last_maintenance_date"] is not None


def test_start_while_checked_out(client, user_ids, equipment):
    record = _schedule(client, equipment["id"]).json()
    client.post("/api/assignments/checkout", json={
        "qr_code": "QR_BRASS_001",
        "student_id": user_ids["student"],
        "expected_return_date": "2099-01-01T00:00:00+00:00",
    })
    assert client.put(f"/api/maintenance/{record['id']}/start").status_code == 409


def test_cancel_and_listing(client, equipment):
    record = _schedule(client, equipment["id"]).json()
    res = client.put(f"/api/maintenance/{record['id']}/cancel")
    assert res.json()["status"] == "cancelled"
    assert len(client.get(f"/api/maintenance/equipment/{equipment['id']}").json()) == 1
    assert len(client.get("/api/maintenance/status/cancelled").json()) == 1
    assert client.put(f"/api/maintenance/{record['id']}/cancel").status_code == 409


def test_schedule_unknown_equipment(client):
    assert _schedule(client, 99999).status_code == 404


def test_student_cannot_schedule(client, login_as, equipment):
    login_as("student")
    assert _schedule(client, equipment["id"]).status_code == 403
