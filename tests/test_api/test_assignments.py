"""API testy pro /api/assignments: vydání, vrácení, schválení."""
from datetime import datetime, timedelta, timezone


def _in_days(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def _checkout(client, student_id, code="QR_BRASS_001", days=7, **extra):
    return client.post("/api/assignments/checkout", json={
        "qr_code": code,
        "student_id": student_id,
        "expected_return_date": _in_days(days),
        "purpose": "practice",
        **extra,
    })


def test_checkout_and_clean_return(client, login_as, user_ids, equipment):
    login_as("student")
    res = _checkout(client, user_ids["student"])
    assert res.status_code == 201
    assignment = res.json()
    assert assignment["status"] == "checked_out"
    assert assignment["checkout_condition"] == "good"
    assert assignment["checked_out_by"] == user_ids["student"]

    eq = client.get(f"/api/equipment/{equipment['id']}").json()
    assert eq["status"] == "checked_out"
    assert eq["assigned_to_id"] == user_ids["student"]

    res = client.put(f"/api/assignments/{assignment['id']}/return", json={"return_condition": "good"})
    assert res.status_code == 200
    assert res.json()["status"] == "returned"
    assert res.json()["returned_to"] == user_ids["student"]

    eq = client.get(f"/api/equipment/{equipment['id']}").json()
    assert eq["status"] == "available"
    assert eq["assigned_to_id"] is None


def test_checkout_unknown_code(client, user_ids):
    res = _checkout(client, user_ids["student"], code="QR_NEEXISTUJE")
    assert res.status_code == 404


def test_checkout_twice_conflict(client, user_ids, equipment):
    assert _checkout(client, user_ids["student"]).status_code == 201
    res = _checkout(client, user_ids["student2"])
    assert res.status_code == 409


def test_checkout_not_available(client, user_ids, equipment):
    client.put(f"/api/equipment/{equipment['id']}/status", json={"status": "in_maintenance"})
    assert _checkout(client, user_ids["student"]).status_code == 409


def test_checkout_unknown_student(client, equipment):
    assert _checkout(client, 9999).status_code == 404


def test_checkout_validation(client, equipment):
    res = client.post("/api/assignments/checkout", json={"qr_code": "QR_BRASS_001"})
    assert res.status_code == 422


def test_damage_path_with_supervisor_approval(client, login_as, user_ids, equipment):
    assignment = _checkout(client, user_ids["student"]).json()

    login_as("student")
    res = client.put(f"/api/assignments/{assignment['id']}/return", json={
        "return_condition": "poor",
        "damage_notes": "Promáčklý korpus",
    })
    assert res.json()["status"] == "pending_return"
    assert client.put(f"/api/assignments/{assignment['id']}/approve-return", json={}).status_code == 403

    login_as("dozor")
    pending = client.get("/api/assignments/pending-peer-review").json()
    assert [a["id"] for a in pending] == [assignment["id"]]
    damaged = client.get("/api/assignments/with-damage").json()
    assert [a["id"] for a in damaged] == [assignment["id"]]

    res = client.put(f"/api/assignments/{assignment['id']}/approve-return", json={"approval_notes": "Do opravy"})
    assert res.status_code == 200
    data = res.json()
    assert data["status"] == "returned"
    assert data["supervisor_approved_by"] == user_ids["dozor"]
    assert data["return_notes"] == "Do opravy"

    eq = client.get(f"/api/equipment/{equipment['id']}").json()
    assert eq["status"] == "available"
    assert eq["condition"] == "poor"


def test_approve_not_pending(client, user_ids, equipment):
    assignment = _checkout(client, user_ids["student"]).json()
    res = client.put(f"/api/assignments/{assignment['id']}/approve-return", json={})
    assert res.status_code == 409


def test_return_twice(client, user_ids, equipment):
    assignment = _checkout(client, user_ids["student"]).json()
    url = f"/api/assignments/{assignment['id']}/return"
    assert client.put(url, json={"return_condition": "good"}).status_code == 200
    assert client.put(url, json={"return_condition": "good"}).status_code == 409


def test_bulk_extend(client, user_ids, equipment):
    client.post("/api/equipment", json={"qr_code": "QR_BRASS_002", "make": "Bach", "model": "TR300", "category": "brass"})
    a1 = _checkout(client, user_ids["student"]).json()
    a2 = _checkout(client, user_ids["student"], code="QR_BRASS_002").json()

    res = client.put("/api/assignments/bulk/extend", json={
        "assignment_ids": [a1["id"], a2["id"]],
        "new_return_date": _in_days(30),
    })
    assert res.status_code == 200
    assert len(res.json()) == 2

    client.put(f"/api/assignments/{a2['id']}/return", json={"return_condition": "good"})
    res = client.put("/api/assignments/bulk/extend", json={
        "assignment_ids": [a1["id"], a2["id"]],
        "new_return_date": _in_days(60),
    })
    assert res.status_code == 409
    after = client.get(f"/api/assignments/{a1['id']}").json()
    assert after["expected_return_date"][:10] == _in_days(30)[:10]


def test_overdue_views_and_notifications(client, user_ids, equipment):
    late = _checkout(client, user_ids["student"], days=-1).json()

    assert [a["id"] for a in client.get("/api/assignments/overdue").json()] == [late["id"]]
    assert client.get("/api/assignments/due-soon").json() == []
    assert [e["id"] for e in client.get("/api/equipment/overdue").json()] == [equipment["id"]]
    res = client.post("/api/assignments/notifications/overdue")
    assert res.status_code == 200
    assert res.json() == {"notified": 1}


def test_student_sees_only_own(client, login_as, user_ids, equipment):
    assignment = _checkout(client, user_ids["student"]).json()

    login_as("student")
    own = client.get(f"/api/assignments/student/{user_ids['student']}/active")
    assert [a["id"] for a in own.json()] == [assignment["id"]]
    assert client.get(f"/api/assignments/{assignment['id']}").status_code == 200

    login_as("student2")
    assert client.get(f"/api/assignments/student/{user_ids['student']}").status_code == 403
    assert client.get(f"/api/assignments/{assignment['id']}").status_code == 403


def test_equipment_views(client, user_ids, equipment):
    assert client.get(f"/api/assignments/equipment/{equipment['id']}/active").status_code == 404
    assignment = _checkout(client, user_ids["student"]).json()
    active = client.get(f"/api/assignments/equipment/{equipment['id']}/active").json()
    assert active["id"] == assignment["id"]
    history = client.get(f"/api/assignments/equipment/{equipment['id']}/history").json()
    assert len(history) == 1


def test_statistics(client, user_ids, equipment):
    assignment = _checkout(client, user_ids["student"]).json()
    client.put(f"/api/assignments/{assignment['id']}/return", json={"return_condition": "good"})

    res = client.get("/api/assignments/stats/status/returned")
    assert res.json() == {"status": "returned", "count": 1}
    assert client.get("/api/assignments/stats/purpose").json() == [{"purpose": "practice", "count": 1}]
    by_date = client.get("/api/assignments/stats/checkouts-by-date", params={"days": 7}).json()
    assert sum(row["count"] for row in by_date) == 1
    avg = client.get("/api/assignments/stats/average-duration").json()
    assert avg["average_days"] >= 0.0


def test_paged_list(client, user_ids, equipment):
    _checkout(client, user_ids["student"])
    res = client.get("/api/assignments", params={"page": 1, "size": 10})
    assert res.status_code == 200
    assert res.json()["total"] == 1
