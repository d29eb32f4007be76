"""API testy pro /api/events."""
from datetime import datetime, timedelta, timezone


def _event(days: int = 10, **extra) -> dict:
    return {
        "name": "Jarní koncert",
        "event_type": "concert",
        "event_date": (datetime.now(timezone.utc) + timedelta(days=days)).isoformat(),
        "venue": "Velký sál",
        **extra,
    }


def test_create_event(client, login_as, user_ids):
    login_as("reditel")
    res = client.post("/api/events", json=_event())
    assert res.status_code == 201
    data = res.json()
    assert data["status"] == "planned"
    assert data["director_id"] == user_ids["reditel"]


def test_student_cannot_create_event(client, login_as):
    login_as("student")
    assert client.post("/api/events", json=_event()).status_code == 403
    assert client.get("/api/events").status_code == 200


def test_list_upcoming(client):
    client.post("/api/events", json=_event(days=10))
    client.post("/api/events", json=_event(days=-10, name="Loňská přehlídka", event_type="parade"))
    assert client.get("/api/events").json()["total"] == 2
    upcoming = client.get("/api/events", params={"upcoming": True}).json()
    assert [e["name"] for e in upcoming["items"]] == ["Jarní koncert"]


def test_update_event(client):
    event = client.post("/api/events", json=_event()).json()
    res = client.put(f"/api/events/{event['id']}", json={"status": "confirmed"})
    assert res.status_code == 200
    assert res.json()["status"] == "confirmed"
    assert client.get("/api/events/99999").status_code == 404


def test_assignments_by_event(client, user_ids, equipment):
    event = client.post("/api/events", json=_event()).json()
    client.post("/api/assignments/checkout", json={
        "qr_code": "QR_BRASS_001",
        "student_id": user_ids["student"],
        "event_id": event["id"],
        "expected_return_date": event["event_date"],
        "purpose": "performance",
    })
    res = client.get(f"/api/assignments/event/{event['id']}").json()
    assert len(res) == 1
    assert res[0]["event_id"] == event["id"]
