"""API testy pro přihlášení a role."""


def test_login_and_me(client, login_as):
    res = login_as("reditel")
    assert res.status_code == 200
    assert res.json()["role"] == "band_director"
    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.json()["username"] == "reditel"


def test_login_wrong_password(client, login_as):
    res = login_as("reditel", "spatne-heslo")
    assert res.status_code == 401


def test_login_inactive_user(client, login_as, user_ids):
    client.put(f"/api/users/{user_ids['student2']}", json={"is_active": False})
    res = login_as("student2")
    assert res.status_code == 403


def test_logout_requires_new_login(client):
    assert client.post("/api/auth/logout").status_code == 204
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/equipment").status_code == 401


def test_rate_limit(client, login_as):
    for _ in range(10):
        login_as("admin", "spatne-heslo")
    res = login_as("admin")
    assert res.status_code == 429


def test_student_cannot_manage_registry(client, login_as):
    login_as("student")
    res = client.post("/api/equipment", json={
        "qr_code": "QR_BRASS_009", "make": "Bach", "model": "TR300", "category": "brass",
    })
    assert res.status_code == 403
    assert client.get("/api/users").status_code == 403
    assert client.get("/api/assignments").status_code == 403


def test_supervisor_reads_but_cannot_mutate(client, login_as, equipment):
    login_as("dozor")
    assert client.get("/api/equipment/stats/status").status_code == 200
    res = client.put(f"/api/equipment/{equipment['id']}/status", json={"status": "missing"})
    assert res.status_code == 403


def test_only_manager_deactivates(client, login_as, equipment):
    login_as("reditel")
    res = client.put(f"/api/equipment/{equipment['id']}/deactivate", json={"reason": "Staré"})
    assert res.status_code == 403
    login_as("spravce")
    res = client.put(f"/api/equipment/{equipment['id']}/deactivate", json={"reason": "Staré"})
    assert res.status_code == 200
    assert res.json()["status"] == "retired"


def test_create_user_duplicate(client):
    payload = {"username": "novy", "email": "novy@test.com", "password": "heslo1234", "role": "student"}
    assert client.post("/api/users", json=payload).status_code == 201
    assert client.post("/api/users", json=payload).status_code == 409


def test_health(client):
    res = client.get("/health")
    assert res.status_code == 200
    assert res.json() == {"status": "ok"}
