import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from bandtrack.main import app
from bandtrack.database import Base, get_db
from bandtrack.models.user import User, UserRole
from bandtrack.routers import auth
from bandtrack.services.user_service import hash_password

TEST_DB_URL = "sqlite:///:memory:"
PASSWORD = "heslo1234"

# username → role; id odpovídá pořadí vložení
USERS = {
    "admin": UserRole.admin,
    "reditel": UserRole.band_director,
    "spravce": UserRole.equipment_manager,
    "dozor": UserRole.supervisor,
    "student": UserRole.student,
    "student2": UserRole.student,
}


def login(client, username: str, password: str = PASSWORD):
    return client.post("/api/auth/login", json={"username": username, "password": password})


@pytest.fixture(scope="function")
def client():
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,  # Ensure all connections share same in-memory DB
    )
    Base.metadata.create_all(engine)
    TestSession = sessionmaker(bind=engine)

    def override_get_db():
        db = TestSession()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    auth._login_attempts.clear()

    db = TestSession()
    hashed = hash_password(PASSWORD)
    for username, role in USERS.items():
        db.add(User(username=username, email=f"{username}@test.com", hashed_password=hashed, role=role.value))
    db.commit()
    db.close()

    with TestClient(app) as c:
        # Výchozí přihlášení jako admin; testy rolí se přepínají přes login()
        login(c, "admin")
        yield c

    app.dependency_overrides.clear()
    Base.metadata.drop_all(engine)


@pytest.fixture
def login_as(client):
    return lambda username, password=PASSWORD: login(client, username, password)


@pytest.fixture
def user_ids(client):
    users = client.get("/api/users", params={"size": 200}).json()["items"]
    return {u["username"]: u["id"] for u in users}


@pytest.fixture
def equipment(client):
    res = client.post("/api/equipment", json={
        "qr_code": "QR_BRASS_001",
        "make": "Yamaha",
        "model": "YTR-2330",
        "category": "brass",
        "condition": "good",
        "purchase_price": "18500.00",
    })
    assert res.status_code == 201
    return res.json()
