"""Testy exportů: Excel a QR štítky."""
import io
from openpyxl import load_workbook


def test_assignments_excel(client, user_ids, equipment):
    client.post("/api/assignments/checkout", json={
        "qr_code": "QR_BRASS_001",
        "student_id": user_ids["student"],
        "expected_return_date": "2099-01-01T00:00:00+00:00",
        "purpose": "lesson",
    })
    res = client.get("/api/export/excel/assignments")
    assert res.status_code == 200
    assert res.headers["content-type"].startswith("application/vnd.openxmlformats")

    ws = load_workbook(io.BytesIO(res.content)).active
    assert ws.title == "Výpůjčky"
    assert ws.cell(row=2, column=2).value == "QR_BRASS_001"
    assert ws.cell(row=2, column=7).value == "Vypůjčeno"


def test_equipment_excel(client, equipment):
    res = client.get("/api/export/excel/equipment")
    assert res.status_code == 200
    ws = load_workbook(io.BytesIO(res.content)).active
    assert ws.cell(row=1, column=2).value == "QR kód"
    assert ws.cell(row=2, column=2).value == "QR_BRASS_001"


def test_exports_require_staff(client, login_as):
    login_as("student")
    assert client.get("/api/export/excel/equipment").status_code == 403


def test_qr_equipment_png(client, equipment):
    res = client.get(f"/api/qr/equipment/{equipment['id']}")
    assert res.status_code == 200
    assert res.headers["content-type"] == "image/png"
    assert res.content[:4] == b'\x89PNG'


def test_qr_equipment_not_found(client):
    assert client.get("/api/qr/equipment/99999").status_code == 404


def test_qr_batch_pdf(client, equipment):
    res = client.get("/api/qr/batch", params={"ids": f"{equipment['id']},99999,abc"})
    assert res.status_code == 200
    assert res.headers["content-type"] == "application/pdf"
    assert res.content[:4] == b"%PDF"
