"""Seed script: naplní DB ukázkovými daty kapely."""
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from bandtrack.database import Base, engine, SessionLocal
import bandtrack.models  # noqa: F401 register all models
from bandtrack.models.user import User, UserRole
from bandtrack.models.equipment import Equipment, EquipmentCategory, EquipmentCondition
from bandtrack.models.event import BandEvent, EventType
from bandtrack.services.user_service import hash_password
import bandtrack.services.assignment_service as assignment_svc


def seed():
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()

    users_data = [
        ("admin", "admin@bandtrack.local", "Administrátor", UserRole.admin),
        ("reditel", "reditel@bandtrack.local", "Jana Dvořáková", UserRole.band_director),
        ("spravce", "spravce@bandtrack.local", "Petr Novák", UserRole.equipment_manager),
        ("dozor", "dozor@bandtrack.local", "Eva Svobodová", UserRole.supervisor),
        ("student1", "student1@bandtrack.local", "Tomáš Král", UserRole.student),
        ("student2", "student2@bandtrack.local", "Lucie Benešová", UserRole.student),
    ]
    existing_users = {u.username for u in db.query(User).all()}
    for username, email, full_name, role in users_data:
        if username not in existing_users:
            db.add(User(
                username=username,
                email=email,
                full_name=full_name,
                hashed_password=hash_password("heslo1234"),
                role=role.value,
            ))
    db.commit()

    equipment_data = [
        ("QR_BRASS_001", "Yamaha", "YTR-2330", EquipmentCategory.brass, EquipmentCondition.good, "Zkušebna A", 18500),
        ("QR_BRASS_002", "Bach", "TB301", EquipmentCategory.brass, EquipmentCondition.excellent, "Zkušebna A", 24000),
        ("QR_WOODWIND_001", "Buffet", "E11", EquipmentCategory.woodwind, EquipmentCondition.good, "Zkušebna B", 32000),
        ("QR_WOODWIND_002", "Yamaha", "YAS-280", EquipmentCategory.woodwind, EquipmentCondition.fair, "Zkušebna B", 29000),
        ("QR_PERCUSSION_001", "Pearl", "Snare CS1450", EquipmentCategory.percussion, EquipmentCondition.good, "Sklad", 9800),
        ("QR_STRING_001", "Fender", "Precision Bass", EquipmentCategory.string, EquipmentCondition.good, "Sklad", 27000),
        ("QR_ELECTRONIC_001", "Roland", "KC-220", EquipmentCategory.electronic, EquipmentCondition.poor, "Sklad", 8900),
        ("QR_ACCESSORY_001", "Manhasset", "Pult 48", EquipmentCategory.accessory, EquipmentCondition.fair, "Sál", 1900),
    ]
    existing_codes = {e.qr_code for e in db.query(Equipment).all()}
    for code, make, model, category, condition, location, price in equipment_data:
        if code not in existing_codes:
            db.add(Equipment(
                qr_code=code,
                make=make,
                model=model,
                category=category,
                condition=condition,
                location=location,
                purchase_date=date(2022, 9, 1),
                purchase_price=Decimal(price),
                next_maintenance_date=date(2022, 9, 1) + timedelta(days=180),
            ))
    db.commit()

    director = db.query(User).filter_by(username="reditel").first()
    if not db.query(BandEvent).first():
        db.add(BandEvent(
            name="Vánoční koncert",
            event_type=EventType.concert,
            event_date=datetime.now(timezone.utc) + timedelta(days=21),
            venue="Velký sál",
            director_id=director.id if director else None,
        ))
        db.commit()

    # Jedna aktivní výpůjčka pro ukázku
    student = db.query(User).filter_by(username="student1").first()
    trumpet = db.query(Equipment).filter_by(qr_code="QR_BRASS_001").first()
    if student and trumpet and assignment_svc.get_active_assignment_by_equipment(db, trumpet.id) is None:
        event = db.query(BandEvent).first()
        assignment_svc.checkout_equipment(
            db,
            qr_code=trumpet.qr_code,
            student_id=student.id,
            event_id=event.id if event else None,
            expected_return_date=datetime.now(timezone.utc) + timedelta(days=14),
            purpose="performance",
        )

    db.close()
    print("✅ Seed dokončen!")


if __name__ == "__main__":
    seed()
