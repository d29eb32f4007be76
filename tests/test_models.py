"""Unit testy pro SQLAlchemy modely."""
import pytest
from datetime import date, datetime, timezone
from decimal import Decimal
from sqlalchemy.exc import IntegrityError

from bandtrack.models.user import User, UserRole
from bandtrack.models.equipment import (
    Equipment, EquipmentCategory, EquipmentCondition, EquipmentStatus, CONDITION_RANK, condition_rank,
)
from bandtrack.models.assignment import EquipmentAssignment, AssignmentStatus
from bandtrack.models.event import BandEvent, EventType, EventStatus
from bandtrack.models.maintenance import EquipmentMaintenance, MaintenanceType, MaintenanceStatus, MaintenancePriority
from bandtrack.models.signature import DigitalSignature, SignatureType, SignatureFormat


# ─── User ────────────────────────────────────────────────────────────────────

def test_user_create(db):
    user = User(username="testuser", email="test@example.com", hashed_password="hashedpw")
    db.add(user)
    db.commit()
    db.refresh(user)

    assert user.id is not None
    assert user.role == UserRole.student.value
    assert user.is_active is True
    assert isinstance(user.created_at, datetime)


def test_user_unique_username(db):
    db.add(User(username="dup", email="a@a.com", hashed_password="x"))
    db.commit()
    db.add(User(username="dup", email="b@b.com", hashed_password="x"))
    with pytest.raises(IntegrityError):
        db.commit()


# ─── Equipment ───────────────────────────────────────────────────────────────

def test_equipment_defaults(db):
    eq = Equipment(qr_code="QR_BRASS_001", make="Yamaha", model="YTR-2330", category=EquipmentCategory.brass)
    db.add(eq)
    db.commit()
    db.refresh(eq)

    assert eq.status == EquipmentStatus.available
    assert eq.condition == EquipmentCondition.good
    assert eq.maintenance_interval_months == 6
    assert eq.assigned_to_id is None
    assert eq.is_active is True
    assert eq.display_name == "Yamaha YTR-2330 (QR_BRASS_001)"


def test_equipment_unique_qr_code(db):
    db.add(Equipment(qr_code="QR_DUP", make="A", model="B", category=EquipmentCategory.brass))
    db.commit()
    db.add(Equipment(qr_code="QR_DUP", make="C", model="D", category=EquipmentCategory.string))
    with pytest.raises(IntegrityError):
        db.commit()


def test_equipment_price_and_dates(db):
    eq = Equipment(
        qr_code="QR_STRING_001", make="Fender", model="Precision", category=EquipmentCategory.string,
        purchase_date=date(2023, 1, 10), purchase_price=Decimal("27000.50"),
    )
    db.add(eq)
    db.commit()
    db.refresh(eq)
    assert eq.purchase_price == Decimal("27000.50")
    assert eq.purchase_date == date(2023, 1, 10)


def test_condition_rank_order():
    assert condition_rank(EquipmentCondition.excellent) < condition_rank(EquipmentCondition.good)
    assert condition_rank("repair_needed") == 5
    assert set(CONDITION_RANK) == set(EquipmentCondition)


# ─── Assignment ──────────────────────────────────────────────────────────────

def _assignment(equipment, student, status):
    return EquipmentAssignment(
        equipment_id=equipment.id,
        student_id=student.id,
        status=status,
        checkout_condition=EquipmentCondition.good,
    )


def test_single_active_assignment_index(db, trumpet, student):
    """Druhá aktivní výpůjčka stejného kusu musí narazit na unikátní index."""
    db.add(_assignment(trumpet, student, AssignmentStatus.checked_out))
    db.commit()
    db.add(_assignment(trumpet, student, AssignmentStatus.checked_out))
    with pytest.raises(IntegrityError):
        db.commit()


def test_closed_assignments_not_limited(db, trumpet, student):
    db.add(_assignment(trumpet, student, AssignmentStatus.returned))
    db.add(_assignment(trumpet, student, AssignmentStatus.returned))
    db.add(_assignment(trumpet, student, AssignmentStatus.checked_out))
    db.commit()
    assert len(trumpet.assignments) == 3


def test_assignment_relationships(db, trumpet, student):
    event = BandEvent(name="Koncert", event_type=EventType.concert, event_date=datetime.now(timezone.utc))
    db.add(event)
    db.commit()
    a = _assignment(trumpet, student, AssignmentStatus.checked_out)
    a.event_id = event.id
    db.add(a)
    db.commit()
    db.refresh(a)

    assert a.equipment.qr_code == "QR_BRASS_001"
    assert a.student.username == "student"
    assert a.event.name == "Koncert"
    assert student.assignments == [a]


# ─── Event / Maintenance ─────────────────────────────────────────────────────

def test_event_default_status(db):
    event = BandEvent(name="Přehlídka", event_type=EventType.parade, event_date=datetime.now(timezone.utc))
    db.add(event)
    db.commit()
    assert event.status == EventStatus.planned


def test_maintenance_defaults(db, trumpet):
    record = EquipmentMaintenance(equipment_id=trumpet.id, maintenance_type=MaintenanceType.cleaning)
    db.add(record)
    db.commit()
    db.refresh(record)
    assert record.status == MaintenanceStatus.scheduled
    assert record.priority == MaintenancePriority.medium
    assert trumpet.maintenance_records == [record]


# ─── Signature ───────────────────────────────────────────────────────────────

def test_signature_defaults(db, student):
    sig = DigitalSignature(user_id=student.id, signature_data="data", signature_hash="0" * 64)
    db.add(sig)
    db.commit()
    db.refresh(sig)

    assert sig.signature_type == SignatureType.general
    assert sig.signature_format == SignatureFormat.svg
    assert sig.usage_count == 0
    assert sig.active is True
    assert sig.is_verified is False
    assert sig.user.username == "student"
    assert student.signatures == [sig]
