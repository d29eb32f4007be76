import calendar
import logging
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

from fastapi import HTTPException
from sqlalchemy import select, func
from sqlalchemy.orm import Session

from bandtrack.errors import NotFoundError, InvalidStateError
from bandtrack.models.equipment import Equipment, EquipmentCategory, EquipmentCondition, EquipmentStatus
from bandtrack.schemas.equipment import EquipmentCreate, EquipmentUpdate
from bandtrack.schemas.pagination import Page

logger = logging.getLogger(__name__)


def add_months(d: date, months: int) -> date:
    month_index = d.month - 1 + months
    year = d.year + month_index // 12
    month = month_index % 12 + 1
    day = min(d.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


# ── Čtení ─────────────────────────────────────────────────────────────────────

def get_equipment_list(
    db: Session,
    page: int = 1,
    size: int = 50,
    search: str = "",
    category: EquipmentCategory | None = None,
    status: EquipmentStatus | None = None,
) -> Page:
    query = select(Equipment).where(Equipment.is_active == True).order_by(Equipment.qr_code)
    if search:
        query = query.where(_search_clause(search))
    if category is not None:
        query = query.where(Equipment.category == category)
    if status is not None:
        query = query.where(Equipment.status == status)
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page.build(rows, total, page, size)


def _search_clause(term: str):
    pattern = f"%{term}%"
    return (
        Equipment.make.ilike(pattern)
        | Equipment.model.ilike(pattern)
        | Equipment.qr_code.ilike(pattern)
        | Equipment.serial_number.ilike(pattern)
        | Equipment.description.ilike(pattern)
    )


def search_equipment(db: Session, term: str) -> list[Equipment]:
    logger.debug("Hledání vybavení: %s", term)
    return db.scalars(
        select(Equipment).where(_search_clause(term)).order_by(Equipment.qr_code)
    ).all()


def get_equipment(db: Session, equipment_id: int) -> Equipment:
    equipment = db.get(Equipment, equipment_id)
    if not equipment:
        raise NotFoundError(f"Vybavení nenalezeno: {equipment_id}")
    return equipment


def get_equipment_by_code(db: Session, code: str) -> Equipment | None:
    return db.scalar(select(Equipment).where(Equipment.qr_code == code))


def find_by_code(db: Session, code: str) -> Equipment:
    equipment = get_equipment_by_code(db, code)
    if not equipment:
        raise NotFoundError(f"Vybavení nenalezeno: {code}")
    return equipment


def get_available(db: Session, category: EquipmentCategory | None = None) -> list[Equipment]:
    query = select(Equipment).where(
        Equipment.status == EquipmentStatus.available,
        Equipment.is_active == True,
    )
    if category is not None:
        query = query.where(Equipment.category == category)
    return db.scalars(query.order_by(Equipment.qr_code)).all()


def get_by_status(db: Session, status: EquipmentStatus) -> list[Equipment]:
    return db.scalars(select(Equipment).where(Equipment.status == status).order_by(Equipment.qr_code)).all()


def get_by_condition(db: Session, condition: EquipmentCondition) -> list[Equipment]:
    return db.scalars(
        select(Equipment).where(Equipment.condition == condition).order_by(Equipment.qr_code)
    ).all()


def get_by_category(db: Session, category: EquipmentCategory) -> list[Equipment]:
    return db.scalars(
        select(Equipment).where(Equipment.category == category).order_by(Equipment.qr_code)
    ).all()


def get_by_location(db: Session, location: str) -> list[Equipment]:
    return db.scalars(
        select(Equipment).where(Equipment.location == location).order_by(Equipment.qr_code)
    ).all()


def get_assigned_to_user(db: Session, user_id: int) -> list[Equipment]:
    return db.scalars(select(Equipment).where(Equipment.assigned_to_id == user_id)).all()


def get_overdue_equipment(db: Session) -> list[Equipment]:
    now = datetime.now(timezone.utc)
    return db.scalars(
        select(Equipment).where(
            Equipment.assigned_to_id.is_not(None),
            Equipment.expected_return_date < now,
        )
    ).all()


def get_due_for_maintenance(db: Session) -> list[Equipment]:
    return db.scalars(
        select(Equipment).where(
            Equipment.next_maintenance_date <= date.today(),
            Equipment.status != EquipmentStatus.in_maintenance,
        )
    ).all()


def get_overdue_maintenance(db: Session) -> list[Equipment]:
    """Vybavení bez údržby, nebo s poslední údržbou starší než měsíc."""
    threshold = add_months(date.today(), -1)
    return db.scalars(
        select(Equipment).where(
            Equipment.is_active == True,
            Equipment.last_maintenance_date.is_(None) | (Equipment.last_maintenance_date < threshold),
        )
    ).all()


def get_upcoming_maintenance(db: Session, days_ahead: int) -> list[Equipment]:
    today = date.today()
    return db.scalars(
        select(Equipment)
        .where(Equipment.next_maintenance_date.between(today, today + timedelta(days=days_ahead)))
        .order_by(Equipment.next_maintenance_date)
    ).all()


# ── Statistiky ────────────────────────────────────────────────────────────────

def _count_by(db: Session, column) -> list[dict]:
    rows = db.execute(
        select(column, func.count())
        .where(Equipment.is_active == True)
        .group_by(column)
        .order_by(column)
    ).all()
    return [{"key": key.value if key is not None else None, "count": count} for key, count in rows]


def stats_by_category(db: Session) -> list[dict]:
    return _count_by(db, Equipment.category)


def stats_by_status(db: Session) -> list[dict]:
    return _count_by(db, Equipment.status)


def stats_by_condition(db: Session) -> list[dict]:
    return _count_by(db, Equipment.condition)


def total_value(db: Session, category: EquipmentCategory | None = None) -> Decimal:
    query = select(func.sum(Equipment.purchase_price)).where(Equipment.is_active == True)
    if category is not None:
        query = query.where(Equipment.category == category)
    return db.scalar(query) or Decimal("0")


# ── QR kódy ───────────────────────────────────────────────────────────────────

def is_qr_code_unique(db: Session, code: str) -> bool:
    return get_equipment_by_code(db, code) is None


def generate_next_qr_code(db: Session, category: EquipmentCategory) -> str:
    count = db.scalar(
        select(func.count()).select_from(Equipment).where(
            Equipment.category == category,
            Equipment.is_active == True,
        )
    )
    return f"QR_{category.value.upper()}_{count + 1:03d}"


# ── Zápis ─────────────────────────────────────────────────────────────────────

def create_equipment(db: Session, data: EquipmentCreate) -> Equipment:
    if get_equipment_by_code(db, data.qr_code):
        raise HTTPException(status_code=409, detail="QR kód již existuje")
    equipment = Equipment(**data.model_dump())
    db.add(equipment)
    db.commit()
    db.refresh(equipment)
    logger.info("Vybavení založeno: %s", equipment.display_name)
    return equipment


def update_equipment(db: Session, equipment_id: int, data: EquipmentUpdate) -> Equipment:
    equipment = get_equipment(db, equipment_id)
    update_data = data.model_dump(exclude_unset=True)
    new_code = update_data.get("qr_code")
    if new_code and new_code != equipment.qr_code and get_equipment_by_code(db, new_code):
        raise HTTPException(status_code=409, detail="QR kód již existuje")
    for field, value in update_data.items():
        setattr(equipment, field, value)
    db.commit()
    db.refresh(equipment)
    return equipment


def update_status(db: Session, equipment_id: int, new_status: EquipmentStatus, commit: bool = True) -> Equipment:
    """Bezpodmínečný zápis stavu. Legalitu přechodu hlídá volající."""
    equipment = get_equipment(db, equipment_id)
    logger.info("Vybavení %s: stav %s → %s", equipment.qr_code, equipment.status.value, new_status.value)
    equipment.status = new_status
    if commit:
        db.commit()
        db.refresh(equipment)
    return equipment


def update_condition(
    db: Session, equipment_id: int, new_condition: EquipmentCondition, notes: str | None = None
) -> Equipment:
    equipment = get_equipment(db, equipment_id)
    logger.info(
        "Vybavení %s: technický stav %s → %s",
        equipment.qr_code, equipment.condition.value, new_condition.value,
    )
    equipment.condition = new_condition
    if notes and notes.strip():
        equipment.notes = f"{equipment.notes}\n{notes}" if equipment.notes else notes
    db.commit()
    db.refresh(equipment)
    return equipment


def _check_manual_status(equipment: Equipment, new_status: EquipmentStatus) -> None:
    if equipment.status == EquipmentStatus.checked_out:
        raise InvalidStateError(f"Vybavení je vypůjčeno, stav řídí výpůjčka: {equipment.qr_code}")
    if new_status == EquipmentStatus.checked_out:
        raise InvalidStateError("Stav 'checked_out' lze nastavit pouze výpůjčkou")


def change_status(db: Session, equipment_id: int, new_status: EquipmentStatus) -> Equipment:
    """Ruční změna stavu z API, nesmí obejít výpůjční proces."""
    equipment = get_equipment(db, equipment_id)
    _check_manual_status(equipment, new_status)
    return update_status(db, equipment_id, new_status)


def bulk_change_status(db: Session, equipment_ids: list[int], new_status: EquipmentStatus) -> list[Equipment]:
    """Hromadná změna stavu. Buď projdou všechny položky, nebo žádná."""
    logger.info("Hromadná změna stavu %d kusů vybavení na %s", len(equipment_ids), new_status.value)
    rows = []
    for equipment_id in equipment_ids:
        equipment = get_equipment(db, equipment_id)
        _check_manual_status(equipment, new_status)
        rows.append(equipment)
    for equipment in rows:
        update_status(db, equipment.id, new_status, commit=False)
    db.commit()
    for equipment in rows:
        db.refresh(equipment)
    return rows


def deactivate_equipment(db: Session, equipment_id: int, reason: str | None = None) -> Equipment:
    equipment = get_equipment(db, equipment_id)
    if equipment.status == EquipmentStatus.checked_out:
        raise InvalidStateError(f"Vypůjčené vybavení nelze vyřadit: {equipment.qr_code}")
    logger.info("Vyřazení vybavení %s, důvod: %s", equipment.qr_code, reason)
    equipment.is_active = False
    equipment.status = EquipmentStatus.retired
    if reason and reason.strip():
        equipment.notes = f"{equipment.notes}\nVyřazeno: {reason}" if equipment.notes else f"Vyřazeno: {reason}"
    db.commit()
    db.refresh(equipment)
    return equipment
