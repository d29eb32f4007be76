"""Výpůjční proces vybavení: vydání → vrácení → (schválení) a dotazy nad evidencí.

Stav vybavení ``checked_out`` a cache držitele (``assigned_to_id``,
``assignment_date``, ``expected_return_date``) zapisují pouze přechody v tomto
modulu. Každý přechod nejdřív ověří všechny podmínky a teprve potom zapisuje;
končí jediným commitem, při chybě se session vrací zpět.
"""
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, func, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from bandtrack.errors import NotFoundError, InvalidStateError
from bandtrack.models.assignment import EquipmentAssignment, AssignmentStatus
from bandtrack.models.equipment import Equipment, EquipmentCondition, EquipmentStatus, condition_rank
from bandtrack.models.event import BandEvent
from bandtrack.models.user import User
from bandtrack.schemas.pagination import Page
import bandtrack.services.equipment_service as equipment_svc

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(dt: datetime | None) -> datetime | None:
    """SQLite vrací naivní datetime, ukládáme vždy UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def needs_approval(
    checkout_condition: EquipmentCondition | None,
    return_condition: EquipmentCondition,
    damage_notes: str | None,
) -> bool:
    """Jakákoli změna stavu (i zlepšení) nebo poznámka o poškození vyžaduje schválení."""
    if checkout_condition is None:
        return True
    if condition_rank(return_condition) != condition_rank(checkout_condition):
        return True
    return bool(damage_notes and damage_notes.strip())


def is_damaged(assignment: EquipmentAssignment) -> bool:
    """Vráceno v horším stavu, než bylo vydáno."""
    if assignment.return_condition is None or assignment.checkout_condition is None:
        return False
    return condition_rank(assignment.return_condition) > condition_rank(assignment.checkout_condition)


def is_overdue(assignment: EquipmentAssignment, now: datetime | None = None) -> bool:
    return (
        assignment.status == AssignmentStatus.checked_out
        and assignment.expected_return_date is not None
        and _as_utc(assignment.expected_return_date) < (now or _utcnow())
    )


# ── Načítání ──────────────────────────────────────────────────────────────────

def get_assignment(db: Session, assignment_id: int) -> EquipmentAssignment:
    assignment = db.get(EquipmentAssignment, assignment_id)
    if not assignment:
        raise NotFoundError(f"Výpůjčka nenalezena: {assignment_id}")
    return assignment


def _lock_assignment(db: Session, assignment_id: int) -> EquipmentAssignment:
    assignment = db.scalar(
        select(EquipmentAssignment).where(EquipmentAssignment.id == assignment_id).with_for_update()
    )
    if not assignment:
        raise NotFoundError(f"Výpůjčka nenalezena: {assignment_id}")
    return assignment


def _lock_equipment_by_code(db: Session, code: str) -> Equipment:
    equipment = db.scalar(select(Equipment).where(Equipment.qr_code == code).with_for_update())
    if not equipment:
        raise NotFoundError(f"Vybavení nenalezeno: {code}")
    return equipment


def get_active_assignment_by_equipment(db: Session, equipment_id: int) -> EquipmentAssignment | None:
    return db.scalar(
        select(EquipmentAssignment).where(
            EquipmentAssignment.equipment_id == equipment_id,
            EquipmentAssignment.status == AssignmentStatus.checked_out,
        )
    )


def get_assignments(db: Session, page: int = 1, size: int = 20) -> Page:
    query = select(EquipmentAssignment).order_by(EquipmentAssignment.checkout_date.desc())
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    rows = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page.build(rows, total, page, size)


# ── Přechody ──────────────────────────────────────────────────────────────────

def _claim_equipment(
    db: Session,
    equipment_id: int,
    student_id: int,
    checkout_date: datetime,
    expected_return_date: datetime | None,
) -> bool:
    """Compare-and-set available → checked_out. Vrací False, pokud kus mezitím získal někdo jiný."""
    result = db.execute(
        update(Equipment)
        .where(Equipment.id == equipment_id, Equipment.status == EquipmentStatus.available)
        .values(
            status=EquipmentStatus.checked_out,
            assigned_to_id=student_id,
            assignment_date=checkout_date,
            expected_return_date=expected_return_date,
            updated_at=checkout_date,
        )
        .execution_options(synchronize_session=False)
    )
    return result.rowcount == 1


def _advance_assignments(
    db: Session, assignment_ids: list[int], from_status: AssignmentStatus, **values
) -> int:
    """Compare-and-set nad výpůjčkami ve stavu ``from_status``. Vrací počet změněných řádků.

    Na SQLite je ``FOR UPDATE`` bez účinku, takže o vítězi souběžných přechodů
    rozhoduje až tento UPDATE.
    """
    result = db.execute(
        update(EquipmentAssignment)
        .where(EquipmentAssignment.id.in_(assignment_ids), EquipmentAssignment.status == from_status)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    return result.rowcount


def checkout_equipment(
    db: Session,
    qr_code: str,
    student_id: int,
    event_id: int | None,
    expected_return_date: datetime | None,
    purpose: str | None,
    notes: str | None = None,
    checked_out_by: int | None = None,
) -> EquipmentAssignment:
    try:
        equipment = _lock_equipment_by_code(db, qr_code)

        if equipment.status != EquipmentStatus.available:
            raise InvalidStateError(f"Vybavení není k dispozici pro výpůjčku: {qr_code}")

        # Kontrola proti rozjetí stavu vybavení a evidence výpůjček
        if get_active_assignment_by_equipment(db, equipment.id):
            raise InvalidStateError(f"Vybavení je již vypůjčeno: {qr_code}")

        student = db.get(User, student_id)
        if not student:
            raise NotFoundError(f"Student nenalezen: {student_id}")

        event = None
        if event_id is not None:
            event = db.get(BandEvent, event_id)
            if not event:
                raise NotFoundError(f"Akce nenalezena: {event_id}")

        now = _utcnow()
        expected_return_date = _as_utc(expected_return_date)
        checkout_condition = equipment.condition
        if not _claim_equipment(db, equipment.id, student.id, now, expected_return_date):
            raise InvalidStateError(f"Vybavení není k dispozici pro výpůjčku: {qr_code}")

        assignment = EquipmentAssignment(
            equipment_id=equipment.id,
            student_id=student.id,
            event_id=event.id if event else None,
            status=AssignmentStatus.checked_out,
            checkout_date=now,
            expected_return_date=expected_return_date,
            checkout_condition=checkout_condition,
            assignment_purpose=purpose,
            checkout_notes=notes,
            checked_out_by=checked_out_by,
        )
        db.add(assignment)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise InvalidStateError(f"Vybavení je již vypůjčeno: {qr_code}")
    except Exception:
        db.rollback()
        raise

    db.refresh(assignment)
    logger.info(
        "Vybavení %s vydáno studentovi %s (akce: %s)",
        qr_code, student.email, event.name if event else purpose or "practice",
    )
    return assignment


def return_equipment(
    db: Session,
    assignment_id: int,
    return_condition: EquipmentCondition,
    damage_notes: str | None = None,
    returned_by_id: int | None = None,
) -> EquipmentAssignment:
    try:
        assignment = _lock_assignment(db, assignment_id)
        if assignment.status != AssignmentStatus.checked_out:
            raise InvalidStateError(f"Výpůjčka není ve stavu vypůjčeno: {assignment_id}")

        equipment = db.scalar(
            select(Equipment).where(Equipment.id == assignment.equipment_id).with_for_update()
        )

        pending = needs_approval(assignment.checkout_condition, return_condition, damage_notes)
        claimed = _advance_assignments(
            db, [assignment.id], AssignmentStatus.checked_out,
            status=AssignmentStatus.pending_return if pending else AssignmentStatus.returned,
            actual_return_date=_utcnow(),
            return_condition=return_condition,
            damage_notes=damage_notes,
            returned_to=returned_by_id,
        )
        if claimed != 1:
            raise InvalidStateError(f"Výpůjčka není ve stavu vypůjčeno: {assignment_id}")

        equipment.condition = return_condition
        equipment.assigned_to_id = None
        equipment.assignment_date = None
        equipment.expected_return_date = None

        if pending:
            # Kus zůstává checked_out, dokud vrácení neschválí vedoucí
            logger.info("Vybavení %s vráceno se změnou stavu nebo poškozením, čeká na schválení", equipment.qr_code)
        else:
            equipment_svc.update_status(db, equipment.id, EquipmentStatus.available, commit=False)
            logger.info("Vybavení %s vráceno v pořádku, je opět k dispozici", equipment.qr_code)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(assignment)
    return assignment


def approve_return(
    db: Session, assignment_id: int, approver_id: int, approval_notes: str | None = None
) -> EquipmentAssignment:
    try:
        assignment = _lock_assignment(db, assignment_id)
        if assignment.status != AssignmentStatus.pending_return:
            raise InvalidStateError(f"Výpůjčka nečeká na schválení vrácení: {assignment_id}")

        approver = db.get(User, approver_id)
        if not approver:
            raise NotFoundError(f"Schvalovatel nenalezen: {approver_id}")

        claimed = _advance_assignments(
            db, [assignment.id], AssignmentStatus.pending_return,
            status=AssignmentStatus.returned,
            supervisor_approved_by=approver.id,
            return_notes=approval_notes,
        )
        if claimed != 1:
            raise InvalidStateError(f"Výpůjčka nečeká na schválení vrácení: {assignment_id}")

        equipment_svc.update_status(db, assignment.equipment_id, EquipmentStatus.available, commit=False)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(assignment)
    logger.info("Vrácení výpůjčky %s schválil %s", assignment_id, approver.email)
    return assignment


def extend_multiple(
    db: Session, assignment_ids: list[int], new_return_date: datetime
) -> list[EquipmentAssignment]:
    """Prodloužení více výpůjček. Vše, nebo nic: při první chybě se nezmění žádná."""
    new_return_date = _as_utc(new_return_date)
    logger.info("Prodloužení %d výpůjček do %s", len(assignment_ids), new_return_date)
    try:
        assignments = []
        for assignment_id in dict.fromkeys(assignment_ids):
            assignment = _lock_assignment(db, assignment_id)
            if assignment.status != AssignmentStatus.checked_out:
                raise InvalidStateError(f"Výpůjčka není ve stavu vypůjčeno: {assignment_id}")
            assignments.append(assignment)

        if assignments:
            extended = _advance_assignments(
                db, [a.id for a in assignments], AssignmentStatus.checked_out,
                expected_return_date=new_return_date,
            )
            if extended != len(assignments):
                raise InvalidStateError("Některá výpůjčka byla mezitím vrácena, prodloužení zrušeno")

        for assignment in assignments:
            assignment.equipment.expected_return_date = new_return_date

        db.commit()
    except Exception:
        db.rollback()
        raise

    for assignment in assignments:
        db.refresh(assignment)
    return assignments


def send_overdue_notifications(db: Session) -> int:
    overdue = get_overdue(db)
    logger.info("Nalezeno %d výpůjček po termínu k upozornění", len(overdue))
    for assignment in overdue:
        # Doručení (e-mail/SMS) zatím není, jen záznam do logu
        logger.info(
            "Upozornění na prodlení: student %s, vybavení %s",
            assignment.student.email, assignment.equipment.qr_code,
        )
    return len(overdue)


# ── Dotazy ────────────────────────────────────────────────────────────────────

def get_by_student(db: Session, student_id: int) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment).where(EquipmentAssignment.student_id == student_id)
    ).all()


def get_active_by_student(db: Session, student_id: int) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment).where(
            EquipmentAssignment.student_id == student_id,
            EquipmentAssignment.status == AssignmentStatus.checked_out,
        )
    ).all()


def get_history_by_student(db: Session, student_id: int) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment)
        .where(EquipmentAssignment.student_id == student_id)
        .order_by(EquipmentAssignment.checkout_date.desc(), EquipmentAssignment.id.desc())
    ).all()


def get_by_equipment(db: Session, equipment_id: int) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment).where(EquipmentAssignment.equipment_id == equipment_id)
    ).all()


def get_history_by_equipment(db: Session, equipment_id: int) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment)
        .where(EquipmentAssignment.equipment_id == equipment_id)
        .order_by(EquipmentAssignment.checkout_date.desc(), EquipmentAssignment.id.desc())
    ).all()


def get_by_status(db: Session, status: AssignmentStatus) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment)
        .where(EquipmentAssignment.status == status)
        .order_by(EquipmentAssignment.created_at.desc())
    ).all()


def get_by_event(db: Session, event_id: int) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment).where(EquipmentAssignment.event_id == event_id)
    ).all()


def get_overdue(db: Session) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment)
        .where(
            EquipmentAssignment.status == AssignmentStatus.checked_out,
            EquipmentAssignment.expected_return_date < _utcnow(),
        )
        .order_by(EquipmentAssignment.expected_return_date, EquipmentAssignment.id)
    ).all()


def get_due_soon(db: Session, days_ahead: int) -> list[EquipmentAssignment]:
    now = _utcnow()
    return db.scalars(
        select(EquipmentAssignment)
        .where(
            EquipmentAssignment.status == AssignmentStatus.checked_out,
            EquipmentAssignment.expected_return_date.between(now, now + timedelta(days=days_ahead)),
        )
        .order_by(EquipmentAssignment.expected_return_date)
    ).all()


def get_due_tomorrow(db: Session) -> list[EquipmentAssignment]:
    return get_due_soon(db, 1)


def get_recent_checkouts(db: Session, days_back: int) -> list[EquipmentAssignment]:
    since = _utcnow() - timedelta(days=days_back)
    return db.scalars(
        select(EquipmentAssignment)
        .where(EquipmentAssignment.checkout_date >= since)
        .order_by(EquipmentAssignment.checkout_date.desc())
    ).all()


def get_recent_returns(db: Session, days_back: int) -> list[EquipmentAssignment]:
    since = _utcnow() - timedelta(days=days_back)
    return db.scalars(
        select(EquipmentAssignment)
        .where(EquipmentAssignment.actual_return_date >= since)
        .order_by(EquipmentAssignment.actual_return_date.desc())
    ).all()


def get_pending_peer_review(db: Session) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment).where(
            EquipmentAssignment.status == AssignmentStatus.pending_return,
            EquipmentAssignment.peer_reviewer_id.is_(None),
        )
    ).all()


def get_pending_supervisor_approval(db: Session) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment).where(
            EquipmentAssignment.status == AssignmentStatus.pending_return,
            EquipmentAssignment.peer_reviewer_id.is_not(None),
            EquipmentAssignment.supervisor_approved_by.is_(None),
        )
    ).all()


def get_with_condition_changes(db: Session) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment).where(
            EquipmentAssignment.return_condition.is_not(None),
            (EquipmentAssignment.return_condition != EquipmentAssignment.checkout_condition)
            | EquipmentAssignment.checkout_condition.is_(None),
        )
    ).all()


def get_with_damage(db: Session) -> list[EquipmentAssignment]:
    return db.scalars(
        select(EquipmentAssignment).where(
            EquipmentAssignment.damage_notes.is_not(None),
            func.trim(EquipmentAssignment.damage_notes) != "",
        )
    ).all()


# ── Statistiky ────────────────────────────────────────────────────────────────

def count_by_status(db: Session, status: AssignmentStatus) -> int:
    return db.scalar(
        select(func.count()).select_from(EquipmentAssignment).where(EquipmentAssignment.status == status)
    )


def stats_by_purpose(db: Session) -> list[dict]:
    rows = db.execute(
        select(EquipmentAssignment.assignment_purpose, func.count())
        .group_by(EquipmentAssignment.assignment_purpose)
        .order_by(EquipmentAssignment.assignment_purpose)
    ).all()
    return [{"purpose": purpose, "count": count} for purpose, count in rows]


def checkout_stats_by_date(db: Session, days_back: int) -> list[dict]:
    since = _utcnow() - timedelta(days=days_back)
    day = func.date(EquipmentAssignment.checkout_date)
    rows = db.execute(
        select(day, func.count())
        .where(EquipmentAssignment.checkout_date >= since)
        .group_by(day)
        .order_by(day)
    ).all()
    return [{"day": d, "count": count} for d, count in rows]


def average_duration_days(db: Session) -> float:
    completed = db.scalars(
        select(EquipmentAssignment).where(EquipmentAssignment.actual_return_date.is_not(None))
    ).all()
    if not completed:
        return 0.0
    seconds = sum(
        (_as_utc(a.actual_return_date) - _as_utc(a.checkout_date)).total_seconds() for a in completed
    )
    return seconds / len(completed) / 86400
