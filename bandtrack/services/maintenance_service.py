import logging
from datetime import date
from sqlalchemy.orm import Session
from sqlalchemy import select
from bandtrack.errors import NotFoundError, InvalidStateError
from bandtrack.models.equipment import EquipmentStatus
from bandtrack.models.maintenance import EquipmentMaintenance, MaintenanceStatus
from bandtrack.schemas.maintenance import MaintenanceCreate, MaintenanceComplete
import bandtrack.services.equipment_service as equipment_svc

logger = logging.getLogger(__name__)


def get_maintenance(db: Session, maintenance_id: int) -> EquipmentMaintenance:
    record = db.get(EquipmentMaintenance, maintenance_id)
    if not record:
        raise NotFoundError(f"Záznam o údržbě nenalezen: {maintenance_id}")
    return record


def get_by_equipment(db: Session, equipment_id: int) -> list[EquipmentMaintenance]:
    equipment_svc.get_equipment(db, equipment_id)
    return db.scalars(
        select(EquipmentMaintenance)
        .where(EquipmentMaintenance.equipment_id == equipment_id)
        .order_by(EquipmentMaintenance.created_at.desc())
    ).all()


def get_by_status(db: Session, status: MaintenanceStatus) -> list[EquipmentMaintenance]:
    return db.scalars(
        select(EquipmentMaintenance)
        .where(EquipmentMaintenance.status == status)
        .order_by(EquipmentMaintenance.scheduled_date)
    ).all()


def schedule_maintenance(db: Session, data: MaintenanceCreate, user_id: int | None = None) -> EquipmentMaintenance:
    equipment = equipment_svc.get_equipment(db, data.equipment_id)
    record = EquipmentMaintenance(
        **data.model_dump(),
        status=MaintenanceStatus.scheduled,
        condition_before=equipment.condition,
        created_by=user_id,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info("Naplánována údržba %s pro %s", record.maintenance_type.value, equipment.qr_code)
    return record


def start_maintenance(db: Session, maintenance_id: int) -> EquipmentMaintenance:
    record = get_maintenance(db, maintenance_id)
    if record.status not in (MaintenanceStatus.scheduled, MaintenanceStatus.postponed):
        raise InvalidStateError(f"Údržbu nelze zahájit ze stavu {record.status.value}")
    equipment = equipment_svc.get_equipment(db, record.equipment_id)
    if equipment.status != EquipmentStatus.available:
        raise InvalidStateError(f"Vybavení není k dispozici pro údržbu: {equipment.qr_code}")

    record.status = MaintenanceStatus.in_progress
    record.condition_before = equipment.condition
    equipment_svc.update_status(db, equipment.id, EquipmentStatus.in_maintenance, commit=False)
    db.commit()
    db.refresh(record)
    return record


def complete_maintenance(
    db: Session, maintenance_id: int, data: MaintenanceComplete, user_id: int | None = None
) -> EquipmentMaintenance:
    record = get_maintenance(db, maintenance_id)
    if record.status != MaintenanceStatus.in_progress:
        raise InvalidStateError("Dokončit lze pouze probíhající údržbu")
    equipment = equipment_svc.get_equipment(db, record.equipment_id)

    today = date.today()
    record.status = MaintenanceStatus.completed
    record.completed_date = today
    record.condition_after = data.condition_after
    record.actual_cost = data.actual_cost
    record.work_description = data.work_description
    record.completed_by = user_id

    equipment.condition = data.condition_after
    equipment.last_maintenance_date = today
    equipment.next_maintenance_date = equipment_svc.add_months(today, equipment.maintenance_interval_months)
    equipment_svc.update_status(db, equipment.id, EquipmentStatus.available, commit=False)

    db.commit()
    db.refresh(record)
    logger.info("Údržba %s dokončena, %s je opět k dispozici", record.id, equipment.qr_code)
    return record


def cancel_maintenance(db: Session, maintenance_id: int) -> EquipmentMaintenance:
    record = get_maintenance(db, maintenance_id)
    if record.status in (MaintenanceStatus.completed, MaintenanceStatus.cancelled):
        raise InvalidStateError(f"Údržbu nelze zrušit ze stavu {record.status.value}")
    if record.status == MaintenanceStatus.in_progress:
        equipment_svc.update_status(db, record.equipment_id, EquipmentStatus.available, commit=False)
    record.status = MaintenanceStatus.cancelled
    db.commit()
    db.refresh(record)
    return record
