from decimal import Decimal
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from bandtrack.database import get_db
from bandtrack.models.equipment import EquipmentCategory, EquipmentCondition, EquipmentStatus
from bandtrack.models.user import UserRole
from bandtrack.schemas.equipment import (
    EquipmentCreate, EquipmentUpdate, EquipmentResponse,
    StatusUpdateRequest, ConditionUpdateRequest, BulkStatusRequest, DeactivateRequest, CountByKey,
)
from bandtrack.schemas.pagination import Page
from bandtrack.routers.auth import require_session_user, require_roles, REGISTRY_ROLES, STAFF_ROLES
import bandtrack.services.equipment_service as svc

router = APIRouter(prefix="/api/equipment", tags=["equipment"])

_staff = Depends(require_roles(*STAFF_ROLES))
_registry = Depends(require_roles(*REGISTRY_ROLES))


@router.get("", response_model=Page[EquipmentResponse])
def list_equipment(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    search: str = Query(""),
    category: EquipmentCategory | None = Query(None),
    status: EquipmentStatus | None = Query(None),
    db: Session = Depends(get_db),
    _=Depends(require_session_user),
):
    return svc.get_equipment_list(db, page=page, size=size, search=search, category=category, status=status)


@router.post("", response_model=EquipmentResponse, status_code=201)
def create_equipment(data: EquipmentCreate, db: Session = Depends(get_db), _=_registry):
    return svc.create_equipment(db, data)


@router.get("/search", response_model=list[EquipmentResponse])
def search_equipment(q: str = Query(..., min_length=1), db: Session = Depends(get_db), _=Depends(require_session_user)):
    return svc.search_equipment(db, q)


@router.get("/qr/{code}", response_model=EquipmentResponse)
def get_by_qr_code(code: str, db: Session = Depends(get_db), _=Depends(require_session_user)):
    return svc.find_by_code(db, code)


@router.get("/available", response_model=list[EquipmentResponse])
def available_equipment(
    category: EquipmentCategory | None = Query(None),
    db: Session = Depends(get_db),
    _=Depends(require_session_user),
):
    return svc.get_available(db, category)


@router.get("/category/{category}", response_model=list[EquipmentResponse])
def by_category(category: EquipmentCategory, db: Session = Depends(get_db), _=Depends(require_session_user)):
    return svc.get_by_category(db, category)


@router.get("/status/{status}", response_model=list[EquipmentResponse])
def by_status(status: EquipmentStatus, db: Session = Depends(get_db), _=_staff):
    return svc.get_by_status(db, status)


@router.get("/condition/{condition}", response_model=list[EquipmentResponse])
def by_condition(condition: EquipmentCondition, db: Session = Depends(get_db), _=_staff):
    return svc.get_by_condition(db, condition)


@router.get("/location/{location}", response_model=list[EquipmentResponse])
def by_location(location: str, db: Session = Depends(get_db), _=_staff):
    return svc.get_by_location(db, location)


@router.get("/assigned/{user_id}", response_model=list[EquipmentResponse])
def assigned_to_user(user_id: int, db: Session = Depends(get_db), _=_staff):
    return svc.get_assigned_to_user(db, user_id)


@router.get("/overdue", response_model=list[EquipmentResponse])
def overdue_equipment(db: Session = Depends(get_db), _=_staff):
    return svc.get_overdue_equipment(db)


@router.get("/maintenance/due", response_model=list[EquipmentResponse])
def maintenance_due(db: Session = Depends(get_db), _=_staff):
    return svc.get_due_for_maintenance(db)


@router.get("/maintenance/overdue", response_model=list[EquipmentResponse])
def maintenance_overdue(db: Session = Depends(get_db), _=_staff):
    return svc.get_overdue_maintenance(db)


@router.get("/maintenance/upcoming", response_model=list[EquipmentResponse])
def maintenance_upcoming(days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db), _=_staff):
    return svc.get_upcoming_maintenance(db, days)


# ── Statistiky ───────────────────────────────────────────────────────────────

@router.get("/stats/category", response_model=list[CountByKey])
def stats_category(db: Session = Depends(get_db), _=_staff):
    return svc.stats_by_category(db)


@router.get("/stats/status", response_model=list[CountByKey])
def stats_status(db: Session = Depends(get_db), _=_staff):
    return svc.stats_by_status(db)


@router.get("/stats/condition", response_model=list[CountByKey])
def stats_condition(db: Session = Depends(get_db), _=_staff):
    return svc.stats_by_condition(db)


@router.get("/stats/value")
def stats_value(
    category: EquipmentCategory | None = Query(None),
    db: Session = Depends(get_db),
    _=_staff,
) -> dict[str, Decimal]:
    return {"total_value": svc.total_value(db, category)}


@router.get("/stats/value-by-category")
def stats_value_by_category(db: Session = Depends(get_db), _=_staff) -> dict[str, Decimal]:
    return {category.value: svc.total_value(db, category) for category in EquipmentCategory}


# ── QR kódy ──────────────────────────────────────────────────────────────────

@router.get("/qr-code/validate/{code}")
def validate_qr_code(code: str, db: Session = Depends(get_db), _=_registry):
    return {"qr_code": code, "unique": svc.is_qr_code_unique(db, code)}


@router.post("/qr-code/generate")
def generate_qr_code(category: EquipmentCategory = Query(...), db: Session = Depends(get_db), _=_registry):
    return {"qr_code": svc.generate_next_qr_code(db, category)}


@router.put("/bulk/status", response_model=list[EquipmentResponse])
def bulk_status(data: BulkStatusRequest, db: Session = Depends(get_db), _=_registry):
    return svc.bulk_change_status(db, data.equipment_ids, data.status)


# ── Jednotlivý kus ───────────────────────────────────────────────────────────

@router.get("/{equipment_id}", response_model=EquipmentResponse)
def get_equipment(equipment_id: int, db: Session = Depends(get_db), _=Depends(require_session_user)):
    return svc.get_equipment(db, equipment_id)


@router.put("/{equipment_id}", response_model=EquipmentResponse)
def update_equipment(equipment_id: int, data: EquipmentUpdate, db: Session = Depends(get_db), _=_registry):
    return svc.update_equipment(db, equipment_id, data)


@router.put("/{equipment_id}/status", response_model=EquipmentResponse)
def change_status(equipment_id: int, data: StatusUpdateRequest, db: Session = Depends(get_db), _=_registry):
    return svc.change_status(db, equipment_id, data.status)


@router.put("/{equipment_id}/condition", response_model=EquipmentResponse)
def update_condition(equipment_id: int, data: ConditionUpdateRequest, db: Session = Depends(get_db), _=_registry):
    return svc.update_condition(db, equipment_id, data.condition, data.notes)


@router.put("/{equipment_id}/deactivate", response_model=EquipmentResponse)
def deactivate_equipment(
    equipment_id: int,
    data: DeactivateRequest,
    db: Session = Depends(get_db),
    _=Depends(require_roles(UserRole.equipment_manager)),
):
    return svc.deactivate_equipment(db, equipment_id, data.reason)
