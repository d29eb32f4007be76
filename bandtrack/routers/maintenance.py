from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from bandtrack.database import get_db
from bandtrack.models.maintenance import MaintenanceStatus
from bandtrack.schemas.maintenance import MaintenanceCreate, MaintenanceComplete, MaintenanceResponse
from bandtrack.routers.auth import require_roles, REGISTRY_ROLES, STAFF_ROLES
import bandtrack.services.maintenance_service as svc

router = APIRouter(prefix="/api/maintenance", tags=["maintenance"])


@router.post("", response_model=MaintenanceResponse, status_code=201)
def schedule_maintenance(
    data: MaintenanceCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_roles(*REGISTRY_ROLES)),
):
    return svc.schedule_maintenance(db, data, user_id=user_id)


@router.get("/equipment/{equipment_id}", response_model=list[MaintenanceResponse])
def maintenance_by_equipment(equipment_id: int, db: Session = Depends(get_db), _=Depends(require_roles(*STAFF_ROLES))):
    return svc.get_by_equipment(db, equipment_id)


@router.get("/status/{status}", response_model=list[MaintenanceResponse])
def maintenance_by_status(status: MaintenanceStatus, db: Session = Depends(get_db), _=Depends(require_roles(*STAFF_ROLES))):
    return svc.get_by_status(db, status)


@router.get("/{maintenance_id}", response_model=MaintenanceResponse)
def get_maintenance(maintenance_id: int, db: Session = Depends(get_db), _=Depends(require_roles(*STAFF_ROLES))):
    return svc.get_maintenance(db, maintenance_id)


@router.put("/{maintenance_id}/start", response_model=MaintenanceResponse)
def start_maintenance(maintenance_id: int, db: Session = Depends(get_db), _=Depends(require_roles(*REGISTRY_ROLES))):
    return svc.start_maintenance(db, maintenance_id)


@router.put("/{maintenance_id}/complete", response_model=MaintenanceResponse)
def complete_maintenance(
    maintenance_id: int,
    data: MaintenanceComplete,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_roles(*REGISTRY_ROLES)),
):
    return svc.complete_maintenance(db, maintenance_id, data, user_id=user_id)


@router.put("/{maintenance_id}/cancel", response_model=MaintenanceResponse)
def cancel_maintenance(maintenance_id: int, db: Session = Depends(get_db), _=Depends(require_roles(*REGISTRY_ROLES))):
    return svc.cancel_maintenance(db, maintenance_id)
