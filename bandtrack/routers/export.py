from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session
from bandtrack.database import get_db
from bandtrack.routers.auth import require_roles, STAFF_ROLES
import bandtrack.services.export_service as svc

router = APIRouter(prefix="/api/export", tags=["export"], dependencies=[Depends(require_roles(*STAFF_ROLES))])

_XLSX = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


@router.get("/excel/assignments")
def export_assignments_excel(db: Session = Depends(get_db)):
    xlsx_bytes = svc.export_assignments_excel(db)
    return Response(
        content=xlsx_bytes,
        media_type=_XLSX,
        headers={"Content-Disposition": "attachment; filename=vypujcky.xlsx"},
    )


@router.get("/excel/equipment")
def export_equipment_excel(db: Session = Depends(get_db)):
    xlsx_bytes = svc.export_equipment_excel(db)
    return Response(
        content=xlsx_bytes,
        media_type=_XLSX,
        headers={"Content-Disposition": "attachment; filename=vybaveni.xlsx"},
    )
