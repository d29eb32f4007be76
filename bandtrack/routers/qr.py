from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response
from sqlalchemy.orm import Session
from bandtrack.database import get_db
from bandtrack.routers.auth import require_roles, STAFF_ROLES
import bandtrack.services.qr_service as svc

router = APIRouter(prefix="/api/qr", tags=["qr"], dependencies=[Depends(require_roles(*STAFF_ROLES))])


@router.get("/equipment/{equipment_id}")
def qr_equipment(equipment_id: int, db: Session = Depends(get_db)):
    png_bytes = svc.generate_equipment_qr(db, equipment_id)
    return Response(content=png_bytes, media_type="image/png")


@router.get("/batch")
def qr_batch(
    ids: str = Query(..., description="Comma-separated IDs"),
    db: Session = Depends(get_db),
):
    id_list = [int(i.strip()) for i in ids.split(",") if i.strip().isdigit()]
    pdf_bytes = svc.generate_batch_pdf(db, id_list)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": "attachment; filename=qr-stitky.pdf"},
    )
