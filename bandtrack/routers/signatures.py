from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from bandtrack.database import get_db
from bandtrack.models.signature import SignatureType
from bandtrack.models.user import UserRole
from bandtrack.schemas.signature import (
    SignatureCreate, SignatureResponse, SignatureTypeCount, SignatureVerifyRequest,
)
from bandtrack.routers.auth import require_session_user, require_roles, STAFF_ROLES
import bandtrack.services.signature_service as svc

router = APIRouter(prefix="/api/signatures", tags=["signatures"])

_staff = Depends(require_roles(*STAFF_ROLES))


def _require_owner_or_staff(request: Request, owner_id: int) -> None:
    """Student pracuje jen se svými podpisy."""
    if request.session.get("role") == UserRole.student.value and request.session.get("user_id") != owner_id:
        raise HTTPException(status_code=403, detail="Nedostatečná oprávnění")


@router.post("", response_model=SignatureResponse, status_code=201)
def create_signature(
    data: SignatureCreate,
    request: Request,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_session_user),
):
    return svc.create_signature(
        db,
        user_id,
        data,
        ip_address=request.client.host if request.client else None,
        user_agent=request.headers.get("user-agent"),
    )


@router.get("/me", response_model=list[SignatureResponse])
def my_signatures(db: Session = Depends(get_db), user_id: int = Depends(require_session_user)):
    return svc.get_by_user(db, user_id)


@router.get("/user/{user_id}", response_model=list[SignatureResponse])
def by_user(
    user_id: int,
    request: Request,
    include_inactive: bool = Query(False),
    db: Session = Depends(get_db),
    _=Depends(require_session_user),
):
    _require_owner_or_staff(request, user_id)
    return svc.get_by_user(db, user_id, active_only=not include_inactive)


@router.get("/type/{signature_type}", response_model=list[SignatureResponse])
def by_type(signature_type: SignatureType, db: Session = Depends(get_db), _=_staff):
    return svc.get_by_type(db, signature_type)


@router.get("/recent", response_model=list[SignatureResponse])
def recent(days: int = Query(7, ge=1, le=365), db: Session = Depends(get_db), _=_staff):
    return svc.get_recent(db, days)


@router.get("/stats/type", response_model=list[SignatureTypeCount])
def stats_by_type(db: Session = Depends(get_db), _=_staff):
    return svc.count_by_type(db)


@router.get("/{signature_id}", response_model=SignatureResponse)
def get_signature(
    signature_id: int, request: Request, db: Session = Depends(get_db), _=Depends(require_session_user)
):
    signature = svc.get_signature(db, signature_id)
    _require_owner_or_staff(request, signature.user_id)
    return signature


@router.put("/{signature_id}/use", response_model=SignatureResponse)
def use_signature(
    signature_id: int, request: Request, db: Session = Depends(get_db), _=Depends(require_session_user)
):
    signature = svc.get_signature(db, signature_id)
    if request.session.get("user_id") != signature.user_id:
        raise HTTPException(status_code=403, detail="Podpis může použít jen jeho vlastník")
    return svc.record_usage(db, signature_id)


@router.put("/{signature_id}/verify", response_model=SignatureResponse)
def verify_signature(
    signature_id: int, data: SignatureVerifyRequest, db: Session = Depends(get_db), _=_staff
):
    return svc.mark_verified(db, signature_id, data.method)


@router.put("/{signature_id}/deactivate", response_model=SignatureResponse)
def deactivate_signature(
    signature_id: int, request: Request, db: Session = Depends(get_db), _=Depends(require_session_user)
):
    signature = svc.get_signature(db, signature_id)
    _require_owner_or_staff(request, signature.user_id)
    return svc.deactivate_signature(db, signature_id)
