from fastapi import APIRouter, Depends, HTTPException, Query, Request
from sqlalchemy.orm import Session
from bandtrack.config import settings
from bandtrack.database import get_db
from bandtrack.models.assignment import AssignmentStatus
from bandtrack.models.user import UserRole
from bandtrack.schemas.assignment import (
    CheckoutRequest, ReturnRequest, ApprovalRequest, ExtendAssignmentsRequest, AssignmentResponse,
    StatusCount, PurposeCount, DailyCheckouts, AverageDuration, NotificationResult,
)
from bandtrack.schemas.pagination import Page
from bandtrack.routers.auth import (
    require_session_user, require_roles, REGISTRY_ROLES, CHECKOUT_ROLES, STAFF_ROLES,
)
import bandtrack.services.assignment_service as svc

router = APIRouter(prefix="/api/assignments", tags=["assignments"])

_staff = Depends(require_roles(*STAFF_ROLES))


def _require_self_or_staff(request: Request, student_id: int) -> None:
    """Student vidí jen své výpůjčky."""
    if request.session.get("role") == UserRole.student.value and request.session.get("user_id") != student_id:
        raise HTTPException(status_code=403, detail="Nedostatečná oprávnění")


@router.get("", response_model=Page[AssignmentResponse])
def list_assignments(
    page: int = Query(1, ge=1),
    size: int = Query(20, ge=1, le=200),
    db: Session = Depends(get_db),
    _=_staff,
):
    return svc.get_assignments(db, page=page, size=size)


# ── Přechody ─────────────────────────────────────────────────────────────────

@router.post("/checkout", response_model=AssignmentResponse, status_code=201)
def checkout(
    data: CheckoutRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_roles(*CHECKOUT_ROLES)),
):
    return svc.checkout_equipment(
        db,
        qr_code=data.qr_code,
        student_id=data.student_id,
        event_id=data.event_id,
        expected_return_date=data.expected_return_date,
        purpose=data.purpose,
        notes=data.notes,
        checked_out_by=user_id,
    )


@router.put("/bulk/extend", response_model=list[AssignmentResponse])
def extend_assignments(
    data: ExtendAssignmentsRequest,
    db: Session = Depends(get_db),
    _=Depends(require_roles(*REGISTRY_ROLES)),
):
    return svc.extend_multiple(db, data.assignment_ids, data.new_return_date)


@router.post("/notifications/overdue", response_model=NotificationResult)
def notify_overdue(db: Session = Depends(get_db), _=Depends(require_roles(*REGISTRY_ROLES))):
    return {"notified": svc.send_overdue_notifications(db)}


# ── Dotazy ───────────────────────────────────────────────────────────────────

@router.get("/student/{student_id}", response_model=list[AssignmentResponse])
def by_student(student_id: int, request: Request, db: Session = Depends(get_db), _=Depends(require_session_user)):
    _require_self_or_staff(request, student_id)
    return svc.get_by_student(db, student_id)


@router.get("/student/{student_id}/active", response_model=list[AssignmentResponse])
def active_by_student(student_id: int, request: Request, db: Session = Depends(get_db), _=Depends(require_session_user)):
    _require_self_or_staff(request, student_id)
    return svc.get_active_by_student(db, student_id)


@router.get("/student/{student_id}/history", response_model=list[AssignmentResponse])
def history_by_student(student_id: int, request: Request, db: Session = Depends(get_db), _=Depends(require_session_user)):
    _require_self_or_staff(request, student_id)
    return svc.get_history_by_student(db, student_id)


@router.get("/equipment/{equipment_id}", response_model=list[AssignmentResponse])
def by_equipment(equipment_id: int, db: Session = Depends(get_db), _=_staff):
    return svc.get_by_equipment(db, equipment_id)


@router.get("/equipment/{equipment_id}/active", response_model=AssignmentResponse)
def active_by_equipment(equipment_id: int, db: Session = Depends(get_db), _=_staff):
    assignment = svc.get_active_assignment_by_equipment(db, equipment_id)
    if not assignment:
        raise HTTPException(status_code=404, detail="Vybavení není vypůjčeno")
    return assignment


@router.get("/equipment/{equipment_id}/history", response_model=list[AssignmentResponse])
def history_by_equipment(equipment_id: int, db: Session = Depends(get_db), _=_staff):
    return svc.get_history_by_equipment(db, equipment_id)


@router.get("/status/{status}", response_model=list[AssignmentResponse])
def by_status(status: AssignmentStatus, db: Session = Depends(get_db), _=_staff):
    return svc.get_by_status(db, status)


@router.get("/event/{event_id}", response_model=list[AssignmentResponse])
def by_event(event_id: int, db: Session = Depends(get_db), _=_staff):
    return svc.get_by_event(db, event_id)


@router.get("/overdue", response_model=list[AssignmentResponse])
def overdue(db: Session = Depends(get_db), _=_staff):
    return svc.get_overdue(db)


@router.get("/due-soon", response_model=list[AssignmentResponse])
def due_soon(days: int | None = Query(None, ge=0, le=365), db: Session = Depends(get_db), _=_staff):
    return svc.get_due_soon(db, settings.DUE_SOON_DAYS if days is None else days)


@router.get("/due-tomorrow", response_model=list[AssignmentResponse])
def due_tomorrow(db: Session = Depends(get_db), _=_staff):
    return svc.get_due_tomorrow(db)


@router.get("/recent/checkouts", response_model=list[AssignmentResponse])
def recent_checkouts(days: int | None = Query(None, ge=1, le=365), db: Session = Depends(get_db), _=_staff):
    return svc.get_recent_checkouts(db, days or settings.RECENT_DAYS)


@router.get("/recent/returns", response_model=list[AssignmentResponse])
def recent_returns(days: int | None = Query(None, ge=1, le=365), db: Session = Depends(get_db), _=_staff):
    return svc.get_recent_returns(db, days or settings.RECENT_DAYS)


@router.get("/pending-peer-review", response_model=list[AssignmentResponse])
def pending_peer_review(db: Session = Depends(get_db), _=_staff):
    return svc.get_pending_peer_review(db)


@router.get("/pending-supervisor-approval", response_model=list[AssignmentResponse])
def pending_supervisor_approval(db: Session = Depends(get_db), _=_staff):
    return svc.get_pending_supervisor_approval(db)


@router.get("/condition-changes", response_model=list[AssignmentResponse])
def condition_changes(db: Session = Depends(get_db), _=_staff):
    return svc.get_with_condition_changes(db)


@router.get("/with-damage", response_model=list[AssignmentResponse])
def with_damage(db: Session = Depends(get_db), _=_staff):
    return svc.get_with_damage(db)


# ── Statistiky ───────────────────────────────────────────────────────────────

@router.get("/stats/status/{status}", response_model=StatusCount)
def count_by_status(status: AssignmentStatus, db: Session = Depends(get_db), _=_staff):
    return {"status": status, "count": svc.count_by_status(db, status)}


@router.get("/stats/purpose", response_model=list[PurposeCount])
def stats_by_purpose(db: Session = Depends(get_db), _=_staff):
    return svc.stats_by_purpose(db)


@router.get("/stats/checkouts-by-date", response_model=list[DailyCheckouts])
def checkouts_by_date(days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db), _=_staff):
    return svc.checkout_stats_by_date(db, days)


@router.get("/stats/average-duration", response_model=AverageDuration)
def average_duration(db: Session = Depends(get_db), _=_staff):
    return {"average_days": svc.average_duration_days(db)}


# ── Jednotlivá výpůjčka ──────────────────────────────────────────────────────

@router.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(assignment_id: int, request: Request, db: Session = Depends(get_db), _=Depends(require_session_user)):
    assignment = svc.get_assignment(db, assignment_id)
    _require_self_or_staff(request, assignment.student_id)
    return assignment


@router.put("/{assignment_id}/return", response_model=AssignmentResponse)
def return_equipment(
    assignment_id: int,
    data: ReturnRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_roles(*CHECKOUT_ROLES)),
):
    return svc.return_equipment(
        db,
        assignment_id,
        return_condition=data.return_condition,
        damage_notes=data.damage_notes,
        returned_by_id=data.returned_by_id or user_id,
    )


@router.put("/{assignment_id}/approve-return", response_model=AssignmentResponse)
def approve_return(
    assignment_id: int,
    data: ApprovalRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_roles(*STAFF_ROLES)),
):
    return svc.approve_return(
        db,
        assignment_id,
        approver_id=data.approver_id or user_id,
        approval_notes=data.approval_notes,
    )
