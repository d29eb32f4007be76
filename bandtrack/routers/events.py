from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from bandtrack.database import get_db
from bandtrack.models.user import UserRole
from bandtrack.schemas.event import EventCreate, EventUpdate, EventResponse
from bandtrack.schemas.pagination import Page
from bandtrack.routers.auth import require_session_user, require_roles
import bandtrack.services.event_service as svc

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=Page[EventResponse])
def list_events(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    upcoming: bool = Query(False),
    db: Session = Depends(get_db),
    _=Depends(require_session_user),
):
    return svc.get_events(db, page=page, size=size, upcoming=upcoming)


@router.post("", response_model=EventResponse, status_code=201)
def create_event(
    data: EventCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(require_roles(UserRole.band_director)),
):
    return svc.create_event(db, data, director_id=user_id)


@router.get("/{event_id}", response_model=EventResponse)
def get_event(event_id: int, db: Session = Depends(get_db), _=Depends(require_session_user)):
    return svc.get_event(db, event_id)


@router.put("/{event_id}", response_model=EventResponse)
def update_event(
    event_id: int,
    data: EventUpdate,
    db: Session = Depends(get_db),
    _=Depends(require_roles(UserRole.band_director)),
):
    return svc.update_event(db, event_id, data)
