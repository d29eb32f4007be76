import logging
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from bandtrack.database import get_db
from bandtrack.models.user import UserRole
from bandtrack.schemas.user import UserCreate, UserUpdate, UserResponse
from bandtrack.schemas.pagination import Page
from bandtrack.routers.auth import require_roles
import bandtrack.services.user_service as svc

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    dependencies=[Depends(require_roles(UserRole.band_director))],
)


@router.get("", response_model=Page[UserResponse])
def list_users(
    page: int = Query(1, ge=1),
    size: int = Query(50, ge=1, le=200),
    role: UserRole | None = Query(None),
    db: Session = Depends(get_db),
):
    return svc.get_users(db, page=page, size=size, role=role.value if role else None)


@router.post("", response_model=UserResponse, status_code=201)
def create_user(data: UserCreate, db: Session = Depends(get_db)):
    user = svc.create_user(db, data)
    logger.info(f"AUDIT: vytvořen uživatel '{user.username}' (role={user.role})")
    return user


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, db: Session = Depends(get_db)):
    return svc.get_user(db, user_id)


@router.put("/{user_id}", response_model=UserResponse)
def update_user(user_id: int, data: UserUpdate, db: Session = Depends(get_db)):
    return svc.update_user(db, user_id, data)
