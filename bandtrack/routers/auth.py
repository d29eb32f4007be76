import logging
import time
from collections import defaultdict

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.orm import Session

from bandtrack.database import get_db
from bandtrack.models.user import UserRole
from bandtrack.schemas.user import LoginRequest, UserResponse
from bandtrack.services.user_service import verify_password, get_user_by_username, get_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

# Sady rolí pro jednotlivé skupiny operací; admin projde vždy
REGISTRY_ROLES = (UserRole.band_director, UserRole.equipment_manager)
CHECKOUT_ROLES = (UserRole.student, UserRole.band_director, UserRole.equipment_manager)
STAFF_ROLES = (UserRole.band_director, UserRole.equipment_manager, UserRole.supervisor)

# ── Rate limiting (in-memory, per IP) ──────────────────────────────────────
_login_attempts: dict[str, list[float]] = defaultdict(list)
_RATE_LIMIT_WINDOW = 60   # seconds
_RATE_LIMIT_MAX = 10      # max attempts per window


def _check_rate_limit(ip: str) -> bool:
    now = time.time()
    _login_attempts[ip] = [t for t in _login_attempts[ip] if now - t < _RATE_LIMIT_WINDOW]
    if len(_login_attempts[ip]) >= _RATE_LIMIT_MAX:
        return False
    _login_attempts[ip].append(now)
    return True


def _reset_rate_limit(ip: str) -> None:
    _login_attempts.pop(ip, None)


def require_session_user(request: Request) -> int:
    """Any authenticated user; returns the session user id."""
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status_code=401, detail="Přihlášení vyžadováno")
    return user_id


def require_roles(*roles: UserRole):
    """Dependency factory: session role must be one of ``roles`` (or admin)."""
    allowed = {r.value for r in roles} | {UserRole.admin.value}

    def dependency(request: Request, user_id: int = Depends(require_session_user)) -> int:
        if request.session.get("role") not in allowed:
            raise HTTPException(status_code=403, detail="Nedostatečná oprávnění")
        return user_id

    return dependency


@router.post("/login", response_model=UserResponse)
def login(request: Request, data: LoginRequest, db: Session = Depends(get_db)):
    ip = request.client.host if request.client else "unknown"
    if not _check_rate_limit(ip):
        raise HTTPException(status_code=429, detail="Příliš mnoho pokusů. Zkuste to za chvíli.")
    user = get_user_by_username(db, data.username)
    if not user or not verify_password(data.password, user.hashed_password):
        logger.warning(f"AUDIT: neúspěšné přihlášení pro uživatele '{data.username}' z IP {ip}")
        raise HTTPException(status_code=401, detail="Nesprávné jméno nebo heslo.")
    if not user.is_active:
        logger.warning(f"AUDIT: pokus o přihlášení deaktivovaného účtu '{data.username}' z IP {ip}")
        raise HTTPException(status_code=403, detail="Účet je deaktivován.")
    _reset_rate_limit(ip)
    logger.info(f"AUDIT: přihlášení '{user.username}' (role={user.role}) z IP {ip}")
    request.session["user_id"] = user.id
    request.session["username"] = user.username
    request.session["role"] = user.role
    return user


@router.post("/logout", status_code=204)
def logout(request: Request):
    username = request.session.get("username")
    if username:
        logger.info(f"AUDIT: odhlášení '{username}'")
    request.session.clear()


@router.get("/me", response_model=UserResponse)
def me(user_id: int = Depends(require_session_user), db: Session = Depends(get_db)):
    return get_user(db, user_id)
