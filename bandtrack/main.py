from fastapi import FastAPI, Request
from fastapi.responses import Response
from starlette.middleware.sessions import SessionMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from contextlib import asynccontextmanager
import logging
import os

from bandtrack.database import engine, SessionLocal
from bandtrack.database import Base
import bandtrack.models  # noqa: F401 register all models
from bandtrack.models.user import User, UserRole
from bandtrack.config import settings
from bandtrack.services.user_service import hash_password
from bandtrack.routers import (
    health, auth, users, equipment, assignments, events, maintenance, qr, export, signatures,
)

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(application: FastAPI):
    # Tabulky pro vývoj bez alembicu
    if settings.DATABASE_URL.startswith("sqlite:///./data/"):
        os.makedirs("data", exist_ok=True)
    Base.metadata.create_all(bind=engine)

    # První admin, pokud zatím neexistuje žádný uživatel
    db = SessionLocal()
    try:
        if not db.query(User).first():
            admin = User(
                username=settings.FIRST_ADMIN_USER,
                email=f"{settings.FIRST_ADMIN_USER}@bandtrack.local",
                full_name="Administrátor",
                hashed_password=hash_password(settings.FIRST_ADMIN_PASS),
                role=UserRole.admin.value,
                is_active=True,
            )
            db.add(admin)
            db.commit()
            logger.info("Vytvořen první admin uživatel: %s", settings.FIRST_ADMIN_USER)
    finally:
        db.close()

    yield


app = FastAPI(
    title="BandTrack",
    description="Evidence a výpůjčky hudebního vybavení",
    version="0.3.0",
    lifespan=lifespan,
)

app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    https_only=settings.APP_ENV == "production",
    same_site="lax",
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        if settings.APP_ENV == "production":
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


app.add_middleware(SecurityHeadersMiddleware)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(equipment.router)
app.include_router(assignments.router)
app.include_router(events.router)
app.include_router(maintenance.router)
app.include_router(qr.router)
app.include_router(export.router)
app.include_router(signatures.router)
