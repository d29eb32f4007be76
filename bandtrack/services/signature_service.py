"""Digitální podpisy uživatelů: založení, použití, ověření otisku a zneplatnění."""
import hashlib
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from bandtrack.errors import NotFoundError, InvalidStateError
from bandtrack.models.signature import DigitalSignature, SignatureType
from bandtrack.models.user import User
from bandtrack.schemas.signature import SignatureCreate

logger = logging.getLogger(__name__)

RECENT_USE_WINDOW = timedelta(hours=24)


def compute_hash(signature_data: str) -> str:
    return hashlib.sha256(signature_data.encode("utf-8")).hexdigest()


def is_recently_used(signature: DigitalSignature, now: datetime | None = None) -> bool:
    if signature.last_used_at is None:
        return False
    last_used = signature.last_used_at
    if last_used.tzinfo is None:
        last_used = last_used.replace(tzinfo=timezone.utc)
    return last_used > (now or datetime.now(timezone.utc)) - RECENT_USE_WINDOW


def get_signature(db: Session, signature_id: int) -> DigitalSignature:
    signature = db.get(DigitalSignature, signature_id)
    if not signature:
        raise NotFoundError(f"Podpis nenalezen: {signature_id}")
    return signature


def create_signature(
    db: Session,
    user_id: int,
    data: SignatureCreate,
    ip_address: str | None = None,
    user_agent: str | None = None,
) -> DigitalSignature:
    user = db.get(User, user_id)
    if not user:
        raise NotFoundError(f"Uživatel nenalezen: {user_id}")

    values = data.model_dump()
    if not values["legal_name"]:
        values["legal_name"] = user.full_name or user.username
    signature = DigitalSignature(
        **values,
        user_id=user.id,
        signature_hash=compute_hash(data.signature_data),
        ip_address=ip_address,
        user_agent=user_agent,
    )
    db.add(signature)
    db.commit()
    db.refresh(signature)
    logger.info("Uživatel %s uložil podpis %s (%s)", user.username, signature.id, signature.signature_type.value)
    return signature


def get_by_user(db: Session, user_id: int, active_only: bool = True) -> list[DigitalSignature]:
    """Podpisy uživatele, nejnovější první."""
    query = select(DigitalSignature).where(DigitalSignature.user_id == user_id)
    if active_only:
        query = query.where(DigitalSignature.active.is_(True))
    return db.scalars(query.order_by(DigitalSignature.created_at.desc(), DigitalSignature.id.desc())).all()


def get_by_type(db: Session, signature_type: SignatureType) -> list[DigitalSignature]:
    return db.scalars(
        select(DigitalSignature)
        .where(DigitalSignature.signature_type == signature_type)
        .order_by(DigitalSignature.id)
    ).all()


def get_recent(db: Session, days_back: int) -> list[DigitalSignature]:
    since = datetime.now(timezone.utc) - timedelta(days=days_back)
    return db.scalars(
        select(DigitalSignature)
        .where(DigitalSignature.created_at >= since)
        .order_by(DigitalSignature.created_at.desc())
    ).all()


def record_usage(db: Session, signature_id: int) -> DigitalSignature:
    signature = get_signature(db, signature_id)
    if not signature.active:
        raise InvalidStateError(f"Podpis je zneplatněn: {signature_id}")
    # Inkrement v SQL, souběžná použití se nepřepíší
    signature.usage_count = DigitalSignature.usage_count + 1
    signature.last_used_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(signature)
    return signature


def verify_integrity(signature: DigitalSignature) -> bool:
    return signature.signature_hash == compute_hash(signature.signature_data)


def mark_verified(db: Session, signature_id: int, method: str) -> DigitalSignature:
    signature = get_signature(db, signature_id)
    if not verify_integrity(signature):
        logger.warning("Podpis %s: otisk nesouhlasí s uloženými daty", signature_id)
        raise InvalidStateError(f"Otisk podpisu nesouhlasí: {signature_id}")
    signature.is_verified = True
    signature.verification_date = datetime.now(timezone.utc)
    signature.verification_method = method
    db.commit()
    db.refresh(signature)
    return signature


def deactivate_signature(db: Session, signature_id: int) -> DigitalSignature:
    signature = get_signature(db, signature_id)
    signature.active = False
    db.commit()
    db.refresh(signature)
    logger.info("Podpis %s zneplatněn", signature_id)
    return signature


def count_by_type(db: Session) -> list[dict]:
    rows = db.execute(
        select(DigitalSignature.signature_type, func.count())
        .group_by(DigitalSignature.signature_type)
        .order_by(DigitalSignature.signature_type)
    ).all()
    return [{"signature_type": t, "count": count} for t, count in rows]
