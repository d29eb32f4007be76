from datetime import datetime, timezone
from sqlalchemy.orm import Session
from sqlalchemy import select, func
from bandtrack.errors import NotFoundError
from bandtrack.models.event import BandEvent
from bandtrack.schemas.event import EventCreate, EventUpdate
from bandtrack.schemas.pagination import Page


def get_events(db: Session, page: int = 1, size: int = 50, upcoming: bool = False) -> Page:
    query = select(BandEvent).order_by(BandEvent.event_date)
    if upcoming:
        query = query.where(BandEvent.event_date >= datetime.now(timezone.utc))
    total = db.scalar(select(func.count()).select_from(query.subquery()))
    events = db.scalars(query.offset((page - 1) * size).limit(size)).all()
    return Page.build(events, total, page, size)


def get_event(db: Session, event_id: int) -> BandEvent:
    event = db.get(BandEvent, event_id)
    if not event:
        raise NotFoundError(f"Akce nenalezena: {event_id}")
    return event


def create_event(db: Session, data: EventCreate, director_id: int | None = None) -> BandEvent:
    event = BandEvent(**data.model_dump(), director_id=director_id)
    db.add(event)
    db.commit()
    db.refresh(event)
    return event


def update_event(db: Session, event_id: int, data: EventUpdate) -> BandEvent:
    event = get_event(db, event_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        setattr(event, field, value)
    db.commit()
    db.refresh(event)
    return event
