from datetime import datetime
from pydantic import BaseModel, Field
from bandtrack.models.event import EventType, EventStatus


class EventBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    event_type: EventType
    event_date: datetime
    end_date: datetime | None = None
    venue: str | None = None
    description: str | None = None


class EventCreate(EventBase):
    pass


class EventUpdate(BaseModel):
    name: str | None = None
    event_type: EventType | None = None
    status: EventStatus | None = None
    event_date: datetime | None = None
    end_date: datetime | None = None
    venue: str | None = None
    description: str | None = None


class EventResponse(EventBase):
    id: int
    status: EventStatus
    director_id: int | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}
