import enum
from datetime import datetime, timezone
from sqlalchemy import String, DateTime, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bandtrack.database import Base


class EventType(str, enum.Enum):
    concert = "concert"
    competition = "competition"
    parade = "parade"
    festival = "festival"
    practice = "practice"
    rehearsal = "rehearsal"
    masterclass = "masterclass"
    recording = "recording"
    community_event = "community_event"
    fundraiser = "fundraiser"


class EventStatus(str, enum.Enum):
    planned = "planned"
    approved = "approved"
    confirmed = "confirmed"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"


class BandEvent(Base):
    __tablename__ = "band_events"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    event_type: Mapped[EventType] = mapped_column(
        SAEnum(EventType, values_callable=lambda e: [x.value for x in e]), nullable=False
    )
    status: Mapped[EventStatus] = mapped_column(
        SAEnum(EventStatus, values_callable=lambda e: [x.value for x in e]),
        default=EventStatus.planned,
        nullable=False,
    )
    event_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    end_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    venue: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    director_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    assignments: Mapped[list["EquipmentAssignment"]] = relationship(back_populates="event")
