import enum
from datetime import datetime, timezone
from sqlalchemy import ForeignKey, String, DateTime, Text, Integer, Index, text, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bandtrack.database import Base
from bandtrack.models.equipment import EquipmentCondition


class AssignmentStatus(str, enum.Enum):
    pending_checkout = "pending_checkout"
    checked_out = "checked_out"
    pending_return = "pending_return"
    returned = "returned"
    overdue = "overdue"
    lost = "lost"
    damaged = "damaged"


_ACTIVE = text("status = 'checked_out'")


class EquipmentAssignment(Base):
    """Jedna výpůjčka: od vydání po vrácení (případně schválení vrácení)."""

    __tablename__ = "equipment_assignments"

    __table_args__ = (
        # Nejvýše jedna aktivní výpůjčka na kus vybavení
        Index(
            "uq_active_assignment_per_equipment",
            "equipment_id",
            unique=True,
            sqlite_where=_ACTIVE,
            postgresql_where=_ACTIVE,
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    equipment_id: Mapped[int] = mapped_column(ForeignKey("equipment.id"), nullable=False, index=True)
    student_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    event_id: Mapped[int | None] = mapped_column(ForeignKey("band_events.id"), nullable=True, index=True)
    status: Mapped[AssignmentStatus] = mapped_column(
        SAEnum(AssignmentStatus, values_callable=lambda e: [x.value for x in e]),
        nullable=False,
        index=True,
    )

    checkout_date: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    expected_return_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_return_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    checkout_condition: Mapped[EquipmentCondition | None] = mapped_column(
        SAEnum(EquipmentCondition, values_callable=lambda e: [x.value for x in e]), nullable=True
    )
    return_condition: Mapped[EquipmentCondition | None] = mapped_column(
        SAEnum(EquipmentCondition, values_callable=lambda e: [x.value for x in e]), nullable=True
    )

    # Workflow: ID uživatelů bez FK (historická stopa, uživatel může být deaktivován)
    checked_out_by: Mapped[int | None] = mapped_column(Integer, nullable=True)
    returned_to: Mapped[int | None] = mapped_column(Integer, nullable=True)
    peer_reviewer_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    supervisor_approved_by: Mapped[int | None] = mapped_column(Integer, nullable=True)

    assignment_purpose: Mapped[str | None] = mapped_column(String(64), nullable=True)  # practice/performance/lesson
    checkout_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    return_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    damage_notes: Mapped[str | None] = mapped_column(Text, nullable=True)

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

    equipment: Mapped["Equipment"] = relationship(back_populates="assignments")
    student: Mapped["User"] = relationship(back_populates="assignments", foreign_keys=[student_id])
    event: Mapped["BandEvent | None"] = relationship(back_populates="assignments")
