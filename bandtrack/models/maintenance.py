import enum
from datetime import datetime, timezone, date
from decimal import Decimal
from sqlalchemy import ForeignKey, String, DateTime, Date, Numeric, Text, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bandtrack.database import Base
from bandtrack.models.equipment import EquipmentCondition


class MaintenanceType(str, enum.Enum):
    preventive = "preventive"
    repair = "repair"
    cleaning = "cleaning"
    calibration = "calibration"
    inspection = "inspection"
    upgrade = "upgrade"
    replacement = "replacement"


class MaintenanceStatus(str, enum.Enum):
    scheduled = "scheduled"
    in_progress = "in_progress"
    completed = "completed"
    cancelled = "cancelled"
    postponed = "postponed"


class MaintenancePriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"
    urgent = "urgent"


def _enum(cls):
    return SAEnum(cls, values_callable=lambda e: [x.value for x in e])


class EquipmentMaintenance(Base):
    __tablename__ = "equipment_maintenance"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    equipment_id: Mapped[int] = mapped_column(ForeignKey("equipment.id"), nullable=False, index=True)
    maintenance_type: Mapped[MaintenanceType] = mapped_column(_enum(MaintenanceType), nullable=False)
    status: Mapped[MaintenanceStatus] = mapped_column(
        _enum(MaintenanceStatus), default=MaintenanceStatus.scheduled, nullable=False, index=True
    )
    priority: Mapped[MaintenancePriority] = mapped_column(
        _enum(MaintenancePriority), default=MaintenancePriority.medium, nullable=False
    )
    scheduled_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    completed_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    condition_before: Mapped[EquipmentCondition | None] = mapped_column(_enum(EquipmentCondition), nullable=True)
    condition_after: Mapped[EquipmentCondition | None] = mapped_column(_enum(EquipmentCondition), nullable=True)
    estimated_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    actual_cost: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    technician_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    work_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    completed_by: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True)
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

    equipment: Mapped["Equipment"] = relationship(back_populates="maintenance_records")
