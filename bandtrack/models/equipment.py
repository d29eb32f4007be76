import enum
from datetime import datetime, timezone, date
from decimal import Decimal
from sqlalchemy import String, Boolean, DateTime, Date, Numeric, Integer, Text, ForeignKey, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bandtrack.database import Base


class EquipmentCategory(str, enum.Enum):
    brass = "brass"
    woodwind = "woodwind"
    percussion = "percussion"
    string = "string"
    electronic = "electronic"
    accessory = "accessory"


class EquipmentCondition(str, enum.Enum):
    excellent = "excellent"
    good = "good"
    fair = "fair"
    poor = "poor"
    repair_needed = "repair_needed"


class EquipmentStatus(str, enum.Enum):
    available = "available"
    checked_out = "checked_out"
    in_maintenance = "in_maintenance"
    retired = "retired"
    missing = "missing"


# 1 = nejlepší stav; pořadí nezávisí na pořadí deklarace enumu
CONDITION_RANK: dict[EquipmentCondition, int] = {
    EquipmentCondition.excellent: 1,
    EquipmentCondition.good: 2,
    EquipmentCondition.fair: 3,
    EquipmentCondition.poor: 4,
    EquipmentCondition.repair_needed: 5,
}


def condition_rank(condition: EquipmentCondition | str) -> int:
    return CONDITION_RANK[EquipmentCondition(condition)]


def _enum(cls):
    return SAEnum(cls, values_callable=lambda e: [x.value for x in e])


class Equipment(Base):
    __tablename__ = "equipment"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    qr_code: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    serial_number: Mapped[str | None] = mapped_column(String(128), nullable=True)
    make: Mapped[str] = mapped_column(String(128), nullable=False)
    model: Mapped[str] = mapped_column(String(128), nullable=False)
    category: Mapped[EquipmentCategory] = mapped_column(_enum(EquipmentCategory), nullable=False, index=True)
    condition: Mapped[EquipmentCondition] = mapped_column(
        _enum(EquipmentCondition), default=EquipmentCondition.good, nullable=False
    )
    status: Mapped[EquipmentStatus] = mapped_column(
        _enum(EquipmentStatus), default=EquipmentStatus.available, nullable=False, index=True
    )
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    purchase_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    purchase_price: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    warranty_expiration: Mapped[date | None] = mapped_column(Date, nullable=True)
    last_maintenance_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_maintenance_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    maintenance_interval_months: Mapped[int] = mapped_column(Integer, default=6, nullable=False)

    # Cache aktivní výpůjčky, zapisuje pouze assignment_service
    assigned_to_id: Mapped[int | None] = mapped_column(ForeignKey("users.id"), nullable=True, index=True)
    assignment_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    expected_return_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
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

    assigned_to: Mapped["User | None"] = relationship(back_populates="held_equipment")
    assignments: Mapped[list["EquipmentAssignment"]] = relationship(
        back_populates="equipment", order_by="EquipmentAssignment.checkout_date"
    )
    maintenance_records: Mapped[list["EquipmentMaintenance"]] = relationship(back_populates="equipment")

    @property
    def display_name(self) -> str:
        return f"{self.make} {self.model} ({self.qr_code})"
