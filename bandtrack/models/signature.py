import enum
from datetime import datetime, timezone
from sqlalchemy import ForeignKey, String, DateTime, Text, Integer, Boolean, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship
from bandtrack.database import Base


class SignatureType(str, enum.Enum):
    general = "general"
    equipment_checkout = "equipment_checkout"
    equipment_return = "equipment_return"
    performance_consent = "performance_consent"
    medical_waiver = "medical_waiver"
    photo_release = "photo_release"


SIGNATURE_TYPE_LABELS = {
    SignatureType.general: "Obecný",
    SignatureType.equipment_checkout: "Výpůjčka vybavení",
    SignatureType.equipment_return: "Vrácení vybavení",
    SignatureType.performance_consent: "Souhlas s vystoupením",
    SignatureType.medical_waiver: "Zdravotní prohlášení",
    SignatureType.photo_release: "Souhlas s fotografováním",
}


class SignatureFormat(str, enum.Enum):
    svg = "svg"
    png = "png"
    json = "json"  # data tahů


class DigitalSignature(Base):
    """Uložený podpis uživatele (Base64 SVG/PNG nebo data tahů) s otiskem SHA-256."""

    __tablename__ = "digital_signatures"

    id: Mapped[int] = mapped_column(primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    signature_data: Mapped[str] = mapped_column(Text, nullable=False)
    signature_type: Mapped[SignatureType] = mapped_column(
        SAEnum(SignatureType, values_callable=lambda e: [x.value for x in e]),
        default=SignatureType.general,
        nullable=False,
        index=True,
    )
    signature_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    signature_format: Mapped[SignatureFormat] = mapped_column(
        SAEnum(SignatureFormat, values_callable=lambda e: [x.value for x in e]),
        default=SignatureFormat.svg,
        nullable=False,
    )
    signature_width: Mapped[int | None] = mapped_column(Integer, nullable=True)
    signature_height: Mapped[int | None] = mapped_column(Integer, nullable=True)
    stroke_color: Mapped[str] = mapped_column(String(16), default="#000000", nullable=False)
    background_color: Mapped[str] = mapped_column(String(32), default="transparent", nullable=False)

    usage_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    last_used_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    signature_hash: Mapped[str] = mapped_column(String(64), nullable=False)
    is_verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verification_date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    verification_method: Mapped[str | None] = mapped_column(String(64), nullable=True)

    legal_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    intent_statement: Mapped[str | None] = mapped_column(Text, nullable=True)
    # Kontext podpisu
    ip_address: Mapped[str | None] = mapped_column(String(45), nullable=True)
    user_agent: Mapped[str | None] = mapped_column(Text, nullable=True)

    active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
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

    user: Mapped["User"] = relationship(back_populates="signatures")

    @property
    def display_name(self) -> str:
        if self.signature_name:
            return self.signature_name
        return f"Podpis: {SIGNATURE_TYPE_LABELS[self.signature_type]}"
