from datetime import datetime, date
from decimal import Decimal
from pydantic import BaseModel, Field
from bandtrack.models.equipment import EquipmentCategory, EquipmentCondition, EquipmentStatus


class EquipmentBase(BaseModel):
    qr_code: str = Field(..., min_length=1, max_length=64)
    make: str = Field(..., min_length=1, max_length=128)
    model: str = Field(..., min_length=1, max_length=128)
    category: EquipmentCategory
    condition: EquipmentCondition = EquipmentCondition.good
    serial_number: str | None = None
    location: str | None = None
    description: str | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = None
    warranty_expiration: date | None = None
    next_maintenance_date: date | None = None
    maintenance_interval_months: int = Field(6, ge=1, le=120)
    notes: str | None = None


class EquipmentCreate(EquipmentBase):
    pass


class EquipmentUpdate(BaseModel):
    """Popisná pole. Stav a držitele mění jen výpůjčky a údržba."""

    qr_code: str | None = None
    make: str | None = None
    model: str | None = None
    category: EquipmentCategory | None = None
    serial_number: str | None = None
    location: str | None = None
    description: str | None = None
    purchase_date: date | None = None
    purchase_price: Decimal | None = None
    warranty_expiration: date | None = None
    next_maintenance_date: date | None = None
    maintenance_interval_months: int | None = Field(None, ge=1, le=120)
    notes: str | None = None


class EquipmentResponse(EquipmentBase):
    id: int
    status: EquipmentStatus
    assigned_to_id: int | None
    assignment_date: datetime | None
    expected_return_date: datetime | None
    last_maintenance_date: date | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StatusUpdateRequest(BaseModel):
    status: EquipmentStatus


class ConditionUpdateRequest(BaseModel):
    condition: EquipmentCondition
    notes: str | None = None


class BulkStatusRequest(BaseModel):
    equipment_ids: list[int] = Field(..., min_length=1)
    status: EquipmentStatus


class DeactivateRequest(BaseModel):
    reason: str | None = None


class CountByKey(BaseModel):
    key: str | None
    count: int
