from datetime import datetime, date
from decimal import Decimal
from pydantic import BaseModel
from bandtrack.models.equipment import EquipmentCondition
from bandtrack.models.maintenance import MaintenanceType, MaintenanceStatus, MaintenancePriority


class MaintenanceCreate(BaseModel):
    equipment_id: int
    maintenance_type: MaintenanceType
    priority: MaintenancePriority = MaintenancePriority.medium
    scheduled_date: date | None = None
    estimated_cost: Decimal | None = None
    technician_name: str | None = None
    notes: str | None = None


class MaintenanceComplete(BaseModel):
    condition_after: EquipmentCondition
    actual_cost: Decimal | None = None
    work_description: str | None = None


class MaintenanceResponse(BaseModel):
    id: int
    equipment_id: int
    maintenance_type: MaintenanceType
    status: MaintenanceStatus
    priority: MaintenancePriority
    scheduled_date: date | None
    completed_date: date | None
    condition_before: EquipmentCondition | None
    condition_after: EquipmentCondition | None
    estimated_cost: Decimal | None
    actual_cost: Decimal | None
    technician_name: str | None
    work_description: str | None
    notes: str | None
    created_by: int | None
    completed_by: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
