from datetime import datetime, date
from pydantic import BaseModel, Field
from bandtrack.models.assignment import AssignmentStatus
from bandtrack.models.equipment import EquipmentCondition


class CheckoutRequest(BaseModel):
    qr_code: str = Field(..., min_length=1, max_length=64)
    student_id: int
    event_id: int | None = None
    expected_return_date: datetime
    purpose: str | None = Field(None, max_length=64)
    notes: str | None = None


class ReturnRequest(BaseModel):
    return_condition: EquipmentCondition
    damage_notes: str | None = None
    returned_by_id: int | None = None  # výchozí = přihlášený uživatel


class ApprovalRequest(BaseModel):
    approver_id: int | None = None  # výchozí = přihlášený uživatel
    approval_notes: str | None = None


class ExtendAssignmentsRequest(BaseModel):
    assignment_ids: list[int] = Field(..., min_length=1)
    new_return_date: datetime


class AssignmentResponse(BaseModel):
    id: int
    equipment_id: int
    student_id: int
    event_id: int | None
    status: AssignmentStatus
    checkout_date: datetime
    expected_return_date: datetime | None
    actual_return_date: datetime | None
    checkout_condition: EquipmentCondition | None
    return_condition: EquipmentCondition | None
    checked_out_by: int | None
    returned_to: int | None
    peer_reviewer_id: int | None
    supervisor_approved_by: int | None
    assignment_purpose: str | None
    checkout_notes: str | None
    return_notes: str | None
    damage_notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class StatusCount(BaseModel):
    status: AssignmentStatus
    count: int


class PurposeCount(BaseModel):
    purpose: str | None
    count: int


class DailyCheckouts(BaseModel):
    day: date
    count: int


class AverageDuration(BaseModel):
    average_days: float


class NotificationResult(BaseModel):
    notified: int
