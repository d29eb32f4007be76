from bandtrack.schemas.user import UserCreate, UserUpdate, UserResponse, LoginRequest
from bandtrack.schemas.equipment import EquipmentCreate, EquipmentUpdate, EquipmentResponse
from bandtrack.schemas.assignment import (
    CheckoutRequest, ReturnRequest, ApprovalRequest, ExtendAssignmentsRequest, AssignmentResponse,
)
from bandtrack.schemas.event import EventCreate, EventUpdate, EventResponse
from bandtrack.schemas.maintenance import MaintenanceCreate, MaintenanceComplete, MaintenanceResponse
from bandtrack.schemas.signature import SignatureCreate, SignatureResponse
from bandtrack.schemas.pagination import Page

__all__ = [
    "UserCreate", "UserUpdate", "UserResponse", "LoginRequest",
    "EquipmentCreate", "EquipmentUpdate", "EquipmentResponse",
    "CheckoutRequest", "ReturnRequest", "ApprovalRequest", "ExtendAssignmentsRequest", "AssignmentResponse",
    "EventCreate", "EventUpdate", "EventResponse",
    "MaintenanceCreate", "MaintenanceComplete", "MaintenanceResponse",
    "SignatureCreate", "SignatureResponse",
    "Page",
]
