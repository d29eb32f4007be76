from bandtrack.models.user import User, UserRole
from bandtrack.models.equipment import Equipment, EquipmentCategory, EquipmentCondition, EquipmentStatus
from bandtrack.models.event import BandEvent, EventType, EventStatus
from bandtrack.models.assignment import EquipmentAssignment, AssignmentStatus
from bandtrack.models.maintenance import (
    EquipmentMaintenance, MaintenanceType, MaintenanceStatus, MaintenancePriority,
)
from bandtrack.models.signature import DigitalSignature, SignatureType, SignatureFormat

__all__ = [
    "User", "UserRole",
    "Equipment", "EquipmentCategory", "EquipmentCondition", "EquipmentStatus",
    "BandEvent", "EventType", "EventStatus",
    "EquipmentAssignment", "AssignmentStatus",
    "EquipmentMaintenance", "MaintenanceType", "MaintenanceStatus", "MaintenancePriority",
    "DigitalSignature", "SignatureType", "SignatureFormat",
]
