"""
Enumerations shared by the FleetFlow models and schemas.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.
    
    Roles:
        MANAGER: Owns the fleet registry, maintenance and fuel logging
        DISPATCHER: Creates trips and moves them through their lifecycle
        SAFETY_OFFICER: Manages driver compliance and statuses
        FINANCIAL_ANALYST: Reviews costs, analytics and exported reports
    """
    MANAGER = "MANAGER"
    DISPATCHER = "DISPATCHER"
    SAFETY_OFFICER = "SAFETY_OFFICER"
    FINANCIAL_ANALYST = "FINANCIAL_ANALYST"

    @property
    def label(self) -> str:
        return ROLE_LABELS[self]


ROLE_LABELS = {
    UserRole.MANAGER: "Fleet Manager",
    UserRole.DISPATCHER: "Dispatcher",
    UserRole.SAFETY_OFFICER: "Safety Officer",
    UserRole.FINANCIAL_ANALYST: "Financial Analyst",
}


class VehicleType(str, enum.Enum):
    """Vehicle body type."""
    TRUCK = "truck"
    VAN = "van"
    BIKE = "bike"


class VehicleStatus(str, enum.Enum):
    """Vehicle availability."""
    AVAILABLE = "available"
    ON_TRIP = "on_trip"  # Assigned to a dispatched trip
    IN_SHOP = "in_shop"  # Under scheduled maintenance
    OUT_OF_SERVICE = "out_of_service"


class DriverStatus(str, enum.Enum):
    """Driver duty status."""
    ON_DUTY = "on_duty"
    OFF_DUTY = "off_duty"
    SUSPENDED = "suspended"


class MaintenanceStatus(str, enum.Enum):
    """Maintenance record status."""
    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


def enum_values(enum_cls):
    """Persist enum values (e.g. "on_trip") rather than member names."""
    return [member.value for member in enum_cls]
