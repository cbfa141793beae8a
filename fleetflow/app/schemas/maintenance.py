"""
Maintenance Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List
from fleetflow.app.models.enums import MaintenanceStatus
from fleetflow.app.schemas.vehicle import VehicleSummary


class MaintenanceCreate(BaseModel):
    """Schema for scheduling maintenance. New records always start as scheduled."""
    vehicle_id: int
    service_type: str = Field(..., min_length=1, max_length=255)
    cost: float = Field(..., ge=0)
    description: Optional[str] = None
    service_date: date
    next_service_date: Optional[date] = None
    notes: Optional[str] = None


class MaintenanceUpdate(BaseModel):
    """Schema for updating a maintenance record."""
    vehicle_id: Optional[int] = None
    service_type: Optional[str] = Field(None, min_length=1, max_length=255)
    cost: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    service_date: Optional[date] = None
    next_service_date: Optional[date] = None
    status: Optional[MaintenanceStatus] = None
    notes: Optional[str] = None


class MaintenanceResponse(BaseModel):
    """Schema for maintenance record response."""
    id: int
    vehicle_id: int
    service_type: str
    cost: float
    description: Optional[str]
    service_date: date
    next_service_date: Optional[date]
    status: MaintenanceStatus
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    vehicle: Optional[VehicleSummary] = None
    
    class Config:
        from_attributes = True


class MaintenanceListResponse(BaseModel):
    records: List[MaintenanceResponse]
    total: int
    page: int
    page_size: int
