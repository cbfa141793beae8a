"""
Vehicle Pydantic schemas.

Defines request and response models for the vehicle registry.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from fleetflow.app.models.enums import VehicleType, VehicleStatus


class VehicleCreate(BaseModel):
    """Schema for registering a new vehicle."""
    name: str = Field(..., min_length=1, max_length=100, description="Fleet name, e.g. TR-001")
    license_plate: str = Field(..., min_length=1, max_length=50, description="Unique registration plate")
    model: str = Field(..., min_length=1, max_length=100)
    vehicle_type: VehicleType
    max_load_capacity: float = Field(..., gt=0, description="Maximum cargo weight in kg")
    current_odometer: float = Field(0, ge=0, description="Odometer reading in km")
    status: VehicleStatus = VehicleStatus.AVAILABLE
    region: str = Field("Unknown", min_length=1, max_length=100)
    acquisition_cost: float = Field(0, ge=0)


class VehicleUpdate(BaseModel):
    """Schema for updating an existing vehicle. Cost totals are not writable."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    license_plate: Optional[str] = Field(None, min_length=1, max_length=50)
    model: Optional[str] = Field(None, min_length=1, max_length=100)
    vehicle_type: Optional[VehicleType] = None
    max_load_capacity: Optional[float] = Field(None, gt=0)
    current_odometer: Optional[float] = Field(None, ge=0)
    status: Optional[VehicleStatus] = None
    region: Optional[str] = Field(None, min_length=1, max_length=100)
    acquisition_cost: Optional[float] = Field(None, ge=0)


class VehicleResponse(BaseModel):
    """Schema for vehicle response."""
    id: int
    name: str
    license_plate: str
    model: str
    vehicle_type: VehicleType
    max_load_capacity: float
    current_odometer: float
    status: VehicleStatus
    region: str
    acquisition_cost: float
    total_fuel_cost: float
    total_maintenance_cost: float
    created_at: datetime
    updated_at: datetime
    
    class Config:
        from_attributes = True


class VehicleSummary(BaseModel):
    """Compact vehicle view embedded in trip, fuel and maintenance responses."""
    id: int
    name: str
    license_plate: str
    vehicle_type: VehicleType
    max_load_capacity: float
    status: VehicleStatus
    
    class Config:
        from_attributes = True


class VehicleListResponse(BaseModel):
    """Schema for paginated vehicle list."""
    vehicles: List[VehicleResponse]
    total: int
    page: int
    page_size: int
