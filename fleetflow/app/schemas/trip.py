"""
Trip Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from fleetflow.app.models.trip_enums import TripStatus
from fleetflow.app.schemas.vehicle import VehicleSummary
from fleetflow.app.schemas.driver import DriverSummary


class TripCreate(BaseModel):
    """Schema for creating a draft trip."""
    vehicle_id: int = Field(..., description="Vehicle carrying the cargo")
    driver_id: int = Field(..., description="Assigned driver")
    cargo_weight: float = Field(..., gt=0, description="Cargo weight in kg")
    cargo_description: Optional[str] = None
    start_location: str = Field(..., min_length=1, max_length=255)
    end_location: str = Field(..., min_length=1, max_length=255)
    notes: Optional[str] = None


class TripUpdate(BaseModel):
    """Schema for editing trip details. Status changes go through /status."""
    cargo_description: Optional[str] = None
    start_location: Optional[str] = Field(None, min_length=1, max_length=255)
    end_location: Optional[str] = Field(None, min_length=1, max_length=255)
    notes: Optional[str] = None


class TripStatusUpdate(BaseModel):
    """Schema for a lifecycle transition."""
    status: TripStatus
    start_odometer: Optional[float] = Field(None, ge=0, description="Reading at dispatch")
    end_odometer: Optional[float] = Field(None, ge=0, description="Reading at completion")


class TripResponse(BaseModel):
    """Schema for trip response with embedded vehicle/driver summaries."""
    id: int
    trip_id: str
    vehicle_id: int
    driver_id: int
    cargo_weight: float
    cargo_description: Optional[str]
    start_location: str
    end_location: str
    start_odometer: Optional[float]
    end_odometer: Optional[float]
    total_distance: Optional[float]
    status: TripStatus
    notes: Optional[str]
    start_time: Optional[datetime]
    end_time: Optional[datetime]
    created_at: datetime
    updated_at: datetime
    
    # None when the referenced record has been deleted
    vehicle: Optional[VehicleSummary] = None
    driver: Optional[DriverSummary] = None
    
    class Config:
        from_attributes = True


class TripListResponse(BaseModel):
    """Schema for paginated trip list."""
    trips: List[TripResponse]
    total: int
    page: int
    page_size: int
