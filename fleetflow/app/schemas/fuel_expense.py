"""
Fuel expense Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import date, datetime
from typing import Optional, List
from fleetflow.app.schemas.vehicle import VehicleSummary


class FuelExpenseCreate(BaseModel):
    """Schema for logging a refuelling."""
    vehicle_id: int
    trip_id: Optional[int] = None
    liters: float = Field(..., gt=0)
    cost: float = Field(..., ge=0)
    cost_per_liter: Optional[float] = Field(None, ge=0, description="Derived from cost/liters when omitted")
    km: float = Field(0, ge=0, description="Distance covered on this fill")
    fuel_date: date
    notes: Optional[str] = None


class FuelExpenseUpdate(BaseModel):
    """Schema for correcting a fuel expense."""
    vehicle_id: Optional[int] = None
    trip_id: Optional[int] = None
    liters: Optional[float] = Field(None, gt=0)
    cost: Optional[float] = Field(None, ge=0)
    cost_per_liter: Optional[float] = Field(None, ge=0)
    km: Optional[float] = Field(None, ge=0)
    fuel_date: Optional[date] = None
    notes: Optional[str] = None


class FuelExpenseResponse(BaseModel):
    """Schema for fuel expense response."""
    id: int
    vehicle_id: int
    trip_id: Optional[int]
    liters: float
    cost: float
    cost_per_liter: float
    km: float
    fuel_date: date
    notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    vehicle: Optional[VehicleSummary] = None
    
    class Config:
        from_attributes = True


class FuelExpenseListResponse(BaseModel):
    expenses: List[FuelExpenseResponse]
    total: int
    page: int
    page_size: int
