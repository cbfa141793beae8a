"""
Driver Pydantic schemas.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator
from datetime import date, datetime
from typing import Optional, List
from fleetflow.app.models.enums import DriverStatus


class DriverCreate(BaseModel):
    """Schema for registering a driver."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    license_number: str = Field(..., min_length=1, max_length=100)
    license_expiry: date
    safety_score: float = Field(100, ge=0, le=100)
    status: DriverStatus = DriverStatus.ON_DUTY

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: str) -> str:
        return value.lower()


class DriverUpdate(BaseModel):
    """Schema for updating a driver (partial)."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailStr] = None
    license_number: Optional[str] = Field(None, min_length=1, max_length=100)
    license_expiry: Optional[date] = None
    safety_score: Optional[float] = Field(None, ge=0, le=100)
    trips_completed: Optional[int] = Field(None, ge=0)
    trips_assigned: Optional[int] = Field(None, ge=0)
    status: Optional[DriverStatus] = None

    @field_validator("email")
    @classmethod
    def lowercase_email(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class DriverResponse(BaseModel):
    """Schema for driver response, with read-time compliance fields."""
    id: int
    name: str
    email: str
    license_number: str
    license_expiry: date
    safety_score: float
    trips_completed: int
    trips_assigned: int
    status: DriverStatus
    created_at: datetime
    updated_at: datetime
    
    # Derived at read time
    license_status: Optional[str] = None
    days_until_license_expiry: Optional[int] = None
    risk_level: Optional[str] = None
    is_assignable: Optional[bool] = None
    completion_rate: Optional[str] = None
    
    class Config:
        from_attributes = True


class DriverSummary(BaseModel):
    """Compact driver view embedded in trip responses."""
    id: int
    name: str
    email: str
    safety_score: float
    status: DriverStatus
    
    class Config:
        from_attributes = True


class DriverListResponse(BaseModel):
    """Schema for paginated driver list."""
    drivers: List[DriverResponse]
    total: int
    page: int
    page_size: int
