"""
Analytics Schemas.
"""

from pydantic import BaseModel
from typing import List, Optional, Dict
from datetime import date


class DashboardStats(BaseModel):
    """Flat KPI summary shown on every role's landing page."""
    total_vehicles: int
    active_fleet: int
    maintenance_alerts: int
    available_vehicles: int
    pending_cargo: int
    utilization_rate: str
    total_trips: int
    completed_trips: int
    active_trips: int
    cancelled_trips: int
    completion_rate: str
    total_drivers: int
    on_duty_drivers: int
    suspended_drivers: int
    total_fuel_cost: float
    total_maintenance_cost: float
    total_distance: float
    avg_safety_score: str


class VehicleROI(BaseModel):
    """Operational cost relative to acquisition cost per vehicle."""
    vehicle_id: int
    name: str
    license_plate: str
    acquisition_cost: float
    fuel_cost: float
    maintenance_cost: float
    total_operational_cost: float
    roi_percentage: str


class FuelEfficiency(BaseModel):
    """Fuel consumption per vehicle."""
    vehicle_id: int
    name: Optional[str]
    license_plate: Optional[str]
    total_liters: float
    total_cost: float
    total_km: float
    avg_cost_per_liter: float
    km_per_liter: str
    record_count: int


class DriverPerformance(BaseModel):
    """Per-driver trip and compliance view."""
    driver_id: int
    name: str
    email: str
    license_number: str
    license_expiry: date
    license_status: str
    trips_completed: int
    trips_assigned: int
    completion_rate: str
    safety_score: float
    risk_level: str
    status: str


class MonthlyCosts(BaseModel):
    """Fuel and maintenance spend for one calendar month."""
    month: str
    year: int
    month_number: int
    fuel_cost: float
    maintenance_cost: float
    total_cost: float


class TripSummary(BaseModel):
    total_trips: int
    draft_trips: int
    completed_trips: int
    active_trips: int
    cancelled_trips: int
    completion_rate: str
    total_distance: float


class SafetyScoreBand(BaseModel):
    range: str
    count: int


class DriverBrief(BaseModel):
    driver_id: int
    name: str
    safety_score: float
    status: str
    risk_level: str


class SafetyOverview(BaseModel):
    """Compliance summary for the Safety Officer."""
    total_drivers: int
    on_duty: int
    off_duty: int
    suspended: int
    valid_licenses: int
    expiring_licenses: int
    expired_licenses: int
    license_compliance_rate: str
    risk_counts: Dict[str, int]
    assignable_drivers: int
    avg_safety_score: str
    safety_distribution: List[SafetyScoreBand]
    top_performers: List[DriverBrief]
    at_risk_drivers: List[DriverBrief]
