"""
Analytics API Endpoints.

Read-only aggregates for the role dashboards. The KPI summary is open to
every role; the detailed views are for Manager, Safety Officer and
Financial Analyst.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role, ALL_ROLES, ANALYTICS_READERS
from fleetflow.app.services.analytics import AnalyticsService
from fleetflow.app.schemas.analytics import (
    DashboardStats, VehicleROI, FuelEfficiency, DriverPerformance,
    MonthlyCosts, TripSummary, SafetyOverview
)

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/dashboard", response_model=DashboardStats)
async def get_dashboard_stats(
    current_user: dict = Depends(require_role(ALL_ROLES)),
    db: AsyncSession = Depends(get_db)
):
    """Fleet, trip, driver and cost KPIs."""
    return await AnalyticsService.get_dashboard(db)


@router.get("/vehicle-roi", response_model=List[VehicleROI])
async def get_vehicle_roi(
    current_user: dict = Depends(require_role(ANALYTICS_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """Operational cost against acquisition cost per vehicle."""
    return await AnalyticsService.get_vehicle_roi(db)


@router.get("/fuel-efficiency", response_model=List[FuelEfficiency])
async def get_fuel_efficiency(
    current_user: dict = Depends(require_role(ANALYTICS_READERS)),
    db: AsyncSession = Depends(get_db)
):
    return await AnalyticsService.get_fuel_efficiency(db)


@router.get("/driver-performance", response_model=List[DriverPerformance])
async def get_driver_performance(
    current_user: dict = Depends(require_role(ANALYTICS_READERS)),
    db: AsyncSession = Depends(get_db)
):
    return await AnalyticsService.get_driver_performance(db)


@router.get("/monthly-costs", response_model=MonthlyCosts)
async def get_monthly_costs(
    month: Optional[int] = Query(None, ge=1, le=12, description="Calendar month, defaults to current"),
    year: Optional[int] = Query(None, ge=1900, le=9999, description="Year, defaults to current"),
    current_user: dict = Depends(require_role(ANALYTICS_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """Fuel and maintenance spend for one calendar month."""
    return await AnalyticsService.get_monthly_costs(db, month=month, year=year)


@router.get("/trip-summary", response_model=TripSummary)
async def get_trip_summary(
    current_user: dict = Depends(require_role(ANALYTICS_READERS)),
    db: AsyncSession = Depends(get_db)
):
    return await AnalyticsService.get_trip_summary(db)


@router.get("/safety", response_model=SafetyOverview)
async def get_safety_overview(
    current_user: dict = Depends(require_role(ANALYTICS_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """License compliance, risk buckets and safety score distribution."""
    return await AnalyticsService.get_safety_overview(db)
