"""
Analytics Service.

Handles data aggregation for the role dashboards.
Focused on READ-ONLY operations; queries run one after another on the
request's session.
"""

import calendar
from datetime import date
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from fleetflow.app.models.driver import Driver
from fleetflow.app.models.enums import DriverStatus, VehicleStatus
from fleetflow.app.models.fuel_expense import FuelExpense
from fleetflow.app.models.maintenance import Maintenance
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import TripStatus
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.analytics import (
    DashboardStats, VehicleROI, FuelEfficiency, DriverPerformance,
    MonthlyCosts, TripSummary, SafetyOverview, SafetyScoreBand, DriverBrief
)
from fleetflow.app.services import compliance
from fleetflow.app.services.compliance import percent


async def _count(db: AsyncSession, column, *conditions) -> int:
    query = select(func.count(column))
    if conditions:
        query = query.where(*conditions)
    return (await db.execute(query)).scalar() or 0


async def _sum(db: AsyncSession, column, *conditions) -> float:
    query = select(func.coalesce(func.sum(column), 0))
    if conditions:
        query = query.where(*conditions)
    return float((await db.execute(query)).scalar() or 0)


def _driver_brief(driver: Driver, today: date) -> DriverBrief:
    return DriverBrief(
        driver_id=driver.id,
        name=driver.name,
        safety_score=driver.safety_score,
        status=driver.status.value,
        risk_level=compliance.risk_level(driver, today),
    )


class AnalyticsService:

    @staticmethod
    async def get_dashboard(db: AsyncSession) -> DashboardStats:
        """Fleet-wide KPIs shown on every role's landing page."""
        
        # 1. Vehicle counts
        total_vehicles = await _count(db, Vehicle.id)
        active_fleet = await _count(db, Vehicle.id, Vehicle.status == VehicleStatus.ON_TRIP)
        maintenance_alerts = await _count(db, Vehicle.id, Vehicle.status == VehicleStatus.IN_SHOP)
        available_vehicles = await _count(db, Vehicle.id, Vehicle.status == VehicleStatus.AVAILABLE)
        
        # 2. Trip counts
        total_trips = await _count(db, Trip.id)
        pending_cargo = await _count(db, Trip.id, Trip.status == TripStatus.DRAFT)
        completed_trips = await _count(db, Trip.id, Trip.status == TripStatus.COMPLETED)
        active_trips = await _count(db, Trip.id, Trip.status == TripStatus.DISPATCHED)
        cancelled_trips = await _count(db, Trip.id, Trip.status == TripStatus.CANCELLED)
        total_distance = await _sum(db, Trip.total_distance, Trip.status == TripStatus.COMPLETED)
        
        # 3. Drivers
        total_drivers = await _count(db, Driver.id)
        on_duty_drivers = await _count(db, Driver.id, Driver.status == DriverStatus.ON_DUTY)
        suspended_drivers = await _count(db, Driver.id, Driver.status == DriverStatus.SUSPENDED)
        avg_safety = (await db.execute(select(func.avg(Driver.safety_score)))).scalar()
        
        # 4. Costs from the records themselves; spend on deleted vehicles still counts
        total_fuel_cost = await _sum(db, FuelExpense.cost)
        total_maintenance_cost = await _sum(db, Maintenance.cost)
        
        return DashboardStats(
            total_vehicles=total_vehicles,
            active_fleet=active_fleet,
            maintenance_alerts=maintenance_alerts,
            available_vehicles=available_vehicles,
            pending_cargo=pending_cargo,
            utilization_rate=percent(active_fleet, total_vehicles),
            total_trips=total_trips,
            completed_trips=completed_trips,
            active_trips=active_trips,
            cancelled_trips=cancelled_trips,
            completion_rate=percent(completed_trips, total_trips),
            total_drivers=total_drivers,
            on_duty_drivers=on_duty_drivers,
            suspended_drivers=suspended_drivers,
            total_fuel_cost=total_fuel_cost,
            total_maintenance_cost=total_maintenance_cost,
            total_distance=total_distance,
            avg_safety_score=f"{avg_safety:.1f}" if total_drivers and avg_safety is not None else "0",
        )

    @staticmethod
    async def get_vehicle_roi(db: AsyncSession) -> List[VehicleROI]:
        """Operational cost as a share of acquisition cost, per vehicle."""
        result = await db.execute(select(Vehicle).order_by(Vehicle.name))
        
        data = []
        for vehicle in result.scalars().all():
            total_cost = vehicle.total_fuel_cost + vehicle.total_maintenance_cost
            data.append(VehicleROI(
                vehicle_id=vehicle.id,
                name=vehicle.name,
                license_plate=vehicle.license_plate,
                acquisition_cost=vehicle.acquisition_cost,
                fuel_cost=vehicle.total_fuel_cost,
                maintenance_cost=vehicle.total_maintenance_cost,
                total_operational_cost=total_cost,
                roi_percentage=percent(total_cost, vehicle.acquisition_cost, digits=2),
            ))
        return data

    @staticmethod
    async def get_fuel_efficiency(db: AsyncSession) -> List[FuelEfficiency]:
        """Fuel consumption grouped by vehicle."""
        stmt = select(
            FuelExpense.vehicle_id,
            Vehicle.name,
            Vehicle.license_plate,
            func.sum(FuelExpense.liters).label("total_liters"),
            func.sum(FuelExpense.cost).label("total_cost"),
            func.coalesce(func.sum(FuelExpense.km), 0).label("total_km"),
            func.avg(FuelExpense.cost_per_liter).label("avg_cost_per_liter"),
            func.count(FuelExpense.id).label("record_count"),
        ).outerjoin(Vehicle, Vehicle.id == FuelExpense.vehicle_id)\
         .group_by(FuelExpense.vehicle_id, Vehicle.name, Vehicle.license_plate)\
         .order_by(FuelExpense.vehicle_id)
        
        results = await db.execute(stmt)
        
        data = []
        for row in results:
            total_liters = float(row.total_liters or 0)
            total_km = float(row.total_km or 0)
            data.append(FuelEfficiency(
                vehicle_id=row.vehicle_id,
                name=row.name,
                license_plate=row.license_plate,
                total_liters=total_liters,
                total_cost=float(row.total_cost or 0),
                total_km=total_km,
                avg_cost_per_liter=round(float(row.avg_cost_per_liter or 0), 2),
                km_per_liter=f"{total_km / total_liters:.2f}" if total_liters else "0",
                record_count=row.record_count,
            ))
        return data

    @staticmethod
    async def get_driver_performance(db: AsyncSession, today: Optional[date] = None) -> List[DriverPerformance]:
        """Per-driver completed trips (counted from trips), completion rate and risk."""
        today = today or date.today()
        
        completed_query = select(Trip.driver_id, func.count(Trip.id))\
            .where(Trip.status == TripStatus.COMPLETED)\
            .group_by(Trip.driver_id)
        completed_by_driver = dict((await db.execute(completed_query)).all())
        
        result = await db.execute(select(Driver).order_by(Driver.name))
        
        data = []
        for driver in result.scalars().all():
            completed = completed_by_driver.get(driver.id, 0)
            data.append(DriverPerformance(
                driver_id=driver.id,
                name=driver.name,
                email=driver.email,
                license_number=driver.license_number,
                license_expiry=driver.license_expiry,
                license_status=compliance.license_status(driver.license_expiry, today),
                trips_completed=completed,
                trips_assigned=driver.trips_assigned,
                completion_rate=percent(completed, driver.trips_assigned),
                safety_score=driver.safety_score,
                risk_level=compliance.risk_level(driver, today),
                status=driver.status.value,
            ))
        return data

    @staticmethod
    async def get_monthly_costs(db: AsyncSession, month: Optional[int] = None, year: Optional[int] = None) -> MonthlyCosts:
        """Fuel and maintenance spend for one calendar month (current month by default)."""
        today = date.today()
        month = month or today.month
        year = year or today.year
        
        start = date(year, month, 1)
        end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
        
        fuel_cost = await _sum(
            db, FuelExpense.cost, FuelExpense.fuel_date >= start, FuelExpense.fuel_date < end
        )
        maintenance_cost = await _sum(
            db, Maintenance.cost, Maintenance.service_date >= start, Maintenance.service_date < end
        )
        
        return MonthlyCosts(
            month=f"{calendar.month_name[month]} {year}",
            year=year,
            month_number=month,
            fuel_cost=fuel_cost,
            maintenance_cost=maintenance_cost,
            total_cost=fuel_cost + maintenance_cost,
        )

    @staticmethod
    async def get_trip_summary(db: AsyncSession) -> TripSummary:
        total_trips = await _count(db, Trip.id)
        draft_trips = await _count(db, Trip.id, Trip.status == TripStatus.DRAFT)
        completed_trips = await _count(db, Trip.id, Trip.status == TripStatus.COMPLETED)
        active_trips = await _count(db, Trip.id, Trip.status == TripStatus.DISPATCHED)
        cancelled_trips = await _count(db, Trip.id, Trip.status == TripStatus.CANCELLED)
        total_distance = await _sum(db, Trip.total_distance, Trip.status == TripStatus.COMPLETED)
        
        return TripSummary(
            total_trips=total_trips,
            draft_trips=draft_trips,
            completed_trips=completed_trips,
            active_trips=active_trips,
            cancelled_trips=cancelled_trips,
            completion_rate=percent(completed_trips, total_trips),
            total_distance=total_distance,
        )

    @staticmethod
    async def get_safety_overview(db: AsyncSession, today: Optional[date] = None) -> SafetyOverview:
        """Compliance summary computed from the loaded driver rows."""
        today = today or date.today()
        drivers = (await db.execute(select(Driver))).scalars().all()
        
        license_counts = {
            compliance.LicenseStatus.VALID: 0,
            compliance.LicenseStatus.EXPIRING: 0,
            compliance.LicenseStatus.EXPIRED: 0,
        }
        risk_counts = {
            compliance.RiskLevel.LOW: 0,
            compliance.RiskLevel.MEDIUM: 0,
            compliance.RiskLevel.HIGH: 0,
        }
        for driver in drivers:
            license_counts[compliance.license_status(driver.license_expiry, today)] += 1
            risk_counts[compliance.risk_level(driver, today)] += 1
        
        return SafetyOverview(
            total_drivers=len(drivers),
            on_duty=sum(1 for d in drivers if d.status == DriverStatus.ON_DUTY),
            off_duty=sum(1 for d in drivers if d.status == DriverStatus.OFF_DUTY),
            suspended=sum(1 for d in drivers if d.status == DriverStatus.SUSPENDED),
            valid_licenses=license_counts[compliance.LicenseStatus.VALID],
            expiring_licenses=license_counts[compliance.LicenseStatus.EXPIRING],
            expired_licenses=license_counts[compliance.LicenseStatus.EXPIRED],
            license_compliance_rate=percent(license_counts[compliance.LicenseStatus.VALID], len(drivers)),
            risk_counts=risk_counts,
            assignable_drivers=sum(1 for d in drivers if compliance.is_assignable(d, today)),
            avg_safety_score=compliance.average(d.safety_score for d in drivers),
            safety_distribution=[
                SafetyScoreBand(**band) for band in compliance.safety_distribution(drivers)
            ],
            top_performers=[_driver_brief(d, today) for d in compliance.top_performers(drivers)],
            at_risk_drivers=[_driver_brief(d, today) for d in compliance.at_risk_drivers(drivers)],
        )
