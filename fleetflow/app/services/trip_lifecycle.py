"""
Trip lifecycle service.

Owns trip creation rules and the draft -> dispatched -> completed/cancelled
state machine, including the vehicle and driver side effects of each edge.
Functions stage changes on the session; endpoints commit.
"""

import logging
import time
import uuid
from datetime import datetime, timezone, date
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from fleetflow.app.core.exceptions import (
    BusinessRuleError,
    InvalidStatusTransitionError,
    ResourceNotFoundError,
)
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.enums import DriverStatus, VehicleStatus
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import TripStatus, TRIP_TRANSITIONS
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.driver import DriverSummary
from fleetflow.app.schemas.trip import TripCreate, TripResponse, TripStatusUpdate
from fleetflow.app.schemas.vehicle import VehicleSummary
from fleetflow.app.services import compliance

logger = logging.getLogger("fleetflow.trips")


def format_kg(value: float) -> str:
    """Render a weight without a trailing .0 for whole numbers (4000, 3500.5)."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def generate_trip_id() -> str:
    """Human readable trip reference derived from the creation timestamp."""
    millis = int(time.time() * 1000)
    return f"TR-{millis}-{uuid.uuid4().hex[:4].upper()}"


def is_valid_transition(current: TripStatus, requested: TripStatus) -> bool:
    return requested in TRIP_TRANSITIONS.get(current, set())


async def _get_vehicle(db: AsyncSession, vehicle_id: int) -> Optional[Vehicle]:
    result = await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
    return result.scalar_one_or_none()


async def _get_driver(db: AsyncSession, driver_id: int) -> Optional[Driver]:
    result = await db.execute(select(Driver).where(Driver.id == driver_id))
    return result.scalar_one_or_none()


async def create_trip(db: AsyncSession, trip_data: TripCreate, today: Optional[date] = None) -> Tuple[Trip, Vehicle, Driver]:
    """
    Validate and stage a new draft trip.
    
    Validates:
    - Vehicle exists and can carry the cargo
    - Driver exists, is not suspended and holds an unexpired license
    
    The driver's trips_assigned counter is incremented.
    """
    vehicle = await _get_vehicle(db, trip_data.vehicle_id)
    if not vehicle:
        raise ResourceNotFoundError("Vehicle", trip_data.vehicle_id)
    
    if trip_data.cargo_weight > vehicle.max_load_capacity:
        raise BusinessRuleError(
            f"Cargo weight ({format_kg(trip_data.cargo_weight)}kg) exceeds "
            f"vehicle capacity ({format_kg(vehicle.max_load_capacity)}kg)",
            details={
                "cargo_weight": trip_data.cargo_weight,
                "max_load_capacity": vehicle.max_load_capacity,
            }
        )
    
    driver = await _get_driver(db, trip_data.driver_id)
    if not driver:
        raise ResourceNotFoundError("Driver", trip_data.driver_id)
    
    if driver.status == DriverStatus.SUSPENDED:
        raise BusinessRuleError(
            f"Driver {driver.name} is suspended and cannot be assigned",
            details={"driver_id": driver.id}
        )
    
    if compliance.license_status(driver.license_expiry, today) == compliance.LicenseStatus.EXPIRED:
        raise BusinessRuleError(
            f"Driver {driver.name} has an expired license",
            details={"driver_id": driver.id, "license_expiry": driver.license_expiry.isoformat()}
        )
    
    trip = Trip(
        trip_id=generate_trip_id(),
        vehicle_id=vehicle.id,
        driver_id=driver.id,
        cargo_weight=trip_data.cargo_weight,
        cargo_description=trip_data.cargo_description,
        start_location=trip_data.start_location,
        end_location=trip_data.end_location,
        notes=trip_data.notes,
        status=TripStatus.DRAFT,
    )
    driver.trips_assigned = (driver.trips_assigned or 0) + 1
    
    db.add(trip)
    return trip, vehicle, driver


async def apply_status_transition(db: AsyncSession, trip: Trip, update: TripStatusUpdate) -> List[object]:
    """
    Move a trip along one lifecycle edge and stage the side effects.
    
    - dispatched: start_time, start odometer, vehicle on_trip
    - completed: end_time, distance/odometer, vehicle available, driver trips_completed + 1
    - cancelled: vehicle released if the trip was on the road
    
    Linked vehicle/driver rows that no longer exist are skipped.
    
    Returns:
        The touched vehicle/driver rows, for refreshing after commit
        
    Raises:
        InvalidStatusTransitionError: edge not in the lifecycle (including same status)
    """
    current = trip.status
    requested = update.status
    
    if not is_valid_transition(current, requested):
        raise InvalidStatusTransitionError(current.value, requested.value)
    
    now = datetime.now(timezone.utc)
    vehicle = await _get_vehicle(db, trip.vehicle_id)
    driver = await _get_driver(db, trip.driver_id)
    touched = []
    
    if requested == TripStatus.DISPATCHED:
        trip.start_time = now
        if update.start_odometer is not None:
            trip.start_odometer = update.start_odometer
        elif vehicle is not None:
            trip.start_odometer = vehicle.current_odometer
        if vehicle is not None:
            vehicle.status = VehicleStatus.ON_TRIP
            touched.append(vehicle)
    
    elif requested == TripStatus.COMPLETED:
        trip.end_time = now
        if update.end_odometer is not None:
            trip.end_odometer = update.end_odometer
            if trip.start_odometer is not None:
                trip.total_distance = max(update.end_odometer - trip.start_odometer, 0)
        if vehicle is not None:
            vehicle.status = VehicleStatus.AVAILABLE
            if update.end_odometer is not None:
                vehicle.current_odometer = update.end_odometer
            touched.append(vehicle)
        if driver is not None:
            driver.trips_completed = (driver.trips_completed or 0) + 1
            touched.append(driver)
    
    elif requested == TripStatus.CANCELLED:
        if current == TripStatus.DISPATCHED and vehicle is not None:
            vehicle.status = VehicleStatus.AVAILABLE
            touched.append(vehicle)
    
    trip.status = requested
    logger.info("Trip %s: %s -> %s", trip.trip_id, current.value, requested.value)
    return touched


async def load_references(
    db: AsyncSession, trips: Iterable[Trip]
) -> Tuple[Dict[int, Vehicle], Dict[int, Driver]]:
    """Fetch the vehicles and drivers referenced by a batch of trips."""
    trips = list(trips)
    vehicle_ids = {t.vehicle_id for t in trips}
    driver_ids = {t.driver_id for t in trips}
    
    vehicles = {}
    if vehicle_ids:
        result = await db.execute(select(Vehicle).where(Vehicle.id.in_(vehicle_ids)))
        vehicles = {v.id: v for v in result.scalars().all()}
    
    drivers = {}
    if driver_ids:
        result = await db.execute(select(Driver).where(Driver.id.in_(driver_ids)))
        drivers = {d.id: d for d in result.scalars().all()}
    
    return vehicles, drivers


def to_response(trip: Trip, vehicles: Dict[int, Vehicle], drivers: Dict[int, Driver]) -> TripResponse:
    """Serialize a trip with its vehicle/driver summaries (None when orphaned)."""
    response = TripResponse.model_validate(trip)
    vehicle = vehicles.get(trip.vehicle_id)
    driver = drivers.get(trip.driver_id)
    response.vehicle = VehicleSummary.model_validate(vehicle) if vehicle else None
    response.driver = DriverSummary.model_validate(driver) if driver else None
    return response


async def serialize_trips(db: AsyncSession, trips: List[Trip]) -> List[TripResponse]:
    vehicles, drivers = await load_references(db, trips)
    return [to_response(trip, vehicles, drivers) for trip in trips]
