"""
Demo data seeding.

Resets the fleet tables to a small, known fleet and makes sure the four
role accounts exist. Used by POST /v1/seed and `python -m fleetflow.seed_data`.
"""

import logging
from datetime import date, datetime, timezone
from typing import Dict, List

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from fleetflow.app.core.exceptions import DuplicateRecordError
from fleetflow.app.core.security import get_password_hash
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.enums import (
    UserRole, VehicleType, VehicleStatus, DriverStatus, MaintenanceStatus
)
from fleetflow.app.models.fuel_expense import FuelExpense
from fleetflow.app.models.maintenance import Maintenance
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import TripStatus
from fleetflow.app.models.user import User
from fleetflow.app.models.vehicle import Vehicle

logger = logging.getLogger("fleetflow.seed")


# (email, name, password, role)
DEMO_USERS = [
    ("manager@fleetflow.com", "Fleet Manager", "manager123", UserRole.MANAGER),
    ("dispatcher@fleetflow.com", "Dispatcher", "dispatcher123", UserRole.DISPATCHER),
    ("safety@fleetflow.com", "Safety Officer", "safety123", UserRole.SAFETY_OFFICER),
    ("finance@fleetflow.com", "Financial Analyst", "finance123", UserRole.FINANCIAL_ANALYST),
]

DEMO_VEHICLES = [
    dict(name="TR-001", license_plate="MH02AB0001", model="Volvo FH16", vehicle_type=VehicleType.TRUCK,
         max_load_capacity=25000, status=VehicleStatus.AVAILABLE, current_odometer=45230,
         region="West", acquisition_cost=800000),
    dict(name="TR-005", license_plate="MH02AB0005", model="Mercedes Actros", vehicle_type=VehicleType.TRUCK,
         max_load_capacity=24000, status=VehicleStatus.ON_TRIP, current_odometer=67890,
         region="North", acquisition_cost=850000),
    dict(name="TR-008", license_plate="MH02AB0008", model="Scania R450", vehicle_type=VehicleType.TRUCK,
         max_load_capacity=23000, status=VehicleStatus.IN_SHOP, current_odometer=89120,
         region="South", acquisition_cost=820000),
    dict(name="TR-012", license_plate="MH02AB0012", model="Man TGX", vehicle_type=VehicleType.TRUCK,
         max_load_capacity=25500, status=VehicleStatus.AVAILABLE, current_odometer=12450,
         region="East", acquisition_cost=780000),
    dict(name="VN-003", license_plate="MH02AB0003", model="Ford Transit", vehicle_type=VehicleType.VAN,
         max_load_capacity=3500, status=VehicleStatus.AVAILABLE, current_odometer=34560,
         region="West", acquisition_cost=350000),
]

DEMO_DRIVERS = [
    dict(name="John Doe", email="john@example.com", license_number="DL-2024-001",
         license_expiry=date(2027, 12, 31), safety_score=95, trips_completed=127, trips_assigned=130,
         status=DriverStatus.ON_DUTY),
    dict(name="Jane Smith", email="jane@example.com", license_number="DL-2024-002",
         license_expiry=date(2026, 3, 15), safety_score=88, trips_completed=104, trips_assigned=112,
         status=DriverStatus.ON_DUTY),
    dict(name="Mike Johnson", email="mike@example.com", license_number="DL-2023-003",
         license_expiry=date(2025, 6, 20), safety_score=76, trips_completed=148, trips_assigned=156,
         status=DriverStatus.OFF_DUTY),
    dict(name="Sarah Wilson", email="sarah@example.com", license_number="DL-2023-004",
         license_expiry=date(2024, 3, 10), safety_score=62, trips_completed=79, trips_assigned=89,
         status=DriverStatus.SUSPENDED),
    dict(name="Alex Brown", email="alex@example.com", license_number="DL-2024-005",
         license_expiry=date(2027, 9, 1), safety_score=91, trips_completed=98, trips_assigned=100,
         status=DriverStatus.ON_DUTY),
    dict(name="Lisa Chen", email="lisa@example.com", license_number="DL-2024-006",
         license_expiry=date(2026, 2, 28), safety_score=84, trips_completed=65, trips_assigned=70,
         status=DriverStatus.OFF_DUTY),
]

# Indexes refer to DEMO_VEHICLES / DEMO_DRIVERS
DEMO_TRIPS = [
    dict(trip_id="TR-0001", vehicle=1, driver=0, cargo_weight=2500, start_location="Warehouse A",
         end_location="Store B", status=TripStatus.DISPATCHED,
         start_time=datetime(2026, 2, 20, 10, 0, tzinfo=timezone.utc)),
    dict(trip_id="TR-0002", vehicle=1, driver=1, cargo_weight=3200, start_location="Port C",
         end_location="Store D", status=TripStatus.DISPATCHED,
         start_time=datetime(2026, 2, 20, 11, 30, tzinfo=timezone.utc)),
    dict(trip_id="TR-0003", vehicle=2, driver=2, cargo_weight=1800, start_location="Factory E",
         end_location="Retail F", status=TripStatus.COMPLETED,
         start_time=datetime(2026, 2, 19, 9, 0, tzinfo=timezone.utc),
         end_time=datetime(2026, 2, 19, 17, 0, tzinfo=timezone.utc), total_distance=320),
    dict(trip_id="TR-0004", vehicle=3, driver=3, cargo_weight=2200, start_location="Warehouse A",
         end_location="Store G", status=TripStatus.DRAFT),
]

DEMO_FUEL = [
    dict(vehicle=0, liters=150, cost=15000, cost_per_liter=100, km=930, fuel_date=date(2024, 1, 20)),
    dict(vehicle=1, liters=120, cost=12000, cost_per_liter=100, km=768, fuel_date=date(2024, 1, 19)),
    dict(vehicle=2, liters=140, cost=14000, cost_per_liter=100, km=854, fuel_date=date(2024, 1, 18)),
    dict(vehicle=3, liters=110, cost=11000, cost_per_liter=100, km=693, fuel_date=date(2024, 1, 17)),
    dict(vehicle=0, liters=130, cost=13000, cost_per_liter=100, km=806, fuel_date=date(2024, 1, 15)),
    dict(vehicle=1, liters=145, cost=14500, cost_per_liter=100, km=928, fuel_date=date(2024, 1, 14)),
]

DEMO_MAINTENANCE = [
    dict(vehicle=0, service_type="Oil Change", cost=250, service_date=date(2024, 1, 20),
         status=MaintenanceStatus.COMPLETED),
    dict(vehicle=1, service_type="Tire Replacement", cost=800, service_date=date(2024, 1, 19),
         status=MaintenanceStatus.COMPLETED),
    dict(vehicle=2, service_type="Brake Service", cost=1200, service_date=date(2024, 1, 21),
         status=MaintenanceStatus.SCHEDULED),
    dict(vehicle=3, service_type="Engine Inspection", cost=500, service_date=date(2024, 1, 18),
         status=MaintenanceStatus.COMPLETED),
    dict(vehicle=0, service_type="Filter Replacement", cost=150, service_date=date(2024, 1, 10),
         status=MaintenanceStatus.COMPLETED),
    dict(vehicle=2, service_type="Transmission Check", cost=350, service_date=date(2024, 1, 5),
         status=MaintenanceStatus.COMPLETED),
]

FLEET_MODELS = [Trip, FuelExpense, Maintenance, Driver, Vehicle]


async def ensure_demo_users(db: AsyncSession) -> List[User]:
    """Create any of the four role accounts that do not exist yet."""
    created = []
    for email, name, password, role in DEMO_USERS:
        result = await db.execute(select(User).where(User.email == email))
        if result.scalar_one_or_none():
            continue
        user = User(
            email=email,
            name=name,
            hashed_password=get_password_hash(password),
            role=role,
            is_active=True,
        )
        db.add(user)
        created.append(user)
    return created


async def _ensure_demo_keys_free(db: AsyncSession):
    plates = [v["license_plate"] for v in DEMO_VEHICLES]
    emails = [d["email"] for d in DEMO_DRIVERS]
    trip_codes = [t["trip_id"] for t in DEMO_TRIPS]
    taken_plates = (await db.execute(
        select(Vehicle.license_plate).where(Vehicle.license_plate.in_(plates))
    )).scalars().all()
    taken_emails = (await db.execute(
        select(Driver.email).where(Driver.email.in_(emails))
    )).scalars().all()
    taken_trips = (await db.execute(
        select(Trip.trip_id).where(Trip.trip_id.in_(trip_codes))
    )).scalars().all()
    if taken_plates or taken_emails or taken_trips:
        raise DuplicateRecordError(
            "Demo data already present; seed with reset=true to reload it",
            details={
                "license_plates": sorted(taken_plates),
                "emails": sorted(taken_emails),
                "trip_ids": sorted(taken_trips),
            },
        )


async def seed_demo_data(db: AsyncSession, reset: bool = True) -> Dict[str, int]:
    """
    Load the demo fleet.
    
    Args:
        db: Database session (committed here)
        reset: Clear vehicles, drivers, trips, fuel and maintenance first
        
    Returns:
        Row counts per seeded table
    
    Raises:
        DuplicateRecordError: reset is off and demo plates or emails are already taken
    """
    if reset:
        for model in FLEET_MODELS:
            await db.execute(delete(model))
    else:
        await _ensure_demo_keys_free(db)
    
    await ensure_demo_users(db)
    
    # Vehicle cost totals are derived from the seeded records so the ledger starts balanced
    vehicles = []
    for index, data in enumerate(DEMO_VEHICLES):
        vehicles.append(Vehicle(
            **data,
            total_fuel_cost=sum(f["cost"] for f in DEMO_FUEL if f["vehicle"] == index),
            total_maintenance_cost=sum(m["cost"] for m in DEMO_MAINTENANCE if m["vehicle"] == index),
        ))
    drivers = [Driver(**data) for data in DEMO_DRIVERS]
    db.add_all(vehicles + drivers)
    await db.flush()
    
    trips = []
    for data in DEMO_TRIPS:
        fields = dict(data)
        vehicle = vehicles[fields.pop("vehicle")]
        driver = drivers[fields.pop("driver")]
        trips.append(Trip(vehicle_id=vehicle.id, driver_id=driver.id, **fields))
    
    fuel = []
    for data in DEMO_FUEL:
        fields = dict(data)
        vehicle = vehicles[fields.pop("vehicle")]
        fuel.append(FuelExpense(vehicle_id=vehicle.id, **fields))
    
    maintenance = []
    for data in DEMO_MAINTENANCE:
        fields = dict(data)
        vehicle = vehicles[fields.pop("vehicle")]
        maintenance.append(Maintenance(vehicle_id=vehicle.id, **fields))
    
    db.add_all(trips + fuel + maintenance)
    await db.commit()
    
    counts = {
        "vehicles": len(vehicles),
        "drivers": len(drivers),
        "trips": len(trips),
        "fuel_expenses": len(fuel),
        "maintenance": len(maintenance),
    }
    logger.info("Demo data seeded: %s", counts)
    return counts
