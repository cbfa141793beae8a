"""
Vehicle cost ledger.

Vehicle.total_fuel_cost and Vehicle.total_maintenance_cost mirror the sum
of the linked fuel and maintenance records. Every change to those records
adjusts the totals in the caller's transaction; the caller commits.
"""

import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func

from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.models.fuel_expense import FuelExpense
from fleetflow.app.models.maintenance import Maintenance

logger = logging.getLogger("fleetflow.ledger")

FUEL = "total_fuel_cost"
MAINTENANCE = "total_maintenance_cost"


async def get_vehicle(db: AsyncSession, vehicle_id: Optional[int]) -> Optional[Vehicle]:
    if vehicle_id is None:
        return None
    result = await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
    return result.scalar_one_or_none()


async def adjust(db: AsyncSession, vehicle_id: Optional[int], column: str, delta: float) -> Optional[Vehicle]:
    """
    Add delta to one of the vehicle's cost totals.
    
    Missing vehicles (deleted after the record was logged) are skipped.
    """
    if not delta:
        return await get_vehicle(db, vehicle_id)
    
    vehicle = await get_vehicle(db, vehicle_id)
    if vehicle is None:
        logger.warning("Cost adjustment skipped: vehicle %s not found", vehicle_id)
        return None
    
    setattr(vehicle, column, (getattr(vehicle, column) or 0) + delta)
    logger.info("Vehicle %s %s %+.2f", vehicle_id, column, delta)
    return vehicle


async def move(
    db: AsyncSession,
    column: str,
    old_vehicle_id: int,
    old_cost: float,
    new_vehicle_id: int,
    new_cost: float,
) -> None:
    """Apply a record update: by difference on one vehicle, or moved between two."""
    if old_vehicle_id == new_vehicle_id:
        await adjust(db, new_vehicle_id, column, new_cost - old_cost)
    else:
        await adjust(db, old_vehicle_id, column, -old_cost)
        await adjust(db, new_vehicle_id, column, new_cost)


async def reconcile(db: AsyncSession, vehicle: Vehicle) -> Vehicle:
    """Recompute both totals from the fuel and maintenance records."""
    fuel_total = (await db.execute(
        select(func.coalesce(func.sum(FuelExpense.cost), 0)).where(FuelExpense.vehicle_id == vehicle.id)
    )).scalar()
    maintenance_total = (await db.execute(
        select(func.coalesce(func.sum(Maintenance.cost), 0)).where(Maintenance.vehicle_id == vehicle.id)
    )).scalar()
    
    vehicle.total_fuel_cost = float(fuel_total or 0)
    vehicle.total_maintenance_cost = float(maintenance_total or 0)
    logger.info(
        "Vehicle %s costs reconciled: fuel=%.2f maintenance=%.2f",
        vehicle.id, vehicle.total_fuel_cost, vehicle.total_maintenance_cost
    )
    return vehicle
