"""
Maintenance API Endpoints.

Scheduling service puts an available vehicle in the shop; completing it
releases the vehicle. Costs flow into total_maintenance_cost in the same
transaction as the record change.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fleetflow.app.db.session import get_db
from fleetflow.app.models.maintenance import Maintenance
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.models.enums import MaintenanceStatus, VehicleStatus
from fleetflow.app.schemas.maintenance import (
    MaintenanceCreate, MaintenanceUpdate, MaintenanceResponse, MaintenanceListResponse
)
from fleetflow.app.schemas.vehicle import VehicleSummary
from fleetflow.app.schemas.auth import MessageResponse
from fleetflow.app.core.guards import require_role, MAINTENANCE_READERS, MAINTENANCE_WRITERS
from fleetflow.app.services import cost_ledger
from fleetflow.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/maintenance", tags=["Maintenance"])


async def _serialize(db: AsyncSession, records: List[Maintenance]) -> List[MaintenanceResponse]:
    vehicle_ids = {r.vehicle_id for r in records}
    vehicles = {}
    if vehicle_ids:
        result = await db.execute(select(Vehicle).where(Vehicle.id.in_(vehicle_ids)))
        vehicles = {v.id: v for v in result.scalars().all()}
    
    responses = []
    for record in records:
        vehicle = vehicles.get(record.vehicle_id)
        response = MaintenanceResponse.model_validate(record)
        response.vehicle = VehicleSummary.model_validate(vehicle) if vehicle else None
        responses.append(response)
    return responses


async def _get_record_or_404(db: AsyncSession, record_id: int) -> Maintenance:
    result = await db.execute(select(Maintenance).where(Maintenance.id == record_id))
    record = result.scalar_one_or_none()
    
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Maintenance record not found"
        )
    return record


async def _require_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await cost_ledger.get_vehicle(db, vehicle_id)
    if not vehicle:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )
    return vehicle


@router.get("", response_model=MaintenanceListResponse)
async def list_maintenance(
    vehicle_id: Optional[int] = Query(None, description="Filter by vehicle"),
    record_status: Optional[MaintenanceStatus] = Query(None, alias="status", description="Filter by status"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(require_role(MAINTENANCE_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """List maintenance records, newest first."""
    filters = []
    if vehicle_id is not None:
        filters.append(Maintenance.vehicle_id == vehicle_id)
    if record_status:
        filters.append(Maintenance.status == record_status)
    
    total = (await db.execute(select(func.count(Maintenance.id)).where(*filters))).scalar()
    
    offset = (page - 1) * page_size
    query = select(Maintenance).where(*filters)\
        .order_by(Maintenance.created_at.desc(), Maintenance.id.desc())\
        .offset(offset).limit(page_size)
    records = (await db.execute(query)).scalars().all()
    
    return MaintenanceListResponse(
        records=await _serialize(db, records),
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{record_id}", response_model=MaintenanceResponse)
async def get_maintenance(
    record_id: int = Path(..., description="Maintenance record ID"),
    current_user: dict = Depends(require_role(MAINTENANCE_READERS)),
    db: AsyncSession = Depends(get_db)
):
    record = await _get_record_or_404(db, record_id)
    return (await _serialize(db, [record]))[0]


@router.post("", response_model=MaintenanceResponse, status_code=status.HTTP_201_CREATED)
async def create_maintenance(
    record_data: MaintenanceCreate,
    current_user: dict = Depends(require_role(MAINTENANCE_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Schedule maintenance (Manager only).
    
    The record starts as scheduled, its cost is added to the vehicle and an
    available vehicle goes in_shop.
    """
    vehicle = await _require_vehicle(db, record_data.vehicle_id)
    
    record = Maintenance(**record_data.model_dump(), status=MaintenanceStatus.SCHEDULED)
    db.add(record)
    await cost_ledger.adjust(db, vehicle.id, cost_ledger.MAINTENANCE, record.cost)
    if vehicle.status == VehicleStatus.AVAILABLE:
        vehicle.status = VehicleStatus.IN_SHOP
    
    await db.commit()
    await db.refresh(record)
    await db.refresh(vehicle)
    
    await log_user_action(db, current_user, AuditAction.MAINTENANCE_CREATED, record.id, {
        "vehicle_id": record.vehicle_id,
        "service_type": record.service_type,
        "cost": record.cost
    })
    
    return (await _serialize(db, [record]))[0]


@router.api_route("/{record_id}", methods=["PUT", "PATCH"], response_model=MaintenanceResponse)
async def update_maintenance(
    record_id: int = Path(..., description="Maintenance record ID"),
    record_data: MaintenanceUpdate = ...,
    current_user: dict = Depends(require_role(MAINTENANCE_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a maintenance record (Manager only).
    
    Cost changes adjust the vehicle total by the difference. Marking the
    record completed makes the vehicle available again.
    """
    record = await _get_record_or_404(db, record_id)
    update_data = record_data.model_dump(exclude_unset=True)
    
    new_vehicle_id = update_data.get("vehicle_id") or record.vehicle_id
    if new_vehicle_id != record.vehicle_id:
        await _require_vehicle(db, new_vehicle_id)
    
    old_vehicle_id, old_cost, old_status = record.vehicle_id, record.cost, record.status
    for field, value in update_data.items():
        if value is None and field not in ("description", "next_service_date", "notes"):
            continue
        setattr(record, field, value)
    
    await cost_ledger.move(
        db, cost_ledger.MAINTENANCE, old_vehicle_id, old_cost, record.vehicle_id, record.cost
    )
    
    if record.status == MaintenanceStatus.COMPLETED and old_status != MaintenanceStatus.COMPLETED:
        vehicle = await cost_ledger.get_vehicle(db, record.vehicle_id)
        if vehicle is not None:
            vehicle.status = VehicleStatus.AVAILABLE
    
    await db.commit()
    await db.refresh(record)
    
    await log_user_action(db, current_user, AuditAction.MAINTENANCE_UPDATED, record.id, {
        "updated_fields": list(update_data.keys()),
        "status": record.status.value
    })
    
    return (await _serialize(db, [record]))[0]


@router.delete("/{record_id}", response_model=MessageResponse)
async def delete_maintenance(
    record_id: int = Path(..., description="Maintenance record ID"),
    current_user: dict = Depends(require_role(MAINTENANCE_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a maintenance record (Manager only) and take its cost off the vehicle."""
    record = await _get_record_or_404(db, record_id)
    vehicle_id, cost = record.vehicle_id, record.cost
    
    await cost_ledger.adjust(db, vehicle_id, cost_ledger.MAINTENANCE, -cost)
    await db.delete(record)
    await db.commit()
    
    await log_user_action(db, current_user, AuditAction.MAINTENANCE_DELETED, record_id, {
        "vehicle_id": vehicle_id,
        "cost": cost
    })
    
    return MessageResponse(message="Maintenance record deleted")
