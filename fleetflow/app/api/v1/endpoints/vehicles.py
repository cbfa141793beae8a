"""
Vehicle Registry API Endpoints.

All roles can browse the fleet; only the Manager registers, edits and retires vehicles.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fleetflow.app.db.session import get_db
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.models.enums import VehicleType, VehicleStatus
from fleetflow.app.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleResponse, VehicleListResponse
from fleetflow.app.schemas.auth import MessageResponse
from fleetflow.app.core.exceptions import BusinessRuleError, DuplicateRecordError
from fleetflow.app.core.guards import require_role, VEHICLE_READERS, VEHICLE_WRITERS
from fleetflow.app.services import cost_ledger
from fleetflow.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/vehicles", tags=["Vehicles"])


async def _get_vehicle_or_404(db: AsyncSession, vehicle_id: int) -> Vehicle:
    result = await db.execute(select(Vehicle).where(Vehicle.id == vehicle_id))
    vehicle = result.scalar_one_or_none()
    
    if not vehicle:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )
    return vehicle


async def _ensure_plate_available(db: AsyncSession, license_plate: str, exclude_id: Optional[int] = None):
    query = select(Vehicle.id).where(Vehicle.license_plate == license_plate)
    if exclude_id is not None:
        query = query.where(Vehicle.id != exclude_id)
    if (await db.execute(query)).first():
        raise DuplicateRecordError(
            "License plate already registered",
            details={"license_plate": license_plate}
        )


@router.get("", response_model=VehicleListResponse)
async def list_vehicles(
    vehicle_type: Optional[VehicleType] = Query(None, description="Filter by type"),
    vehicle_status: Optional[VehicleStatus] = Query(None, alias="status", description="Filter by status"),
    region: Optional[str] = Query(None, description="Filter by region"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(require_role(VEHICLE_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    List vehicles, newest first, with optional type/status/region filters.
    """
    filters = []
    if vehicle_type:
        filters.append(Vehicle.vehicle_type == vehicle_type)
    if vehicle_status:
        filters.append(Vehicle.status == vehicle_status)
    if region:
        filters.append(Vehicle.region == region)
    
    total = (await db.execute(select(func.count(Vehicle.id)).where(*filters))).scalar()
    
    offset = (page - 1) * page_size
    query = select(Vehicle).where(*filters)\
        .order_by(Vehicle.created_at.desc(), Vehicle.id.desc())\
        .offset(offset).limit(page_size)
    vehicles = (await db.execute(query)).scalars().all()
    
    return VehicleListResponse(
        vehicles=[VehicleResponse.model_validate(v) for v in vehicles],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{vehicle_id}", response_model=VehicleResponse)
async def get_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(require_role(VEHICLE_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """Get a single vehicle."""
    vehicle = await _get_vehicle_or_404(db, vehicle_id)
    return VehicleResponse.model_validate(vehicle)


@router.post("", response_model=VehicleResponse, status_code=status.HTTP_201_CREATED)
async def create_vehicle(
    vehicle_data: VehicleCreate,
    current_user: dict = Depends(require_role(VEHICLE_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new vehicle (Manager only).
    
    Cost totals start at zero and are maintained by fuel/maintenance logging.
    """
    await _ensure_plate_available(db, vehicle_data.license_plate)
    
    vehicle = Vehicle(**vehicle_data.model_dump())
    db.add(vehicle)
    await db.commit()
    await db.refresh(vehicle)
    
    await log_user_action(db, current_user, AuditAction.VEHICLE_CREATED, vehicle.id, {"license_plate": vehicle.license_plate})
    
    return VehicleResponse.model_validate(vehicle)


@router.api_route("/{vehicle_id}", methods=["PUT", "PATCH"], response_model=VehicleResponse)
async def update_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    vehicle_data: VehicleUpdate = ...,
    current_user: dict = Depends(require_role(VEHICLE_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Update vehicle details (Manager only). Only provided fields change.
    """
    vehicle = await _get_vehicle_or_404(db, vehicle_id)
    
    update_data = vehicle_data.model_dump(exclude_unset=True, exclude_none=True)
    if "license_plate" in update_data and update_data["license_plate"] != vehicle.license_plate:
        await _ensure_plate_available(db, update_data["license_plate"], exclude_id=vehicle.id)
    
    for field, value in update_data.items():
        setattr(vehicle, field, value)
    
    await db.commit()
    await db.refresh(vehicle)
    
    await log_user_action(db, current_user, AuditAction.VEHICLE_UPDATED, vehicle.id, {
        "updated_fields": list(update_data.keys())
    })
    
    return VehicleResponse.model_validate(vehicle)


@router.patch("/{vehicle_id}/toggle-service", response_model=VehicleResponse)
async def toggle_vehicle_service(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(require_role(VEHICLE_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Take a vehicle out of service, or return it to available (Manager only).
    """
    vehicle = await _get_vehicle_or_404(db, vehicle_id)
    
    if vehicle.status == VehicleStatus.OUT_OF_SERVICE:
        vehicle.status = VehicleStatus.AVAILABLE
    elif vehicle.status == VehicleStatus.AVAILABLE:
        vehicle.status = VehicleStatus.OUT_OF_SERVICE
    else:
        raise BusinessRuleError(
            f"Cannot toggle service while vehicle is {vehicle.status.value}",
            details={"status": vehicle.status.value}
        )
    
    await db.commit()
    await db.refresh(vehicle)
    
    return VehicleResponse.model_validate(vehicle)


@router.post("/{vehicle_id}/reconcile-costs", response_model=VehicleResponse)
async def reconcile_vehicle_costs(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(require_role(VEHICLE_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Recompute fuel and maintenance totals from the logged records (Manager only).
    """
    vehicle = await _get_vehicle_or_404(db, vehicle_id)
    await cost_ledger.reconcile(db, vehicle)
    await db.commit()
    await db.refresh(vehicle)
    
    await log_user_action(db, current_user, AuditAction.VEHICLE_COSTS_RECONCILED, vehicle.id, {
        "total_fuel_cost": vehicle.total_fuel_cost,
        "total_maintenance_cost": vehicle.total_maintenance_cost
    })
    
    return VehicleResponse.model_validate(vehicle)


@router.delete("/{vehicle_id}", response_model=MessageResponse)
async def delete_vehicle(
    vehicle_id: int = Path(..., description="Vehicle ID"),
    current_user: dict = Depends(require_role(VEHICLE_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Delete a vehicle (Manager only).
    
    Trips, fuel and maintenance records referencing it are kept.
    """
    vehicle = await _get_vehicle_or_404(db, vehicle_id)
    license_plate = vehicle.license_plate
    
    await db.delete(vehicle)
    await db.commit()
    
    await log_user_action(db, current_user, AuditAction.VEHICLE_DELETED, vehicle_id, {"license_plate": license_plate})
    
    return MessageResponse(message="Vehicle deleted")
