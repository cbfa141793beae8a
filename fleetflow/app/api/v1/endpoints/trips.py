"""
Trip API Endpoints.

Dispatchers create trips and move them through draft -> dispatched ->
completed/cancelled; Managers can follow along read-only.
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fleetflow.app.db.session import get_db
from fleetflow.app.models.trip import Trip
from fleetflow.app.models.trip_enums import TripStatus
from fleetflow.app.schemas.trip import TripCreate, TripUpdate, TripStatusUpdate, TripResponse, TripListResponse
from fleetflow.app.schemas.auth import MessageResponse
from fleetflow.app.core.guards import require_role, TRIP_READERS, TRIP_WRITERS
from fleetflow.app.services import trip_lifecycle
from fleetflow.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/trips", tags=["Trips"])


async def _get_trip_or_404(db: AsyncSession, trip_id: int) -> Trip:
    result = await db.execute(select(Trip).where(Trip.id == trip_id))
    trip = result.scalar_one_or_none()
    
    if not trip:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Trip not found"
        )
    return trip


async def _serialize(db: AsyncSession, trip: Trip) -> TripResponse:
    return (await trip_lifecycle.serialize_trips(db, [trip]))[0]


@router.get("", response_model=TripListResponse)
async def list_trips(
    trip_status: Optional[TripStatus] = Query(None, alias="status", description="Filter by status"),
    vehicle_id: Optional[int] = Query(None, description="Filter by vehicle"),
    driver_id: Optional[int] = Query(None, description="Filter by driver"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(require_role(TRIP_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """List trips, newest first, with vehicle and driver summaries."""
    filters = []
    if trip_status:
        filters.append(Trip.status == trip_status)
    if vehicle_id is not None:
        filters.append(Trip.vehicle_id == vehicle_id)
    if driver_id is not None:
        filters.append(Trip.driver_id == driver_id)
    
    total = (await db.execute(select(func.count(Trip.id)).where(*filters))).scalar()
    
    offset = (page - 1) * page_size
    query = select(Trip).where(*filters)\
        .order_by(Trip.created_at.desc(), Trip.id.desc())\
        .offset(offset).limit(page_size)
    trips = (await db.execute(query)).scalars().all()
    
    return TripListResponse(
        trips=await trip_lifecycle.serialize_trips(db, trips),
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{trip_id}", response_model=TripResponse)
async def get_trip(
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_role(TRIP_READERS)),
    db: AsyncSession = Depends(get_db)
):
    trip = await _get_trip_or_404(db, trip_id)
    return await _serialize(db, trip)


@router.post("", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
async def create_trip(
    trip_data: TripCreate,
    current_user: dict = Depends(require_role(TRIP_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Create a draft trip (Dispatcher only).
    
    Validates:
    - Vehicle exists and cargo fits its max load capacity
    - Driver exists, is not suspended and has a valid license
    """
    trip, vehicle, driver = await trip_lifecycle.create_trip(db, trip_data)
    await db.commit()
    await db.refresh(trip)
    await db.refresh(driver)
    
    await log_user_action(db, current_user, AuditAction.TRIP_CREATED, trip.trip_id, {
        "vehicle_id": trip.vehicle_id,
        "driver_id": trip.driver_id,
        "cargo_weight": trip.cargo_weight
    })
    
    return trip_lifecycle.to_response(trip, {vehicle.id: vehicle}, {driver.id: driver})


@router.api_route("/{trip_id}", methods=["PUT", "PATCH"], response_model=TripResponse)
async def update_trip(
    trip_id: int = Path(..., description="Trip ID"),
    trip_data: TripUpdate = ...,
    current_user: dict = Depends(require_role(TRIP_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Edit trip details (Dispatcher only). Status changes go through /status.
    """
    trip = await _get_trip_or_404(db, trip_id)
    
    update_data = trip_data.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        if value is None and field in ("start_location", "end_location"):
            continue
        setattr(trip, field, value)
    
    await db.commit()
    await db.refresh(trip)
    
    await log_user_action(db, current_user, AuditAction.TRIP_UPDATED, trip.trip_id, {
        "updated_fields": list(update_data.keys())
    })
    
    return await _serialize(db, trip)


@router.api_route("/{trip_id}/status", methods=["PUT", "PATCH"], response_model=TripResponse)
async def update_trip_status(
    trip_id: int = Path(..., description="Trip ID"),
    status_data: TripStatusUpdate = ...,
    current_user: dict = Depends(require_role(TRIP_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Move a trip along its lifecycle (Dispatcher only).
    
    Allowed: draft -> dispatched | cancelled, dispatched -> completed | cancelled.
    Vehicle status and driver counters change in the same transaction.
    """
    trip = await _get_trip_or_404(db, trip_id)
    previous_status = trip.status
    
    touched = await trip_lifecycle.apply_status_transition(db, trip, status_data)
    await db.commit()
    await db.refresh(trip)
    for row in touched:
        await db.refresh(row)
    
    await log_user_action(db, current_user, AuditAction.TRIP_STATUS_CHANGED, trip.trip_id, {
        "from": previous_status.value,
        "to": trip.status.value
    })
    
    return await _serialize(db, trip)


@router.delete("/{trip_id}", response_model=MessageResponse)
async def delete_trip(
    trip_id: int = Path(..., description="Trip ID"),
    current_user: dict = Depends(require_role(TRIP_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a trip (Dispatcher only)."""
    trip = await _get_trip_or_404(db, trip_id)
    trip_code, trip_status = trip.trip_id, trip.status.value
    
    await db.delete(trip)
    await db.commit()
    
    await log_user_action(db, current_user, AuditAction.TRIP_DELETED, trip_code, {"status": trip_status})
    
    return MessageResponse(message="Trip deleted")
