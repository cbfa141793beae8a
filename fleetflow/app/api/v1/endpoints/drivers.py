"""
Driver API Endpoints.

Managers and Dispatchers read the roster; the Safety Officer owns driver
records and statuses. Compliance fields are computed on every read.
"""

from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fleetflow.app.db.session import get_db
from fleetflow.app.models.driver import Driver
from fleetflow.app.models.enums import DriverStatus
from fleetflow.app.schemas.driver import DriverCreate, DriverUpdate, DriverResponse, DriverListResponse
from fleetflow.app.schemas.auth import MessageResponse
from fleetflow.app.core.exceptions import DuplicateRecordError
from fleetflow.app.core.guards import require_role, DRIVER_READERS, DRIVER_WRITERS
from fleetflow.app.services import compliance
from fleetflow.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/drivers", tags=["Drivers"])


def to_response(driver: Driver, today: Optional[date] = None) -> DriverResponse:
    response = DriverResponse.model_validate(driver)
    return response.model_copy(update=compliance.compliance_fields(driver, today))


async def _get_driver_or_404(db: AsyncSession, driver_id: int) -> Driver:
    result = await db.execute(select(Driver).where(Driver.id == driver_id))
    driver = result.scalar_one_or_none()
    
    if not driver:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Driver not found"
        )
    return driver


async def _ensure_email_available(db: AsyncSession, email: str, exclude_id: Optional[int] = None):
    query = select(Driver.id).where(Driver.email == email)
    if exclude_id is not None:
        query = query.where(Driver.id != exclude_id)
    if (await db.execute(query)).first():
        raise DuplicateRecordError("Driver email already registered", details={"email": email})


@router.get("", response_model=DriverListResponse)
async def list_drivers(
    driver_status: Optional[DriverStatus] = Query(None, alias="status", description="Filter by status"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(require_role(DRIVER_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """List drivers, newest first."""
    filters = [Driver.status == driver_status] if driver_status else []
    
    total = (await db.execute(select(func.count(Driver.id)).where(*filters))).scalar()
    
    offset = (page - 1) * page_size
    query = select(Driver).where(*filters)\
        .order_by(Driver.created_at.desc(), Driver.id.desc())\
        .offset(offset).limit(page_size)
    drivers = (await db.execute(query)).scalars().all()
    
    today = date.today()
    return DriverListResponse(
        drivers=[to_response(d, today) for d in drivers],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{driver_id}", response_model=DriverResponse)
async def get_driver(
    driver_id: int = Path(..., description="Driver ID"),
    current_user: dict = Depends(require_role(DRIVER_READERS)),
    db: AsyncSession = Depends(get_db)
):
    driver = await _get_driver_or_404(db, driver_id)
    return to_response(driver)


@router.post("", response_model=DriverResponse, status_code=status.HTTP_201_CREATED)
async def create_driver(
    driver_data: DriverCreate,
    current_user: dict = Depends(require_role(DRIVER_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Register a driver (Safety Officer only).
    """
    await _ensure_email_available(db, driver_data.email)
    
    driver = Driver(**driver_data.model_dump())
    db.add(driver)
    await db.commit()
    await db.refresh(driver)
    
    await log_user_action(db, current_user, AuditAction.DRIVER_CREATED, driver.id, {"email": driver.email})
    
    return to_response(driver)


@router.api_route("/{driver_id}", methods=["PUT", "PATCH"], response_model=DriverResponse)
async def update_driver(
    driver_id: int = Path(..., description="Driver ID"),
    driver_data: DriverUpdate = ...,
    current_user: dict = Depends(require_role(DRIVER_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Update a driver, including duty status and safety score (Safety Officer only).
    """
    driver = await _get_driver_or_404(db, driver_id)
    
    update_data = driver_data.model_dump(exclude_unset=True, exclude_none=True)
    if "email" in update_data and update_data["email"] != driver.email:
        await _ensure_email_available(db, update_data["email"], exclude_id=driver.id)
    
    for field, value in update_data.items():
        setattr(driver, field, value)
    
    await db.commit()
    await db.refresh(driver)
    
    await log_user_action(db, current_user, AuditAction.DRIVER_UPDATED, driver.id, {
        "updated_fields": list(update_data.keys())
    })
    
    return to_response(driver)


@router.delete("/{driver_id}", response_model=MessageResponse)
async def delete_driver(
    driver_id: int = Path(..., description="Driver ID"),
    current_user: dict = Depends(require_role(DRIVER_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a driver (Safety Officer only). Their trips are kept."""
    driver = await _get_driver_or_404(db, driver_id)
    email = driver.email
    
    await db.delete(driver)
    await db.commit()
    
    await log_user_action(db, current_user, AuditAction.DRIVER_DELETED, driver_id, {"email": email})
    
    return MessageResponse(message="Driver deleted")
