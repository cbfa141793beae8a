"""
Fuel Expense API Endpoints.

The Manager logs refuelling; the Financial Analyst reviews it. Every change
moves the linked vehicle's total_fuel_cost in the same transaction.
"""

from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query, Path
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from fleetflow.app.db.session import get_db
from fleetflow.app.models.fuel_expense import FuelExpense
from fleetflow.app.models.vehicle import Vehicle
from fleetflow.app.schemas.fuel_expense import (
    FuelExpenseCreate, FuelExpenseUpdate, FuelExpenseResponse, FuelExpenseListResponse
)
from fleetflow.app.schemas.vehicle import VehicleSummary
from fleetflow.app.schemas.auth import MessageResponse
from fleetflow.app.core.guards import require_role, FUEL_READERS, FUEL_WRITERS
from fleetflow.app.services import cost_ledger
from fleetflow.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/fuel", tags=["Fuel Expenses"])


def derive_cost_per_liter(cost: float, liters: float) -> float:
    return round(cost / liters, 2) if liters else 0


async def _serialize(db: AsyncSession, expenses: List[FuelExpense]) -> List[FuelExpenseResponse]:
    vehicle_ids = {e.vehicle_id for e in expenses}
    vehicles = {}
    if vehicle_ids:
        result = await db.execute(select(Vehicle).where(Vehicle.id.in_(vehicle_ids)))
        vehicles = {v.id: v for v in result.scalars().all()}
    
    responses = []
    for expense in expenses:
        vehicle = vehicles.get(expense.vehicle_id)
        response = FuelExpenseResponse.model_validate(expense)
        response.vehicle = VehicleSummary.model_validate(vehicle) if vehicle else None
        responses.append(response)
    return responses


async def _get_expense_or_404(db: AsyncSession, expense_id: int) -> FuelExpense:
    result = await db.execute(select(FuelExpense).where(FuelExpense.id == expense_id))
    expense = result.scalar_one_or_none()
    
    if not expense:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Fuel expense not found"
        )
    return expense


async def _require_vehicle(db: AsyncSession, vehicle_id: int) -> Vehicle:
    vehicle = await cost_ledger.get_vehicle(db, vehicle_id)
    if not vehicle:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Vehicle not found"
        )
    return vehicle


@router.get("", response_model=FuelExpenseListResponse)
async def list_fuel_expenses(
    vehicle_id: Optional[int] = Query(None, description="Filter by vehicle"),
    trip_id: Optional[int] = Query(None, description="Filter by trip"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(require_role(FUEL_READERS)),
    db: AsyncSession = Depends(get_db)
):
    """List fuel expenses, most recent fuel date first."""
    filters = []
    if vehicle_id is not None:
        filters.append(FuelExpense.vehicle_id == vehicle_id)
    if trip_id is not None:
        filters.append(FuelExpense.trip_id == trip_id)
    
    total = (await db.execute(select(func.count(FuelExpense.id)).where(*filters))).scalar()
    
    offset = (page - 1) * page_size
    query = select(FuelExpense).where(*filters)\
        .order_by(FuelExpense.fuel_date.desc(), FuelExpense.id.desc())\
        .offset(offset).limit(page_size)
    expenses = (await db.execute(query)).scalars().all()
    
    return FuelExpenseListResponse(
        expenses=await _serialize(db, expenses),
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{expense_id}", response_model=FuelExpenseResponse)
async def get_fuel_expense(
    expense_id: int = Path(..., description="Fuel expense ID"),
    current_user: dict = Depends(require_role(FUEL_READERS)),
    db: AsyncSession = Depends(get_db)
):
    expense = await _get_expense_or_404(db, expense_id)
    return (await _serialize(db, [expense]))[0]


@router.post("", response_model=FuelExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_fuel_expense(
    expense_data: FuelExpenseCreate,
    current_user: dict = Depends(require_role(FUEL_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Log a refuelling (Manager only) and add its cost to the vehicle.
    """
    vehicle = await _require_vehicle(db, expense_data.vehicle_id)
    
    fields = expense_data.model_dump()
    if fields["cost_per_liter"] is None:
        fields["cost_per_liter"] = derive_cost_per_liter(fields["cost"], fields["liters"])
    
    expense = FuelExpense(**fields)
    db.add(expense)
    await cost_ledger.adjust(db, vehicle.id, cost_ledger.FUEL, expense.cost)
    
    await db.commit()
    await db.refresh(expense)
    await db.refresh(vehicle)
    
    await log_user_action(db, current_user, AuditAction.FUEL_EXPENSE_CREATED, expense.id, {
        "vehicle_id": expense.vehicle_id,
        "cost": expense.cost
    })
    
    return (await _serialize(db, [expense]))[0]


@router.api_route("/{expense_id}", methods=["PUT", "PATCH"], response_model=FuelExpenseResponse)
async def update_fuel_expense(
    expense_id: int = Path(..., description="Fuel expense ID"),
    expense_data: FuelExpenseUpdate = ...,
    current_user: dict = Depends(require_role(FUEL_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """
    Correct a fuel expense (Manager only).
    
    The vehicle total moves by the cost difference, or from the old vehicle
    to the new one when the expense is reassigned.
    """
    expense = await _get_expense_or_404(db, expense_id)
    update_data = expense_data.model_dump(exclude_unset=True)
    
    new_vehicle_id = update_data.get("vehicle_id") or expense.vehicle_id
    if new_vehicle_id != expense.vehicle_id:
        await _require_vehicle(db, new_vehicle_id)
    
    old_vehicle_id, old_cost = expense.vehicle_id, expense.cost
    for field, value in update_data.items():
        if value is None and field not in ("trip_id", "notes"):
            continue
        setattr(expense, field, value)
    
    if "cost_per_liter" not in update_data and ("cost" in update_data or "liters" in update_data):
        expense.cost_per_liter = derive_cost_per_liter(expense.cost, expense.liters)
    
    await cost_ledger.move(
        db, cost_ledger.FUEL, old_vehicle_id, old_cost, expense.vehicle_id, expense.cost
    )
    
    await db.commit()
    await db.refresh(expense)
    
    await log_user_action(db, current_user, AuditAction.FUEL_EXPENSE_UPDATED, expense.id, {
        "updated_fields": list(update_data.keys())
    })
    
    return (await _serialize(db, [expense]))[0]


@router.delete("/{expense_id}", response_model=MessageResponse)
async def delete_fuel_expense(
    expense_id: int = Path(..., description="Fuel expense ID"),
    current_user: dict = Depends(require_role(FUEL_WRITERS)),
    db: AsyncSession = Depends(get_db)
):
    """Delete a fuel expense (Manager only) and take its cost off the vehicle."""
    expense = await _get_expense_or_404(db, expense_id)
    vehicle_id, cost = expense.vehicle_id, expense.cost
    
    await cost_ledger.adjust(db, vehicle_id, cost_ledger.FUEL, -cost)
    await db.delete(expense)
    await db.commit()
    
    await log_user_action(db, current_user, AuditAction.FUEL_EXPENSE_DELETED, expense_id, {
        "vehicle_id": vehicle_id,
        "cost": cost
    })
    
    return MessageResponse(message="Fuel expense deleted")
