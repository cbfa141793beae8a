"""
Demo Data API Endpoint.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from fleetflow.app.db.session import get_db
from fleetflow.app.core.guards import require_role
from fleetflow.app.models.enums import UserRole
from fleetflow.app.services.seed import seed_demo_data
from fleetflow.app.services.audit import log_user_action, AuditAction

router = APIRouter(prefix="/seed", tags=["Seed"])


@router.post("")
async def seed_database(
    reset: bool = Query(True, description="Clear the fleet tables first"),
    current_user: dict = Depends(require_role([UserRole.MANAGER])),
    db: AsyncSession = Depends(get_db)
):
    """
    Reset the fleet to the demo data set (Manager only).
    """
    counts = await seed_demo_data(db, reset=reset)
    
    await log_user_action(db, current_user, AuditAction.DEMO_DATA_SEEDED, metadata=counts)
    
    return {"message": "Database seeded successfully", "counts": counts}
