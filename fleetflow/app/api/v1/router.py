"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from fleetflow.app.api.v1.endpoints import (
    auth, vehicles, drivers, trips, fuel, maintenance,
    analytics, reports, seed
)

router = APIRouter()

# Authentication and role gate
router.include_router(auth.router)

# Fleet registry
router.include_router(vehicles.router)
router.include_router(drivers.router)

# Dispatch
router.include_router(trips.router)

# Costs
router.include_router(fuel.router)
router.include_router(maintenance.router)

# Read-only views
router.include_router(analytics.router)
router.include_router(reports.router)

# Demo data
router.include_router(seed.router)
