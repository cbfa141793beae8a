"""
FleetFlow API application.

Wires logging, request observability, the uniform error envelope and the
v1 router. Tables are created on startup; there is no migration tool.
"""

import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from starlette.exceptions import HTTPException as StarletteHTTPException
from fastapi.exceptions import RequestValidationError
from fleetflow.app.core.config import settings
from fleetflow.app.core.logging_config import setup_logging
from fleetflow.app.core.observability import ObservabilityMiddleware
from fleetflow.app.core.redis_client import ping_redis
from fleetflow.app.api.v1.router import router as api_v1_router
from fleetflow.app.db.session import engine, Base
from fleetflow.app.core.exceptions import (
    FleetFlowError,
    fleetflow_error_handler,
    http_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

# Model modules register their tables on Base.metadata
from fleetflow.app.models.user import User  # noqa: F401
from fleetflow.app.models.audit_log import AuditLog  # noqa: F401
from fleetflow.app.models.vehicle import Vehicle  # noqa: F401
from fleetflow.app.models.driver import Driver  # noqa: F401
from fleetflow.app.models.trip import Trip  # noqa: F401
from fleetflow.app.models.fuel_expense import FuelExpense  # noqa: F401
from fleetflow.app.models.maintenance import Maintenance  # noqa: F401

setup_logging(settings.log_level)
logger = logging.getLogger("fleetflow")


@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s %s ready (%d tables)", settings.app_name, settings.api_version, len(Base.metadata.tables))
    yield
    await engine.dispose()
    logger.info("%s stopped", settings.app_name)


app = FastAPI(
    title=settings.app_name,
    version=settings.api_version,
    debug=settings.debug,
    description="Role-based fleet operations backend: vehicles, drivers, trips, fuel and maintenance",
    lifespan=lifespan,
)

app.add_middleware(ObservabilityMiddleware)

app.add_exception_handler(FleetFlowError, fleetflow_error_handler)
app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

app.include_router(api_v1_router, prefix=f"/{settings.api_version}")


@app.get("/health", tags=["Health"])
async def health_check():
    """
    Liveness check.

    The API stays healthy without Redis; only logout is unavailable then.
    """
    return {
        "status": "healthy",
        "app_name": settings.app_name,
        "version": settings.api_version,
        "token_store": "up" if await ping_redis() else "down",
    }


@app.get("/", tags=["Root"])
async def root():
    return {
        "message": "FleetFlow API",
        "docs": "/docs",
        "health": "/health",
        "api": f"/{settings.api_version}",
    }
