"""
FleetFlow error types and the handlers that render them.

Whatever goes wrong, the client receives the same envelope:

    {"error_code": "...", "message": "...", "details": {...}}

Fleet rule violations (capacity, suspended drivers, duplicate plates,
illegal trip moves) are raised from services as FleetFlowError subclasses;
endpoints keep raising HTTPException for plain 401/403/404 cases and the
handlers below give both the same shape.
"""

import logging
from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import Any, Dict, Optional

logger = logging.getLogger("fleetflow")

STATUS_ERROR_CODES = {
    400: "ERR_BAD_REQUEST",
    401: "ERR_UNAUTHORIZED",
    403: "ERR_FORBIDDEN",
    404: "ERR_NOT_FOUND",
    405: "ERR_METHOD_NOT_ALLOWED",
    503: "ERR_SERVICE_UNAVAILABLE",
}


class FleetFlowError(Exception):
    """Base class for errors that carry their own HTTP status and error code."""

    status_code = status.HTTP_400_BAD_REQUEST
    error_code = "ERR_BAD_REQUEST"

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ResourceNotFoundError(FleetFlowError):
    """A referenced vehicle, driver or trip does not exist."""

    status_code = status.HTTP_404_NOT_FOUND
    error_code = "ERR_NOT_FOUND"

    def __init__(self, resource: str, resource_id: Any = None):
        super().__init__(f"{resource} not found", {"resource": resource, "id": resource_id})


class BusinessRuleError(FleetFlowError):
    """Well-formed request that breaks a fleet rule."""


class DuplicateRecordError(BusinessRuleError):
    """A unique business key (license plate, driver email) is already taken."""

    error_code = "ERR_DUPLICATE"


class InvalidStatusTransitionError(BusinessRuleError):
    error_code = "ERR_TRIP_TRANSITION"

    def __init__(self, current: str, requested: str):
        super().__init__(
            f"Invalid status transition from {current} to {requested}",
            {"current_status": current, "requested_status": requested},
        )


def error_response(status_code: int, error_code: str, message: str,
                   details: Optional[Dict[str, Any]] = None, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error_code": error_code, "message": message, "details": details or {}},
        headers=headers,
    )


async def fleetflow_error_handler(request: Request, exc: FleetFlowError) -> JSONResponse:
    return error_response(exc.status_code, exc.error_code, exc.message, exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Covers HTTPException raised by endpoints as well as routing 404/405."""
    return error_response(
        exc.status_code,
        STATUS_ERROR_CODES.get(exc.status_code, "ERR_UNKNOWN"),
        str(exc.detail),
        headers=getattr(exc, "headers", None),
    )


def describe_validation_error(error: Dict[str, Any]) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path"))
    if error.get("type") == "missing":
        return f"{field} is required"
    if not field:
        return str(error.get("msg"))
    return f"{field}: {error.get('msg')}"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Request validation failures are client errors like any other: 400, not 422."""
    errors = exc.errors()
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "ERR_VALIDATION",
        describe_validation_error(errors[0]) if errors else "Invalid request",
        {"errors": [{"loc": list(e.get("loc", ())), "msg": e.get("msg"), "type": e.get("type")} for e in errors]},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "ERR_INTERNAL_SERVER",
        str(exc) or "Internal server error",
        {"type": type(exc).__name__},
    )
