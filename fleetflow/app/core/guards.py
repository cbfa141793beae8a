"""
Security guards for role-based access control.

Holds the static role tables (which dashboard pages each role may open,
which roles may read or write each resource) and the dependency factory
that enforces them on routes.
"""

from typing import Dict, List
from fastapi import Depends, HTTPException, status
from fleetflow.app.models.enums import UserRole
from fleetflow.app.core.dependencies import get_current_user

ALL_ROLES = [
    UserRole.MANAGER,
    UserRole.DISPATCHER,
    UserRole.SAFETY_OFFICER,
    UserRole.FINANCIAL_ANALYST,
]

# Dashboard pages each role may navigate to
ROLE_ALLOWED_PAGES: Dict[UserRole, List[str]] = {
    UserRole.MANAGER: [
        "/dashboard", "/dashboard/vehicles", "/dashboard/maintenance",
        "/dashboard/fuel", "/dashboard/analytics", "/dashboard/settings",
    ],
    UserRole.DISPATCHER: [
        "/dashboard", "/dashboard/trips", "/dashboard/vehicles",
        "/dashboard/drivers", "/dashboard/settings",
    ],
    UserRole.SAFETY_OFFICER: [
        "/dashboard", "/dashboard/drivers", "/dashboard/vehicles",
        "/dashboard/analytics", "/dashboard/settings",
    ],
    UserRole.FINANCIAL_ANALYST: [
        "/dashboard", "/dashboard/fuel", "/dashboard/maintenance",
        "/dashboard/analytics", "/dashboard/reports", "/dashboard/settings",
    ],
}

# API access per resource
VEHICLE_READERS = ALL_ROLES
VEHICLE_WRITERS = [UserRole.MANAGER]
DRIVER_READERS = [UserRole.MANAGER, UserRole.DISPATCHER, UserRole.SAFETY_OFFICER]
DRIVER_WRITERS = [UserRole.SAFETY_OFFICER]
TRIP_READERS = [UserRole.MANAGER, UserRole.DISPATCHER]
TRIP_WRITERS = [UserRole.DISPATCHER]
FUEL_READERS = [UserRole.MANAGER, UserRole.FINANCIAL_ANALYST]
FUEL_WRITERS = [UserRole.MANAGER]
MAINTENANCE_READERS = [UserRole.MANAGER, UserRole.FINANCIAL_ANALYST]
MAINTENANCE_WRITERS = [UserRole.MANAGER]
ANALYTICS_READERS = [UserRole.MANAGER, UserRole.SAFETY_OFFICER, UserRole.FINANCIAL_ANALYST]
REPORT_READERS = [UserRole.MANAGER, UserRole.FINANCIAL_ANALYST]


def allowed_pages_for(role: UserRole) -> List[str]:
    """Pages the role may open; unknown roles get nothing."""
    return list(ROLE_ALLOWED_PAGES.get(role, []))


def is_page_allowed(role: UserRole, page: str) -> bool:
    normalized = "/" + page.strip("/") if page.strip("/") else "/"
    return normalized in ROLE_ALLOWED_PAGES.get(role, [])


def require_role(allowed_roles: List[UserRole]):
    """
    Route dependency admitting only the listed roles; others get 403.

        @router.post("")
        async def create_vehicle(current_user: dict = Depends(require_role(VEHICLE_WRITERS))):
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        try:
            role = UserRole(current_user["role"])
        except ValueError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid role in token")

        if role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join(r.value for r in allowed_roles)}"
            )
        return current_user

    return role_checker
