"""
Audit trail writer.

Every login attempt and every create, update or delete of a fleet record lands in
``audit_logs`` and is echoed to the ``fleetflow.audit`` logger. Entries are
committed on their own, after the change they describe has been committed.
"""

import logging
from typing import Optional, Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from fleetflow.app.models.audit_log import AuditLog

logger = logging.getLogger("fleetflow.audit")


class AuditAction:
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"

    VEHICLE_CREATED = "VEHICLE_CREATED"
    VEHICLE_UPDATED = "VEHICLE_UPDATED"
    VEHICLE_DELETED = "VEHICLE_DELETED"
    VEHICLE_COSTS_RECONCILED = "VEHICLE_COSTS_RECONCILED"
    DRIVER_CREATED = "DRIVER_CREATED"
    DRIVER_UPDATED = "DRIVER_UPDATED"
    DRIVER_DELETED = "DRIVER_DELETED"
    TRIP_CREATED = "TRIP_CREATED"
    TRIP_UPDATED = "TRIP_UPDATED"
    TRIP_STATUS_CHANGED = "TRIP_STATUS_CHANGED"
    TRIP_DELETED = "TRIP_DELETED"
    FUEL_EXPENSE_CREATED = "FUEL_EXPENSE_CREATED"
    FUEL_EXPENSE_UPDATED = "FUEL_EXPENSE_UPDATED"
    FUEL_EXPENSE_DELETED = "FUEL_EXPENSE_DELETED"
    MAINTENANCE_CREATED = "MAINTENANCE_CREATED"
    MAINTENANCE_UPDATED = "MAINTENANCE_UPDATED"
    MAINTENANCE_DELETED = "MAINTENANCE_DELETED"

    DEMO_DATA_SEEDED = "DEMO_DATA_SEEDED"


# Record kind touched by each action; auth and seeding have none
ACTION_ENTITY = {
    AuditAction.VEHICLE_CREATED: "vehicle",
    AuditAction.VEHICLE_UPDATED: "vehicle",
    AuditAction.VEHICLE_DELETED: "vehicle",
    AuditAction.VEHICLE_COSTS_RECONCILED: "vehicle",
    AuditAction.DRIVER_CREATED: "driver",
    AuditAction.DRIVER_UPDATED: "driver",
    AuditAction.DRIVER_DELETED: "driver",
    AuditAction.TRIP_CREATED: "trip",
    AuditAction.TRIP_UPDATED: "trip",
    AuditAction.TRIP_STATUS_CHANGED: "trip",
    AuditAction.TRIP_DELETED: "trip",
    AuditAction.FUEL_EXPENSE_CREATED: "fuel_expense",
    AuditAction.FUEL_EXPENSE_UPDATED: "fuel_expense",
    AuditAction.FUEL_EXPENSE_DELETED: "fuel_expense",
    AuditAction.MAINTENANCE_CREATED: "maintenance",
    AuditAction.MAINTENANCE_UPDATED: "maintenance",
    AuditAction.MAINTENANCE_DELETED: "maintenance",
}


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[int] = None,
    actor_email: Optional[str] = None,
    entity_id: Any = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLog:
    """
    Persist one audit entry and commit it.

    Args:
        db: Database session
        action: One of the AuditAction constants
        actor_id: User performing the action, None for unknown login emails
        actor_email: Email the actor used
        entity_id: Id (or trip code) of the record the action touched
        metadata: Extra JSON context such as a failure reason
        ip_address: Client address, recorded for auth events
    """
    entity_type = ACTION_ENTITY.get(action)
    entry = AuditLog(
        actor_id=actor_id,
        actor_email=actor_email,
        action=action,
        entity_type=entity_type,
        entity_id=str(entity_id) if entity_id is not None else None,
        meta_data=metadata,
        ip_address=ip_address
    )
    db.add(entry)
    await db.commit()

    if entity_type:
        logger.info("%s %s:%s by %s", action, entity_type, entity_id, actor_email or "anonymous")
    else:
        logger.info("%s by %s %s", action, actor_email or "anonymous", metadata or {})
    return entry


async def log_user_action(
    db: AsyncSession,
    current_user: dict,
    action: str,
    entity_id: Any = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Audit an action by the authenticated caller (``current_user`` is the token payload)."""
    return await log_event(
        db=db,
        action=action,
        actor_id=current_user.get("user_id"),
        actor_email=current_user.get("sub"),
        entity_id=entity_id,
        metadata=metadata
    )


async def log_auth_event(
    db: AsyncSession,
    action: str,
    user_id: Optional[int],
    email: Optional[str],
    ip_address: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    if action == AuditAction.LOGIN_FAILED:
        logger.warning("Failed login for %s from %s: %s", email, ip_address, (metadata or {}).get("reason"))
    return await log_event(
        db=db,
        action=action,
        actor_id=user_id,
        actor_email=email,
        ip_address=ip_address,
        metadata=metadata
    )
