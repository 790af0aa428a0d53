"""
Audit logging service.

Records authentication events and every change to parcels and orders.
Entries are added to the caller's session and flushed; they are committed
together with the change they describe.
"""

from typing import Optional, Dict, Any, List
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, desc
from sendit.app.models.audit_log import AuditLog


# Audit event constants
class AuditAction:
    """Standardized audit action constants."""
    USER_REGISTERED = "USER_REGISTERED"
    LOGIN_SUCCESS = "LOGIN_SUCCESS"
    LOGIN_FAILED = "LOGIN_FAILED"
    LOGOUT = "LOGOUT"
    TOKEN_REFRESHED = "TOKEN_REFRESHED"
    ADMIN_CREATED = "ADMIN_CREATED"

    PARCEL_CREATED = "PARCEL_CREATED"
    PARCEL_UPDATED = "PARCEL_UPDATED"
    PARCEL_DELETED = "PARCEL_DELETED"

    ORDER_CREATED = "ORDER_CREATED"
    ORDER_DESTINATION_CHANGED = "ORDER_DESTINATION_CHANGED"
    ORDER_STATUS_CHANGED = "ORDER_STATUS_CHANGED"
    ORDER_LOCATION_UPDATED = "ORDER_LOCATION_UPDATED"
    ORDER_CANCELLED = "ORDER_CANCELLED"


async def log_event(
    db: AsyncSession,
    action: str,
    actor_id: Optional[int] = None,
    actor_email: Optional[str] = None,
    resource_type: Optional[str] = None,
    resource_id: Optional[int] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None
) -> AuditLog:
    """
    Add an event to the audit log.

    Args:
        db: Database session
        action: Action being performed (use AuditAction constants)
        actor_id: ID of user performing the action
        actor_email: E-mail of the actor
        resource_type: "user", "parcel" or "order"
        resource_id: ID of the resource acted upon
        metadata: Additional context as JSON
        ip_address: IP address of the request

    Returns:
        Flushed AuditLog instance
    """
    audit_log = AuditLog(
        actor_id=actor_id,
        actor_email=actor_email,
        action=action,
        resource_type=resource_type,
        resource_id=resource_id,
        meta_data=metadata,
        ip_address=ip_address
    )

    db.add(audit_log)
    await db.flush()

    return audit_log


async def log_auth_event(
    db: AsyncSession,
    action: str,
    user_id: Optional[int],
    email: Optional[str],
    ip_address: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """Log an authentication event (register, login success/failure, logout)."""
    return await log_event(
        db=db,
        action=action,
        actor_id=user_id,
        actor_email=email,
        resource_type="user",
        resource_id=user_id,
        ip_address=ip_address,
        metadata=metadata
    )


async def get_audit_trail(
    db: AsyncSession,
    resource_type: Optional[str] = None,
    resource_id: Optional[int] = None,
    limit: int = 100
) -> List[AuditLog]:
    """Audit entries, most recent first, optionally for one resource."""
    query = select(AuditLog).order_by(desc(AuditLog.timestamp), desc(AuditLog.id))

    if resource_type:
        query = query.where(AuditLog.resource_type == resource_type)

    if resource_id is not None:
        query = query.where(AuditLog.resource_id == resource_id)

    query = query.limit(limit)

    result = await db.execute(query)
    return list(result.scalars().all())
