"""
Audit Log Database Model.

Tracks authentication events and every change made to parcels and orders.
"""

from sqlalchemy import Column, Integer, String, DateTime, JSON
from sqlalchemy.sql import func
from sendit.app.db.session import Base


class AuditLog(Base):
    """
    Audit log model.

    Events logged:
    - USER_REGISTERED / LOGIN_SUCCESS / LOGIN_FAILED / LOGOUT
    - PARCEL_CREATED / PARCEL_UPDATED / PARCEL_DELETED
    - ORDER_CREATED / ORDER_DESTINATION_CHANGED / ORDER_STATUS_CHANGED
    - ORDER_LOCATION_UPDATED / ORDER_CANCELLED
    - ADMIN_CREATED
    """
    __tablename__ = "audit_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Who performed the action (None for anonymous failures)
    actor_id = Column(Integer, index=True, nullable=True)
    actor_email = Column(String(255), nullable=True)

    # What action was performed
    action = Column(String(100), nullable=False, index=True)

    # What it was performed on
    resource_type = Column(String(50), nullable=True, index=True)
    resource_id = Column(Integer, nullable=True, index=True)

    # Additional context (JSON for flexibility)
    meta_data = Column(JSON, nullable=True)

    ip_address = Column(String(50), nullable=True)

    timestamp = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    def __repr__(self):
        return f"<AuditLog(id={self.id}, action='{self.action}', actor={self.actor_email}, resource={self.resource_type}:{self.resource_id})>"
