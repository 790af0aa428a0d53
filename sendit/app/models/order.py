"""
Delivery order database model.

Locations are stored as JSON documents with the Location schema's fields.
distance, duration, price and estimated_delivery are derived values that
are always written together (see sendit.app.domain.orders).
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, JSON
from sqlalchemy.sql import func
from sendit.app.db.session import Base
from sendit.app.models.enums import OrderStatus


class DeliveryOrder(Base):
    __tablename__ = "delivery_orders"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Cleared when the parcel of a finished order is deleted
    parcel_id = Column(Integer, ForeignKey("parcels.id", ondelete="SET NULL"), nullable=True, index=True)

    pickup_location = Column(JSON, nullable=False)
    destination_location = Column(JSON, nullable=False)
    current_location = Column(JSON, nullable=True)

    status = Column(Enum(OrderStatus), default=OrderStatus.PENDING, nullable=False, index=True)

    # Derived
    distance = Column(Float, nullable=False)        # km
    duration = Column(Integer, nullable=False)      # minutes, rounded up
    price = Column(Float, nullable=False)           # USD, unrounded
    estimated_delivery = Column(DateTime(timezone=True), nullable=False)
    actual_delivery = Column(DateTime(timezone=True), nullable=True)

    # Assigned once at creation
    tracking_number = Column(String(64), unique=True, nullable=False, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<DeliveryOrder(id={self.id}, tracking='{self.tracking_number}', status='{self.status.value}')>"
