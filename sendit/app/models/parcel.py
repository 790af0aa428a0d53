"""
Parcel database model.

A parcel is created once by its owner and may later be referenced by
one or more delivery orders.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Boolean
from sqlalchemy.sql import func
from sendit.app.db.session import Base
from sendit.app.domain.pricing import weight_category


class Parcel(Base):
    """
    Parcel model.

    Weight is in kilograms, dimensions in centimeters and value in USD.
    """
    __tablename__ = "parcels"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Ownership
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    description = Column(String(500), nullable=False)

    # Physical properties
    weight = Column(Float, nullable=False)
    length_cm = Column(Float, nullable=False)
    width_cm = Column(Float, nullable=False)
    height_cm = Column(Float, nullable=False)

    value = Column(Float, nullable=False, default=0.0)
    fragile = Column(Boolean, nullable=False, default=False)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    @property
    def dimensions(self) -> dict:
        return {"length": self.length_cm, "width": self.width_cm, "height": self.height_cm}

    @property
    def weight_category(self):
        return weight_category(self.weight)

    @property
    def volume(self) -> float:
        return self.length_cm * self.width_cm * self.height_cm

    def __repr__(self):
        return f"<Parcel(id={self.id}, user_id={self.user_id}, weight={self.weight})>"
