"""
Delivery order Pydantic schemas.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from sendit.app.models.enums import OrderStatus, WeightCategory
from sendit.app.schemas.location import Location


class OrderCreate(BaseModel):
    """Schema for POST /orders."""
    parcel_id: int = Field(..., description="Parcel to ship (must belong to the caller)")
    pickup_location: Location
    destination_location: Location


class QuoteRequest(BaseModel):
    """Schema for POST /orders/quote."""
    weight: float = Field(..., gt=0, allow_inf_nan=False, description="Weight in kilograms")
    pickup_location: Location
    destination_location: Location


class QuoteResponse(BaseModel):
    distance: float
    duration: int
    price: float
    estimated_delivery: datetime
    weight_category: WeightCategory

    class Config:
        from_attributes = True


class DestinationUpdate(BaseModel):
    destination_location: Location


class StatusUpdate(BaseModel):
    status: OrderStatus
    current_location: Optional[Location] = None


class LocationUpdate(BaseModel):
    current_location: Location


class OrderResponse(BaseModel):
    """Schema for order response."""
    id: int
    user_id: int
    parcel_id: Optional[int] = None
    pickup_location: Location
    destination_location: Location
    current_location: Optional[Location] = None
    status: OrderStatus
    distance: float
    duration: int
    price: float
    estimated_delivery: datetime
    actual_delivery: Optional[datetime] = None
    tracking_number: str
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TrackingResponse(BaseModel):
    """Public tracking view; carries no owner or price information."""
    tracking_number: str
    status: OrderStatus
    pickup_location: Location
    destination_location: Location
    current_location: Optional[Location] = None
    estimated_delivery: datetime
    actual_delivery: Optional[datetime] = None
    updated_at: datetime

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    """Schema for paginated order list."""
    orders: List[OrderResponse]
    total: int
    page: int
    page_size: int
