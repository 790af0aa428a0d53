"""
Admin API Schema Definitions.

Pydantic schemas for admin endpoints.
"""

from pydantic import BaseModel
from typing import List
from sendit.app.schemas.auth import UserResponse


class UserListResponse(BaseModel):
    """Schema for list users response."""
    users: List[UserResponse]
    total: int
    page: int
    page_size: int


class OrderStats(BaseModel):
    """Schema for GET /admin/stats."""
    total_orders: int
    pending_orders: int
    in_transit_orders: int
    delivered_orders: int
    cancelled_orders: int
    total_revenue: float
    average_order_value: float
