"""
Parcel Pydantic schemas.

Only the shape is checked here; weight, size, value and description limits
are enforced by sendit.app.domain.parcels so they are reported with the
offending field name.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List
from sendit.app.models.enums import WeightCategory


class Dimensions(BaseModel):
    """Box size in centimeters."""
    length: float
    width: float
    height: float


class ParcelCreate(BaseModel):
    """Schema for creating a new parcel."""
    description: str = Field(..., description="What is being shipped")
    weight: float = Field(..., description="Weight in kilograms")
    dimensions: Dimensions
    value: float = Field(0.0, description="Declared value in USD")
    fragile: bool = False


class ParcelUpdate(BaseModel):
    """Schema for a partial parcel update; the merged parcel is re-validated."""
    description: Optional[str] = None
    weight: Optional[float] = None
    dimensions: Optional[Dimensions] = None
    value: Optional[float] = None
    fragile: Optional[bool] = None


class ParcelResponse(BaseModel):
    """Schema for parcel response."""
    id: int
    user_id: int
    description: str
    weight: float
    dimensions: Dimensions
    value: float
    fragile: bool
    weight_category: WeightCategory
    volume: float
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class ParcelListResponse(BaseModel):
    """Schema for paginated parcel list."""
    parcels: List[ParcelResponse]
    total: int
    page: int
    page_size: int
