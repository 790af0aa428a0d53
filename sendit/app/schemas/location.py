"""
Location value type.

Coordinates are deliberately left unconstrained here: range and presence
checks belong to the order rules so that a bad coordinate is reported as
an InvalidInput naming the field.
"""

from pydantic import BaseModel, Field
from typing import Optional


class Location(BaseModel):
    """Immutable geographic point with its postal address."""
    latitude: Optional[float] = Field(None, description="Latitude in degrees (-90..90)")
    longitude: Optional[float] = Field(None, description="Longitude in degrees (-180..180)")
    address: str = Field(..., description="Street address")
    city: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    country: str = Field(..., min_length=1)
    postal_code: str = Field(..., min_length=1)

    class Config:
        frozen = True
