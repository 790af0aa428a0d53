"""
Great-circle distance and transit time estimation.

Inputs are taken as given: coordinate validation happens before these
functions are called.
"""

import math

EARTH_RADIUS_KM = 6371.0
DEFAULT_AVERAGE_SPEED_KMH = 50.0


def distance_km(a, b) -> float:
    """Haversine distance in kilometers between two objects with latitude/longitude."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    dlat = math.radians(b.latitude - a.latitude)
    dlng = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlng / 2) ** 2
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def eta_minutes(distance: float, average_speed_kmh: float = DEFAULT_AVERAGE_SPEED_KMH) -> int:
    """Whole minutes needed to cover ``distance`` km, rounded up."""
    if distance <= 0:
        return 0
    return math.ceil(distance / average_speed_kmh * 60)
