"""
Enumerations shared by the user, parcel and order models.
"""

import enum


class UserRole(str, enum.Enum):
    """
    User role enumeration.

    Roles:
        USER: Registers parcels and places delivery orders (default role)
        ADMIN: Updates order status/location and sees every order
    """
    USER = "user"
    ADMIN = "admin"


class OrderStatus(str, enum.Enum):
    """
    Delivery order status enumeration.

    Status flow:
        pending → picked_up → in_transit → out_for_delivery → delivered
        pending and the in-progress statuses can move to cancelled
    delivered and cancelled are terminal.
    """
    PENDING = "pending"
    PICKED_UP = "picked_up"
    IN_TRANSIT = "in_transit"
    OUT_FOR_DELIVERY = "out_for_delivery"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


TERMINAL_STATUSES = frozenset({OrderStatus.DELIVERED, OrderStatus.CANCELLED})


class WeightCategory(str, enum.Enum):
    """Pricing tier derived from parcel weight."""
    LIGHT = "light"              # up to 5 kg
    MEDIUM = "medium"            # up to 20 kg
    HEAVY = "heavy"              # up to 50 kg
    EXTRA_HEAVY = "extra_heavy"  # above 50 kg
