"""
Delivery order lifecycle.

Creates orders and applies the destination, status, location and
cancellation changes, enforcing the status-dependent rules:

- the destination can only change while the order is pending,
- delivered and cancelled orders cannot be cancelled,
- every status change goes through one transition policy function.

distance, duration, price and estimated_delivery are computed together by
``quote`` and assigned together; an operation that raises leaves the order
untouched. Persistence is the caller's job.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from sendit.app.core.exceptions import (
    ForbiddenError,
    InvalidInputError,
    InvalidStateError,
    NotFoundError,
)
from sendit.app.domain import geo
from sendit.app.domain.pricing import DEFAULT_PRICING, PricingConfig, price, weight_category
from sendit.app.domain.repositories import ParcelLookup
from sendit.app.domain.tracking import generate_tracking_number
from sendit.app.models.enums import OrderStatus, WeightCategory
from sendit.app.models.order import DeliveryOrder
from sendit.app.schemas.location import Location

logger = logging.getLogger(__name__)

TransitionPolicy = Callable[[OrderStatus, OrderStatus], bool]


def permissive_transitions(current: OrderStatus, new: OrderStatus) -> bool:
    """Any status may follow any other; admins can correct mistakes freely."""
    return True


def terminal_locked_transitions(current: OrderStatus, new: OrderStatus) -> bool:
    """Nothing leaves delivered or cancelled (re-applying the same status is allowed)."""
    return new == current or not current.is_terminal


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RouteQuote:
    distance: float
    duration: int
    price: float
    estimated_delivery: datetime
    weight_category: WeightCategory


def validate_location(location: Optional[Location], field: str, allow_zero_coordinates: bool = False) -> None:
    """
    Raise InvalidInputError for a missing or malformed location.

    Unless ``allow_zero_coordinates`` is set, a latitude or longitude of 0.0
    counts as missing, so points on the equator or the prime meridian are
    refused.
    """
    if location is None:
        raise InvalidInputError(field, f"{field} is required")

    for axis in ("latitude", "longitude"):
        coordinate = getattr(location, axis)
        missing = coordinate is None if allow_zero_coordinates else not coordinate
        if missing:
            raise InvalidInputError(f"{field}.{axis}", "Latitude and longitude are required")

    if not -90 <= location.latitude <= 90:
        raise InvalidInputError(f"{field}.latitude", "Invalid latitude")
    if not -180 <= location.longitude <= 180:
        raise InvalidInputError(f"{field}.longitude", "Invalid longitude")

    if not location.address or not location.address.strip():
        raise InvalidInputError(f"{field}.address", "Address is required")


class OrderLifecycle:

    def __init__(
        self,
        parcels: ParcelLookup,
        pricing: PricingConfig = DEFAULT_PRICING,
        average_speed_kmh: float = geo.DEFAULT_AVERAGE_SPEED_KMH,
        transition_policy: TransitionPolicy = permissive_transitions,
        allow_zero_coordinates: bool = False,
        tracking_prefix: str = "SIT",
        clock: Callable[[], datetime] = utcnow,
    ):
        self.parcels = parcels
        self.pricing = pricing
        self.average_speed_kmh = average_speed_kmh
        self.transition_policy = transition_policy
        self.allow_zero_coordinates = allow_zero_coordinates
        self.tracking_prefix = tracking_prefix
        self.clock = clock

    @classmethod
    def from_settings(cls, parcels: ParcelLookup, settings) -> "OrderLifecycle":
        return cls(
            parcels,
            pricing=PricingConfig.from_settings(settings),
            average_speed_kmh=settings.average_speed_kmh,
            transition_policy=(
                terminal_locked_transitions if settings.strict_status_transitions else permissive_transitions
            ),
            allow_zero_coordinates=settings.allow_zero_coordinates,
            tracking_prefix=settings.tracking_prefix,
        )

    def validate_location(self, location: Optional[Location], field: str) -> None:
        validate_location(location, field, self.allow_zero_coordinates)

    def quote(self, weight_kg: float, pickup: Location, destination: Location) -> RouteQuote:
        distance = geo.distance_km(pickup, destination)
        duration = geo.eta_minutes(distance, self.average_speed_kmh)
        return RouteQuote(
            distance=distance,
            duration=duration,
            price=price(weight_kg, distance, self.pricing),
            estimated_delivery=self.clock() + timedelta(minutes=duration),
            weight_category=weight_category(weight_kg),
        )

    async def create_order(
        self,
        user_id: int,
        parcel_id: int,
        pickup: Location,
        destination: Location,
    ) -> DeliveryOrder:
        parcel = await self.parcels.get_by_id(parcel_id)
        if parcel is None:
            raise NotFoundError("Parcel", parcel_id)
        if parcel.user_id != user_id:
            raise ForbiddenError("Parcel does not belong to user", details={"parcel_id": parcel_id})

        self.validate_location(pickup, "pickup_location")
        self.validate_location(destination, "destination_location")

        quote = self.quote(parcel.weight, pickup, destination)
        now = self.clock()

        order = DeliveryOrder(
            user_id=user_id,
            parcel_id=parcel_id,
            pickup_location=pickup.model_dump(),
            destination_location=destination.model_dump(),
            current_location=None,
            status=OrderStatus.PENDING,
            distance=quote.distance,
            duration=quote.duration,
            price=quote.price,
            estimated_delivery=quote.estimated_delivery,
            actual_delivery=None,
            tracking_number=generate_tracking_number(self.tracking_prefix),
            created_at=now,
            updated_at=now,
        )
        logger.info(
            "Order %s created for parcel %s: %.1f km, %d min, %.2f USD",
            order.tracking_number, parcel_id, quote.distance, quote.duration, quote.price,
        )
        return order

    async def update_destination(self, order: DeliveryOrder, destination: Location) -> DeliveryOrder:
        current = OrderStatus(order.status)
        if current != OrderStatus.PENDING:
            raise InvalidStateError(
                "Cannot change destination for orders that are already in progress", current.value
            )

        self.validate_location(destination, "destination_location")

        parcel = await self.parcels.get_by_id(order.parcel_id)
        if parcel is None:
            raise NotFoundError("Parcel", order.parcel_id)

        pickup = Location.model_validate(order.pickup_location)
        quote = self.quote(parcel.weight, pickup, destination)

        order.destination_location = destination.model_dump()
        order.distance = quote.distance
        order.duration = quote.duration
        order.price = quote.price
        order.estimated_delivery = quote.estimated_delivery
        order.updated_at = self.clock()

        logger.info("Order %s destination changed: %.1f km, %.2f USD", order.tracking_number, quote.distance, quote.price)
        return order

    def check_transition(self, current: OrderStatus, new: OrderStatus) -> None:
        if not self.transition_policy(current, new):
            raise InvalidStateError(
                f"Cannot change status from {current.value} to {new.value}", current.value
            )

    def update_status(
        self,
        order: DeliveryOrder,
        new_status: OrderStatus,
        current_location: Optional[Location] = None,
    ) -> DeliveryOrder:
        current = OrderStatus(order.status)
        new_status = OrderStatus(new_status)
        self.check_transition(current, new_status)

        now = self.clock()
        order.status = new_status
        if current_location is not None:
            order.current_location = current_location.model_dump()
        if new_status == OrderStatus.DELIVERED:
            order.actual_delivery = now
        order.updated_at = now

        if new_status != current:
            logger.info("Order %s status %s -> %s", order.tracking_number, current.value, new_status.value)
        return order

    def update_location(self, order: DeliveryOrder, current_location: Location) -> DeliveryOrder:
        return self.update_status(order, OrderStatus(order.status), current_location)

    def cancel(self, order: DeliveryOrder) -> DeliveryOrder:
        current = OrderStatus(order.status)
        if current.is_terminal:
            raise InvalidStateError(
                "Cannot cancel order that is already delivered or cancelled", current.value
            )
        return self.update_status(order, OrderStatus.CANCELLED)
