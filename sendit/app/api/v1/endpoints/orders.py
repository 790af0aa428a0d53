"""
Delivery order API endpoints.

Customers place orders for their parcels, change the destination while the
order is pending, cancel, and follow progress. Anyone holding a tracking
number can look up the public tracking view.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy.ext.asyncio import AsyncSession
from sendit.app.core.config import settings
from sendit.app.core.dependencies import get_current_user
from sendit.app.core.exceptions import NotFoundError
from sendit.app.core.guards import OwnershipGuard, require_admin
from sendit.app.db.session import get_db
from sendit.app.domain.orders import OrderLifecycle
from sendit.app.models.enums import OrderStatus
from sendit.app.models.order import DeliveryOrder
from sendit.app.repositories.orders import OrderRepository
from sendit.app.repositories.parcels import ParcelRepository
from sendit.app.schemas.location import Location
from sendit.app.schemas.order import (
    DestinationUpdate,
    OrderCreate,
    OrderListResponse,
    OrderResponse,
    QuoteRequest,
    QuoteResponse,
    StatusUpdate,
    TrackingResponse,
)
from sendit.app.services.analytics import AnalyticsService
from sendit.app.services.audit import AuditAction, log_event
from sendit.app.services.notification_service import NotificationService

router = APIRouter(prefix="/orders", tags=["Orders"])
ownership_guard = OwnershipGuard()


def get_order_lifecycle(db: AsyncSession = Depends(get_db)) -> OrderLifecycle:
    return OrderLifecycle.from_settings(ParcelRepository(db), settings)


async def get_order_or_404(repo: OrderRepository, order_id: int) -> DeliveryOrder:
    order = await repo.get(order_id)
    if not order:
        raise NotFoundError("Order", order_id)
    return order


async def apply_status_change(
    db: AsyncSession,
    lifecycle: OrderLifecycle,
    order: DeliveryOrder,
    new_status: OrderStatus,
    current_location: Optional[Location],
    actor: dict,
    action: str = AuditAction.ORDER_STATUS_CHANGED,
) -> DeliveryOrder:
    """
    Status or location change shared by the order and admin endpoints:
    update, notify the owner, audit and commit as one unit of work.
    """
    old_status = OrderStatus(order.status)
    if new_status == old_status and current_location is not None:
        lifecycle.update_location(order, current_location)
    else:
        lifecycle.update_status(order, new_status, current_location)
    await OrderRepository(db).put(order)

    if new_status != old_status:
        await NotificationService.status_update(db, order, old_status)
    elif current_location is not None:
        await NotificationService.location_update(db, order)

    await log_event(
        db=db,
        action=action,
        actor_id=actor["user_id"],
        actor_email=actor.get("sub"),
        resource_type="order",
        resource_id=order.id,
        metadata={
            "old_status": old_status.value,
            "new_status": OrderStatus(new_status).value,
            "location_updated": current_location is not None,
            "current_location": order.current_location,
        }
    )
    await db.commit()
    await db.refresh(order)
    await AnalyticsService.invalidate()
    return order


@router.post("", response_model=OrderResponse, status_code=status.HTTP_201_CREATED)
async def create_order(
    order_data: OrderCreate,
    current_user: dict = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    db: AsyncSession = Depends(get_db)
):
    """
    Place a delivery order for one of the caller's parcels.

    Distance, duration, price and estimated delivery are computed from the
    parcel weight and the two locations; a tracking number is assigned.
    """
    order = await lifecycle.create_order(
        current_user["user_id"],
        order_data.parcel_id,
        order_data.pickup_location,
        order_data.destination_location,
    )
    order = await OrderRepository(db).put(order)

    await NotificationService.order_confirmation(db, order)
    await log_event(
        db=db,
        action=AuditAction.ORDER_CREATED,
        actor_id=current_user["user_id"],
        actor_email=current_user.get("sub"),
        resource_type="order",
        resource_id=order.id,
        metadata={
            "tracking_number": order.tracking_number,
            "parcel_id": order.parcel_id,
            "price": order.price,
        }
    )
    await db.commit()
    await db.refresh(order)
    await AnalyticsService.invalidate()

    return OrderResponse.model_validate(order)


@router.post("/quote", response_model=QuoteResponse)
async def quote_order(
    quote_data: QuoteRequest,
    current_user: dict = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
):
    """Price and ETA for a weight and route, without placing an order."""
    lifecycle.validate_location(quote_data.pickup_location, "pickup_location")
    lifecycle.validate_location(quote_data.destination_location, "destination_location")
    quote = lifecycle.quote(quote_data.weight, quote_data.pickup_location, quote_data.destination_location)
    return QuoteResponse.model_validate(quote)


@router.get("", response_model=OrderListResponse)
async def list_my_orders(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """The caller's orders, newest first."""
    orders, total = await OrderRepository(db).paginate(
        page=page, page_size=page_size, user_id=current_user["user_id"]
    )
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/all", response_model=OrderListResponse)
async def list_all_orders(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Every order in the system (admin only)."""
    orders, total = await OrderRepository(db).paginate(page=page, page_size=page_size)
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/track/{tracking_number}", response_model=TrackingResponse)
async def track_order(
    tracking_number: str = Path(..., description="Tracking number"),
    db: AsyncSession = Depends(get_db)
):
    """Public tracking lookup; no authentication required."""
    order = await OrderRepository(db).get_by_tracking_number(tracking_number)
    if not order:
        raise NotFoundError("Order")
    return TrackingResponse.model_validate(order)


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: int = Path(..., description="Order ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    order = await get_order_or_404(OrderRepository(db), order_id)
    ownership_guard.enforce(order.user_id, current_user, "order")
    return OrderResponse.model_validate(order)


@router.put("/{order_id}/destination", response_model=OrderResponse)
async def update_destination(
    order_id: int = Path(..., description="Order ID"),
    update_data: DestinationUpdate = ...,
    current_user: dict = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    db: AsyncSession = Depends(get_db)
):
    """Change the destination of a pending order; price and ETA are recomputed."""
    repo = OrderRepository(db)
    order = await get_order_or_404(repo, order_id)
    ownership_guard.enforce(order.user_id, current_user, "order", allow_admin=False)

    old_price = order.price
    await lifecycle.update_destination(order, update_data.destination_location)
    await repo.put(order)

    await log_event(
        db=db,
        action=AuditAction.ORDER_DESTINATION_CHANGED,
        actor_id=current_user["user_id"],
        actor_email=current_user.get("sub"),
        resource_type="order",
        resource_id=order.id,
        metadata={"old_price": old_price, "new_price": order.price, "distance": order.distance}
    )
    await db.commit()
    await db.refresh(order)
    await AnalyticsService.invalidate()

    return OrderResponse.model_validate(order)


@router.put("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: int = Path(..., description="Order ID"),
    current_user: dict = Depends(get_current_user),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    db: AsyncSession = Depends(get_db)
):
    """Cancel an order that is neither delivered nor already cancelled."""
    repo = OrderRepository(db)
    order = await get_order_or_404(repo, order_id)
    ownership_guard.enforce(order.user_id, current_user, "order", allow_admin=False)

    old_status = OrderStatus(order.status)
    lifecycle.cancel(order)
    await repo.put(order)

    await NotificationService.order_cancellation(db, order)
    await log_event(
        db=db,
        action=AuditAction.ORDER_CANCELLED,
        actor_id=current_user["user_id"],
        actor_email=current_user.get("sub"),
        resource_type="order",
        resource_id=order.id,
        metadata={"old_status": old_status.value}
    )
    await db.commit()
    await db.refresh(order)
    await AnalyticsService.invalidate()

    return OrderResponse.model_validate(order)


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int = Path(..., description="Order ID"),
    update_data: StatusUpdate = ...,
    current_user: dict = Depends(require_admin),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    db: AsyncSession = Depends(get_db)
):
    """Set the order status, optionally with its current location (admin only)."""
    order = await get_order_or_404(OrderRepository(db), order_id)
    order = await apply_status_change(
        db, lifecycle, order, update_data.status, update_data.current_location, current_user
    )
    return OrderResponse.model_validate(order)
