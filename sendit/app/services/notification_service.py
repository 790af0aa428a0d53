"""
Notification Service.

In-app notifications for order owners: confirmation, status and location
updates, and cancellation. Notifications are flushed into the caller's
session and committed with the order change that produced them.
"""

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update, func
from datetime import datetime, timezone
from typing import Optional, Dict, Any, List

from sendit.app.models.enums import OrderStatus
from sendit.app.models.notification import Notification, NotificationType
from sendit.app.models.order import DeliveryOrder


def _address(location: Optional[dict]) -> str:
    if not location:
        return "unknown location"
    return f"{location.get('address')}, {location.get('city')}"


class NotificationService:

    @staticmethod
    async def create_notification(
        db: AsyncSession,
        user_id: int,
        title: str,
        message: str,
        type: NotificationType = NotificationType.INFO,
        metadata: Optional[Dict[str, Any]] = None
    ) -> Notification:
        """Create a single notification."""
        notif = Notification(
            user_id=user_id,
            type=type,
            title=title,
            message=message,
            metadata_payload=metadata
        )
        db.add(notif)
        await db.flush()  # Caller commits
        return notif

    @staticmethod
    async def order_confirmation(db: AsyncSession, order: DeliveryOrder) -> Notification:
        return await NotificationService.create_notification(
            db,
            user_id=order.user_id,
            title=f"Order Confirmation - {order.tracking_number}",
            message=(
                f"Your order to {_address(order.destination_location)} has been placed. "
                f"Price: ${order.price:.2f}, estimated delivery: {order.estimated_delivery:%Y-%m-%d %H:%M} UTC."
            ),
            type=NotificationType.ORDER_CONFIRMATION,
            metadata={"order_id": order.id, "tracking_number": order.tracking_number},
        )

    @staticmethod
    async def status_update(db: AsyncSession, order: DeliveryOrder, old_status: OrderStatus) -> Notification:
        new_status = OrderStatus(order.status)
        return await NotificationService.create_notification(
            db,
            user_id=order.user_id,
            title=f"Order {order.tracking_number} Status Update",
            message=f"Status changed from {old_status.value} to {new_status.value}.",
            type=NotificationType.STATUS_UPDATE,
            metadata={
                "order_id": order.id,
                "tracking_number": order.tracking_number,
                "old_status": old_status.value,
                "new_status": new_status.value,
            },
        )

    @staticmethod
    async def location_update(db: AsyncSession, order: DeliveryOrder) -> Notification:
        return await NotificationService.create_notification(
            db,
            user_id=order.user_id,
            title=f"Order {order.tracking_number} Location Update",
            message=f"Your parcel is now at {_address(order.current_location)}.",
            type=NotificationType.LOCATION_UPDATE,
            metadata={"order_id": order.id, "tracking_number": order.tracking_number},
        )

    @staticmethod
    async def order_cancellation(db: AsyncSession, order: DeliveryOrder) -> Notification:
        return await NotificationService.create_notification(
            db,
            user_id=order.user_id,
            title=f"Order Cancelled - {order.tracking_number}",
            message="Your order has been cancelled.",
            type=NotificationType.ORDER_CANCELLED,
            metadata={"order_id": order.id, "tracking_number": order.tracking_number},
        )

    @staticmethod
    async def list_for_user(
        db: AsyncSession,
        user_id: int,
        unread_only: bool = False,
        limit: int = 50
    ) -> List[Notification]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712
        query = query.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)
        result = await db.execute(query)
        return list(result.scalars().all())

    @staticmethod
    async def unread_count(db: AsyncSession, user_id: int) -> int:
        result = await db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read == False  # noqa: E712
            )
        )
        return result.scalar_one()

    @staticmethod
    async def mark_read(db: AsyncSession, notification_id: int, user_id: int) -> bool:
        """Mark a notification as read."""
        stmt = update(Notification).where(
            Notification.id == notification_id,
            Notification.user_id == user_id
        ).values(
            is_read=True,
            read_at=datetime.now(timezone.utc)
        )
        result = await db.execute(stmt)
        return result.rowcount > 0

    @staticmethod
    async def mark_all_read(db: AsyncSession, user_id: int) -> int:
        """Mark all notifications for user as read."""
        stmt = update(Notification).where(
            Notification.user_id == user_id,
            Notification.is_read == False  # noqa: E712
        ).values(
            is_read=True,
            read_at=datetime.now(timezone.utc)
        )
        result = await db.execute(stmt)
        return result.rowcount
