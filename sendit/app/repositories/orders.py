from typing import List, Optional

from sqlalchemy import desc, func, select

from sendit.app.models.enums import OrderStatus
from sendit.app.models.order import DeliveryOrder
from sendit.app.repositories.base import SqlAlchemyRepository


class OrderRepository(SqlAlchemyRepository[DeliveryOrder]):
    model = DeliveryOrder

    async def get_by_tracking_number(self, tracking_number: str) -> Optional[DeliveryOrder]:
        result = await self.db.execute(
            select(DeliveryOrder).where(DeliveryOrder.tracking_number == tracking_number.upper())
        )
        return result.scalar_one_or_none()

    async def paginate(
        self,
        page: int = 1,
        page_size: int = 50,
        status: Optional[OrderStatus] = None,
        user_id: Optional[int] = None,
    ):
        """Return (orders, total) for one page, newest first."""
        query = select(DeliveryOrder)
        count_query = select(func.count(DeliveryOrder.id))
        if status is not None:
            query = query.where(DeliveryOrder.status == status)
            count_query = count_query.where(DeliveryOrder.status == status)
        if user_id is not None:
            query = query.where(DeliveryOrder.user_id == user_id)
            count_query = count_query.where(DeliveryOrder.user_id == user_id)

        total = (await self.db.execute(count_query)).scalar_one()
        offset = (page - 1) * page_size
        query = query.order_by(desc(DeliveryOrder.created_at), desc(DeliveryOrder.id)).offset(offset).limit(page_size)
        result = await self.db.execute(query)
        orders: List[DeliveryOrder] = list(result.scalars().all())
        return orders, total

    async def status_counts(self) -> dict:
        result = await self.db.execute(
            select(DeliveryOrder.status, func.count(DeliveryOrder.id)).group_by(DeliveryOrder.status)
        )
        return {status: count for status, count in result.all()}

    async def revenue(self) -> float:
        """Sum of all order prices, cancelled orders included."""
        result = await self.db.execute(select(func.coalesce(func.sum(DeliveryOrder.price), 0.0)))
        return float(result.scalar_one())
