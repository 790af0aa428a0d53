from typing import Optional

from sqlalchemy import func, select, update

from sendit.app.domain.repositories import ParcelLookup
from sendit.app.models.enums import TERMINAL_STATUSES
from sendit.app.models.order import DeliveryOrder
from sendit.app.models.parcel import Parcel
from sendit.app.repositories.base import SqlAlchemyRepository


class ParcelRepository(SqlAlchemyRepository[Parcel], ParcelLookup):
    model = Parcel

    async def get_by_id(self, parcel_id: int) -> Optional[Parcel]:
        return await self.get(parcel_id)

    async def count_active_orders(self, parcel_id: int) -> int:
        """Orders on this parcel that are neither delivered nor cancelled."""
        result = await self.db.execute(
            select(func.count(DeliveryOrder.id)).where(
                DeliveryOrder.parcel_id == parcel_id,
                DeliveryOrder.status.notin_(TERMINAL_STATUSES),
            )
        )
        return result.scalar_one()

    async def detach_orders(self, parcel_id: int) -> None:
        """Clear the parcel reference on (finished) orders before the parcel is deleted."""
        await self.db.execute(
            update(DeliveryOrder).where(DeliveryOrder.parcel_id == parcel_id).values(parcel_id=None)
        )
