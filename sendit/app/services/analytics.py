"""
Order statistics for the admin dashboard.

READ-ONLY aggregation. Results are cached for ``stats_cache_ttl_seconds``
and dropped whenever an order is created or changes status.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from sendit.app.core.config import settings
from sendit.app.models.enums import OrderStatus
from sendit.app.repositories.orders import OrderRepository
from sendit.app.schemas.admin import OrderStats
from sendit.app.services.cache import CacheService

STATS_CACHE_KEY = "admin:order_stats"


class AnalyticsService:

    @staticmethod
    async def get_order_stats(db: AsyncSession) -> OrderStats:
        cached = await CacheService.get(STATS_CACHE_KEY)
        if cached is not None:
            return cached

        repo = OrderRepository(db)
        counts = await repo.status_counts()
        total = sum(counts.values())
        revenue = await repo.revenue()

        stats = OrderStats(
            total_orders=total,
            pending_orders=counts.get(OrderStatus.PENDING, 0),
            in_transit_orders=counts.get(OrderStatus.IN_TRANSIT, 0),
            delivered_orders=counts.get(OrderStatus.DELIVERED, 0),
            cancelled_orders=counts.get(OrderStatus.CANCELLED, 0),
            total_revenue=revenue,
            average_order_value=revenue / total if total else 0.0,
        )

        await CacheService.set(STATS_CACHE_KEY, stats, ttl_seconds=settings.stats_cache_ttl_seconds)
        return stats

    @staticmethod
    async def invalidate() -> None:
        await CacheService.invalidate(STATS_CACHE_KEY)
