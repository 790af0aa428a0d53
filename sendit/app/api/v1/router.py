"""
API v1 Router.

Aggregates all v1 API endpoints.
"""

from fastapi import APIRouter
from sendit.app.api.v1.endpoints import auth, parcels, orders, admin, notifications

router = APIRouter()

router.include_router(auth.router)
router.include_router(parcels.router)
router.include_router(orders.router)
router.include_router(admin.router)
router.include_router(notifications.router)
