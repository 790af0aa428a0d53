"""
Admin API Endpoints.

Order oversight (listing, status and location updates), dashboard
statistics and user management. Every endpoint requires the ADMIN role.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Path, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sendit.app.core.guards import require_admin, require_role
from sendit.app.db.session import get_db
from sendit.app.domain.orders import OrderLifecycle
from sendit.app.models.enums import OrderStatus, UserRole
from sendit.app.models.user import User
from sendit.app.repositories.orders import OrderRepository
from sendit.app.schemas.admin import OrderStats, UserListResponse
from sendit.app.schemas.auth import AdminCreate, UserResponse
from sendit.app.schemas.order import LocationUpdate, OrderListResponse, OrderResponse, StatusUpdate
from sendit.app.services.analytics import AnalyticsService
from sendit.app.services.audit import AuditAction, log_event
from sendit.app.api.v1.endpoints.auth import create_user
from sendit.app.api.v1.endpoints.orders import apply_status_change, get_order_lifecycle, get_order_or_404

router = APIRouter(prefix="/admin", tags=["Admin"])


@router.get("/orders", response_model=OrderListResponse)
async def list_orders(
    status_filter: Optional[OrderStatus] = Query(None, alias="status", description="Only orders in this status"),
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """All orders, newest first, optionally filtered by status."""
    orders, total = await OrderRepository(db).paginate(page=page, page_size=page_size, status=status_filter)
    return OrderListResponse(
        orders=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=page_size
    )


@router.put("/orders/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: int = Path(..., description="Order ID"),
    update_data: StatusUpdate = ...,
    admin: dict = Depends(require_admin),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    db: AsyncSession = Depends(get_db)
):
    """Set the order status and, optionally, its current location."""
    order = await get_order_or_404(OrderRepository(db), order_id)
    order = await apply_status_change(
        db, lifecycle, order, update_data.status, update_data.current_location, admin
    )
    return OrderResponse.model_validate(order)


@router.put("/orders/{order_id}/location", response_model=OrderResponse)
async def update_order_location(
    order_id: int = Path(..., description="Order ID"),
    update_data: LocationUpdate = ...,
    admin: dict = Depends(require_admin),
    lifecycle: OrderLifecycle = Depends(get_order_lifecycle),
    db: AsyncSession = Depends(get_db)
):
    """Record where the parcel is now; the status is left unchanged."""
    order = await get_order_or_404(OrderRepository(db), order_id)
    order = await apply_status_change(
        db, lifecycle, order, OrderStatus(order.status), update_data.current_location, admin,
        action=AuditAction.ORDER_LOCATION_UPDATED,
    )

    return OrderResponse.model_validate(order)


@router.get("/stats", response_model=OrderStats)
async def get_order_stats(
    admin: dict = Depends(require_role([UserRole.ADMIN])),
    db: AsyncSession = Depends(get_db)
):
    """Order counts by status and revenue totals."""
    return await AnalyticsService.get_order_stats(db)


@router.get("/users", response_model=UserListResponse)
async def list_users(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """
    List all users in the system (admin-only).

    Returns paginated user list with role and status information.
    """
    count_query = select(func.count(User.id))
    total_result = await db.execute(count_query)
    total = total_result.scalar()

    offset = (page - 1) * page_size
    query = select(User).order_by(User.created_at.desc(), User.id.desc()).offset(offset).limit(page_size)
    result = await db.execute(query)
    users = result.scalars().all()

    return UserListResponse(
        users=[UserResponse.model_validate(user) for user in users],
        total=total,
        page=page,
        page_size=page_size
    )


@router.post("/create-admin", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_admin(
    admin_data: AdminCreate,
    request: Request,
    admin: dict = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Create another admin account."""
    new_admin = await create_user(db, admin_data, UserRole.ADMIN)

    await log_event(
        db=db,
        action=AuditAction.ADMIN_CREATED,
        actor_id=admin["user_id"],
        actor_email=admin.get("sub"),
        resource_type="user",
        resource_id=new_admin.id,
        metadata={"email": new_admin.email},
        ip_address=request.client.host if request.client else None
    )
    await db.commit()
    await db.refresh(new_admin)

    return UserResponse.model_validate(new_admin)
