"""
Parcel API endpoints.

Customers register the parcels they want to ship. Every write is validated
against the configured weight, size, value and description limits.
"""

from fastapi import APIRouter, Depends, Query, Path, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sendit.app.core.config import settings
from sendit.app.core.dependencies import get_current_user
from sendit.app.core.exceptions import ConflictError, NotFoundError
from sendit.app.core.guards import OwnershipGuard
from sendit.app.db.session import get_db
from sendit.app.domain.parcels import validate_parcel
from sendit.app.models.parcel import Parcel
from sendit.app.repositories.parcels import ParcelRepository
from sendit.app.schemas.parcel import ParcelCreate, ParcelListResponse, ParcelResponse, ParcelUpdate
from sendit.app.services.audit import AuditAction, log_event

router = APIRouter(prefix="/parcels", tags=["Parcels"])
ownership_guard = OwnershipGuard()


def check_parcel(description: str, weight: float, dimensions: dict, value: float) -> None:
    validate_parcel(
        description,
        weight,
        dimensions,
        value,
        max_weight_kg=settings.max_weight_kg,
        max_dimension_cm=settings.max_dimension_cm,
        max_description_length=settings.max_description_length,
    )


async def get_parcel_or_404(repo: ParcelRepository, parcel_id: int) -> Parcel:
    parcel = await repo.get(parcel_id)
    if not parcel:
        raise NotFoundError("Parcel", parcel_id)
    return parcel


@router.post("", response_model=ParcelResponse, status_code=status.HTTP_201_CREATED)
async def create_parcel(
    parcel_data: ParcelCreate,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Register a new parcel owned by the caller."""
    dimensions = parcel_data.dimensions.model_dump()
    check_parcel(parcel_data.description, parcel_data.weight, dimensions, parcel_data.value)

    repo = ParcelRepository(db)
    parcel = await repo.put(Parcel(
        user_id=current_user["user_id"],
        description=parcel_data.description.strip(),
        weight=parcel_data.weight,
        length_cm=dimensions["length"],
        width_cm=dimensions["width"],
        height_cm=dimensions["height"],
        value=parcel_data.value,
        fragile=parcel_data.fragile,
    ))

    await log_event(
        db=db,
        action=AuditAction.PARCEL_CREATED,
        actor_id=current_user["user_id"],
        actor_email=current_user.get("sub"),
        resource_type="parcel",
        resource_id=parcel.id,
        metadata={"weight": parcel.weight, "weight_category": parcel.weight_category.value}
    )
    await db.commit()
    await db.refresh(parcel)

    return ParcelResponse.model_validate(parcel)


@router.get("", response_model=ParcelListResponse)
async def list_my_parcels(
    page: int = Query(1, ge=1, description="Page number"),
    page_size: int = Query(50, ge=1, le=100, description="Items per page"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """The caller's parcels, newest first."""
    user_id = current_user["user_id"]

    total = (await db.execute(
        select(func.count(Parcel.id)).where(Parcel.user_id == user_id)
    )).scalar()

    offset = (page - 1) * page_size
    result = await db.execute(
        select(Parcel).where(Parcel.user_id == user_id)
        .order_by(Parcel.created_at.desc(), Parcel.id.desc()).offset(offset).limit(page_size)
    )
    parcels = result.scalars().all()

    return ParcelListResponse(
        parcels=[ParcelResponse.model_validate(p) for p in parcels],
        total=total,
        page=page,
        page_size=page_size
    )


@router.get("/{parcel_id}", response_model=ParcelResponse)
async def get_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    parcel = await get_parcel_or_404(ParcelRepository(db), parcel_id)
    ownership_guard.enforce(parcel.user_id, current_user, "parcel")
    return ParcelResponse.model_validate(parcel)


@router.put("/{parcel_id}", response_model=ParcelResponse)
async def update_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    parcel_data: ParcelUpdate = ...,
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Update parcel details (owner only).

    Only the supplied fields change; the merged parcel is validated as a
    whole before anything is written.
    """
    repo = ParcelRepository(db)
    parcel = await get_parcel_or_404(repo, parcel_id)
    ownership_guard.enforce(parcel.user_id, current_user, "parcel", allow_admin=False)

    update_data = parcel_data.model_dump(exclude_unset=True, exclude_none=True)
    merged = {
        "description": update_data.get("description", parcel.description),
        "weight": update_data.get("weight", parcel.weight),
        "dimensions": update_data.get("dimensions", parcel.dimensions),
        "value": update_data.get("value", parcel.value),
    }
    check_parcel(merged["description"], merged["weight"], merged["dimensions"], merged["value"])

    parcel.description = merged["description"].strip()
    parcel.weight = merged["weight"]
    parcel.length_cm = merged["dimensions"]["length"]
    parcel.width_cm = merged["dimensions"]["width"]
    parcel.height_cm = merged["dimensions"]["height"]
    parcel.value = merged["value"]
    if "fragile" in update_data:
        parcel.fragile = update_data["fragile"]

    await repo.put(parcel)
    await log_event(
        db=db,
        action=AuditAction.PARCEL_UPDATED,
        actor_id=current_user["user_id"],
        actor_email=current_user.get("sub"),
        resource_type="parcel",
        resource_id=parcel.id,
        metadata={"updated_fields": sorted(update_data)}
    )
    await db.commit()
    await db.refresh(parcel)

    return ParcelResponse.model_validate(parcel)


@router.delete("/{parcel_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_parcel(
    parcel_id: int = Path(..., description="Parcel ID"),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Delete a parcel (owner only). Refused while an undelivered order ships it."""
    repo = ParcelRepository(db)
    parcel = await get_parcel_or_404(repo, parcel_id)
    ownership_guard.enforce(parcel.user_id, current_user, "parcel", allow_admin=False)

    active_orders = await repo.count_active_orders(parcel_id)
    if active_orders:
        raise ConflictError(
            "Parcel has active delivery orders and cannot be deleted",
            details={"parcel_id": parcel_id, "active_orders": active_orders}
        )

    await repo.detach_orders(parcel_id)
    await repo.delete(parcel)
    await log_event(
        db=db,
        action=AuditAction.PARCEL_DELETED,
        actor_id=current_user["user_id"],
        actor_email=current_user.get("sub"),
        resource_type="parcel",
        resource_id=parcel_id,
    )
    await db.commit()
