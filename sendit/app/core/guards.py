"""
Security guards for role-based and ownership-based access control.

Provides dependencies for protecting endpoints.
"""

from typing import List
from fastapi import Depends, HTTPException, status
from sendit.app.models.enums import UserRole
from sendit.app.core.dependencies import get_current_user


def require_role(allowed_roles: List[UserRole]):
    """
    Dependency factory for role-based access control.

    Usage:
        @router.get("/parcels")
        async def list_parcels(current_user: dict = Depends(require_role([UserRole.USER]))):
            ...

    Raises:
        HTTPException 403 if user role is not in allowed_roles
    """
    async def role_checker(current_user: dict = Depends(get_current_user)) -> dict:
        user_role_str = current_user.get("role")

        if not user_role_str:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Role information missing from token"
            )

        try:
            user_role = UserRole(user_role_str)
        except ValueError:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Invalid role in token"
            )

        if user_role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Required role: {', '.join([r.value for r in allowed_roles])}"
            )

        return current_user

    return role_checker


def require_admin(current_user: dict = Depends(get_current_user)) -> dict:
    """
    Dependency for admin-only endpoints.

    Returns:
        User payload if admin, raises 403 otherwise
    """
    if current_user.get("role") != UserRole.ADMIN.value:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required"
        )

    return current_user


def is_admin(current_user: dict) -> bool:
    return current_user.get("role") == UserRole.ADMIN.value


def verify_ownership(resource_owner_id: int, current_user: dict) -> bool:
    """Admins can access everything; everyone else only their own resources."""
    if is_admin(current_user):
        return True
    return current_user.get("user_id") == resource_owner_id


class OwnershipGuard:
    """
    Ownership guard for per-user resources.

    Usage:
        ownership_guard = OwnershipGuard()

        order = await OrderRepository(db).get(order_id)
        ownership_guard.enforce(order.user_id, current_user, "order")
    """

    def enforce(
        self,
        resource_owner_id: int,
        current_user: dict,
        resource_name: str = "resource",
        allow_admin: bool = True,
    ):
        """
        Raise 403 unless the current user owns the resource.

        ``allow_admin=False`` is for owner-only actions such as changing a
        destination or cancelling, which admins perform through the status
        endpoints instead.
        """
        if allow_admin:
            allowed = verify_ownership(resource_owner_id, current_user)
        else:
            allowed = current_user.get("user_id") == resource_owner_id
        if not allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. You do not have permission to access this {resource_name}."
            )
