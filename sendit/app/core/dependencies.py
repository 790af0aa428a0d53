"""
Authentication dependencies for FastAPI.

This module provides dependencies for protecting routes with JWT authentication.
"""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession
from sendit.app.core.exceptions import TokenRevokedError
from sendit.app.core.jwt import decode_access_token
from sendit.app.core.token_revocation import is_token_revoked
from sendit.app.db.session import get_db
from sendit.app.repositories.users import UserRepository

# HTTP Bearer security scheme
security = HTTPBearer()


async def get_bearer_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> str:
    """Raw token string, for endpoints that revoke the presented token."""
    return credentials.credentials


async def get_current_user(
    token: str = Depends(get_bearer_token),
    db: AsyncSession = Depends(get_db)
) -> dict:
    """
    FastAPI dependency for JWT authentication.

    Checks, in order:
    1. JWT signature and expiry
    2. The token has not been revoked by logout or refresh
    3. The user still exists and is active (real-time database check)

    Returns:
        Decoded token payload (``sub``, ``user_id``, ``role``)

    Raises:
        HTTPException 401 if authentication fails, 403 for inactive users
    """
    payload = decode_access_token(token)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = payload.get("user_id")
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if await is_token_revoked(token):
        raise TokenRevokedError()

    user = await UserRepository(db).get(user_id)

    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found",
            headers={"WWW-Authenticate": "Bearer"},
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="User account is inactive",
        )

    return payload
