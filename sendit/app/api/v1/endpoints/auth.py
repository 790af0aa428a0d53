"""
Authentication API endpoints.

Register, login, token refresh, logout and profile.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
from sendit.app.core.config import settings
from sendit.app.core.dependencies import get_bearer_token, get_current_user
from sendit.app.core.exceptions import AuthenticationError, ConflictError
from sendit.app.core.jwt import build_token_payload, create_access_token
from sendit.app.core.security import get_password_hash, verify_password
from sendit.app.core.token_revocation import revoke_token
from sendit.app.db.session import get_db
from sendit.app.models.enums import UserRole
from sendit.app.models.user import User
from sendit.app.repositories.users import UserRepository
from sendit.app.schemas.auth import MessageResponse, TokenResponse, UserLogin, UserRegister, UserResponse
from sendit.app.services.audit import AuditAction, log_auth_event

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _client_ip(request: Request):
    return request.client.host if request.client else None


def token_response(user: User) -> TokenResponse:
    return TokenResponse(
        access_token=create_access_token(data=build_token_payload(user)),
        token_type="bearer",
        expires_in=settings.access_token_expire_minutes * 60,
        user=UserResponse.model_validate(user),
    )


async def create_user(db: AsyncSession, user_data: UserRegister, role: UserRole) -> User:
    """Insert a user after checking the e-mail is free. Flushes, does not commit."""
    users = UserRepository(db)
    if await users.get_by_email(user_data.email):
        raise ConflictError("Email already registered", details={"field": "email"})

    new_user = User(
        email=user_data.email.lower(),
        hashed_password=get_password_hash(user_data.password),
        first_name=user_data.first_name.strip(),
        last_name=user_data.last_name.strip(),
        phone=user_data.phone,
        role=role,
        is_active=True,
    )
    return await users.put(new_user)


@router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserRegister,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a new customer account.

    Every registered account gets the USER role; admins are created through
    POST /admin/create-admin.
    """
    new_user = await create_user(db, user_data, UserRole.USER)

    await log_auth_event(
        db=db,
        action=AuditAction.USER_REGISTERED,
        user_id=new_user.id,
        email=new_user.email,
        ip_address=_client_ip(request),
    )
    await db.commit()
    await db.refresh(new_user)

    return token_response(new_user)


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    request: Request,
    db: AsyncSession = Depends(get_db)
):
    """
    Login user and return JWT token.

    Logs successful and failed login attempts for security monitoring.
    """
    user = await UserRepository(db).get_by_email(credentials.email)

    if not user or not verify_password(credentials.password, user.hashed_password):
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.id if user else None,
            email=credentials.email,
            ip_address=_client_ip(request),
            metadata={"reason": "Invalid password" if user else "User not found"}
        )
        await db.commit()
        raise AuthenticationError("Invalid email or password")

    if not user.is_active:
        await log_auth_event(
            db=db,
            action=AuditAction.LOGIN_FAILED,
            user_id=user.id,
            email=user.email,
            ip_address=_client_ip(request),
            metadata={"reason": "Account is inactive"}
        )
        await db.commit()
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Inactive user account"
        )

    await log_auth_event(
        db=db,
        action=AuditAction.LOGIN_SUCCESS,
        user_id=user.id,
        email=user.email,
        ip_address=_client_ip(request),
    )
    await db.commit()

    return token_response(user)


@router.post("/refresh", response_model=TokenResponse)
async def refresh(
    token: str = Depends(get_bearer_token),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Issue a fresh token and revoke the one presented."""
    user = await UserRepository(db).get(current_user["user_id"])

    await revoke_token(token, user.id)
    await log_auth_event(db=db, action=AuditAction.TOKEN_REFRESHED, user_id=user.id, email=user.email)
    await db.commit()

    return token_response(user)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    request: Request,
    token: str = Depends(get_bearer_token),
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Revoke the presented token."""
    revoked = await revoke_token(token, current_user["user_id"])

    await log_auth_event(
        db=db,
        action=AuditAction.LOGOUT,
        user_id=current_user["user_id"],
        email=current_user.get("sub"),
        ip_address=_client_ip(request),
        metadata={"revoked": revoked}
    )
    await db.commit()

    return MessageResponse(message="Logged out successfully")


@router.get("/profile", response_model=UserResponse)
async def get_profile(
    current_user: dict = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Current authenticated user's account details."""
    user = await UserRepository(db).get(current_user["user_id"])
    return UserResponse.model_validate(user)
