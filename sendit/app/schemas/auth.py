"""
Authentication Pydantic schemas.

Defines request and response schemas for authentication endpoints.
"""

from pydantic import BaseModel, EmailStr, Field
from datetime import datetime
from sendit.app.core.config import settings
from sendit.app.models.enums import UserRole


class UserRegister(BaseModel):
    """
    Schema for customer registration.

    Used by POST /auth/register. Registered users always get the USER role.
    """
    email: EmailStr = Field(..., description="User email address")
    password: str = Field(..., min_length=settings.min_password_length, description="Password")
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    phone: str = Field(default="", max_length=50)


class AdminCreate(UserRegister):
    """Schema for POST /admin/create-admin."""


class UserLogin(BaseModel):
    """Schema for POST /auth/login."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., description="Password")


class UserResponse(BaseModel):
    """
    Schema for user information response.

    Used by GET /auth/profile and embedded in token responses.
    """
    id: int
    email: str
    first_name: str
    last_name: str
    phone: str
    role: UserRole
    is_active: bool
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class TokenResponse(BaseModel):
    """
    Schema for JWT token response.

    Returned by register, login and refresh.
    """
    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    expires_in: int = Field(..., description="Token lifetime in seconds")
    user: UserResponse


class MessageResponse(BaseModel):
    message: str
