"""Pydantic schemas for authentication endpoints"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from uuid import UUID
from datetime import datetime
from typing import Optional


class LoginRequest(BaseModel):
    """Request schema for user login.

    Emails are globally unique, so no tenant identifier is needed.
    """
    email: EmailStr
    password: str = Field(..., min_length=1)


class LoginInfoResponse(BaseModel):
    """Response schema for GET /auth/login, the target of login redirects."""
    message: str
    method: str = "POST"
    fields: list[str] = ["email", "password"]
    next: Optional[str] = None


class LoginResponse(BaseModel):
    """Response schema for successful login."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = 3600


class UserResponse(BaseModel):
    """User information response (excludes password_hash)."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    email: str
    name: str
    role: str
    is_active: bool
    last_login_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class PrincipalResponse(BaseModel):
    """The resolved principal as the access pipeline sees it."""
    user_id: UUID
    tenant_id: UUID
    role: str
    tenant_type: str


class MeResponse(BaseModel):
    """Response schema for GET /auth/me."""
    principal: PrincipalResponse
    user: UserResponse
