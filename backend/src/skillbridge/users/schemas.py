"""Pydantic schemas for tenant user management endpoints.

All schemas exclude password_hash (never returned in API responses).
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from uuid import UUID
from datetime import datetime
from typing import Optional

from ..auth.roles import Role


def _trimmed_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    if not v:
        raise ValueError("Name must not be blank")
    return v


class UserCreate(BaseModel):
    """Request schema for creating a user (POST /tenants/{tenant_id}/users).

    The tenant is always taken from the path, never from the body. Emails are
    globally unique across tenants.
    """
    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "email": "sales@provider.example",
                "name": "Sales Manager",
                "role": "manager",
                "password": "Str0ng!Passw0rd"
            }
        }
    )

    email: EmailStr = Field(..., description="Email address (globally unique, case-insensitive)")
    name: str = Field(..., min_length=1, max_length=200, description="Display name")
    role: Role = Field(..., description="Role within the tenant")
    password: str = Field(..., min_length=1, description="Password (strength policy applies)")

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        return _trimmed_name(v)


class UserUpdate(BaseModel):
    """Request schema for updating a user (PATCH /tenants/{tenant_id}/users/{user_id}).

    All fields are optional. Role changes and deactivation of an admin are
    subject to last-admin protection.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    email: Optional[EmailStr] = None
    role: Optional[Role] = None
    is_active: Optional[bool] = None
    password: Optional[str] = Field(None, min_length=1)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        return _trimmed_name(v)


class UserResponse(BaseModel):
    """Response schema for user details."""
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    tenant_id: UUID
    email: str
    name: str
    role: str
    is_active: bool
    last_login_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class UserListResponse(BaseModel):
    """Page of users with pagination metadata."""
    items: list[UserResponse]
    page: int
    per_page: int
    total: int
    pages: int
    has_prev: bool
    has_next: bool
