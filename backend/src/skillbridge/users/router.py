"""Tenant user management endpoints (admin and manager only).

Every route is scoped to ``/tenants/{tenant_id}`` and passes the access
pipeline (role in {admin, manager}, path tenant equals caller tenant).
Operations on one specific user additionally pass the role-hierarchy guard.
"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from ..auth.dependencies import require
from ..auth.identity import Principal
from ..auth.pipeline import TENANT_USER_ADMIN
from ..auth.roles import Role
from ..database import get_db
from ..directory.pagination import paginate
from .schemas import UserCreate, UserUpdate, UserResponse, UserListResponse
from .service import UserService


router = APIRouter(prefix="/tenants/{tenant_id}/users", tags=["User Management"])


@router.get("", response_model=UserListResponse, summary="List users in tenant")
def list_users(
    tenant_id: UUID,
    role: Optional[Role] = Query(None),
    is_active: Optional[bool] = Query(None),
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1),
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_USER_ADMIN)),
) -> UserListResponse:
    users, total, page, per_page = UserService(db).list_users(
        principal, role=role, is_active=is_active, page=page, per_page=per_page
    )
    return UserListResponse(
        **paginate([UserResponse.model_validate(u) for u in users], total, page, per_page)
    )


@router.post(
    "",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a user in tenant",
)
def create_user(
    tenant_id: UUID,
    data: UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_USER_ADMIN)),
) -> UserResponse:
    """Create a user.

    Raises:
        409: Email already exists
        422: Password does not meet strength requirements
    """
    return UserService(db, request).create_user(principal, data)


@router.get("/{user_id}", response_model=UserResponse, summary="Get user by ID")
def get_user(
    tenant_id: UUID,
    user_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_USER_ADMIN)),
) -> UserResponse:
    return UserService(db).get_user(principal, user_id)


@router.patch("/{user_id}", response_model=UserResponse, summary="Update user")
def update_user(
    tenant_id: UUID,
    user_id: UUID,
    data: UserUpdate,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_USER_ADMIN)),
) -> UserResponse:
    """Update name, email, role, is_active or password.

    Raises:
        404: User not found in tenant
        409: Role-hierarchy rule violated, or email conflict
    """
    return UserService(db, request).update_user(principal, user_id, data)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete user")
def delete_user(
    tenant_id: UUID,
    user_id: UUID,
    request: Request,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_USER_ADMIN)),
) -> None:
    UserService(db, request).delete_user(principal, user_id)
