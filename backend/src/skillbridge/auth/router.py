"""Authentication endpoints for SkillBridge API

Provides login (the only exempt auth path) and retrieval of the resolved
principal for the current token.
"""

from datetime import datetime, timezone
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status, Request
from sqlalchemy.orm import Session

from ..audit.service import log_from_request
from ..database import get_db
from ..models.tenant import Tenant
from ..models.user import User
from ..observability.logging_config import get_logger
from ..observability.metrics import logins_total
from .dependencies import CurrentPrincipal
from .jwt import create_access_token, _get_jwt_expiry_minutes
from .password import verify_password
from .schemas import LoginInfoResponse, LoginRequest, LoginResponse, MeResponse, PrincipalResponse, UserResponse


logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])

_INVALID_CREDENTIALS = "Invalid email or password"


@router.get("/login", response_model=LoginInfoResponse)
def login_info(next: Optional[str] = Query(None, max_length=2000)) -> LoginInfoResponse:
    """Describe the login surface for callers redirected here without a session."""
    return LoginInfoResponse(message="Authentication required: POST credentials to this path", next=next)


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    """Authenticate user and return JWT access token.

    Security measures:
    - Generic error message for unknown email, wrong password, and inactive
      user or tenant (prevents account enumeration)
    - Failed attempts for known users are written to the tenant's audit log
    - last_login_at is updated on successful login

    Raises:
        HTTPException: 401 if credentials are invalid or the account is inactive
    """
    user = db.query(User).filter(User.email == credentials.email.lower()).first()

    if not user or not verify_password(credentials.password, user.password_hash):
        logins_total.labels(outcome="failed").inc()
        if user:
            log_from_request(
                db=db,
                request=request,
                tenant_id=user.tenant_id,
                actor_id=user.id,
                action="LOGIN_FAILED",
                entity_type="user",
                entity_id=user.id,
                metadata={"email": credentials.email, "reason": "invalid_credentials"},
            )
            db.commit()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_INVALID_CREDENTIALS)

    tenant = db.get(Tenant, user.tenant_id)
    if not user.is_active or tenant is None or not tenant.is_active:
        logins_total.labels(outcome="failed").inc()
        log_from_request(
            db=db,
            request=request,
            tenant_id=user.tenant_id,
            actor_id=user.id,
            action="LOGIN_FAILED",
            entity_type="user",
            entity_id=user.id,
            metadata={"email": credentials.email, "reason": "account_inactive"},
        )
        db.commit()
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=_INVALID_CREDENTIALS)

    user.last_login_at = datetime.now(timezone.utc)
    log_from_request(
        db=db,
        request=request,
        tenant_id=user.tenant_id,
        actor_id=user.id,
        action="LOGIN_SUCCESS",
        entity_type="user",
        entity_id=user.id,
        metadata={"email": user.email},
    )
    db.commit()
    logins_total.labels(outcome="success").inc()
    logger.info("Login succeeded", extra={"tenant_id": user.tenant_id, "user_id": user.id})

    access_token = create_access_token(
        user_id=user.id,
        tenant_id=user.tenant_id,
        role=user.role,
        email=user.email,
    )

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=_get_jwt_expiry_minutes() * 60,
    )


@router.get("/me", response_model=MeResponse)
def get_me(
    principal: CurrentPrincipal,
    db: Annotated[Session, Depends(get_db)],
):
    """Return the resolved principal and the user's profile."""
    user = db.get(User, principal.user_id)
    return MeResponse(
        principal=PrincipalResponse(
            user_id=principal.user_id,
            tenant_id=principal.tenant_id,
            role=principal.role.value,
            tenant_type=principal.tenant_type.value,
        ),
        user=UserResponse.model_validate(user),
    )
