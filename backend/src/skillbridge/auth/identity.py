"""Identity context: resolves the calling principal from a session token.

The token only identifies the user. Role, tenant and tenant type are read
from the database on every call so that demotions, deactivations and tenant
suspensions take effect immediately for tokens that were already issued.
"""

from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import jwt
from sqlalchemy.orm import Session

from ..models.tenant import Tenant
from ..models.user import User
from ..observability.logging_config import get_logger
from .jwt import decode_token
from .roles import Role, TenantType

logger = get_logger(__name__)


@dataclass(frozen=True)
class Principal:
    """The authenticated caller: who they are, their role and their tenant."""
    user_id: UUID
    tenant_id: UUID
    role: Role
    tenant_type: TenantType
    email: str


def principal_for(user: User, tenant: Tenant) -> Principal:
    """Build a Principal from loaded rows."""
    return Principal(
        user_id=user.id,
        tenant_id=tenant.id,
        role=Role(user.role),
        tenant_type=TenantType(tenant.tenant_type),
        email=user.email,
    )


def resolve_principal(db: Session, token: Optional[str]) -> Optional[Principal]:
    """Resolve a principal from a bearer token.

    Returns None for a missing, expired or tampered token, for an unknown
    user, and for a deactivated user or tenant. Never raises for bad input.
    """
    if not token:
        return None

    try:
        payload = decode_token(token)
        user_id = UUID(payload.get("sub") or "")
    except (jwt.InvalidTokenError, ValueError) as e:
        logger.info(f"Rejected session token: {e}")
        return None

    row = (
        db.query(User, Tenant)
        .join(Tenant, Tenant.id == User.tenant_id)
        .filter(User.id == user_id)
        .first()
    )
    if row is None:
        return None

    user, tenant = row
    if not user.is_active or not tenant.is_active:
        logger.info(
            "Session for inactive account",
            extra={"user_id": user.id, "tenant_id": tenant.id},
        )
        return None

    return principal_for(user, tenant)
