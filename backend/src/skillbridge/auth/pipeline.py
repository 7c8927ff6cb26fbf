"""Access decision pipeline.

Every protected operation declares a Requirement. ``authorize`` runs four
checks in a fixed order and stops at the first failure:

1. Authenticated    - a principal was resolved (skipped for exempt paths)
2. Role allowed     - principal.role is in allowed_roles (empty set = any role)
3. Tenant scope     - the tenant id in the target path equals principal.tenant_id
4. Tenant type      - principal.tenant_type is in tenant_types (empty set = any)

An operation declares only the checks it needs; the pipeline result is the
conjunction of the declared checks. ``authorize`` is a pure function of its
arguments and never touches the database or the request.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, FrozenSet, Optional, Tuple, Union
from uuid import UUID

from .identity import Principal
from .roles import Role, TenantType, USER_ADMIN_ROLES


class DenyReason(str, Enum):
    """Why the pipeline rejected a call."""
    UNAUTHENTICATED = "Unauthenticated"
    INSUFFICIENT_ROLE = "InsufficientRole"
    WRONG_TENANT = "WrongTenant"
    WRONG_TENANT_TYPE = "WrongTenantType"


@dataclass(frozen=True)
class Decision:
    """Outcome of an access or guard decision."""
    allowed: bool
    reason: Optional[Enum] = None

    @classmethod
    def allow(cls) -> "Decision":
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: Enum) -> "Decision":
        return cls(allowed=False, reason=reason)

    def __bool__(self) -> bool:
        return self.allowed


@dataclass(frozen=True)
class Requirement:
    """Declarative access requirement for one operation.

    Attributes:
        requires_auth: Caller must be authenticated
        allowed_roles: Roles permitted; empty means any authenticated role
        tenant_scope: Name of the path parameter holding the target tenant id
        tenant_types: Tenant types permitted; empty means any
    """
    requires_auth: bool = True
    allowed_roles: FrozenSet[Role] = field(default_factory=frozenset)
    tenant_scope: Optional[str] = None
    tenant_types: FrozenSet[TenantType] = field(default_factory=frozenset)


class AccessDenied(Exception):
    """Raised at the HTTP boundary when the pipeline denies a call.

    Attributes:
        reason: DenyReason from the failing check
        wants_json: Caller asked for a structured response rather than a redirect
    """

    layer = "authorization"

    def __init__(self, reason: DenyReason, wants_json: bool = True):
        super().__init__(reason.value)
        self.reason = reason
        self.wants_json = wants_json


# Paths that bypass the authentication check regardless of principal state
EXEMPT_PATHS: Tuple[re.Pattern, ...] = (
    re.compile(r"^/auth/login$"),
    re.compile(r"^/health$"),
    re.compile(r"^/healthz$"),
    re.compile(r"^/metrics$"),
    re.compile(r"^/static(/|$)"),
    re.compile(r"^/css(/|$)"),
    re.compile(r"^/js(/|$)"),
    re.compile(r"^/img(/|$)"),
    re.compile(r"^/favicon\.ico$"),
    re.compile(r"^/docs(/|$)"),
    re.compile(r"^/openapi\.json$"),
)


def is_exempt(path: Optional[str]) -> bool:
    """True if the path is on the authentication allow-list."""
    if not path:
        return False
    return any(pattern.match(path) for pattern in EXEMPT_PATHS)


ScopeId = Union[str, UUID, None]
Check = Callable[[Optional[Principal], Requirement, ScopeId, Optional[str]], Optional[DenyReason]]


def _check_authenticated(principal, requirement, scope_tenant_id, path):
    if not requirement.requires_auth or is_exempt(path):
        return None
    if principal is None:
        return DenyReason.UNAUTHENTICATED
    return None


def _check_role(principal, requirement, scope_tenant_id, path):
    if not requirement.allowed_roles:
        return None
    if principal is None:
        return DenyReason.UNAUTHENTICATED
    if principal.role not in requirement.allowed_roles:
        return DenyReason.INSUFFICIENT_ROLE
    return None


def _check_tenant_scope(principal, requirement, scope_tenant_id, path):
    if requirement.tenant_scope is None:
        return None
    if principal is None:
        return DenyReason.UNAUTHENTICATED
    if scope_tenant_id is None:
        return DenyReason.WRONG_TENANT
    try:
        target = scope_tenant_id if isinstance(scope_tenant_id, UUID) else UUID(str(scope_tenant_id))
    except ValueError:
        return DenyReason.WRONG_TENANT
    if target != principal.tenant_id:
        return DenyReason.WRONG_TENANT
    return None


def _check_tenant_type(principal, requirement, scope_tenant_id, path):
    if not requirement.tenant_types:
        return None
    if principal is None:
        return DenyReason.UNAUTHENTICATED
    if principal.tenant_type not in requirement.tenant_types:
        return DenyReason.WRONG_TENANT_TYPE
    return None


CHECKS: Tuple[Check, ...] = (
    _check_authenticated,
    _check_role,
    _check_tenant_scope,
    _check_tenant_type,
)


def authorize(
    principal: Optional[Principal],
    requirement: Requirement,
    scope_tenant_id: ScopeId = None,
    path: Optional[str] = None,
) -> Decision:
    """Evaluate a requirement against a principal.

    Args:
        principal: Resolved caller, or None when no valid session exists
        requirement: What the operation demands
        scope_tenant_id: Tenant id taken from the target path (authoritative)
        path: Request path, used only for the authentication allow-list

    Returns:
        Decision: allow, or deny with the reason of the first failing check
    """
    for check in CHECKS:
        reason = check(principal, requirement, scope_tenant_id, path)
        if reason is not None:
            return Decision.deny(reason)
    return Decision.allow()


# Requirements shared by the routers
AUTHENTICATED = Requirement()
TENANT_MEMBER = Requirement(tenant_scope="tenant_id")
TENANT_USER_ADMIN = Requirement(allowed_roles=USER_ADMIN_ROLES, tenant_scope="tenant_id")
TENANT_ADMIN = Requirement(allowed_roles=frozenset({Role.ADMIN}), tenant_scope="tenant_id")
PROVIDER_SENDER = Requirement(
    tenant_scope="tenant_id",
    tenant_types=frozenset({TenantType.PROVIDER}),
)
