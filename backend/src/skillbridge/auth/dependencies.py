"""FastAPI dependencies for authentication and authorization.

This module is the boundary between HTTP and the access pipeline. It supplies
the pipeline with:
- the principal resolved from the Bearer token (or None)
- the tenant id found in the target path
- the request path, for the authentication allow-list

and records the decision. A denied call raises AccessDenied, which the
application renders as 401/303 (unauthenticated) or 403 (everything else).

Usage:
    @router.get("/tenants/{tenant_id}/requests/inbox")
    def inbox(principal: Principal = Depends(require(TENANT_MEMBER))):
        ...
"""

from typing import Annotated, Callable, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from ..database import get_db
from ..observability.logging_config import get_logger
from ..observability.metrics import authorization_decisions_total
from .identity import Principal, resolve_principal
from .pipeline import AUTHENTICATED, AccessDenied, Requirement, authorize


logger = get_logger(__name__)

# Missing credentials are a pipeline decision, not an immediate 403
security = HTTPBearer(auto_error=False)


def wants_json(request: Request) -> bool:
    """True when the caller expects a structured response instead of a redirect."""
    accept = request.headers.get("Accept", "").lower()
    requested_with = request.headers.get("X-Requested-With", "").lower()
    return "application/json" in accept or requested_with == "xmlhttprequest"


def get_optional_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> Optional[Principal]:
    """Resolve the caller from the Authorization header, or None."""
    if credentials is None:
        return None
    return resolve_principal(db, credentials.credentials)


def require(requirement: Requirement) -> Callable:
    """Create a dependency that runs the access pipeline for one operation.

    On success the principal and its tenant type are attached to
    ``request.state`` for downstream handlers.

    Args:
        requirement: Declarative access requirement

    Returns:
        Callable: FastAPI dependency returning the Principal

    Raises:
        AccessDenied: If any declared check fails
    """

    def access_dependency(
        request: Request,
        principal: Optional[Principal] = Depends(get_optional_principal),
    ) -> Optional[Principal]:
        scope_tenant_id = None
        if requirement.tenant_scope:
            scope_tenant_id = request.path_params.get(requirement.tenant_scope)

        decision = authorize(
            principal,
            requirement,
            scope_tenant_id=scope_tenant_id,
            path=request.url.path,
        )

        if not decision.allowed:
            authorization_decisions_total.labels(outcome="deny", reason=decision.reason.value).inc()
            logger.warning(
                f"Access denied: {decision.reason.value}",
                extra={
                    "layer": AccessDenied.layer,
                    "reason": decision.reason.value,
                    "tenant_id": principal.tenant_id if principal else None,
                    "user_id": principal.user_id if principal else None,
                    "path": request.url.path,
                },
            )
            raise AccessDenied(decision.reason, wants_json=wants_json(request))

        authorization_decisions_total.labels(outcome="allow", reason="none").inc()
        request.state.principal = principal
        request.state.tenant_type = principal.tenant_type if principal else None
        return principal

    return access_dependency


# Type alias for endpoints that only need an authenticated caller
CurrentPrincipal = Annotated[Principal, Depends(require(AUTHENTICATED))]
