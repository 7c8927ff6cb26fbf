"""Audit logging service for security events.

Audit entries are added to the caller's session and flushed, never committed
here: they become durable in the same transaction as the mutation they
describe, and disappear with it on rollback.

Audit Events:
- LOGIN_SUCCESS, LOGIN_FAILED
- USER_CREATED, USER_UPDATED, USER_ROLE_CHANGED, USER_DEACTIVATED, USER_DELETED
- REQUEST_CREATED, REQUEST_UPDATED, REQUEST_WITHDRAWN
- REQUEST_ACCEPTED, REQUEST_DECLINED
"""

from sqlalchemy.orm import Session
from uuid import UUID
from typing import Optional, Dict, Any
from fastapi import Request

from ..models.audit_log import AuditLog


def client_ip(request: Request) -> Optional[str]:
    """Client IP, preferring the first hop of X-Forwarded-For."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return request.client.host if request.client else None


def log_audit_event(
    db: Session,
    tenant_id: UUID,
    action: str,
    actor_id: Optional[UUID] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> AuditLog:
    """Create an audit log entry.

    Args:
        db: Database session
        tenant_id: Tenant the event belongs to
        action: Event action (e.g., "USER_CREATED", "REQUEST_ACCEPTED")
        actor_id: User who performed the action (None for anonymous events)
        entity_type: Type of entity affected ("user", "tenant_request")
        entity_id: ID of affected entity
        metadata: Additional context as JSON (e.g., {"old_role": "admin", "new_role": "manager"})
        ip_address: Client IP address
        user_agent: Client User-Agent header

    Returns:
        AuditLog: The created audit log entry
    """
    audit_entry = AuditLog(
        tenant_id=tenant_id,
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata_json=metadata,
        ip_address=ip_address,
        user_agent=user_agent,
    )

    db.add(audit_entry)
    db.flush()

    return audit_entry


def log_from_request(
    db: Session,
    request: Optional[Request],
    tenant_id: UUID,
    action: str,
    actor_id: Optional[UUID] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[UUID] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Create audit log entry extracting IP and User-Agent from the request.

    ``request`` may be None when a service is driven outside HTTP (scripts,
    tests); the entry is then written without client information.
    """
    return log_audit_event(
        db=db,
        tenant_id=tenant_id,
        action=action,
        actor_id=actor_id,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata=metadata,
        ip_address=client_ip(request) if request is not None else None,
        user_agent=request.headers.get("User-Agent") if request is not None else None,
    )
