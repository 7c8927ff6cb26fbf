"""Audit log query endpoint (admin only).

Admins query the audit trail of their own tenant with filtering by action,
entity type and date range. Results are ordered newest first.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth.dependencies import require
from ..auth.identity import Principal
from ..auth.pipeline import TENANT_ADMIN
from ..database import get_db
from ..directory.pagination import normalize_per_page, page_offset, paginate
from ..models.audit_log import AuditLog
from .schemas import AuditLogResponse, AuditLogListResponse


router = APIRouter(prefix="/tenants/{tenant_id}/audit", tags=["Audit Logs"])


@router.get(
    "",
    response_model=AuditLogListResponse,
    summary="Query audit logs (admin only)",
)
def query_audit_logs(
    tenant_id: UUID,
    db: Session = Depends(get_db),
    principal: Principal = Depends(require(TENANT_ADMIN)),
    action: Optional[str] = Query(None, description="Filter by action type"),
    entity_type: Optional[str] = Query(None, description="Filter by entity type"),
    start_date: Optional[datetime] = Query(None, description="Minimum created_at (ISO 8601)"),
    end_date: Optional[datetime] = Query(None, description="Maximum created_at (ISO 8601)"),
    page: int = Query(1, ge=1, description="Page number (1-indexed)"),
    per_page: Optional[int] = Query(None, ge=1, description="Entries per page"),
) -> AuditLogListResponse:
    """Query the tenant's audit log with filtering and pagination."""
    query = db.query(AuditLog).filter(AuditLog.tenant_id == principal.tenant_id)

    if action:
        query = query.filter(AuditLog.action == action)
    if entity_type:
        query = query.filter(AuditLog.entity_type == entity_type)
    if start_date:
        query = query.filter(AuditLog.created_at >= start_date)
    if end_date:
        query = query.filter(AuditLog.created_at <= end_date)

    total = query.count()
    per_page = normalize_per_page(per_page)
    entries = (
        query.order_by(AuditLog.created_at.desc())
        .offset(page_offset(page, per_page))
        .limit(per_page)
        .all()
    )

    return AuditLogListResponse(
        **paginate(
            [AuditLogResponse.model_validate(entry) for entry in entries],
            total,
            page,
            per_page,
        )
    )
