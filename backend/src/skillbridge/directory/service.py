"""Inbox and sent-box listings.

Both listings are scoped to one tenant, ordered newest first, and return
disclosure-filtered views. Status and kind filters are permissive: "all",
missing and unrecognized values apply no predicate.
"""

from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from ..models.tenant_request import TenantRequest
from ..workflow.status import parse_kind_filter, parse_status_filter
from ..workflow.views import build_views
from .pagination import normalize_page, normalize_per_page, page_offset, paginate


class RequestDirectory:
    """Listing service for requests received and sent by a tenant."""

    def __init__(self, db: Session):
        self.db = db

    def list_inbox(
        self,
        tenant_id: UUID,
        status_filter: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        kind_filter: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Requests whose recipient is ``tenant_id``."""
        return self._list(TenantRequest.to_tenant_id, tenant_id, status_filter, page, per_page, kind_filter)

    def list_sent(
        self,
        tenant_id: UUID,
        status_filter: Optional[str] = None,
        page: Optional[int] = None,
        per_page: Optional[int] = None,
        kind_filter: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Requests whose sender is ``tenant_id``."""
        return self._list(TenantRequest.from_tenant_id, tenant_id, status_filter, page, per_page, kind_filter)

    def _list(self, party_column, tenant_id, status_filter, page, per_page, kind_filter) -> Dict[str, Any]:
        page = normalize_page(page)
        per_page = normalize_per_page(per_page)

        query = self.db.query(TenantRequest).filter(party_column == tenant_id)

        status = parse_status_filter(status_filter)
        if status is not None:
            query = query.filter(TenantRequest.status == status.value)

        kind = parse_kind_filter(kind_filter)
        if kind is not None:
            query = query.filter(TenantRequest.kind == kind.value)

        total = query.count()
        records = (
            query.order_by(TenantRequest.created_at.desc(), TenantRequest.id.desc())
            .offset(page_offset(page, per_page))
            .limit(per_page)
            .all()
        )
        return paginate(build_views(self.db, records, tenant_id), total, page, per_page)
