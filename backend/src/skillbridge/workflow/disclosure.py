"""Disclosure rule for cross-tenant requests.

The sender's identity is shown only to the receiving tenant, and only after
that tenant accepted the request. The rule is evaluated on every read; the
stored record never carries disclosed fields.
"""

from typing import Optional
from uuid import UUID

from ..models.tenant_request import TenantRequest
from .schemas import RequestView
from .status import RequestStatus


def may_disclose_sender(request: TenantRequest, viewer_tenant_id: UUID) -> bool:
    return (
        request.to_tenant_id == viewer_tenant_id
        and request.status == RequestStatus.ACCEPTED.value
    )


def disclose(
    request: TenantRequest,
    viewer_tenant_id: UUID,
    sender_email: Optional[str] = None,
    sender_name: Optional[str] = None,
    subject_label: Optional[str] = None,
) -> RequestView:
    """Project ``request`` for ``viewer_tenant_id``.

    Sender contact details passed in are dropped unless the viewer is the
    recipient and the request is accepted.
    """
    visible = may_disclose_sender(request, viewer_tenant_id)
    return RequestView(
        id=request.id,
        kind=request.kind,
        status=request.status,
        from_tenant_id=request.from_tenant_id,
        to_tenant_id=request.to_tenant_id,
        subject_id=request.subject_id,
        subject_label=subject_label,
        offered_talent_id=request.offered_talent_id,
        title=request.title,
        message_text=request.message_text,
        response_message=request.response_message,
        responded_at=request.responded_at,
        created_at=request.created_at,
        updated_at=request.updated_at,
        can_view_sender=visible,
        sender_email=sender_email if visible else None,
        sender_name=sender_name if visible else None,
    )
