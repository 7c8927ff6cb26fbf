"""Pydantic schemas for request workflow endpoints.

Length rules for titles and messages are enforced by the workflow engine
(after trimming) rather than here, so that they surface as workflow
``invalid_input`` errors.
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .status import ResponseDecision


class TalentRequestCreate(BaseModel):
    """POST /tenants/{tenant_id}/talent-requests"""
    talent_id: UUID = Field(..., description="Talent the request is about")
    title: Optional[str] = Field(None, description="Request title (2-120 chars after trimming)")
    message_text: str = Field(..., description="Message (10-4000 chars after trimming)")


class OpportunityRequestCreate(BaseModel):
    """POST /tenants/{tenant_id}/opportunity-requests (provider tenants only)"""
    opportunity_id: UUID = Field(..., description="Opportunity the request is about")
    offered_talent_id: UUID = Field(..., description="Sender's own talent being offered")
    title: Optional[str] = Field(None, description="Request title (2-120 chars after trimming)")
    message_text: str = Field(..., description="Message (10-4000 chars after trimming)")


class RequestUpdate(BaseModel):
    """PATCH /tenants/{tenant_id}/requests/sent/{request_id}; pending only."""
    title: Optional[str] = None
    message_text: Optional[str] = None


class RespondRequest(BaseModel):
    """POST /tenants/{tenant_id}/requests/inbox/{request_id}/respond"""
    decision: ResponseDecision
    message: Optional[str] = Field(None, description="Optional response (max 2000 chars)")


class RequestView(BaseModel):
    """Disclosure-filtered projection of a request.

    sender_email and sender_name are populated only for the receiving tenant
    once the request has been accepted.
    """
    id: UUID
    kind: str
    status: str
    from_tenant_id: UUID
    to_tenant_id: UUID
    subject_id: UUID
    subject_label: Optional[str] = None
    offered_talent_id: Optional[UUID] = None
    title: Optional[str] = None
    message_text: str
    response_message: Optional[str] = None
    responded_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    can_view_sender: bool = False
    sender_email: Optional[str] = None
    sender_name: Optional[str] = None


class RequestPage(BaseModel):
    """Page of request views with pagination metadata."""
    items: list[RequestView]
    page: int
    per_page: int
    total: int
    pages: int
    has_prev: bool
    has_next: bool
