"""Pydantic schemas for audit log endpoints.

Audit logs are read-only (no create/update/delete operations).
"""

from pydantic import BaseModel, ConfigDict, Field
from uuid import UUID
from datetime import datetime
from typing import Optional


class AuditLogResponse(BaseModel):
    """Response schema for audit log entries."""
    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": "550e8400-e29b-41d4-a716-446655440000",
                "tenant_id": "7c9e6679-7425-40de-944b-e07fc1f90ae7",
                "actor_id": "123e4567-e89b-12d3-a456-426614174000",
                "action": "REQUEST_ACCEPTED",
                "entity_type": "tenant_request",
                "entity_id": "abc12345-6789-0abc-def0-123456789012",
                "metadata": {"kind": "talent"},
                "ip_address": "192.168.1.100",
                "user_agent": "Mozilla/5.0...",
                "created_at": "2026-01-04T12:00:00Z"
            }
        },
    )

    id: UUID = Field(..., description="Audit log entry unique identifier")
    tenant_id: UUID = Field(..., description="Tenant ID")
    actor_id: Optional[UUID] = Field(None, description="User who performed the action")
    action: str = Field(..., description="Event action (LOGIN_SUCCESS, USER_CREATED, etc.)")
    entity_type: Optional[str] = Field(None, description="Type of entity affected")
    entity_id: Optional[UUID] = Field(None, description="ID of affected entity")
    metadata: Optional[dict] = Field(None, validation_alias="metadata_json", description="Additional context")
    ip_address: Optional[str] = Field(None, description="Client IP address")
    user_agent: Optional[str] = Field(None, description="Client User-Agent header")
    created_at: datetime = Field(..., description="Event timestamp")


class AuditLogListResponse(BaseModel):
    """Page of audit log entries with pagination metadata."""
    items: list[AuditLogResponse]
    page: int
    per_page: int
    total: int
    pages: int
    has_prev: bool
    has_next: bool
