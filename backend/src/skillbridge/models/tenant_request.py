"""TenantRequest model - a cross-tenant talent or opportunity request"""

import uuid

from sqlalchemy import (
    Column, Text, String, DateTime, Uuid, ForeignKey, CheckConstraint, Index,
)

from .base import Base, utcnow


class TenantRequest(Base):
    """A request sent from one tenant to another about a talent or opportunity.

    to_tenant_id is derived from the subject's owner at creation time and is
    never supplied by the caller. Only pending requests are mutable; accepted,
    declined and expired are terminal.
    """
    __tablename__ = "tenant_request"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    kind = Column(Text, nullable=False)
    from_tenant_id = Column(Uuid, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False)
    from_user_id = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    to_tenant_id = Column(Uuid, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False)
    subject_id = Column(Uuid, nullable=False)
    offered_talent_id = Column(Uuid, ForeignKey("talent.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(120), nullable=True)
    message_text = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="pending")
    response_message = Column(Text, nullable=True)
    responded_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        CheckConstraint(
            "kind IN ('talent', 'opportunity')",
            name="ck_tenant_request_kind"
        ),
        CheckConstraint(
            "status IN ('pending', 'accepted', 'declined', 'expired')",
            name="ck_tenant_request_status"
        ),
        CheckConstraint(
            "from_tenant_id <> to_tenant_id",
            name="ck_tenant_request_distinct_tenants"
        ),
        Index("ix_tenant_request_to_tenant_created", "to_tenant_id", "created_at"),
        Index("ix_tenant_request_from_tenant_created", "from_tenant_id", "created_at"),
    )

    def __repr__(self):
        return f"<TenantRequest(id={self.id}, kind='{self.kind}', status='{self.status}')>"
