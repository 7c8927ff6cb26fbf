"""AuditLog SQLAlchemy model"""

import uuid

from sqlalchemy import Column, Text, DateTime, Uuid, ForeignKey, Index

from .base import Base, PortableJSONB, utcnow


class AuditLog(Base):
    """AuditLog model for immutable security event logging.

    Records security-relevant events (logins, user administration, request
    transitions) per tenant. Entries are append-only.
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_tenant_id", "tenant_id"),
        Index("ix_audit_log_tenant_id_created_at", "tenant_id", "created_at"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenant.id", ondelete="RESTRICT"), nullable=False)
    actor_id = Column(Uuid, ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(Uuid, nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    ip_address = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

