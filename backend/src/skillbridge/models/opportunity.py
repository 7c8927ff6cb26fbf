"""Opportunity model - a project published by a consumer tenant"""

import uuid

from sqlalchemy import Column, Text, DateTime, Uuid, ForeignKey, Index

from .base import Base, utcnow


class Opportunity(Base):
    """An opportunity (project) owned by an end-client tenant."""
    __tablename__ = "opportunity"
    __table_args__ = (
        Index("ix_opportunity_tenant_id", "tenant_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False)
    title = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Opportunity(id={self.id}, tenant_id={self.tenant_id}, title='{self.title}')>"
