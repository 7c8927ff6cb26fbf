"""Talent model - an engineer offered by a provider tenant"""

import uuid

from sqlalchemy import Column, Text, Integer, DateTime, Uuid, ForeignKey, Index

from .base import Base, utcnow


class Talent(Base):
    """A talent profile published by its owning tenant.

    Talent requests target a talent; the receiving tenant of such a request
    is always the talent's owner.
    """
    __tablename__ = "talent"
    __table_args__ = (
        Index("ix_talent_tenant_id", "tenant_id"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False)
    name = Column(Text, nullable=False)
    desired_rate = Column(Integer, nullable=True)
    prefecture = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    def __repr__(self):
        return f"<Talent(id={self.id}, tenant_id={self.tenant_id}, name='{self.name}')>"
