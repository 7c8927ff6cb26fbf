"""Tenant model - Root entity for multi-tenant isolation"""

import uuid

from sqlalchemy import Column, Text, Boolean, DateTime, Uuid, CheckConstraint
from sqlalchemy.orm import relationship, validates

from .base import Base, utcnow


class Tenant(Base):
    """
    Tenant model - a company on the marketplace.

    Every tenant is either a provider ("ses", supplies engineers) or a
    consumer ("end", the end client). The type is fixed for the life of the
    tenant and drives which request kinds it may send.
    """
    __tablename__ = "tenant"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(Text, nullable=False)
    tenant_type = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    users = relationship("User", back_populates="tenant")

    __table_args__ = (
        CheckConstraint("tenant_type IN ('ses', 'end')", name="ck_tenant_type"),
    )

    @validates('name')
    def validate_name(self, key, value):
        """Tenant names are trimmed and must not be empty"""
        value = (value or "").strip()
        if not value:
            raise ValueError("Tenant name must not be empty")
        return value

    def __repr__(self):
        return f"<Tenant(id={self.id}, name='{self.name}', type='{self.tenant_type}')>"
