"""User SQLAlchemy model"""

import uuid

from sqlalchemy import Column, Text, Boolean, DateTime, Uuid, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship, validates

from .base import Base, utcnow


class User(Base):
    """User model representing a member of exactly one tenant.

    Email addresses are globally unique across tenants. Passwords are hashed
    using Argon2id. Deactivated users keep their row but can no longer sign in.
    """
    __tablename__ = "user"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    tenant_id = Column(Uuid, ForeignKey("tenant.id", ondelete="RESTRICT"), nullable=False)
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False)
    password_hash = Column(Text, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    # Relationships
    tenant = relationship("Tenant", back_populates="users")

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "role IN ('admin', 'manager', 'member')",
            name='ck_user_role'
        ),
        Index("ix_user_tenant_id", "tenant_id"),
    )

    @validates("email")
    def validate_email(self, key, value):
        """Structural email check; full syntax is validated at the API boundary."""
        local, _, domain = (value or "").rpartition("@")
        if not local or "." not in domain or domain.startswith(".") or domain.endswith("."):
            raise ValueError("Invalid email format")
        return value.lower()
