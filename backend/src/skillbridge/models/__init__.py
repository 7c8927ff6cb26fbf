"""SQLAlchemy Models for SkillBridge"""

from .base import Base
from .tenant import Tenant
from .user import User
from .talent import Talent
from .opportunity import Opportunity
from .tenant_request import TenantRequest
from .audit_log import AuditLog

__all__ = [
    "Base",
    "Tenant",
    "User",
    "Talent",
    "Opportunity",
    "TenantRequest",
    "AuditLog",
]
