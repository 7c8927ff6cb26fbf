"""User roles and tenant types for SkillBridge.

Roles (within one tenant):
- admin: Full tenant access, user management including other admins
- manager: User management for non-admin users, request handling
- member: Request handling only

Tenant types:
- ses: Provider tenant (staffing company supplying engineers)
- end: Consumer tenant (client company publishing opportunities)

Permission Matrix:
┌────────────────────────────┬───────┬─────────┬────────┐
│ Action                     │ admin │ manager │ member │
├────────────────────────────┼───────┼─────────┼────────┤
│ Manage admin users         │   ✓   │         │        │
│ Manage non-admin users     │   ✓   │    ✓    │        │
│ Add new admin users        │   ✓   │    ✓    │        │
│ View audit log             │   ✓   │         │        │
│ Send / respond to requests │   ✓   │    ✓    │   ✓    │
│ View inbox / sent box      │   ✓   │    ✓    │   ✓    │
└────────────────────────────┴───────┴─────────┴────────┘

Opportunity requests may only be sent by ses tenants; talent requests are
open to both tenant types.
"""

from enum import Enum


class Role(str, Enum):
    """User roles in SkillBridge.

    Values are stored as TEXT in the database and must match exactly.
    """
    ADMIN = "admin"
    MANAGER = "manager"
    MEMBER = "member"


class TenantType(str, Enum):
    """Tenant (company) types. Fixed for the lifetime of a tenant."""
    PROVIDER = "ses"
    CONSUMER = "end"


# Roles allowed to administer a tenant's user list
USER_ADMIN_ROLES = frozenset({Role.ADMIN, Role.MANAGER})
