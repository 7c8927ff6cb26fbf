#!/usr/bin/env python
"""Seed script to create a tenant together with its first admin user.

Every tenant must have at least one admin at all times, so a tenant is never
created without one. Additional users are created through the API.

Usage:
    python backend/scripts/seed_tenant.py

Environment Variables:
    DATABASE_URL: Database connection string
    PASSWORD_PEPPER: Password hashing pepper (required)
    TENANT_NAME: Tenant display name (required)
    TENANT_TYPE: "ses" (provider) or "end" (consumer), default "ses"
    ADMIN_EMAIL: Email for admin user (default: admin@example.com)
    ADMIN_PASSWORD: Password for admin user (default: AdminP@ss123)
    ADMIN_NAME: Display name for admin user (default: Tenant Administrator)
"""

import os
import sys
from pathlib import Path

# Add backend/src to Python path
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from sqlalchemy.exc import SQLAlchemyError

from skillbridge.auth.password import hash_password, validate_password_strength
from skillbridge.auth.roles import Role, TenantType
from skillbridge.database import get_db_session
from skillbridge.models.tenant import Tenant
from skillbridge.models.user import User


def main():
    """Create a tenant and its first admin."""
    tenant_name = os.getenv("TENANT_NAME")
    if not tenant_name:
        print("ERROR: TENANT_NAME environment variable is required")
        print("Example: TENANT_NAME='Acme SES' TENANT_TYPE=ses python seed_tenant.py")
        sys.exit(1)

    try:
        tenant_type = TenantType(os.getenv("TENANT_TYPE", "ses"))
    except ValueError:
        print("ERROR: TENANT_TYPE must be 'ses' or 'end'")
        sys.exit(1)

    admin_email = os.getenv("ADMIN_EMAIL", "admin@example.com").lower()
    admin_password = os.getenv("ADMIN_PASSWORD", "AdminP@ss123")
    admin_name = os.getenv("ADMIN_NAME", "Tenant Administrator")

    is_valid, error_msg = validate_password_strength(admin_password)
    if not is_valid:
        print(f"ERROR: Password does not meet strength requirements: {error_msg}")
        sys.exit(1)

    try:
        with get_db_session() as session:
            if session.query(User).filter(User.email == admin_email).first():
                print(f"ERROR: User with email {admin_email} already exists")
                sys.exit(1)

            tenant = Tenant(name=tenant_name, tenant_type=tenant_type.value, is_active=True)
            session.add(tenant)
            session.flush()

            admin_user = User(
                tenant_id=tenant.id,
                email=admin_email,
                name=admin_name,
                role=Role.ADMIN.value,
                password_hash=hash_password(admin_password),
                is_active=True,
            )
            session.add(admin_user)
            session.flush()

            print("SUCCESS: Tenant and admin user created")
            print(f"  Tenant: {tenant.id} ({tenant.name}, {tenant.tenant_type})")
            print(f"  Admin:  {admin_user.id} <{admin_user.email}>")
    except SQLAlchemyError as e:
        print(f"ERROR: Failed to create tenant: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
