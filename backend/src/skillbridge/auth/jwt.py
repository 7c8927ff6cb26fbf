"""JWT token generation and validation

This module handles JWT access token creation and validation for authentication.
The token is the opaque session handle presented by callers; only the subject
claim is trusted. Role, tenant and tenant type are always reloaded from the
database by the identity module, so a token minted before a demotion cannot
carry stale privileges.

JWT Token Claims Structure:
===========================

Standard JWT Claims:
- sub (Subject): User ID as UUID string
- iat (Issued At): Unix timestamp when token was created
- exp (Expiration): Unix timestamp when token expires (iat + JWT_EXPIRY_MINUTES)

Informational Claims (never used for authorization):
- tenant_id: Tenant ID as UUID string
- role: Role at issue time ("admin" | "manager" | "member")
- email: User's email address

Security Properties:
- Algorithm: HS256 (HMAC-SHA256 symmetric signing)
- Secret: JWT_SECRET environment variable
- No refresh tokens (re-login after expiry)
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Any
from uuid import UUID
import jwt


def _get_jwt_secret() -> str:
    """Get JWT_SECRET from environment.

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    secret = os.getenv('JWT_SECRET')
    if not secret:
        raise ValueError("JWT_SECRET environment variable is not set")
    return secret


def _get_jwt_expiry_minutes() -> int:
    """Get JWT_EXPIRY_MINUTES from environment (default: 60)."""
    expiry = os.getenv('JWT_EXPIRY_MINUTES', '60')
    try:
        return int(expiry)
    except ValueError:
        return 60


def create_access_token(
    user_id: UUID,
    tenant_id: UUID,
    role: str,
    email: str
) -> str:
    """Create a JWT access token for an authenticated user.

    Args:
        user_id: User's UUID
        tenant_id: Tenant's UUID
        role: User's role at issue time
        email: User's email address

    Returns:
        str: Signed JWT token

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    secret = _get_jwt_secret()
    expiry_minutes = _get_jwt_expiry_minutes()

    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=expiry_minutes)

    payload = {
        'sub': str(user_id),
        'tenant_id': str(tenant_id),
        'role': role,
        'email': email,
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp())
    }

    return jwt.encode(payload, secret, algorithm='HS256')


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
        ValueError: If JWT_SECRET is not set
    """
    secret = _get_jwt_secret()

    try:
        return jwt.decode(token, secret, algorithms=['HS256'])
    except jwt.ExpiredSignatureError:
        raise jwt.ExpiredSignatureError("Token has expired")
    except jwt.InvalidTokenError as e:
        raise jwt.InvalidTokenError(f"Invalid token: {str(e)}")
