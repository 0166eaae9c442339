"""JWT token generation and validation

Access tokens carry everything needed to resolve a caller's tenant context.

Claims:
- sub: User ID
- org_id: Organization (tenant) ID, or null for SUPER_ADMIN accounts
- role: SUPER_ADMIN | ADMIN | MEMBER
- email: User's email address
- iat / exp: Issued-at and expiry as Unix timestamps

Tokens are signed with HS256 using JWT_SECRET. The org_id and role claims are
informational: dependencies reload the user row and trust the database, so a
role change or disabled account takes effect before the token expires.
"""

import os
from datetime import datetime, timedelta, timezone
from typing import Dict, Any, Optional
import jwt


ALGORITHM = 'HS256'


def _get_jwt_secret() -> str:
    """Get JWT_SECRET from environment.

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    secret = os.getenv('JWT_SECRET')
    if not secret:
        raise ValueError("JWT_SECRET environment variable is not set")
    return secret


def get_jwt_expiry_minutes() -> int:
    """Get JWT_EXPIRY_MINUTES from environment (default: 60)."""
    expiry = os.getenv('JWT_EXPIRY_MINUTES', '60')
    try:
        return int(expiry)
    except ValueError:
        return 60


def create_access_token(
    user_id: str,
    org_id: Optional[str],
    role: str,
    email: str
) -> str:
    """Create a signed JWT access token.

    Args:
        user_id: User's ID
        org_id: Organization's ID (None for SUPER_ADMIN)
        role: User's role
        email: User's email address

    Returns:
        str: Signed JWT token

    Raises:
        ValueError: If JWT_SECRET is not set
    """
    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=get_jwt_expiry_minutes())

    payload = {
        'sub': str(user_id),
        'org_id': str(org_id) if org_id else None,
        'role': role,
        'email': email,
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp())
    }

    return jwt.encode(payload, _get_jwt_secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
        ValueError: If JWT_SECRET is not set
    """
    return jwt.decode(token, _get_jwt_secret(), algorithms=[ALGORITHM])
