"""FastAPI dependencies for authentication and authorization.

This module provides dependency injection functions for:
- Extracting and validating JWT tokens from requests
- Loading the current authenticated user
- Enforcing role-based access control (RBAC)

Every authentication failure is reported as 401 with the same
WWW-Authenticate header, whether the header is missing, the token is
malformed or expired, or the user no longer exists or is disabled.

Usage:
    @router.get("/me")
    def me(user: User = Depends(get_current_user)):
        ...

    @router.post("/admin/plans")
    def create_plan(admin: User = Depends(require_super_admin)):
        ...
"""

from typing import Callable, Annotated, Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
import jwt

from database import get_db
from models.user import User
from observability.logging_config import get_logger
from .jwt import decode_token
from .roles import UserRole, has_permission

logger = get_logger(__name__)

# auto_error=False so a missing header is reported as 401 by us, not 403 by FastAPI
security = HTTPBearer(auto_error=False)


def _unauthenticated(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """Extract and validate the Bearer token, returning the authenticated user.

    Raises:
        HTTPException 401: Token missing, invalid or expired; user not found
            or not ACTIVE
    """
    if credentials is None or not credentials.credentials:
        raise _unauthenticated("Not authenticated")

    try:
        payload = decode_token(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise _unauthenticated("Token has expired")
    except (jwt.InvalidTokenError, ValueError) as e:
        logger.info(f"Rejected bearer token: {e}")
        raise _unauthenticated("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        raise _unauthenticated("Invalid token: missing user ID claim")

    user = db.query(User).filter(User.id == str(user_id)).first()
    if not user or user.status != "ACTIVE":
        raise _unauthenticated("Not authenticated")

    return user


def require_role(required_role: UserRole) -> Callable:
    """Create a dependency that enforces role-based access control.

    Authentication runs first, so anonymous callers get 401 and only
    authenticated callers with an insufficient role get 403.

    Example:
        @router.delete("/tokens/{token_id}")
        def delete_token(user: User = Depends(require_role(UserRole.ADMIN))):
            ...
    """

    def role_dependency(current_user: User = Depends(get_current_user)) -> User:
        try:
            user_role = UserRole(current_user.role)
        except ValueError:
            logger.error(f"User {current_user.id} has unknown role {current_user.role!r}")
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )

        if not has_permission(user_role, required_role):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Forbidden: {required_role.value} required",
            )

        return current_user

    return role_dependency


def require_super_admin(current_user: User = Depends(require_role(UserRole.SUPER_ADMIN))) -> User:
    """Convenience dependency for platform admin endpoints."""
    return current_user


# Type alias for dependency injection
CurrentUser = Annotated[User, Depends(get_current_user)]
