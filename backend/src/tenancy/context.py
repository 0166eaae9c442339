"""Tenant context: who is calling and which organization they act for."""

from dataclasses import dataclass
from typing import Optional

from models.user import User


@dataclass(frozen=True)
class TenantContext:
    """Resolved identity and tenant scope of an authenticated request.

    Handlers receive this instead of the raw user so every query has an
    organization_id to filter on.
    """
    user_id: str
    organization_id: str
    role: str
    email: str


def resolve_tenant_context(user: Optional[User]) -> Optional[TenantContext]:
    """Build the tenant context for a user.

    Returns None when there is no user or the user belongs to no
    organization (SUPER_ADMIN accounts): neither has a tenant identity.
    """
    if user is None or not user.organization_id:
        return None

    return TenantContext(
        user_id=user.id,
        organization_id=user.organization_id,
        role=user.role,
        email=user.email,
    )
