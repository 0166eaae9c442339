"""User roles for TokenLens.

Roles:
- SUPER_ADMIN: Platform operator. Manages plans and system settings.
  Has no organization and therefore no access to tenant-scoped data.
- ADMIN: Organization owner/administrator. Manages tokens and members.
- MEMBER: Organization member. Reads analytics, edits token settings.

Tenant roles are ordered (ADMIN includes MEMBER). SUPER_ADMIN is not part of
the tenant hierarchy: it only satisfies checks that ask for SUPER_ADMIN.
"""

from enum import Enum
from typing import Set


class UserRole(str, Enum):
    """User roles stored as TEXT in the user table."""
    SUPER_ADMIN = "SUPER_ADMIN"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


ROLE_HIERARCHY = {
    UserRole.SUPER_ADMIN: {UserRole.SUPER_ADMIN},
    UserRole.ADMIN: {UserRole.ADMIN, UserRole.MEMBER},
    UserRole.MEMBER: {UserRole.MEMBER},
}


def has_permission(user_role: UserRole, required_role: UserRole) -> bool:
    """Check whether user_role satisfies required_role.

    Examples:
        >>> has_permission(UserRole.ADMIN, UserRole.MEMBER)
        True
        >>> has_permission(UserRole.MEMBER, UserRole.ADMIN)
        False
        >>> has_permission(UserRole.SUPER_ADMIN, UserRole.ADMIN)
        False
    """
    return required_role in ROLE_HIERARCHY.get(user_role, set())


def get_allowed_roles(required_role: UserRole) -> Set[UserRole]:
    """Get all roles that satisfy required_role.

    Example:
        >>> sorted(r.value for r in get_allowed_roles(UserRole.MEMBER))
        ['ADMIN', 'MEMBER']
    """
    return {role for role, permissions in ROLE_HIERARCHY.items() if required_role in permissions}
