"""SQLAlchemy Models for TokenLens"""

from .base import Base
from .organization import Organization
from .user import User
from .token import Token, TokenSettings
from .plan import Plan, Subscription
from .system_settings import SystemSettings
from .audit_log import AuditLog

__all__ = [
    "Base",
    "Organization",
    "User",
    "Token",
    "TokenSettings",
    "Plan",
    "Subscription",
    "SystemSettings",
    "AuditLog",
]
