"""Request-scoped correlation context.

Holds the request ID and the caller's organization ID in context variables so
log records can be correlated without passing them through every call.
"""

import uuid
from contextvars import ContextVar
from typing import Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
org_id_var: ContextVar[Optional[str]] = ContextVar("org_id", default=None)


def generate_request_id() -> str:
    """Generate a new unique request ID (UUID v4)."""
    return str(uuid.uuid4())


def get_request_id() -> str:
    """Get current request ID from context, or "no-request-id" if not set."""
    return request_id_var.get() or "no-request-id"


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_org_id() -> Optional[str]:
    return org_id_var.get()


def set_org_id(org_id: Optional[str]) -> None:
    org_id_var.set(org_id)
