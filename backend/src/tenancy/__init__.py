"""Tenancy module - tenant context resolution and request correlation.

Tenant isolation rules:
- Every tenant-scoped query filters on the caller's organization_id
- Cross-tenant access is reported as 404, never 403
"""

from .context import TenantContext, resolve_tenant_context

__all__ = [
    "TenantContext",
    "resolve_tenant_context",
]
