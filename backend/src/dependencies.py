"""Global FastAPI dependencies for tenant isolation.

This module provides:
- get_tenant_context: Resolve the caller's identity and organization
- TenantQuery: Organization-scoped query helpers (the resource guard)

Every tenant-scoped endpoint depends on get_tenant_context and loads rows
through TenantQuery, so a row from another organization is never returned
and never distinguishable from a row that does not exist.
"""

from typing import Annotated, Optional

from fastapi import Depends, HTTPException, status
from sqlalchemy.orm import Session

from auth.dependencies import get_current_user
from models.user import User
from observability.metrics import tenant_access_denied_total
from observability.request_id import set_org_id
from tenancy.context import TenantContext, resolve_tenant_context


def get_tenant_context(current_user: User = Depends(get_current_user)) -> TenantContext:
    """Resolve the tenant context for the authenticated caller.

    The organization comes from the user row, never from the request body or
    query string, so clients cannot choose which tenant they act for.

    Raises:
        HTTPException 401: Not authenticated, or the account has no
            organization (platform SUPER_ADMIN)

    Example:
        @router.get("/tokens")
        def list_tokens(ctx: TenantContext = Depends(get_tenant_context), ...):
            return TenantQuery.scoped_query(db, Token, ctx.organization_id).all()
    """
    context = resolve_tenant_context(current_user)
    if context is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    set_org_id(context.organization_id)
    return context


CurrentTenant = Annotated[TenantContext, Depends(get_tenant_context)]


class TenantQuery:
    """Utility class for building organization-scoped queries.

    Models must expose an organization_id column.
    """

    @staticmethod
    def scoped_query(session: Session, model, organization_id: str):
        """Create a query filtered by organization_id.

        Raises:
            AttributeError: If model doesn't have organization_id column
        """
        if not hasattr(model, 'organization_id'):
            raise AttributeError(f"Model {model.__name__} does not have organization_id column")

        return session.query(model).filter(model.organization_id == organization_id)

    @staticmethod
    def get_scoped(session: Session, model, record_id: str, organization_id: str) -> Optional[object]:
        """Fetch a record by id within an organization, or None."""
        return TenantQuery.scoped_query(session, model, organization_id).filter(
            model.id == record_id
        ).first()

    @staticmethod
    def get_or_404(session: Session, model, record_id: str, organization_id: str):
        """Get a record by ID with organization scoping, or raise 404.

        Returns 404 for both:
        - Records that don't exist
        - Records that exist but belong to another organization

        The response body is identical in both cases, so callers cannot probe
        for resources of other tenants.

        Example:
            token = TenantQuery.get_or_404(db, Token, token_id, ctx.organization_id)
        """
        record = TenantQuery.get_scoped(session, model, record_id, organization_id)

        if not record:
            tenant_access_denied_total.labels(resource=model.__tablename__).inc()
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"{model.__name__} not found",
            )

        return record
