"""Unit tests for tenant context resolution and the tenant-scoped resource guard"""

import pytest
from fastapi import HTTPException

from dependencies import TenantQuery, get_tenant_context
from models.token import Token
from tenancy.context import TenantContext, resolve_tenant_context


pytestmark = pytest.mark.unit


class TestResolveTenantContext:

    def test_tenant_user(self, admin_user):
        context = resolve_tenant_context(admin_user)

        assert context == TenantContext(
            user_id=admin_user.id,
            organization_id=admin_user.organization_id,
            role="ADMIN",
            email="admin@acme.io",
        )

    def test_no_user(self):
        assert resolve_tenant_context(None) is None

    def test_user_without_organization(self, super_admin_user):
        assert resolve_tenant_context(super_admin_user) is None

    def test_dependency_rejects_user_without_organization(self, super_admin_user):
        with pytest.raises(HTTPException) as exc_info:
            get_tenant_context(super_admin_user)

        assert exc_info.value.status_code == 401


class TestTenantQuery:

    def test_scoped_query_only_returns_own_rows(self, db_session, token_a, token_b):
        tokens = TenantQuery.scoped_query(db_session, Token, token_a.organization_id).all()

        assert [token.id for token in tokens] == [token_a.id]

    def test_scoped_query_requires_organization_column(self, db_session):
        with pytest.raises(AttributeError):
            TenantQuery.scoped_query(db_session, TenantContext, "org")

    def test_get_or_404_returns_own_row(self, db_session, token_a):
        assert TenantQuery.get_or_404(db_session, Token, token_a.id, token_a.organization_id) is token_a

    def test_foreign_and_missing_rows_are_indistinguishable(self, db_session, token_a, token_b):
        with pytest.raises(HTTPException) as foreign:
            TenantQuery.get_or_404(db_session, Token, token_b.id, token_a.organization_id)
        with pytest.raises(HTTPException) as missing:
            TenantQuery.get_or_404(db_session, Token, "no-such-token", token_a.organization_id)

        assert foreign.value.status_code == missing.value.status_code == 404
        assert foreign.value.detail == missing.value.detail == "Token not found"

    def test_get_scoped_returns_none_for_foreign_row(self, db_session, token_a, token_b):
        assert TenantQuery.get_scoped(db_session, Token, token_b.id, token_a.organization_id) is None
        assert db_session.get(Token, token_b.id) is not None
