"""Pytest fixtures for TokenLens backend tests.

Provides reusable test fixtures for:
- Database session on an in-memory SQLite database
- Test organizations, plans and subscriptions
- Test users with different roles (SUPER_ADMIN, ADMIN, MEMBER)
- Test tokens with settings
- Test clients with the get_db dependency overridden

Usage:
    def test_list_tokens(client, admin_headers, test_token):
        response = client.get("/api/v1/tokens", headers=admin_headers)
        assert response.status_code == 200
"""

import sys
import os
from pathlib import Path

# Set environment variables BEFORE any application imports
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("PASSWORD_PEPPER", "test-pepper-secret-key-32-chars-long")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret-key-256-bits-minimum-length-required-for-security")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from decimal import Decimal
from typing import Dict, Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))
sys.path.insert(0, str(Path(__file__).parent))

from models.base import Base
from models.organization import Organization
from models.user import User
from models.token import Token, TokenSettings
from models.plan import Plan, Subscription
from auth.password import hash_password
from auth.jwt import create_access_token
from database import get_db as database_get_db

# Multi-organization fixtures for tenant isolation tests
from fixtures.multi_org import (  # noqa: F401
    org_a,
    org_b,
    user_a,
    user_b,
    token_a,
    token_b,
    multi_org_setup,
    org_a_headers,
    org_b_headers,
)


# One shared connection so every session sees the same in-memory database
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

TEST_PASSWORD = "SecureP@ss123"


def auth_headers(user: User) -> Dict[str, str]:
    """Authorization headers carrying a fresh access token for user."""
    token = create_access_token(
        user_id=user.id,
        org_id=user.organization_id,
        role=user.role,
        email=user.email
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test.

    Creates all tables before the test and drops them after.
    """
    Base.metadata.create_all(bind=test_engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture(scope="function")
def test_org(db_session: Session) -> Organization:
    """Create a test organization."""
    org = Organization(slug="test-org", name="Test Organization")
    db_session.add(org)
    db_session.commit()
    db_session.refresh(org)
    return org


@pytest.fixture(scope="function")
def free_plan(db_session: Session) -> Plan:
    """Create the default public plan with a small token limit."""
    plan = Plan(
        name="Free",
        slug="free",
        price=Decimal("0"),
        tokens_limit=2,
        api_calls_limit=1000,
        transfers_limit=10000,
        members_limit=2,
        features=["Basic analytics"],
        sort_order=0,
    )
    db_session.add(plan)
    db_session.commit()
    db_session.refresh(plan)
    return plan


@pytest.fixture(scope="function")
def plans(db_session: Session) -> Dict[str, Plan]:
    """Create three plans in the order free, pro, enterprise."""
    created = {}
    for index, (slug, tokens_limit) in enumerate((("free", 1), ("pro", 10), ("enterprise", -1))):
        plan = Plan(
            name=slug.title(),
            slug=slug,
            price=Decimal(index * 49),
            tokens_limit=tokens_limit,
            api_calls_limit=-1,
            transfers_limit=-1,
            members_limit=-1,
            sort_order=index,
        )
        db_session.add(plan)
        created[slug] = plan
    db_session.commit()
    for plan in created.values():
        db_session.refresh(plan)
    return created


@pytest.fixture(scope="function")
def subscribed_org(db_session: Session, test_org: Organization, free_plan: Plan) -> Organization:
    """The test organization subscribed to the free plan."""
    db_session.add(Subscription(organization_id=test_org.id, plan_id=free_plan.id))
    db_session.commit()
    db_session.refresh(test_org)
    return test_org


def _create_user(db_session: Session, organization_id, email: str, role: str, name: str) -> User:
    user = User(
        organization_id=organization_id,
        email=email,
        name=name,
        role=role,
        password_hash=hash_password(TEST_PASSWORD),
        status="ACTIVE"
    )
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture(scope="function")
def admin_user(db_session: Session, test_org: Organization) -> User:
    """Create an ADMIN user for testing."""
    return _create_user(db_session, test_org.id, "admin@acme.io", "ADMIN", "Admin User")


@pytest.fixture(scope="function")
def member_user(db_session: Session, test_org: Organization) -> User:
    """Create a MEMBER user for testing."""
    return _create_user(db_session, test_org.id, "member@acme.io", "MEMBER", "Member User")


@pytest.fixture(scope="function")
def super_admin_user(db_session: Session) -> User:
    """Create a platform SUPER_ADMIN (no organization)."""
    return _create_user(db_session, None, "superadmin@tokenlens.io", "SUPER_ADMIN", "Super Admin")


@pytest.fixture(scope="function")
def test_token(db_session: Session, test_org: Organization, admin_user: User) -> Token:
    """Create a token owned by the test organization, with default settings."""
    token = Token(
        organization_id=test_org.id,
        address="0x833589fcd6edb6e08f4c7c32d4f71b54bda02913",
        symbol="USDC",
        name="USD Coin",
        decimals=6,
        network="base",
        created_by=admin_user.id,
    )
    token.settings = TokenSettings()
    db_session.add(token)
    db_session.commit()
    db_session.refresh(token)
    return token


@pytest.fixture(scope="function")
def bare_token(db_session: Session, test_org: Organization) -> Token:
    """Create a token that has no settings row yet."""
    token = Token(
        organization_id=test_org.id,
        address="0x4200000000000000000000000000000000000006",
        symbol="WETH",
        name="Wrapped Ether",
        decimals=18,
        network="base",
    )
    db_session.add(token)
    db_session.commit()
    db_session.refresh(token)
    return token


@pytest.fixture(scope="function")
def client(db_session: Session):
    """Create an unauthenticated test client.

    Authenticate individual requests by passing headers from the
    *_headers fixtures or auth_headers().
    """
    from main import app

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[database_get_db] = override_get_db

    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def admin_headers(admin_user: User) -> Dict[str, str]:
    return auth_headers(admin_user)


@pytest.fixture(scope="function")
def member_headers(member_user: User) -> Dict[str, str]:
    return auth_headers(member_user)


@pytest.fixture(scope="function")
def super_admin_headers(super_admin_user: User) -> Dict[str, str]:
    return auth_headers(super_admin_user)
