"""Authentication endpoints for TokenLens API

Provides signup, login and current-user endpoints.
"""

import re
from datetime import datetime, timezone
from typing import Annotated, Optional
from fastapi import APIRouter, Depends, HTTPException, status, Request
from sqlalchemy.orm import Session

from database import get_db
from models.organization import Organization
from models.plan import Plan, Subscription
from models.user import User
from audit.service import log_from_request
from observability.logging_config import get_logger
from observability.metrics import auth_logins_total
from .schemas import LoginRequest, LoginResponse, MeResponse, SignupRequest, UserResponse
from .password import hash_password, verify_password
from .jwt import create_access_token, get_jwt_expiry_minutes
from .dependencies import CurrentUser
from .roles import UserRole

logger = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["Authentication"])


def _issue_token(user: User) -> LoginResponse:
    access_token = create_access_token(
        user_id=user.id,
        org_id=user.organization_id,
        role=user.role,
        email=user.email
    )
    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        expires_in=get_jwt_expiry_minutes() * 60
    )


def slugify(name: str) -> str:
    """Derive a URL-safe organization slug from a display name.

    Example:
        >>> slugify("Acme Labs, Inc.")
        'acme-labs-inc'
    """
    slug = re.sub(r'[^a-z0-9]+', '-', name.lower()).strip('-')
    if len(slug) < 2:
        slug = f"org-{slug}" if slug else "org"
    return slug[:100]


def _unique_slug(db: Session, name: str) -> str:
    base = slugify(name)
    slug = base
    suffix = 2
    while db.query(Organization.id).filter(Organization.slug == slug).first():
        slug = f"{base[:95]}-{suffix}"
        suffix += 1
    return slug


def _default_plan(db: Session) -> Optional[Plan]:
    """First active public plan in display order, if any."""
    return db.query(Plan).filter(
        Plan.is_active.is_(True),
        Plan.is_public.is_(True)
    ).order_by(Plan.sort_order.asc()).first()


@router.post("/signup", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
def signup(
    data: SignupRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    """Create an organization with its first ADMIN user and log them in.

    The organization is subscribed to the first active public plan when one
    exists, so plan limits apply from the first request.

    Raises:
        HTTPException 409: Email already registered
        HTTPException 422: Validation failed (weak password, empty name)
    """
    email = data.email.lower()
    if db.query(User.id).filter(User.email == email).first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Email is already registered"
        )

    organization = Organization(
        name=data.organization_name,
        slug=_unique_slug(db, data.organization_name)
    )
    db.add(organization)
    db.flush()

    user = User(
        organization_id=organization.id,
        email=email,
        name=data.name,
        role=UserRole.ADMIN.value,
        password_hash=hash_password(data.password),
        status="ACTIVE"
    )
    db.add(user)

    plan = _default_plan(db)
    if plan:
        db.add(Subscription(organization_id=organization.id, plan_id=plan.id))

    db.flush()
    log_from_request(
        db=db,
        request=request,
        organization_id=organization.id,
        action="SIGNUP",
        actor_id=user.id,
        entity_type="organization",
        entity_id=organization.id,
        metadata={"email": email, "plan": plan.slug if plan else None}
    )
    db.commit()
    db.refresh(user)

    logger.info(f"Organization {organization.slug} created", extra={"org_id": organization.id})
    return _issue_token(user)


@router.post("/login", response_model=LoginResponse)
def login(
    credentials: LoginRequest,
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    """Authenticate user and return JWT access token.

    Unknown email, wrong password and disabled account all produce the same
    401 response so the endpoint cannot be used to enumerate accounts.
    Both outcomes are written to the audit log.
    """
    user = db.query(User).filter(User.email == credentials.email.lower()).first()

    if not user or user.status != "ACTIVE" or not verify_password(credentials.password, user.password_hash):
        log_from_request(
            db=db,
            request=request,
            organization_id=user.organization_id if user else None,
            action="LOGIN_FAILED",
            actor_id=user.id if user else None,
            metadata={"email": credentials.email},
        )
        db.commit()
        auth_logins_total.labels(outcome="failure").inc()
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password"
        )

    user.last_login_at = datetime.now(timezone.utc)
    log_from_request(
        db=db,
        request=request,
        organization_id=user.organization_id,
        action="LOGIN_SUCCESS",
        actor_id=user.id,
        metadata={"email": user.email},
    )
    db.commit()
    db.refresh(user)

    auth_logins_total.labels(outcome="success").inc()
    return _issue_token(user)


@router.get("/me", response_model=MeResponse)
def get_me(current_user: CurrentUser):
    """Get current authenticated user information."""
    return MeResponse(user=UserResponse.model_validate(current_user))
