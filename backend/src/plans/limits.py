"""Plan limit checks for an organization.

A limit of -1 means unlimited. Organizations without a subscription may not
add resources.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from models.plan import Plan, Subscription, UNLIMITED
from models.token import Token
from models.user import User


@dataclass(frozen=True)
class LimitCheck:
    allowed: bool
    message: Optional[str] = None


def _plan_for(db: Session, organization_id: str) -> Optional[Plan]:
    subscription = db.query(Subscription).filter(
        Subscription.organization_id == organization_id
    ).first()
    return subscription.plan if subscription else None


def _check(current: int, limit: int, noun: str, upgrade_hint: str) -> LimitCheck:
    if limit == UNLIMITED:
        return LimitCheck(allowed=True)
    if current >= limit:
        return LimitCheck(
            allowed=False,
            message=f"{noun} limit reached ({limit}). Upgrade your plan to {upgrade_hint}."
        )
    return LimitCheck(allowed=True)


def check_token_limit(db: Session, organization_id: str) -> LimitCheck:
    """Can the organization track one more token?"""
    plan = _plan_for(db, organization_id)
    if plan is None:
        return LimitCheck(allowed=False, message="No subscription found")

    count = db.query(func.count(Token.id)).filter(Token.organization_id == organization_id).scalar()
    return _check(count, plan.tokens_limit, "Token", "add more tokens")


def check_members_limit(db: Session, organization_id: str) -> LimitCheck:
    """Can the organization add one more member?"""
    plan = _plan_for(db, organization_id)
    if plan is None:
        return LimitCheck(allowed=False, message="No subscription found")

    count = db.query(func.count(User.id)).filter(User.organization_id == organization_id).scalar()
    return _check(count, plan.members_limit, "Member", "invite more members")


def check_api_calls_limit(db: Session, organization_id: str) -> Optional[str]:
    """Soft limit on monthly API calls.

    Returns a warning message at 80% usage and once the limit is reached,
    otherwise None. Never blocks.
    """
    subscription = db.query(Subscription).filter(
        Subscription.organization_id == organization_id
    ).first()
    if subscription is None or subscription.plan is None:
        return None

    current = subscription.api_calls_this_month
    limit = subscription.plan.api_calls_limit
    if limit == UNLIMITED or limit <= 0:
        return None

    if current >= limit:
        return f"API call limit exceeded ({limit}/month). Some features may be restricted. Please upgrade your plan."
    if current >= limit * 0.8:
        percent = round(current / limit * 100)
        return f"You've used {current}/{limit} API calls this month ({percent}%). Consider upgrading your plan."
    return None


def record_api_call(db: Session, organization_id: str) -> None:
    """Count one resource-consuming request against the monthly quota.

    Organizations without a subscription are not counted. The caller commits.
    """
    db.execute(
        update(Subscription)
        .where(Subscription.organization_id == organization_id)
        .values(api_calls_this_month=Subscription.api_calls_this_month + 1)
        .execution_options(synchronize_session=False)
    )


def _usage(current: int, limit: int) -> dict:
    percentage = 0.0 if limit == UNLIMITED or limit <= 0 else current / limit * 100
    return {"current": current, "limit": limit, "percentage": round(percentage, 1)}


def get_usage_stats(db: Session, organization_id: str) -> Optional[dict]:
    """Current usage against each plan limit, or None without a subscription."""
    subscription = db.query(Subscription).filter(
        Subscription.organization_id == organization_id
    ).first()
    if subscription is None or subscription.plan is None:
        return None

    plan = subscription.plan
    tokens = db.query(func.count(Token.id)).filter(Token.organization_id == organization_id).scalar()
    members = db.query(func.count(User.id)).filter(User.organization_id == organization_id).scalar()

    return {
        "plan": plan.slug,
        "tokens": _usage(tokens, plan.tokens_limit),
        "members": _usage(members, plan.members_limit),
        "api_calls": _usage(subscription.api_calls_this_month, plan.api_calls_limit),
        "can_add_token": check_token_limit(db, organization_id).allowed,
        "can_add_member": check_members_limit(db, organization_id).allowed,
        "warning": check_api_calls_limit(db, organization_id),
    }
