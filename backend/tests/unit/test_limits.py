"""Unit tests for plan limit checks"""

import pytest

from models.plan import Subscription
from models.token import Token
from plans.limits import (
    check_api_calls_limit,
    check_members_limit,
    check_token_limit,
    get_usage_stats,
    record_api_call,
)


pytestmark = pytest.mark.unit


def _add_token(db_session, organization_id, suffix: str) -> None:
    db_session.add(Token(
        organization_id=organization_id,
        address="0x" + suffix * 40,
        symbol=f"T{suffix}",
        name=f"Token {suffix}",
    ))
    db_session.commit()


class TestTokenLimit:

    def test_no_subscription_is_not_allowed(self, db_session, test_org):
        result = check_token_limit(db_session, test_org.id)

        assert result.allowed is False
        assert result.message == "No subscription found"

    def test_under_limit_is_allowed(self, db_session, subscribed_org):
        _add_token(db_session, subscribed_org.id, "1")

        assert check_token_limit(db_session, subscribed_org.id).allowed is True

    def test_at_limit_is_denied(self, db_session, subscribed_org):
        _add_token(db_session, subscribed_org.id, "1")
        _add_token(db_session, subscribed_org.id, "2")

        result = check_token_limit(db_session, subscribed_org.id)

        assert result.allowed is False
        assert result.message == "Token limit reached (2). Upgrade your plan to add more tokens."

    def test_unlimited_plan(self, db_session, test_org, plans):
        db_session.add(Subscription(organization_id=test_org.id, plan_id=plans["enterprise"].id))
        db_session.commit()
        for suffix in "123456":
            _add_token(db_session, test_org.id, suffix)

        assert check_token_limit(db_session, test_org.id).allowed is True

    def test_other_organizations_tokens_do_not_count(self, db_session, subscribed_org, token_a, token_b):
        assert check_token_limit(db_session, subscribed_org.id).allowed is True


class TestMembersLimit:

    def test_members_limit(self, db_session, subscribed_org, admin_user, member_user):
        result = check_members_limit(db_session, subscribed_org.id)

        assert result.allowed is False
        assert "Member limit reached (2)" in result.message


class TestApiCallsLimit:

    @pytest.mark.parametrize("calls,expected", [
        (0, None),
        (799, None),
        (800, "You've used 800/1000 API calls this month (80%). Consider upgrading your plan."),
        (1000, "API call limit exceeded (1000/month). Some features may be restricted. Please upgrade your plan."),
    ])
    def test_soft_warnings(self, db_session, subscribed_org, calls, expected):
        subscription = subscribed_org.subscription
        subscription.api_calls_this_month = calls
        db_session.commit()

        assert check_api_calls_limit(db_session, subscribed_org.id) == expected

    def test_no_subscription_has_no_warning(self, db_session, test_org):
        assert check_api_calls_limit(db_session, test_org.id) is None


class TestApiCallCounter:

    def test_record_api_call_increments(self, db_session, subscribed_org):
        record_api_call(db_session, subscribed_org.id)
        record_api_call(db_session, subscribed_org.id)
        db_session.commit()

        db_session.refresh(subscribed_org.subscription)
        assert subscribed_org.subscription.api_calls_this_month == 2

    def test_record_api_call_without_subscription(self, db_session, test_org):
        record_api_call(db_session, test_org.id)
        db_session.commit()

        assert get_usage_stats(db_session, test_org.id) is None


class TestUsageStats:

    def test_unlimited_plan_reports_zero_percent(self, db_session, test_org, plans):
        db_session.add(Subscription(organization_id=test_org.id, plan_id=plans["enterprise"].id, api_calls_this_month=12))
        db_session.commit()

        stats = get_usage_stats(db_session, test_org.id)

        assert stats["api_calls"] == {"current": 12, "limit": -1, "percentage": 0.0}
        assert stats["can_add_token"] is True
        assert stats["warning"] is None
