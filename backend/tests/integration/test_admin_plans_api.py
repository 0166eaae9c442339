"""Integration tests for the admin plan catalogue endpoints"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from models.plan import Plan, Subscription


pytestmark = pytest.mark.integration

URL = "/api/v1/admin/plans"

NEW_PLAN = {
    "name": "Starter",
    "slug": "starter",
    "description": "For small teams",
    "price": 19.99,
    "tokens_limit": 3,
    "api_calls_limit": 5000,
    "transfers_limit": 50000,
    "members_limit": 3,
    "features": ["Holder analytics", "Whale alerts"],
}


class TestListPlans:

    def test_list_in_sort_order_with_subscription_counts(
        self, client: TestClient, db_session: Session, super_admin_headers, plans, test_org
    ):
        db_session.add(Subscription(organization_id=test_org.id, plan_id=plans["pro"].id))
        db_session.commit()

        response = client.get(URL, headers=super_admin_headers)

        assert response.status_code == 200
        data = response.json()["plans"]
        assert [plan["slug"] for plan in data] == ["free", "pro", "enterprise"]
        assert [plan["subscriptions_count"] for plan in data] == [0, 1, 0]
        assert data[1]["price"] == 49.0

    def test_requires_super_admin(self, client: TestClient, admin_headers, plans):
        assert client.get(URL, headers=admin_headers).status_code == 403
        assert client.get(URL).status_code == 401


class TestCreatePlan:

    def test_create_appends_to_end(self, client: TestClient, super_admin_headers, plans):
        response = client.post(URL, headers=super_admin_headers, json=NEW_PLAN)

        assert response.status_code == 201
        data = response.json()
        assert data["success"] is True
        assert data["plan"]["sort_order"] == 3
        assert data["plan"]["features"] == ["Holder analytics", "Whale alerts"]

    def test_first_plan_gets_position_zero(self, client: TestClient, super_admin_headers):
        response = client.post(URL, headers=super_admin_headers, json=NEW_PLAN)

        assert response.json()["plan"]["sort_order"] == 0

    def test_duplicate_slug(self, client: TestClient, super_admin_headers, plans):
        response = client.post(URL, headers=super_admin_headers, json={**NEW_PLAN, "slug": "pro"})

        assert response.status_code == 409

    @pytest.mark.parametrize("overrides", [
        {"slug": "Not A Slug"},
        {"tokens_limit": -2},
        {"price": -1},
        {"sort_order": 1},
    ])
    def test_invalid_plan(self, client: TestClient, super_admin_headers, overrides):
        response = client.post(URL, headers=super_admin_headers, json={**NEW_PLAN, **overrides})

        assert response.status_code == 422


class TestUpdatePlan:

    def test_partial_update(self, client: TestClient, super_admin_headers, plans):
        response = client.put(f"{URL}/{plans['pro'].id}", headers=super_admin_headers, json={"tokens_limit": 25})

        assert response.status_code == 200
        plan = response.json()["plan"]
        assert plan["tokens_limit"] == 25
        assert plan["name"] == "Pro"

    def test_null_clears_description(self, client: TestClient, db_session: Session, super_admin_headers, plans):
        plans["pro"].description = "For growing teams"
        db_session.commit()

        response = client.put(f"{URL}/{plans['pro'].id}", headers=super_admin_headers, json={"description": None})

        assert response.status_code == 200
        assert response.json()["plan"]["description"] is None
        db_session.refresh(plans["pro"])
        assert plans["pro"].description is None

    @pytest.mark.parametrize("body", [
        {"name": None},
        {"tokens_limit": None},
        {"sort_order": 0},
    ])
    def test_rejected_updates_leave_plan_unchanged(
        self, client: TestClient, db_session: Session, super_admin_headers, plans, body
    ):
        response = client.put(f"{URL}/{plans['pro'].id}", headers=super_admin_headers, json=body)

        assert response.status_code == 422
        db_session.refresh(plans["pro"])
        assert plans["pro"].name == "Pro"
        assert plans["pro"].sort_order == 1

    def test_slug_conflict(self, client: TestClient, super_admin_headers, plans):
        response = client.put(f"{URL}/{plans['pro'].id}", headers=super_admin_headers, json={"slug": "free"})

        assert response.status_code == 409

    def test_unknown_plan(self, client: TestClient, super_admin_headers):
        response = client.put(f"{URL}/missing", headers=super_admin_headers, json={"name": "X"})

        assert response.status_code == 404


class TestGetAndDeletePlan:

    def test_get_plan(self, client: TestClient, super_admin_headers, plans):
        response = client.get(f"{URL}/{plans['enterprise'].id}", headers=super_admin_headers)

        assert response.status_code == 200
        assert response.json()["tokens_limit"] == -1

    def test_get_unknown_plan(self, client: TestClient, super_admin_headers):
        assert client.get(f"{URL}/missing", headers=super_admin_headers).status_code == 404

    def test_delete_plan(self, client: TestClient, db_session: Session, super_admin_headers, plans):
        plan_id = plans["enterprise"].id

        response = client.delete(f"{URL}/{plan_id}", headers=super_admin_headers)

        assert response.status_code == 200
        assert db_session.query(Plan).filter_by(id=plan_id).count() == 0

    def test_cannot_delete_plan_with_subscriptions(
        self, client: TestClient, db_session: Session, super_admin_headers, plans, test_org
    ):
        db_session.add(Subscription(organization_id=test_org.id, plan_id=plans["free"].id))
        db_session.commit()

        response = client.delete(f"{URL}/{plans['free'].id}", headers=super_admin_headers)

        assert response.status_code == 400
        assert "1 active subscription" in response.json()["detail"]
