"""Integration tests for PUT /api/v1/tokens/{id}/settings"""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from models.audit_log import AuditLog
from models.token import TokenSettings


pytestmark = pytest.mark.integration


def _url(token) -> str:
    return f"/api/v1/tokens/{token.id}/settings"


class TestUpdateTokenSettings:

    def test_creates_settings_on_first_write(self, client: TestClient, db_session: Session, admin_headers, bare_token):
        response = client.put(_url(bare_token), headers=admin_headers, json={"whale_threshold": "50000"})

        assert response.status_code == 200
        data = response.json()
        assert data["token_id"] == bare_token.id
        assert data["whale_threshold"] == "50000"
        assert data["cache_duration_minutes"] == 5
        assert db_session.query(TokenSettings).filter_by(token_id=bare_token.id).count() == 1

    def test_updates_existing_settings(self, client: TestClient, admin_headers, test_token):
        response = client.put(_url(test_token), headers=admin_headers, json={
            "custom_basescan_api_key": "ABC123",
            "supply_method": "ONCHAIN",
        })

        assert response.status_code == 200
        data = response.json()
        assert data["custom_basescan_api_key"] == "ABC123"
        assert data["supply_method"] == "ONCHAIN"
        assert data["whale_threshold"] == "10000"

    def test_same_body_twice_gives_same_state(self, client: TestClient, admin_headers, test_token):
        body = {
            "whale_threshold": "123.45",
            "custom_exchange_addresses": ["0x" + "c" * 40, "0x" + "d" * 40],
            "max_transfers_to_fetch": 500,
        }

        first = client.put(_url(test_token), headers=admin_headers, json=body).json()
        second = client.put(_url(test_token), headers=admin_headers, json=body).json()

        first.pop("updated_at")
        second.pop("updated_at")
        assert first == second

    def test_exchange_list_replaced(self, client: TestClient, admin_headers, test_token):
        client.put(_url(test_token), headers=admin_headers, json={"custom_exchange_addresses": ["0x" + "c" * 40]})
        response = client.put(_url(test_token), headers=admin_headers, json={"custom_exchange_addresses": []})

        assert response.json()["custom_exchange_addresses"] == []

    def test_member_can_update_settings(self, client: TestClient, member_headers, test_token):
        response = client.put(_url(test_token), headers=member_headers, json={"cache_duration_minutes": 15})

        assert response.status_code == 200

    def test_update_is_audited_without_values(self, client: TestClient, db_session: Session, admin_headers, test_token):
        client.put(_url(test_token), headers=admin_headers, json={"custom_moralis_api_key": "moralis-secret"})

        entry = db_session.query(AuditLog).filter_by(action="TOKEN_SETTINGS_UPDATED").one()
        assert entry.entity_id == test_token.id
        assert entry.metadata_json == {"fields": ["custom_moralis_api_key"]}
        assert "moralis-secret" not in str(entry.metadata_json)

    @pytest.mark.parametrize("body", [
        {"whale_threshold": "a lot"},
        {"whale_threshold": None},
        {"cache_duration_minutes": -1},
        {"supply_method": "GUESS"},
        {"custom_exchange_addresses": ["not-an-address"]},
        {"token_id": "another-token"},
    ])
    def test_invalid_body(self, client: TestClient, db_session: Session, admin_headers, test_token, body):
        response = client.put(_url(test_token), headers=admin_headers, json=body)

        assert response.status_code == 422
        assert response.json()["error"] == "validation_error"
        db_session.expire_all()
        assert db_session.query(TokenSettings).filter_by(token_id=test_token.id).one().whale_threshold == "10000"

    def test_unknown_token(self, client: TestClient, admin_headers):
        response = client.put("/api/v1/tokens/unknown/settings", headers=admin_headers, json={"whale_threshold": "1"})

        assert response.status_code == 404

    def test_unauthenticated_write_changes_nothing(self, client: TestClient, db_session: Session, test_token):
        response = client.put(_url(test_token), json={"whale_threshold": "1"})

        assert response.status_code == 401
        db_session.expire_all()
        assert db_session.query(TokenSettings).filter_by(token_id=test_token.id).one().whale_threshold == "10000"
