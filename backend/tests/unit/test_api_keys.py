"""Unit tests for explorer credential sources

Precedence per key: token settings, system settings, environment, placeholder.
"""

import pytest

from config import Settings
from explorer.api_keys import describe_key_sources
from models.system_settings import SystemSettings


pytestmark = pytest.mark.unit


@pytest.fixture
def env_settings():
    return Settings(
        _env_file=None,
        BASESCAN_API_KEY="ENV-BASESCAN",
        ETHERSCAN_API_KEY=None,
        ROUTESCAN_API_KEY=None,
        MORALIS_API_KEY=None,
        QUICKNODE_URL=None,
    )


@pytest.fixture
def system_settings(db_session):
    row = SystemSettings(
        default_basescan_api_key="SYSTEM-BASESCAN",
        default_etherscan_api_key="SYSTEM-ETHERSCAN",
    )
    db_session.add(row)
    db_session.commit()
    return row


def test_placeholders_when_nothing_configured(db_session, env_settings):
    env_settings.BASESCAN_API_KEY = None

    sources = describe_key_sources(db_session, settings=env_settings)

    assert sources == {
        "basescan_api_key": "default",
        "routescan_api_key": "default",
        "etherscan_api_key": "default",
        "moralis_api_key": "unset",
        "quiknode_url": "default",
    }


def test_environment_used_without_database_values(db_session, env_settings):
    sources = describe_key_sources(db_session, settings=env_settings)

    assert sources["basescan_api_key"] == "environment"


def test_system_settings_override_environment(db_session, env_settings, system_settings):
    sources = describe_key_sources(db_session, settings=env_settings)

    assert sources["basescan_api_key"] == "system"
    assert sources["etherscan_api_key"] == "system"


def test_token_settings_override_system(db_session, env_settings, system_settings, token_a):
    sources = describe_key_sources(db_session, token_id=token_a.id, settings=env_settings)

    assert sources == {
        "basescan_api_key": "token",
        "routescan_api_key": "default",
        "etherscan_api_key": "system",
        "moralis_api_key": "unset",
        "quiknode_url": "default",
    }


def test_token_without_own_key_falls_back(db_session, env_settings, bare_token):
    sources = describe_key_sources(db_session, token_id=bare_token.id, settings=env_settings)

    assert sources["basescan_api_key"] == "environment"


def test_blank_system_value_is_not_set(db_session, env_settings):
    db_session.add(SystemSettings(default_basescan_api_key=""))
    db_session.commit()

    sources = describe_key_sources(db_session, settings=env_settings)

    assert sources["basescan_api_key"] == "environment"
