"""Explorer credential sources.

Each credential comes from the first tier that sets it:

1. TokenSettings.custom_* of the token (when a token is given)
2. SystemSettings.default_* (platform defaults, row id "system")
3. Environment configuration (Settings.*_API_KEY / QUICKNODE_URL)
4. A public placeholder (explorers accept "YourApiKeyToken" at a low rate limit)

A failure to read either settings table is logged and treated as "not set".
"""

from typing import Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from config import Settings, get_settings
from models.system_settings import SystemSettings, SYSTEM_SETTINGS_ID
from models.token import TokenSettings
from observability.logging_config import get_logger

logger = get_logger(__name__)

PLACEHOLDER_API_KEY = "YourApiKeyToken"
DEFAULT_RPC_URL = "https://mainnet.base.org"

# key name -> (TokenSettings column, SystemSettings column, Settings attribute, placeholder)
_KEY_SOURCES = {
    "basescan_api_key": ("custom_basescan_api_key", "default_basescan_api_key", "BASESCAN_API_KEY", PLACEHOLDER_API_KEY),
    "routescan_api_key": ("custom_routescan_api_key", "default_routescan_api_key", "ROUTESCAN_API_KEY", PLACEHOLDER_API_KEY),
    "etherscan_api_key": ("custom_etherscan_api_key", "default_etherscan_api_key", "ETHERSCAN_API_KEY", PLACEHOLDER_API_KEY),
    "moralis_api_key": ("custom_moralis_api_key", "default_moralis_api_key", "MORALIS_API_KEY", None),
    "quiknode_url": ("custom_quiknode_url", "default_quiknode_url", "QUICKNODE_URL", DEFAULT_RPC_URL),
}


def _load_token_settings(db: Session, token_id: Optional[str]) -> Optional[TokenSettings]:
    if not token_id:
        return None
    try:
        return db.query(TokenSettings).filter(TokenSettings.token_id == token_id).first()
    except SQLAlchemyError:
        logger.warning(f"Could not read token settings for token {token_id}", exc_info=True)
        return None


def _load_system_settings(db: Session) -> Optional[SystemSettings]:
    try:
        return db.query(SystemSettings).filter(SystemSettings.id == SYSTEM_SETTINGS_ID).first()
    except SQLAlchemyError:
        logger.warning("Could not read system settings", exc_info=True)
        return None


def describe_key_sources(
    db: Session,
    token_id: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Dict[str, str]:
    """Report which tier each credential comes from: token, system, environment, default or unset.

    Only the tier is returned, never the credential itself.
    """
    settings = settings or get_settings()
    token_settings = _load_token_settings(db, token_id)
    system_settings = _load_system_settings(db)

    resolved = {}
    for key, (token_column, system_column, env_name, placeholder) in _KEY_SOURCES.items():
        candidates = (
            ("token", getattr(token_settings, token_column, None) if token_settings else None),
            ("system", getattr(system_settings, system_column, None) if system_settings else None),
            ("environment", getattr(settings, env_name, None)),
        )
        for source, value in candidates:
            if value:
                resolved[key] = source
                break
        else:
            resolved[key] = "default" if placeholder else "unset"
    return resolved
