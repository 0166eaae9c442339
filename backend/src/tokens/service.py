"""Token domain operations.

The functions here assume the caller already resolved the tenant and loaded
the token through TenantQuery; they do not re-check ownership.
"""

from typing import Any, Dict, Tuple

from sqlalchemy.orm import Session

from models.token import Token, TokenSettings
from observability.logging_config import get_logger
from observability.metrics import token_settings_upserts_total

logger = get_logger(__name__)

DEFAULT_WHALE_THRESHOLD = "10000"


def upsert_token_settings(
    db: Session,
    token: Token,
    changes: Dict[str, Any],
) -> Tuple[TokenSettings, bool]:
    """Create or update the settings row of a token.

    If the token has no settings yet, a row is created from the column
    defaults plus the supplied fields. Otherwise each supplied field replaces
    the stored value; fields not supplied are left untouched. Values are
    assigned as-is, so nested structures (exchange address lists) are
    replaced rather than merged. Applying the same changes twice yields the
    same stored row.

    Args:
        db: Database session
        token: Token owned by the caller's organization
        changes: Field name -> new value, only for fields present in the request

    Returns:
        (settings, created): the persisted row and whether it was inserted
    """
    settings = db.query(TokenSettings).filter(TokenSettings.token_id == token.id).first()
    created = settings is None

    if created:
        settings = TokenSettings(token_id=token.id, **changes)
        db.add(settings)
    else:
        for field, value in changes.items():
            setattr(settings, field, value)

    db.commit()
    db.refresh(settings)

    token_settings_upserts_total.labels(operation="created" if created else "updated").inc()
    logger.info(
        f"Token settings {'created' if created else 'updated'} for token {token.id}",
        extra={"org_id": token.organization_id}
    )
    return settings, created


def create_token(
    db: Session,
    organization_id: str,
    created_by: str,
    address: str,
    network: str,
    symbol: str,
    name: str,
    decimals: int,
) -> Token:
    """Add a token to an organization with default settings.

    The caller commits.
    """
    token = Token(
        organization_id=organization_id,
        address=address,
        network=network,
        symbol=symbol,
        name=name,
        decimals=decimals,
        created_by=created_by,
        is_verified=False,
    )
    token.settings = TokenSettings(whale_threshold=DEFAULT_WHALE_THRESHOLD)
    db.add(token)
    db.flush()
    return token
