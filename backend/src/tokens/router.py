"""FastAPI router for tenant-scoped token management.

Endpoints:
- GET    /tokens                 - List the organization's tokens
- POST   /tokens                 - Track a new token (plan limit enforced)
- GET    /tokens/{id}            - Token with its settings (counts one API call)
- PUT    /tokens/{id}/settings   - Create or update token settings
- DELETE /tokens/{id}            - Stop tracking a token
- GET    /tokens/{id}/api-keys   - Which tier each explorer credential comes from

Every endpoint resolves the tenant first (401 when it cannot), then loads the
token through TenantQuery (404 when missing or owned by another organization).
"""

from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import get_db
from dependencies import CurrentTenant, TenantQuery
from audit.service import log_from_request
from explorer.api_keys import describe_key_sources
from models.token import Token
from plans.limits import check_api_calls_limit, check_token_limit, record_api_call
from .schemas import ApiKeySourcesRead, TokenCreate, TokenRead, TokenSettingsRead, TokenSettingsUpdate
from .service import create_token, upsert_token_settings


router = APIRouter(prefix="/tokens", tags=["Tokens"])


@router.get("", response_model=List[TokenRead])
def list_tokens(
    ctx: CurrentTenant,
    db: Session = Depends(get_db),
) -> List[Token]:
    """List tokens of the caller's organization, newest first."""
    return TenantQuery.scoped_query(db, Token, ctx.organization_id).order_by(
        Token.created_at.desc()
    ).all()


@router.post("", response_model=TokenRead, status_code=status.HTTP_201_CREATED)
def add_token(
    data: TokenCreate,
    request: Request,
    ctx: CurrentTenant,
    db: Session = Depends(get_db),
) -> Token:
    """Start tracking an ERC20 contract.

    Raises:
        HTTPException 403: Organization reached its plan's token limit
        HTTPException 409: Token already tracked on this network
    """
    limit = check_token_limit(db, ctx.organization_id)
    if not limit.allowed:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=limit.message)

    existing = TenantQuery.scoped_query(db, Token, ctx.organization_id).filter(
        Token.network == data.network,
        Token.address == data.address,
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Token is already tracked on this network"
        )

    try:
        token = create_token(
            db,
            organization_id=ctx.organization_id,
            created_by=ctx.user_id,
            address=data.address,
            network=data.network,
            symbol=data.symbol,
            name=data.name,
            decimals=data.decimals,
        )
        log_from_request(
            db=db,
            request=request,
            organization_id=ctx.organization_id,
            action="TOKEN_CREATED",
            actor_id=ctx.user_id,
            entity_type="token",
            entity_id=token.id,
            metadata={"address": token.address, "network": token.network},
        )
        db.commit()
    except IntegrityError:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Token is already tracked on this network"
        )

    db.refresh(token)
    return token


@router.get("/{token_id}", response_model=TokenRead)
def get_token(
    token_id: str,
    response: Response,
    ctx: CurrentTenant,
    db: Session = Depends(get_db),
) -> Token:
    """Get a token of the caller's organization together with its settings.

    Each read counts as one API call of the organization's monthly quota.
    The quota is soft: past 80% the response carries an X-Usage-Warning header.
    """
    token = TenantQuery.get_or_404(db, Token, token_id, ctx.organization_id)

    record_api_call(db, ctx.organization_id)
    db.commit()
    warning = check_api_calls_limit(db, ctx.organization_id)
    if warning:
        response.headers["X-Usage-Warning"] = warning

    db.refresh(token)
    return token


@router.put("/{token_id}/settings", response_model=TokenSettingsRead)
def update_token_settings(
    token_id: str,
    data: TokenSettingsUpdate,
    request: Request,
    ctx: CurrentTenant,
    db: Session = Depends(get_db),
):
    """Create the token's settings on first write, update them afterwards.

    Only fields present in the body are written. Sending the same body twice
    leaves the same stored state.

    Example Request:
        PUT /api/v1/tokens/3f0c.../settings
        {"whale_threshold": "50000", "custom_basescan_api_key": "ABC123"}
    """
    token = TenantQuery.get_or_404(db, Token, token_id, ctx.organization_id)

    changes = data.changes()
    log_from_request(
        db=db,
        request=request,
        organization_id=ctx.organization_id,
        action="TOKEN_SETTINGS_UPDATED",
        actor_id=ctx.user_id,
        entity_type="token",
        entity_id=token.id,
        # Field names only: values may be credentials
        metadata={"fields": sorted(changes)},
    )
    settings, _ = upsert_token_settings(db, token, changes)
    return settings


@router.delete("/{token_id}")
def delete_token(
    token_id: str,
    request: Request,
    ctx: CurrentTenant,
    db: Session = Depends(get_db),
) -> Dict[str, Any]:
    """Stop tracking a token. Its settings are deleted with it."""
    token = TenantQuery.get_or_404(db, Token, token_id, ctx.organization_id)

    log_from_request(
        db=db,
        request=request,
        organization_id=ctx.organization_id,
        action="TOKEN_DELETED",
        actor_id=ctx.user_id,
        entity_type="token",
        entity_id=token.id,
        metadata={"address": token.address, "network": token.network},
    )
    db.delete(token)
    db.commit()

    return {"success": True}


@router.get("/{token_id}/api-keys", response_model=ApiKeySourcesRead)
def get_api_key_sources(
    token_id: str,
    ctx: CurrentTenant,
    db: Session = Depends(get_db),
) -> ApiKeySourcesRead:
    """Show whether each explorer credential is the token's own, a platform default or unset."""
    token = TenantQuery.get_or_404(db, Token, token_id, ctx.organization_id)
    return ApiKeySourcesRead(token_id=token.id, sources=describe_key_sources(db, token.id))
