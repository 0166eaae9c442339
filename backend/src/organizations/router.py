"""FastAPI router for the caller's organization.

Endpoints:
- GET /organizations/usage  - Plan limits and current usage
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import get_db
from dependencies import CurrentTenant
from plans.limits import get_usage_stats
from .schemas import UsageRead


router = APIRouter(prefix="/organizations", tags=["Organizations"])


@router.get("/usage", response_model=UsageRead)
def get_usage(
    ctx: CurrentTenant,
    db: Session = Depends(get_db),
) -> UsageRead:
    """Report token, member and API call usage of the caller's organization.

    Raises:
        HTTPException 404: Organization has no subscription
    """
    stats = get_usage_stats(db, ctx.organization_id)
    if stats is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No subscription found")
    return UsageRead(**stats)
