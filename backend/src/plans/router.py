"""Admin router for the plan catalogue (SUPER_ADMIN only).

Endpoints:
- GET    /admin/plans           - List plans in display order
- POST   /admin/plans           - Create a plan
- POST   /admin/plans/reorder   - Reassign display order atomically
- GET    /admin/plans/{id}      - Get a plan
- PUT    /admin/plans/{id}      - Update a plan
- DELETE /admin/plans/{id}      - Delete a plan without subscriptions

Plans are platform-level rows, not tenant-scoped. Anonymous callers get 401,
authenticated callers without SUPER_ADMIN get 403.
"""

from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database import get_db
from auth.dependencies import require_super_admin
from audit.service import log_from_request
from models.plan import Plan
from models.user import User
from observability.logging_config import get_logger
from observability.metrics import plan_reorders_total
from .schemas import PlanCreate, PlanListResponse, PlanRead, PlanResponse, PlanUpdate
from .service import (
    IncompletePlanOrderError,
    PlanNotFoundError,
    next_sort_order,
    reorder_plans,
    validate_plan_order,
)

logger = get_logger(__name__)

router = APIRouter(prefix="/admin/plans", tags=["Admin: Plans"])


def _to_read(plan: Plan) -> PlanRead:
    return PlanRead.model_validate(plan).model_copy(
        update={"subscriptions_count": len(plan.subscriptions)}
    )


def _get_plan_or_404(db: Session, plan_id: str) -> Plan:
    plan = db.query(Plan).filter(Plan.id == plan_id).first()
    if not plan:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Plan not found")
    return plan


def _ensure_slug_free(db: Session, slug: str, exclude_id: str = None) -> None:
    query = db.query(Plan.id).filter(Plan.slug == slug)
    if exclude_id:
        query = query.filter(Plan.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f'Plan with slug "{slug}" already exists'
        )


@router.get("", response_model=PlanListResponse)
def list_plans(
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
) -> PlanListResponse:
    """List all plans ordered by sort_order."""
    plans = db.query(Plan).order_by(Plan.sort_order.asc(), Plan.created_at.asc()).all()
    return PlanListResponse(plans=[_to_read(plan) for plan in plans])


@router.post("", response_model=PlanResponse, status_code=status.HTTP_201_CREATED)
def create_plan(
    data: PlanCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
) -> PlanResponse:
    """Create a plan at the end of the display order."""
    _ensure_slug_free(db, data.slug)

    plan = Plan(**data.model_dump(), sort_order=next_sort_order(db))
    db.add(plan)
    db.flush()
    log_from_request(
        db=db,
        request=request,
        organization_id=None,
        action="PLAN_CREATED",
        actor_id=admin.id,
        entity_type="plan",
        entity_id=plan.id,
        metadata={"slug": plan.slug},
    )
    db.commit()
    db.refresh(plan)

    return PlanResponse(plan=_to_read(plan), message=f'Plan "{plan.name}" created successfully')


async def _json_body(request: Request) -> Any:
    """Parsed JSON body, or None when the body is not valid JSON."""
    try:
        return await request.json()
    except ValueError:
        return None


@router.post("/reorder")
def reorder(
    request: Request,
    body: Any = Depends(_json_body),
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
) -> Dict[str, Any]:
    """Reorder plans. Body: {"order": [plan_id, ...]}; index becomes sort_order.

    The body is validated before storage is touched. The update is one
    transaction: either every plan moves or none does.

    Raises:
        HTTPException 400: order missing, empty, not a list, has duplicates,
            or does not name every plan
        HTTPException 500: storage failure, including ids that match no plan
    """
    try:
        order = validate_plan_order(body.get("order") if isinstance(body, dict) else None)
    except ValueError as e:
        plan_reorders_total.labels(outcome="invalid").inc()
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    try:
        reorder_plans(db, order)
    except IncompletePlanOrderError as e:
        plan_reorders_total.labels(outcome="invalid").inc()
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"order must list every plan exactly once ({e.received} of {e.expected} given)"
        )
    except (PlanNotFoundError, SQLAlchemyError):
        plan_reorders_total.labels(outcome="error").inc()
        logger.error("Error reordering plans", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )

    log_from_request(
        db=db,
        request=request,
        organization_id=None,
        action="PLANS_REORDERED",
        actor_id=admin.id,
        entity_type="plan",
        metadata={"order": order},
    )
    db.commit()

    plan_reorders_total.labels(outcome="success").inc()
    return {"success": True, "message": "Plans reordered successfully"}


@router.get("/{plan_id}", response_model=PlanRead)
def get_plan(
    plan_id: str,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
) -> PlanRead:
    return _to_read(_get_plan_or_404(db, plan_id))


@router.put("/{plan_id}", response_model=PlanResponse)
def update_plan(
    plan_id: str,
    data: PlanUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
) -> PlanResponse:
    """Update the supplied fields of a plan. sort_order is changed only by /reorder."""
    plan = _get_plan_or_404(db, plan_id)

    changes = data.model_dump(exclude_unset=True)
    if changes.get("slug") and changes["slug"] != plan.slug:
        _ensure_slug_free(db, changes["slug"], exclude_id=plan.id)

    for field, value in changes.items():
        setattr(plan, field, value)

    log_from_request(
        db=db,
        request=request,
        organization_id=None,
        action="PLAN_UPDATED",
        actor_id=admin.id,
        entity_type="plan",
        entity_id=plan.id,
        metadata={"fields": sorted(changes)},
    )
    db.commit()
    db.refresh(plan)

    return PlanResponse(plan=_to_read(plan), message=f'Plan "{plan.name}" updated successfully')


@router.delete("/{plan_id}")
def delete_plan(
    plan_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
) -> Dict[str, Any]:
    """Delete a plan. Plans with subscriptions cannot be deleted (400)."""
    plan = _get_plan_or_404(db, plan_id)

    subscriptions_count = len(plan.subscriptions)
    if subscriptions_count > 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=(
                f'Cannot delete plan "{plan.name}" because it has '
                f"{subscriptions_count} active subscription(s)"
            )
        )

    log_from_request(
        db=db,
        request=request,
        organization_id=None,
        action="PLAN_DELETED",
        actor_id=admin.id,
        entity_type="plan",
        entity_id=plan.id,
        metadata={"slug": plan.slug},
    )
    name = plan.name
    db.delete(plan)
    db.commit()

    return {"success": True, "message": f'Plan "{name}" deleted successfully'}
