"""Plan catalogue operations."""

from typing import List, Sequence

from sqlalchemy import func, update
from sqlalchemy.orm import Session

from models.plan import Plan
from observability.logging_config import get_logger

logger = get_logger(__name__)


class PlanNotFoundError(Exception):
    """An id in a reorder request matched no plan."""

    def __init__(self, plan_id: str):
        super().__init__(f"Plan {plan_id} not found")
        self.plan_id = plan_id


class IncompletePlanOrderError(Exception):
    """A reorder request did not name every plan."""

    def __init__(self, expected: int, received: int):
        super().__init__(f"Order names {received} of {expected} plans")
        self.expected = expected
        self.received = received


def validate_plan_order(order) -> List[str]:
    """Check the shape of a reorder request before any storage access.

    Raises:
        ValueError: order is not a non-empty list of distinct non-empty strings
    """
    if not isinstance(order, list) or len(order) == 0:
        raise ValueError("order must be a non-empty array of plan IDs")
    if not all(isinstance(plan_id, str) and plan_id for plan_id in order):
        raise ValueError("order must contain only non-empty plan ID strings")
    if len(set(order)) != len(order):
        raise ValueError("order must not contain duplicate plan IDs")
    return order


def reorder_plans(db: Session, order: Sequence[str]) -> None:
    """Set each plan's sort_order to its index in order, atomically.

    All updates run in one transaction. If any id matches no plan, or the
    order does not name every plan, the transaction is rolled back and no
    sort_order changes. On success sort_order values are exactly 0..N-1.

    Raises:
        PlanNotFoundError: An id matched no plan
        IncompletePlanOrderError: Some plans were not named
        SQLAlchemyError: Storage failure
    """
    try:
        for index, plan_id in enumerate(order):
            result = db.execute(
                update(Plan)
                .where(Plan.id == plan_id)
                .values(sort_order=index)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount != 1:
                raise PlanNotFoundError(plan_id)

        total = db.query(func.count(Plan.id)).scalar()
        if total != len(order):
            raise IncompletePlanOrderError(expected=total, received=len(order))

        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(f"Reordered {len(order)} plans")


def next_sort_order(db: Session) -> int:
    """Position for a newly created plan: after every existing one."""
    current = db.query(func.max(Plan.sort_order)).scalar()
    return 0 if current is None else current + 1
