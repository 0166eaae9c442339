"""Database probe shared by /health and /ready.

The relational database is the only hard dependency of the API process, so
the API is either healthy or unhealthy; there is no degraded state.
"""

import time
from enum import Enum
from typing import Optional
from dataclasses import asdict, dataclass

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None

    @property
    def ok(self) -> bool:
        return self.status is HealthStatus.HEALTHY

    def as_dict(self) -> dict:
        return {**asdict(self), "status": self.status.value}


def check_database_health(db: Session) -> ComponentHealth:
    """Round-trip a SELECT 1 and time it."""
    started = time.perf_counter()
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.error("Database health check failed", exc_info=True)
        return ComponentHealth(status=HealthStatus.UNHEALTHY, message="Database unavailable")

    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message="Database connection OK",
        latency_ms=round((time.perf_counter() - started) * 1000, 2),
    )
