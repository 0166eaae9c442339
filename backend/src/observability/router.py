"""Unauthenticated operational endpoints: /metrics, /health, /ready."""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from database import get_db
from .health import check_database_health

router = APIRouter(tags=["Observability"])


@router.get("/metrics", include_in_schema=False)
def metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)


@router.get("/health", summary="Health check endpoint")
def health_check(db: Session = Depends(get_db)):
    """200 while the database answers, 503 otherwise."""
    database = check_database_health(db)
    return JSONResponse(
        status_code=200 if database.ok else 503,
        content={
            "status": database.status.value,
            "components": {"database": database.as_dict()},
        },
    )


@router.get("/ready", summary="Readiness check endpoint")
def readiness_check(db: Session = Depends(get_db)):
    database = check_database_health(db)
    if not database.ok:
        return JSONResponse(status_code=503, content={"status": "not_ready", "message": database.message})
    return {"status": "ready", "message": "Application is ready to serve traffic"}
