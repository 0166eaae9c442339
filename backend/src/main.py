"""TokenLens Backend - Main FastAPI Application

Multi-tenant token analytics platform.

This module creates and configures the main FastAPI application, including:
- API routers (auth, tokens, organization usage, admin plans and settings)
- Middleware (request ID correlation, tenant scoping, CORS)
- Exception handlers
- Health and observability endpoints
"""

import logging
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from sqlalchemy.exc import SQLAlchemyError

from config import get_settings

# Observability
from observability.logging_config import configure_logging
from observability.middleware import RequestIDMiddleware
from observability.router import router as observability_router

# Authentication & Tenancy
from auth.router import router as auth_router
from tenancy.middleware import TenantContextMiddleware

# Domain Routers
from tokens.router import router as tokens_router
from organizations.router import router as organizations_router
from plans.router import router as plans_router
from platform_settings.router import router as platform_settings_router

settings = get_settings()

configure_logging(level=settings.LOG_LEVEL, json_format=settings.LOG_JSON)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("TokenLens API starting up...")
    logger.info(f"Environment: {settings.ENV}")
    logger.info(f"Debug mode: {settings.DEBUG}")

    yield

    logger.info("TokenLens API shutting down...")


app = FastAPI(
    title="TokenLens API",
    description="Multi-tenant ERC20 token analytics for Base",
    version="0.1.0",
    docs_url=None if settings.is_production else "/docs",
    redoc_url=None if settings.is_production else "/redoc",
    openapi_url=None if settings.is_production else "/openapi.json",
    lifespan=lifespan,
)


# =============================================================================
# MIDDLEWARE CONFIGURATION
# =============================================================================

# Request ID Middleware (must be first for proper correlation)
app.add_middleware(RequestIDMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID"],
)

# Tenant Context Middleware (extracts org_id from JWT for logging)
app.add_middleware(TenantContextMiddleware)


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Returns a structured error response with field-level details.
    """
    errors = jsonable_encoder(exc.errors())
    logger.warning(
        f"Validation error on {request.method} {request.url.path}",
        extra={"errors": errors}
    )
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "validation_error",
            "message": "Request validation failed",
            "details": errors,
        },
    )


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(
    request: Request,
    exc: SQLAlchemyError
) -> JSONResponse:
    """Handle database errors.

    Logs the full error but returns a generic message so storage details
    never reach the client.
    """
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "database_error",
            "message": "A database error occurred. Please try again later.",
        },
    )


@app.exception_handler(Exception)
async def generic_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": "internal_error",
            "message": "An unexpected error occurred. Please try again later.",
        },
    )


# =============================================================================
# ROUTER REGISTRATION
# =============================================================================

# Observability (health, metrics, ready)
app.include_router(observability_router)

app.include_router(auth_router, prefix="/api/v1")
app.include_router(tokens_router, prefix="/api/v1")
app.include_router(organizations_router, prefix="/api/v1")

# Super-admin panel
app.include_router(plans_router, prefix="/api/v1")
app.include_router(platform_settings_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root() -> dict[str, Any]:
    """Root endpoint - API information."""
    return {
        "name": "TokenLens API",
        "version": "0.1.0",
        "status": "running",
        "docs": None if settings.is_production else "/docs",
    }


def create_app() -> FastAPI:
    """Application factory for creating test instances."""
    return app


if __name__ == "__main__":
    import os
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=not settings.is_production,
        log_level=settings.LOG_LEVEL.lower(),
    )
