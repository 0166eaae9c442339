"""Observability module for TokenLens.

Provides structured logging, metrics, request correlation and health checks.
"""

from .logging_config import configure_logging, get_logger
from .metrics import (
    auth_logins_total,
    token_settings_upserts_total,
    plan_reorders_total,
    tenant_access_denied_total,
)
from .request_id import request_id_var, get_request_id, set_request_id, generate_request_id
from .health import HealthStatus, ComponentHealth
from .middleware import RequestIDMiddleware

__all__ = [
    # Logging
    "configure_logging",
    "get_logger",
    # Metrics
    "auth_logins_total",
    "token_settings_upserts_total",
    "plan_reorders_total",
    "tenant_access_denied_total",
    # Request ID
    "request_id_var",
    "get_request_id",
    "set_request_id",
    "generate_request_id",
    # Health
    "HealthStatus",
    "ComponentHealth",
    # Middleware
    "RequestIDMiddleware",
]
