"""Audit logging service for security-relevant events.

Events recorded by TokenLens:
- SIGNUP, LOGIN_SUCCESS, LOGIN_FAILED
- TOKEN_CREATED, TOKEN_DELETED, TOKEN_SETTINGS_UPDATED
- PLAN_CREATED, PLAN_UPDATED, PLAN_DELETED, PLANS_REORDERED

Entries are flushed, not committed: they become durable together with the
change they describe, or not at all.
"""

from typing import Optional, Dict, Any

from fastapi import Request
from sqlalchemy.orm import Session

from models.audit_log import AuditLog


def log_audit_event(
    db: Session,
    organization_id: Optional[str],
    action: str,
    actor_id: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
    ip_address: Optional[str] = None,
    user_agent: Optional[str] = None,
) -> AuditLog:
    """Create an audit log entry.

    Args:
        db: Database session
        organization_id: Tenant the event belongs to (None for platform events)
        action: Event action (e.g. "TOKEN_SETTINGS_UPDATED")
        actor_id: User who performed the action
        entity_type: Type of entity affected (e.g. "token", "plan")
        entity_id: ID of affected entity
        metadata: Additional context as JSON (never secrets)
        ip_address: Client IP address
        user_agent: Client User-Agent header

    Returns:
        AuditLog: The created (flushed) audit log entry
    """
    audit_entry = AuditLog(
        organization_id=organization_id,
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata_json=metadata,
        ip_address=ip_address,
        user_agent=user_agent,
    )

    db.add(audit_entry)
    db.flush()

    return audit_entry


def log_from_request(
    db: Session,
    request: Request,
    organization_id: Optional[str],
    action: str,
    actor_id: Optional[str] = None,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> AuditLog:
    """Create an audit log entry with client IP and User-Agent taken from the request.

    Example:
        log_from_request(
            db=db,
            request=request,
            organization_id=ctx.organization_id,
            action="TOKEN_DELETED",
            actor_id=ctx.user_id,
            entity_type="token",
            entity_id=token.id,
        )
    """
    ip_address = request.client.host if request.client else None
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # First hop is the original client
        ip_address = forwarded_for.split(",")[0].strip()

    return log_audit_event(
        db=db,
        organization_id=organization_id,
        action=action,
        actor_id=actor_id,
        entity_type=entity_type,
        entity_id=entity_id,
        metadata=metadata,
        ip_address=ip_address,
        user_agent=request.headers.get("User-Agent"),
    )
