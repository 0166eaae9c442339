"""Admin router for platform-wide settings (SUPER_ADMIN only).

Endpoints:
- GET /admin/settings  - Current settings, credentials masked
- PUT /admin/settings  - Update the supplied fields

Stored credentials are never returned: each one reads as "***hidden***" when
set and null otherwise.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from database import get_db
from auth.dependencies import require_super_admin
from audit.service import log_from_request
from models.user import User
from .schemas import SystemSettingsRead, SystemSettingsResponse, SystemSettingsUpdate
from .service import get_or_create_system_settings, update_system_settings


router = APIRouter(prefix="/admin/settings", tags=["Admin: Settings"])


@router.get("", response_model=SystemSettingsResponse)
def get_system_settings(
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
) -> SystemSettingsResponse:
    row, created = get_or_create_system_settings(db)
    if created:
        db.commit()
        db.refresh(row)
    return SystemSettingsResponse(settings=SystemSettingsRead.masked(row))


@router.put("", response_model=SystemSettingsResponse)
def put_system_settings(
    data: SystemSettingsUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_super_admin),
) -> SystemSettingsResponse:
    """Update system settings.

    Example Request:
        PUT /api/v1/admin/settings
        {"basescan_api_key": "***hidden***", "etherscan_api_key": "NEWKEY"}

    Here the basescan key keeps its stored value and the etherscan key is replaced.
    """
    changes = data.changes()
    row = update_system_settings(db, changes, updated_by=admin.id)
    log_from_request(
        db=db,
        request=request,
        organization_id=None,
        action="SYSTEM_SETTINGS_UPDATED",
        actor_id=admin.id,
        entity_type="system_settings",
        entity_id=row.id,
        # Column names only: values may be credentials
        metadata={"fields": sorted(changes)},
    )
    db.commit()
    db.refresh(row)

    return SystemSettingsResponse(
        settings=SystemSettingsRead.masked(row),
        message="Settings updated successfully",
    )
