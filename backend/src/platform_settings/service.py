"""System settings row operations."""

from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from config import Settings, get_settings
from models.system_settings import SystemSettings, SYSTEM_SETTINGS_ID, DEFAULT_APP_NAME
from observability.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_SUPPORT_EMAIL = "support@tokenlens.com"


def get_or_create_system_settings(
    db: Session,
    settings: Optional[Settings] = None,
) -> Tuple[SystemSettings, bool]:
    """Load the singleton row, adding it with defaults when absent.

    The caller commits.

    Returns:
        (row, created)
    """
    row = db.query(SystemSettings).filter(SystemSettings.id == SYSTEM_SETTINGS_ID).first()
    if row is not None:
        return row, False

    settings = settings or get_settings()
    row = SystemSettings(
        id=SYSTEM_SETTINGS_ID,
        app_name=DEFAULT_APP_NAME,
        app_url=settings.APP_URL,
        support_email=DEFAULT_SUPPORT_EMAIL,
    )
    db.add(row)
    db.flush()
    logger.info("System settings row created with defaults")
    return row, True


def update_system_settings(
    db: Session,
    changes: Dict[str, Any],
    updated_by: str,
) -> SystemSettings:
    """Write the given columns to the singleton row, creating it first if needed.

    Columns not in changes keep their stored value. The caller commits.
    """
    row, _ = get_or_create_system_settings(db)
    for column, value in changes.items():
        setattr(row, column, value)
    row.updated_by = updated_by
    db.flush()
    return row
