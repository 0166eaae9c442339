"""SystemSettings model - platform-wide defaults (single row, id='system')"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, func

from .base import Base


SYSTEM_SETTINGS_ID = "system"
DEFAULT_APP_NAME = "TokenLens"


class SystemSettings(Base):
    """Platform defaults managed by SUPER_ADMIN.

    Used as the second tier when resolving explorer API keys for a token:
    TokenSettings first, then this row, then environment configuration.
    """
    __tablename__ = "system_settings"

    id = Column(String(36), primary_key=True, default=SYSTEM_SETTINGS_ID)
    app_name = Column(Text, nullable=False, default=DEFAULT_APP_NAME)
    app_url = Column(Text, nullable=True)
    support_email = Column(Text, nullable=True)
    default_basescan_api_key = Column(Text, nullable=True)
    default_etherscan_api_key = Column(Text, nullable=True)
    default_routescan_api_key = Column(Text, nullable=True)
    default_moralis_api_key = Column(Text, nullable=True)
    default_quiknode_url = Column(Text, nullable=True)
    updated_by = Column(String(36), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )
