"""Token SQLAlchemy models: tracked ERC20 contracts and their settings"""

from sqlalchemy import (
    Column, String, Text, Integer, Boolean, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint, func
)
from sqlalchemy.orm import relationship, validates
import re

from .base import Base, PortableJSONB, new_id


SUPPORTED_NETWORKS = ("base", "base-sepolia", "base-testnet")

ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")


class Token(Base):
    """An ERC20 contract tracked by one organization.

    Addresses are stored lower-cased so the same contract cannot be added twice
    to one organization on the same network with different checksums.
    """
    __tablename__ = "token"

    id = Column(String(36), primary_key=True, default=new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    address = Column(Text, nullable=False)
    symbol = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    decimals = Column(Integer, nullable=False, default=18)
    network = Column(Text, nullable=False, default="base")
    is_active = Column(Boolean, nullable=False, default=True)
    is_verified = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    organization = relationship("Organization", back_populates="tokens")
    settings = relationship(
        "TokenSettings",
        back_populates="token",
        uselist=False,
        cascade="all, delete-orphan"
    )

    __table_args__ = (
        UniqueConstraint("organization_id", "network", "address", name="uq_token_org_network_address"),
        CheckConstraint(
            "network IN ('base', 'base-sepolia', 'base-testnet')",
            name="ck_token_network"
        ),
    )

    @validates('address')
    def validate_address(self, key, value):
        """Require a 20-byte hex address and normalize it to lower case"""
        if not value or not ADDRESS_PATTERN.match(value):
            raise ValueError("Invalid contract address")
        return value.lower()

    def __repr__(self):
        return f"<Token(id={self.id}, symbol='{self.symbol}', network='{self.network}')>"


class TokenSettings(Base):
    """Mutable per-token configuration.

    Keyed uniquely by token_id. Created on first write, updated thereafter.
    Custom API keys take precedence over system-wide defaults when the
    explorer keys for a token are resolved.
    """
    __tablename__ = "token_settings"

    id = Column(String(36), primary_key=True, default=new_id)
    token_id = Column(
        String(36),
        ForeignKey("token.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )

    # Analytics thresholds
    whale_threshold = Column(Text, nullable=False, default="10000")
    cache_duration_minutes = Column(Integer, nullable=False, default=5)
    max_transfers_to_fetch = Column(Integer, nullable=False, default=10000)
    custom_exchange_addresses = Column(PortableJSONB, nullable=True)

    # Explorer / RPC credentials
    custom_basescan_api_key = Column(Text, nullable=True)
    custom_etherscan_api_key = Column(Text, nullable=True)
    custom_routescan_api_key = Column(Text, nullable=True)
    custom_moralis_api_key = Column(Text, nullable=True)
    custom_quiknode_url = Column(Text, nullable=True)

    # Supply source
    supply_method = Column(Text, nullable=False, default="API")
    supply_api_total_url = Column(Text, nullable=True)
    supply_api_circulating_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    token = relationship("Token", back_populates="settings")

    __table_args__ = (
        CheckConstraint("supply_method IN ('API', 'ONCHAIN')", name="ck_token_settings_supply_method"),
    )
