"""AuditLog SQLAlchemy model"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Index, func
from sqlalchemy.orm import relationship

from .base import Base, PortableJSONB, new_id


class AuditLog(Base):
    """AuditLog model for immutable security event logging.

    Entries are append-only and should never be updated or deleted.
    organization_id is NULL for platform-level events (SUPER_ADMIN actions,
    logins to unknown accounts).
    """
    __tablename__ = "audit_log"
    __table_args__ = (
        Index("ix_audit_log_organization_id", "organization_id"),
        Index("ix_audit_log_organization_id_created_at", "organization_id", "created_at"),
    )

    id = Column(String(36), primary_key=True, default=new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=True
    )
    actor_id = Column(String(36), ForeignKey("user.id", ondelete="SET NULL"), nullable=True)
    action = Column(Text, nullable=False)
    entity_type = Column(Text, nullable=True)
    entity_id = Column(String(36), nullable=True)
    metadata_json = Column(PortableJSONB, nullable=True)
    ip_address = Column(Text, nullable=True)
    user_agent = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    # Relationships
    organization = relationship("Organization")
    actor = relationship("User")

    def to_dict(self):
        """Convert audit log entry to dictionary representation"""
        return {
            "id": self.id,
            "organization_id": self.organization_id,
            "actor_id": self.actor_id,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "metadata": self.metadata_json,
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
            "created_at": self.created_at.isoformat() if self.created_at else None
        }
