"""Organization model - Root entity for multi-tenant isolation"""

from sqlalchemy import Column, String, Text, DateTime, func
from sqlalchemy.orm import validates, relationship
import re

from .base import Base, new_id


class Organization(Base):
    """
    Organization model - the tenant boundary.

    Every tenant-scoped row (tokens, members, subscription) references
    organization.id. Authorization checks compare against this id.
    """
    __tablename__ = "organization"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    users = relationship("User", back_populates="organization")
    tokens = relationship("Token", back_populates="organization", cascade="all, delete-orphan")
    subscription = relationship("Subscription", back_populates="organization", uselist=False)

    @validates('slug')
    def validate_slug(self, key, value):
        """
        Ensure slug is URL-friendly.

        Pattern: ^[a-z0-9-]+$
        Valid: acme-labs, dao-123
        Invalid: Acme_Labs, acme labs, acme.labs

        Raises:
            ValueError: If slug doesn't match pattern or length requirements
        """
        if not re.match(r'^[a-z0-9-]+$', value):
            raise ValueError(
                "Slug must contain only lowercase letters, numbers, and hyphens"
            )
        if len(value) < 2 or len(value) > 100:
            raise ValueError("Slug must be between 2 and 100 characters")
        return value

    @validates('name')
    def validate_name(self, key, value):
        """
        Ensure organization name is not empty and within length limits.

        Raises:
            ValueError: If name is empty/whitespace or exceeds 200 characters
        """
        if not value or len(value.strip()) == 0:
            raise ValueError("Organization name cannot be empty")
        if len(value) > 200:
            raise ValueError("Organization name cannot exceed 200 characters")
        return value.strip()

    def __repr__(self):
        return f"<Organization(id={self.id}, slug='{self.slug}', name='{self.name}')>"
