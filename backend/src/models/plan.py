"""Plan and Subscription SQLAlchemy models"""

from sqlalchemy import (
    Column, String, Text, Integer, Boolean, Numeric, DateTime, ForeignKey, func
)
from sqlalchemy.orm import relationship

from .base import Base, PortableJSONB, new_id


UNLIMITED = -1


class Plan(Base):
    """A billing plan with resource limits.

    sort_order drives the display order in the pricing table and admin panel.
    A limit of -1 means unlimited.
    """
    __tablename__ = "plan"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(Text, nullable=False)
    slug = Column(Text, nullable=False, unique=True)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(Text, nullable=False, default="USD")
    tokens_limit = Column(Integer, nullable=False)
    api_calls_limit = Column(Integer, nullable=False)
    transfers_limit = Column(Integer, nullable=False)
    members_limit = Column(Integer, nullable=False)
    features = Column(PortableJSONB, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, default=True)
    is_public = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    subscriptions = relationship("Subscription", back_populates="plan")

    def __repr__(self):
        return f"<Plan(id={self.id}, slug='{self.slug}', sort_order={self.sort_order})>"


class Subscription(Base):
    """Links an organization to the plan whose limits apply to it."""
    __tablename__ = "subscription"

    id = Column(String(36), primary_key=True, default=new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organization.id", ondelete="CASCADE"),
        nullable=False,
        unique=True
    )
    plan_id = Column(String(36), ForeignKey("plan.id", ondelete="RESTRICT"), nullable=False)
    api_calls_this_month = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    organization = relationship("Organization", back_populates="subscription")
    plan = relationship("Plan", back_populates="subscriptions")
