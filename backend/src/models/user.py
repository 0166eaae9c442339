"""User SQLAlchemy model"""

from sqlalchemy import Column, String, Text, DateTime, ForeignKey, CheckConstraint, func
from sqlalchemy.orm import relationship, validates

from .base import Base, new_id


class User(Base):
    """User model representing authenticated users.

    Tenant users belong to exactly one organization. SUPER_ADMIN users operate
    the platform and have no organization; they cannot reach tenant-scoped
    endpoints. Passwords are hashed using Argon2id.
    """
    __tablename__ = "user"

    id = Column(String(36), primary_key=True, default=new_id)
    organization_id = Column(
        String(36),
        ForeignKey("organization.id", ondelete="RESTRICT"),
        nullable=True,
        index=True
    )
    email = Column(Text, nullable=False, unique=True)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False, server_default="MEMBER")
    password_hash = Column(Text, nullable=False)
    status = Column(Text, nullable=False, server_default="ACTIVE")
    last_login_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now()
    )

    # Relationships
    organization = relationship("Organization", back_populates="users")

    # Constraints
    __table_args__ = (
        CheckConstraint(
            "role IN ('SUPER_ADMIN', 'ADMIN', 'MEMBER')",
            name='ck_user_role'
        ),
        CheckConstraint(
            "status IN ('ACTIVE', 'DISABLED')",
            name='ck_user_status'
        ),
    )

    @validates('email')
    def normalize_email(self, key, value):
        # Format is checked by EmailStr at the API boundary
        return value.strip().lower()

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"
