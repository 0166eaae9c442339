#!/usr/bin/env python
"""Seed script to create the platform SUPER_ADMIN user.

The SUPER_ADMIN manages plans and system settings. It belongs to no
organization and cannot reach tenant-scoped endpoints. Run once during
initial setup; running it again promotes an existing account with the same
email instead of creating a duplicate.

Usage:
    python backend/scripts/seed_superadmin.py

Environment Variables:
    DATABASE_URL: PostgreSQL connection string
    PASSWORD_PEPPER: Password hashing pepper (required)
    SUPERADMIN_EMAIL: Email (default: superadmin@tokenlens.com)
    SUPERADMIN_PASSWORD: Password (required)
    SUPERADMIN_NAME: Display name (default: Super Admin)
"""

import os
import sys
from pathlib import Path

# Add backend/src to Python path
backend_src = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(backend_src))

from sqlalchemy.exc import SQLAlchemyError

from database import get_db_session
from models.user import User
from auth.password import hash_password, validate_password_strength
from auth.roles import UserRole


def main():
    """Create or promote the SUPER_ADMIN user."""
    email = os.getenv("SUPERADMIN_EMAIL", "superadmin@tokenlens.com").lower()
    password = os.getenv("SUPERADMIN_PASSWORD")
    name = os.getenv("SUPERADMIN_NAME", "Super Admin")

    if not password:
        print("ERROR: SUPERADMIN_PASSWORD environment variable is required")
        sys.exit(1)

    is_valid, error_msg = validate_password_strength(password)
    if not is_valid:
        print(f"ERROR: Password does not meet strength requirements: {error_msg}")
        sys.exit(1)

    try:
        with get_db_session() as session:
            existing_user = session.query(User).filter(User.email == email).first()

            if existing_user:
                print(f"User {email} already exists (ID: {existing_user.id})")
                if existing_user.role != UserRole.SUPER_ADMIN.value:
                    existing_user.role = UserRole.SUPER_ADMIN.value
                    existing_user.organization_id = None
                    print("Updated role to SUPER_ADMIN")
                return

            user = User(
                organization_id=None,
                email=email,
                name=name,
                role=UserRole.SUPER_ADMIN.value,
                password_hash=hash_password(password),
                status="ACTIVE"
            )
            session.add(user)
            session.flush()

            print("SUCCESS: SUPER_ADMIN user created")
            print(f"  ID:    {user.id}")
            print(f"  Email: {user.email}")
            print(f"  Name:  {user.name}")

    except SQLAlchemyError as e:
        print(f"ERROR: Failed to create SUPER_ADMIN user: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
