"""Pydantic schemas for authentication endpoints"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from datetime import datetime
from typing import Optional

from .password import validate_password_strength


class LoginRequest(BaseModel):
    """Request schema for user login.

    Emails are unique across the platform, so no organization selector is needed.
    """
    email: EmailStr
    password: str = Field(..., min_length=1)


class SignupRequest(BaseModel):
    """Request schema for self-service signup.

    Creates a new organization and its first ADMIN user in one step.
    """
    organization_name: str = Field(..., min_length=1, max_length=200)
    name: str = Field(..., min_length=1, max_length=200)
    email: EmailStr
    password: str = Field(..., min_length=8)

    @field_validator('password')
    @classmethod
    def validate_strength(cls, v: str) -> str:
        is_valid, message = validate_password_strength(v)
        if not is_valid:
            raise ValueError(message)
        return v

    @field_validator('organization_name', 'name')
    @classmethod
    def strip_not_empty(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Value cannot be empty or whitespace")
        return v.strip()


class LoginResponse(BaseModel):
    """Response schema for successful login or signup."""
    access_token: str
    token_type: str = "bearer"
    expires_in: int = 3600


class UserResponse(BaseModel):
    """User information response (excludes password_hash)."""
    id: str
    organization_id: Optional[str]
    email: str
    name: str
    role: str
    status: str
    last_login_at: Optional[datetime]
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MeResponse(BaseModel):
    """Response schema for GET /auth/me endpoint."""
    user: UserResponse
