"""Pydantic schemas for organization endpoints."""

from typing import Optional

from pydantic import BaseModel


class UsageMetric(BaseModel):
    current: int
    limit: int
    percentage: float


class UsageRead(BaseModel):
    """Usage of the caller's organization against its plan. A limit of -1 is unlimited."""
    plan: str
    tokens: UsageMetric
    members: UsageMetric
    api_calls: UsageMetric
    can_add_token: bool
    can_add_member: bool
    warning: Optional[str] = None
