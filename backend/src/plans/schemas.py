"""Pydantic schemas for the admin plan endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
import re

NULLABLE_PLAN_FIELDS = frozenset({"description"})


class PlanBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., min_length=2, max_length=100)
    description: Optional[str] = None
    price: Decimal = Field(default=Decimal("0"), ge=0)
    currency: str = Field(default="USD", min_length=3, max_length=3)
    tokens_limit: int = Field(..., ge=-1)
    api_calls_limit: int = Field(..., ge=-1)
    transfers_limit: int = Field(..., ge=-1)
    members_limit: int = Field(..., ge=-1)
    features: List[str] = Field(default_factory=list)
    is_active: bool = True
    is_public: bool = True

    @field_validator('slug')
    @classmethod
    def validate_slug_pattern(cls, v: str) -> str:
        if not re.match(r'^[a-z0-9-]+$', v):
            raise ValueError("Slug must contain only lowercase letters, numbers, and hyphens")
        return v


class PlanCreate(PlanBase):
    """Request schema for POST /admin/plans.

    New plans are appended to the end of the list; positions only change
    through /admin/plans/reorder.
    """
    model_config = ConfigDict(extra="forbid")


class PlanUpdate(BaseModel):
    """Request schema for PUT /admin/plans/{id}; only supplied fields change.

    An explicit null clears description and is rejected for every other field.
    """
    model_config = ConfigDict(extra="forbid")

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    slug: Optional[str] = Field(None, min_length=2, max_length=100)
    description: Optional[str] = None
    price: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    tokens_limit: Optional[int] = Field(None, ge=-1)
    api_calls_limit: Optional[int] = Field(None, ge=-1)
    transfers_limit: Optional[int] = Field(None, ge=-1)
    members_limit: Optional[int] = Field(None, ge=-1)
    features: Optional[List[str]] = None
    is_active: Optional[bool] = None
    is_public: Optional[bool] = None

    @field_validator('slug')
    @classmethod
    def validate_slug_pattern(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not re.match(r'^[a-z0-9-]+$', v):
            raise ValueError("Slug must contain only lowercase letters, numbers, and hyphens")
        return v

    @model_validator(mode="after")
    def reject_null_required(self) -> "PlanUpdate":
        for field in sorted(self.model_fields_set - NULLABLE_PLAN_FIELDS):
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self


class PlanRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    slug: str
    description: Optional[str] = None
    price: Decimal
    currency: str
    tokens_limit: int
    api_calls_limit: int
    transfers_limit: int
    members_limit: int
    features: List[str]
    is_active: bool
    is_public: bool
    sort_order: int
    subscriptions_count: int = 0
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_serializer('price')
    def serialize_price(self, price: Decimal) -> float:
        return float(price)


class PlanListResponse(BaseModel):
    plans: List[PlanRead]


class PlanResponse(BaseModel):
    success: bool = True
    plan: PlanRead
    message: Optional[str] = None
