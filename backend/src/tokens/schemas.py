"""Pydantic schemas for token and token settings endpoints."""

import re
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.token import ADDRESS_PATTERN

Network = Literal["base", "base-sepolia", "base-testnet"]

_DECIMAL_STRING = re.compile(r"^\d+(\.\d+)?$")

# Settings columns declared NOT NULL; an explicit null for them is rejected.
NON_NULLABLE_SETTINGS = frozenset({
    "whale_threshold",
    "cache_duration_minutes",
    "max_transfers_to_fetch",
    "supply_method",
})


def _normalize_address(value: str) -> str:
    if not ADDRESS_PATTERN.match(value):
        raise ValueError("Invalid address: expected 0x followed by 40 hex characters")
    return value.lower()


def _validate_http_url(value: Optional[str]) -> Optional[str]:
    if value is None or value == "":
        return None
    if not value.startswith(("http://", "https://")):
        raise ValueError("URL must start with http:// or https://")
    return value


class TokenCreate(BaseModel):
    """Request schema for POST /tokens.

    Contract metadata is supplied by the client; it is not read from chain.
    """
    address: str = Field(..., examples=["0x833589fcd6edb6e08f4c7c32d4f71b54bda02913"])
    network: Network = "base"
    symbol: str = Field(..., min_length=1, max_length=32)
    name: str = Field(..., min_length=1, max_length=200)
    decimals: int = Field(default=18, ge=0, le=36)

    @field_validator("address")
    @classmethod
    def validate_address(cls, v: str) -> str:
        return _normalize_address(v)


class TokenSettingsUpdate(BaseModel):
    """Request schema for PUT /tokens/{id}/settings.

    Every field is optional. Only fields present in the body are written;
    each replaces the stored value as a whole (lists are not merged).
    Sending null for an optional credential clears it.
    """
    model_config = ConfigDict(extra="forbid")

    whale_threshold: Optional[str] = Field(None, max_length=78, examples=["10000"])
    cache_duration_minutes: Optional[int] = Field(None, ge=1, le=1440)
    max_transfers_to_fetch: Optional[int] = Field(None, ge=1, le=1_000_000)
    custom_exchange_addresses: Optional[List[str]] = None

    custom_basescan_api_key: Optional[str] = Field(None, max_length=200)
    custom_etherscan_api_key: Optional[str] = Field(None, max_length=200)
    custom_routescan_api_key: Optional[str] = Field(None, max_length=200)
    custom_moralis_api_key: Optional[str] = Field(None, max_length=500)
    custom_quiknode_url: Optional[str] = Field(None, max_length=500)

    supply_method: Optional[Literal["API", "ONCHAIN"]] = None
    supply_api_total_url: Optional[str] = Field(None, max_length=500)
    supply_api_circulating_url: Optional[str] = Field(None, max_length=500)

    @field_validator("whale_threshold")
    @classmethod
    def validate_threshold(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not _DECIMAL_STRING.match(v):
            raise ValueError("whale_threshold must be a non-negative decimal number")
        return v

    @field_validator("custom_exchange_addresses")
    @classmethod
    def validate_exchange_addresses(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        if v is None:
            return None
        return [_normalize_address(address) for address in v]

    @field_validator("custom_quiknode_url", "supply_api_total_url", "supply_api_circulating_url")
    @classmethod
    def validate_urls(cls, v: Optional[str]) -> Optional[str]:
        return _validate_http_url(v)

    @model_validator(mode="after")
    def reject_null_required(self) -> "TokenSettingsUpdate":
        for field in sorted(NON_NULLABLE_SETTINGS & self.model_fields_set):
            if getattr(self, field) is None:
                raise ValueError(f"{field} cannot be null")
        return self

    def changes(self) -> dict:
        """Fields explicitly present in the request body."""
        return self.model_dump(exclude_unset=True)


class TokenSettingsRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    token_id: str
    whale_threshold: str
    cache_duration_minutes: int
    max_transfers_to_fetch: int
    custom_exchange_addresses: Optional[List[str]] = None
    custom_basescan_api_key: Optional[str] = None
    custom_etherscan_api_key: Optional[str] = None
    custom_routescan_api_key: Optional[str] = None
    custom_moralis_api_key: Optional[str] = None
    custom_quiknode_url: Optional[str] = None
    supply_method: str
    supply_api_total_url: Optional[str] = None
    supply_api_circulating_url: Optional[str] = None
    updated_at: Optional[datetime] = None


class TokenRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    organization_id: str
    address: str
    symbol: str
    name: str
    decimals: int
    network: str
    is_active: bool
    is_verified: bool
    created_at: Optional[datetime] = None
    settings: Optional[TokenSettingsRead] = None


class ApiKeySourcesRead(BaseModel):
    """Where each explorer credential for a token comes from (never the value)."""
    token_id: str
    sources: dict
