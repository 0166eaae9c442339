"""Pydantic schemas for the admin system settings endpoints."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

# Returned in place of every stored credential. Sending it back keeps the stored value.
HIDDEN = "***hidden***"

# Request field -> SystemSettings column
CREDENTIAL_COLUMNS = {
    "basescan_api_key": "default_basescan_api_key",
    "etherscan_api_key": "default_etherscan_api_key",
    "routescan_api_key": "default_routescan_api_key",
    "moralis_api_key": "default_moralis_api_key",
    "quicknode_url": "default_quiknode_url",
}


class SystemSettingsUpdate(BaseModel):
    """Request schema for PUT /admin/settings.

    Only fields present in the body are written. An empty string or null
    clears a credential; the HIDDEN placeholder leaves it unchanged.
    """
    model_config = ConfigDict(extra="forbid")

    app_name: Optional[str] = Field(None, min_length=1, max_length=100)
    app_url: Optional[str] = Field(None, max_length=500)
    support_email: Optional[EmailStr] = None

    basescan_api_key: Optional[str] = Field(None, max_length=200)
    etherscan_api_key: Optional[str] = Field(None, max_length=200)
    routescan_api_key: Optional[str] = Field(None, max_length=200)
    moralis_api_key: Optional[str] = Field(None, max_length=500)
    quicknode_url: Optional[str] = Field(None, max_length=500)

    @field_validator("support_email", mode="before")
    @classmethod
    def blank_email_clears(cls, v):
        return None if v == "" else v

    @field_validator("app_url", "quicknode_url")
    @classmethod
    def validate_urls(cls, v: Optional[str]) -> Optional[str]:
        if v in (None, "", HIDDEN):
            return v
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @model_validator(mode="after")
    def reject_null_app_name(self) -> "SystemSettingsUpdate":
        if "app_name" in self.model_fields_set and self.app_name is None:
            raise ValueError("app_name cannot be null")
        return self

    def changes(self) -> dict:
        """Column name -> value for the fields to write."""
        changes = {}
        for field, value in self.model_dump(exclude_unset=True).items():
            if field in CREDENTIAL_COLUMNS:
                if value == HIDDEN:
                    continue
                changes[CREDENTIAL_COLUMNS[field]] = value or None
            elif field == "app_name":
                changes[field] = value
            else:
                changes[field] = value or None
        return changes


class SystemSettingsRead(BaseModel):
    """System settings with every stored credential replaced by HIDDEN."""
    app_name: str
    app_url: Optional[str] = None
    support_email: Optional[str] = None
    basescan_api_key: Optional[str] = None
    etherscan_api_key: Optional[str] = None
    routescan_api_key: Optional[str] = None
    moralis_api_key: Optional[str] = None
    quicknode_url: Optional[str] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def masked(cls, row) -> "SystemSettingsRead":
        credentials = {
            field: HIDDEN if getattr(row, column) else None
            for field, column in CREDENTIAL_COLUMNS.items()
        }
        return cls(
            app_name=row.app_name,
            app_url=row.app_url,
            support_email=row.support_email,
            updated_at=row.updated_at,
            **credentials,
        )


class SystemSettingsResponse(BaseModel):
    success: bool = True
    settings: SystemSettingsRead
    message: Optional[str] = None
