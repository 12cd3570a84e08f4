"""Admin console schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, field_validator

from safecircle.schemas.user import validate_address, validate_name, validate_phone


class AdminUserResponse(BaseModel):
    id: int
    email: str
    name: str
    username: str | None
    phone: str | None
    address: str | None
    role: str
    is_active: bool
    is_profile_complete: bool
    created_at: datetime
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class AdminUserUpdate(BaseModel):
    name: str | None = None
    phone: str | None = None
    address: str | None = None

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        return validate_name(v) if v is not None else v

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str | None) -> str | None:
        return validate_phone(v) if v is not None else v

    @field_validator("address")
    @classmethod
    def check_address(cls, v: str | None) -> str | None:
        return validate_address(v) if v is not None else v


class AdminStats(BaseModel):
    users: int
    feedback: int
    active_alerts: int
