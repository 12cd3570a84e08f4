"""User and profile schemas."""

from __future__ import annotations

import re
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from safecircle.core.policies import (
    ADDRESS_MAX_LENGTH,
    ADDRESS_MIN_LENGTH,
    NAME_MAX_LENGTH,
    PHONE_MAX_DIGITS,
    PHONE_MIN_DIGITS,
    PHONE_PATTERN,
    USERNAME_MAX_LENGTH,
    USERNAME_PATTERN,
)


def normalize_username(value: str) -> str:
    """Trim and lower-case a username, rejecting empty or malformed ones."""
    value = value.strip().lower()
    if not value:
        raise ValueError("Username cannot be empty")
    if len(value) > USERNAME_MAX_LENGTH:
        raise ValueError(f"Username must be at most {USERNAME_MAX_LENGTH} characters")
    if not re.match(USERNAME_PATTERN, value):
        raise ValueError("Username may only contain letters, digits, '.' and '_'")
    return value


def validate_name(value: str) -> str:
    value = value.strip()
    if not value:
        raise ValueError("Name cannot be empty")
    if len(value) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must be at most {NAME_MAX_LENGTH} characters")
    return value


def validate_phone(value: str) -> str:
    value = value.strip()
    if not re.match(PHONE_PATTERN, value):
        raise ValueError("Phone number may only contain digits, spaces, dashes, parentheses and a leading +")
    digits = sum(ch.isdigit() for ch in value)
    if not PHONE_MIN_DIGITS <= digits <= PHONE_MAX_DIGITS:
        raise ValueError(f"Phone number must have {PHONE_MIN_DIGITS} to {PHONE_MAX_DIGITS} digits")
    return value


def validate_address(value: str) -> str:
    value = value.strip()
    if len(value) < ADDRESS_MIN_LENGTH:
        raise ValueError(f"Address must be at least {ADDRESS_MIN_LENGTH} characters")
    if len(value) > ADDRESS_MAX_LENGTH:
        raise ValueError(f"Address must be at most {ADDRESS_MAX_LENGTH} characters")
    return value


class UserCard(BaseModel):
    """Public view of another user."""

    id: int
    name: str
    username: str | None

    model_config = {"from_attributes": True}


class UserSearchResult(UserCard):
    match_type: str  # username | name


class ProfileResponse(BaseModel):
    id: int
    email: str
    name: str
    username: str | None
    phone: str | None
    address: str | None
    role: str
    is_profile_complete: bool
    created_at: datetime
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    name: str = Field(max_length=NAME_MAX_LENGTH)
    phone: str
    address: str

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        return validate_name(v)

    @field_validator("phone")
    @classmethod
    def check_phone(cls, v: str) -> str:
        return validate_phone(v)

    @field_validator("address")
    @classmethod
    def check_address(cls, v: str) -> str:
        return validate_address(v)


class UsernameUpdate(BaseModel):
    username: str

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return normalize_username(v)
