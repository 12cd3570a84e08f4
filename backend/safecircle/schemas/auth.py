"""Auth schemas."""

from datetime import datetime

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from safecircle.schemas.user import normalize_username, validate_name


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6)
    confirm_password: str | None = None
    username: str
    name: str | None = None

    @field_validator("username")
    @classmethod
    def check_username(cls, v: str) -> str:
        return normalize_username(v)

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str | None) -> str | None:
        return validate_name(v) if v is not None else v

    @model_validator(mode="after")
    def passwords_match(self) -> "RegisterRequest":
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("Passwords do not match")
        return self


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user_id: int


class UserMe(BaseModel):
    id: int
    email: str
    name: str
    username: str | None
    role: str
    is_active: bool
    is_profile_complete: bool
    created_at: datetime

    model_config = {"from_attributes": True}
