"""Feedback schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from safecircle.core.policies import FEEDBACK_MAX_LENGTH


class FeedbackCreate(BaseModel):
    message: str = Field(max_length=FEEDBACK_MAX_LENGTH)

    @field_validator("message")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Feedback message cannot be empty")
        return v


class FeedbackResponse(BaseModel):
    id: int
    user_id: int
    message: str
    created_at: datetime

    model_config = {"from_attributes": True}


class FeedbackWithAuthor(FeedbackResponse):
    user_email: str | None = None
