"""Emergency alert schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

from safecircle.core.policies import LOCATION_LABEL_MAX_LENGTH


class AlertCreate(BaseModel):
    location: str | None = Field(default=None, max_length=LOCATION_LABEL_MAX_LENGTH)
    latitude: float | None = Field(default=None, ge=-90, le=90)
    longitude: float | None = Field(default=None, ge=-180, le=180)


class AlertFriend(BaseModel):
    """A friend as captured in the alert snapshot."""

    id: int
    name: str
    username: str | None


class AlertResponse(BaseModel):
    id: int
    user_id: int
    user_name: str
    user_username: str | None
    type: str
    status: str
    location: str | None
    latitude: float | None
    longitude: float | None
    created_at: datetime
    resolved_at: datetime | None
    resolved_by: int | None
    friends: list[AlertFriend] = []
