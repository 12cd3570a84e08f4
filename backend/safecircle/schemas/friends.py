"""Friend request and friendship schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class FriendRequestCreate(BaseModel):
    to_user_id: int


class FriendRequestResponse(BaseModel):
    id: int
    from_user_id: int
    to_user_id: int
    from_name: str
    from_username: str | None
    to_name: str
    to_username: str | None
    status: str
    created_at: datetime
    updated_at: datetime | None

    model_config = {"from_attributes": True}


class FriendResponse(BaseModel):
    id: int
    user_id: int
    friend_id: int
    friend_name: str
    friend_username: str | None
    status: str
    created_at: datetime

    model_config = {"from_attributes": True}
