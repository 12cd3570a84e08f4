"""SQLAlchemy models."""

from __future__ import annotations

from safecircle.models.alert import AlertRecipient, EmergencyAlert
from safecircle.models.feedback import Feedback
from safecircle.models.friend_request import FriendRequest
from safecircle.models.friendship import Friendship
from safecircle.models.user import User

__all__ = [
    "User",
    "AlertRecipient",
    "EmergencyAlert",
    "Feedback",
    "FriendRequest",
    "Friendship",
]
