"""Profile and feedback service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from safecircle.core.errors import UsernameTaken
from safecircle.models.feedback import Feedback
from safecircle.models.user import User
from safecircle.services.auth_service import get_user_by_username

logger = logging.getLogger(__name__)


def update_details(db: Session, user: User, name: str, phone: str, address: str) -> User:
    """Save profile details and mark the profile complete.

    Names already copied into requests, friendships and alerts stay as they were.
    """
    user.name = name
    user.phone = phone
    user.address = address
    user.is_profile_complete = True
    user.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    logger.info("Profile updated: user=%s", user.id)
    return user


def update_username(db: Session, user: User, username: str) -> User:
    existing = get_user_by_username(db, username)
    if existing and existing.id != user.id:
        raise UsernameTaken("This username is already taken")
    user.username = username
    user.updated_at = datetime.now(timezone.utc)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise UsernameTaken("This username is already taken")
    db.refresh(user)
    logger.info("Username changed: user=%s", user.id)
    return user


def submit_feedback(db: Session, user: User, message: str) -> Feedback:
    feedback = Feedback(user_id=user.id, message=message)
    db.add(feedback)
    db.commit()
    db.refresh(feedback)
    logger.info("Feedback %s submitted by user=%s", feedback.id, user.id)
    return feedback
