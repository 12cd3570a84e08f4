"""Admin console service."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import delete, func, or_, select
from sqlalchemy.orm import Session

from safecircle.core.errors import Forbidden, NotFound
from safecircle.models.alert import ACTIVE, AlertRecipient, EmergencyAlert
from safecircle.models.feedback import Feedback
from safecircle.models.friend_request import FriendRequest
from safecircle.models.friendship import Friendship
from safecircle.models.user import User

logger = logging.getLogger(__name__)


def get_stats(db: Session) -> dict:
    return {
        "users": db.scalar(select(func.count(User.id))) or 0,
        "feedback": db.scalar(select(func.count(Feedback.id))) or 0,
        "active_alerts": db.scalar(
            select(func.count(EmergencyAlert.id)).where(EmergencyAlert.status == ACTIVE)
        ) or 0,
    }


def list_users(db: Session, q: str | None = None) -> list[User]:
    """All users, optionally filtered by a case-insensitive substring."""
    stmt = select(User).order_by(User.created_at.desc(), User.id.desc())
    if q and q.strip():
        pattern = f"%{q.strip().lower()}%"
        stmt = stmt.where(
            or_(
                func.lower(User.name).like(pattern),
                func.lower(User.email).like(pattern),
                func.lower(User.username).like(pattern),
            )
        )
    return list(db.execute(stmt).scalars().all())


def _get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if not user:
        raise NotFound("User not found")
    return user


def update_user(
    db: Session,
    user_id: int,
    name: str | None = None,
    phone: str | None = None,
    address: str | None = None,
) -> User:
    user = _get_user(db, user_id)
    if name is not None:
        user.name = name
    if phone is not None:
        user.phone = phone
    if address is not None:
        user.address = address
    user.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    logger.info("Admin edited user=%s", user.id)
    return user


def toggle_role(db: Session, admin: User, user_id: int) -> User:
    if user_id == admin.id:
        raise Forbidden("Cannot change your own role")
    user = _get_user(db, user_id)
    user.role = "user" if user.role == "admin" else "admin"
    user.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    logger.info("Admin %s set role of user=%s to %s", admin.id, user.id, user.role)
    return user


def set_active(db: Session, admin: User, user_id: int, active: bool) -> User:
    if user_id == admin.id:
        raise Forbidden("Cannot suspend or activate yourself")
    user = _get_user(db, user_id)
    user.is_active = active
    user.updated_at = datetime.now(timezone.utc)
    db.commit()
    db.refresh(user)
    logger.info("Admin %s %s user=%s", admin.id, "activated" if active else "suspended", user.id)
    return user


def delete_user(db: Session, admin: User, user_id: int) -> None:
    """Hard-delete a user and everything that points at them, in one transaction."""
    if user_id == admin.id:
        raise Forbidden("Cannot delete yourself")
    user = _get_user(db, user_id)

    owned_alerts = select(EmergencyAlert.id).where(EmergencyAlert.user_id == user_id)
    db.execute(delete(AlertRecipient).where(AlertRecipient.alert_id.in_(owned_alerts)))
    db.execute(delete(AlertRecipient).where(AlertRecipient.friend_id == user_id))
    db.execute(delete(EmergencyAlert).where(EmergencyAlert.user_id == user_id))
    db.execute(
        delete(Friendship).where(or_(Friendship.user_id == user_id, Friendship.friend_id == user_id))
    )
    db.execute(
        delete(FriendRequest).where(
            or_(FriendRequest.from_user_id == user_id, FriendRequest.to_user_id == user_id)
        )
    )
    db.execute(delete(Feedback).where(Feedback.user_id == user_id))
    db.delete(user)
    db.commit()
    logger.info("Admin %s deleted user=%s", admin.id, user_id)


def list_feedback(db: Session) -> list[dict]:
    """Feedback newest first, with the author's email."""
    rows = db.execute(
        select(Feedback, User.email)
        .join(User, Feedback.user_id == User.id, isouter=True)
        .order_by(Feedback.created_at.desc(), Feedback.id.desc())
    ).all()
    return [
        {
            "id": fb.id,
            "user_id": fb.user_id,
            "message": fb.message,
            "created_at": fb.created_at,
            "user_email": email,
        }
        for fb, email in rows
    ]


def delete_feedback(db: Session, feedback_id: int) -> None:
    fb = db.get(Feedback, feedback_id)
    if not fb:
        raise NotFound("Feedback not found")
    db.delete(fb)
    db.commit()
    logger.info("Feedback %s deleted", feedback_id)
