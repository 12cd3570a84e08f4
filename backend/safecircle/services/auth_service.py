"""Auth service."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from safecircle.core.config import settings
from safecircle.core.errors import Conflict, EmailTaken, UsernameTaken
from safecircle.core.security import hash_password, verify_password
from safecircle.models.user import User
from safecircle.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get user by email."""
    return db.execute(select(User).where(User.email == email)).scalar_one_or_none()


def get_user_by_username(db: Session, username: str) -> User | None:
    return db.execute(select(User).where(User.username == username)).scalar_one_or_none()


def _role_for_email(email: str) -> str:
    admins = {e.strip().lower() for e in settings.admin_emails}
    return "admin" if email.lower() in admins else "user"


def create_user(db: Session, data: RegisterRequest) -> User:
    """Create a new user. The display name defaults to the email local part."""
    if get_user_by_email(db, data.email):
        raise EmailTaken("Email already registered")
    if get_user_by_username(db, data.username):
        raise UsernameTaken("This username is already taken")

    user = User(
        email=data.email,
        hashed_password=hash_password(data.password),
        name=data.name or data.email.split("@")[0],
        username=data.username,
        role=_role_for_email(data.email),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Email or username already registered")
    db.refresh(user)
    logger.info("User registered: id=%s role=%s", user.id, user.role)
    return user


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Authenticate user by email and password."""
    user = get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        return None
    if not user.is_active:
        logger.info("Login refused for suspended user id=%s", user.id)
        return None
    return user
