"""Friend requests and friendships.

A request moves from ``pending`` to exactly one of ``accepted``, ``rejected``
or ``cancelled`` and never leaves that state. An accepted friendship is stored
as two directed ``Friendship`` rows; both rows are written and deleted in a
single transaction.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from safecircle.core.errors import (
    AlreadyFriends,
    Conflict,
    DuplicateRequest,
    Forbidden,
    InvalidTransition,
    NotFound,
    ServiceError,
)
from safecircle.models.friend_request import ACCEPTED, CANCELLED, PENDING, REJECTED, FriendRequest
from safecircle.models.friendship import Friendship
from safecircle.models.user import User

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def get_friendship(db: Session, user_id: int, friend_id: int) -> Friendship | None:
    """Get the directed row ``user_id -> friend_id``."""
    return db.execute(
        select(Friendship).where(Friendship.user_id == user_id, Friendship.friend_id == friend_id)
    ).scalar_one_or_none()


def are_friends(db: Session, user_a: int, user_b: int) -> bool:
    return get_friendship(db, user_a, user_b) is not None


def _find_pending_request(db: Session, from_user_id: int, to_user_id: int) -> FriendRequest | None:
    return db.execute(
        select(FriendRequest).where(
            FriendRequest.from_user_id == from_user_id,
            FriendRequest.to_user_id == to_user_id,
            FriendRequest.status == PENDING,
        )
    ).scalar_one_or_none()


def get_request(db: Session, request_id: int, user_id: int) -> FriendRequest:
    """Get a request visible to ``user_id`` (its sender or recipient)."""
    req = db.get(FriendRequest, request_id)
    if not req or user_id not in (req.from_user_id, req.to_user_id):
        raise NotFound("Friend request not found")
    return req


def send_request(db: Session, sender: User, to_user_id: int) -> FriendRequest:
    """Create a pending request from ``sender`` to ``to_user_id``.

    Names are copied now; later profile changes do not touch this request.
    """
    if to_user_id == sender.id:
        raise ServiceError("Cannot send a friend request to yourself")
    recipient = db.get(User, to_user_id)
    if not recipient:
        raise NotFound("User not found")
    if are_friends(db, sender.id, recipient.id):
        raise AlreadyFriends("You are already friends with this user")
    if _find_pending_request(db, sender.id, recipient.id):
        raise DuplicateRequest("Friend request already sent")

    req = FriendRequest(
        from_user_id=sender.id,
        to_user_id=recipient.id,
        from_name=sender.display_name,
        from_username=sender.username,
        to_name=recipient.display_name,
        to_username=recipient.username,
        status=PENDING,
    )
    db.add(req)
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with a concurrent request for the same pair
        db.rollback()
        raise DuplicateRequest("Friend request already sent")
    db.refresh(req)
    logger.info("Friend request %s sent: %s -> %s", req.id, sender.id, recipient.id)
    return req


def _require_pending(req: FriendRequest, action: str) -> None:
    if req.status != PENDING:
        raise InvalidTransition(f"Cannot {action} a request that is {req.status}")


def accept_request(db: Session, request_id: int, user: User) -> FriendRequest:
    """Recipient accepts: request becomes accepted and both friendship rows are added."""
    req = get_request(db, request_id, user.id)
    if req.to_user_id != user.id:
        raise Forbidden("Only the recipient can accept this request")
    _require_pending(req, "accept")
    sender = db.get(User, req.from_user_id)
    if not sender:
        raise NotFound("User not found")

    now = _now()
    req.status = ACCEPTED
    req.updated_at = now

    # A crossed request in the other direction is settled by this acceptance
    reverse = _find_pending_request(db, user.id, sender.id)
    if reverse:
        reverse.status = ACCEPTED
        reverse.updated_at = now

    if not get_friendship(db, user.id, sender.id):
        db.add(
            Friendship(
                user_id=user.id,
                friend_id=sender.id,
                friend_name=req.from_name,
                friend_username=req.from_username,
            )
        )
    if not get_friendship(db, sender.id, user.id):
        db.add(
            Friendship(
                user_id=sender.id,
                friend_id=user.id,
                friend_name=user.display_name,
                friend_username=user.username,
            )
        )
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Friendship changed concurrently, please retry")
    db.refresh(req)
    logger.info("Friend request %s accepted: %s <-> %s", req.id, sender.id, user.id)
    return req


def reject_request(db: Session, request_id: int, user: User) -> FriendRequest:
    req = get_request(db, request_id, user.id)
    if req.to_user_id != user.id:
        raise Forbidden("Only the recipient can reject this request")
    _require_pending(req, "reject")
    req.status = REJECTED
    req.updated_at = _now()
    db.commit()
    db.refresh(req)
    logger.info("Friend request %s rejected by %s", req.id, user.id)
    return req


def cancel_request(db: Session, request_id: int, user: User) -> FriendRequest:
    req = get_request(db, request_id, user.id)
    if req.from_user_id != user.id:
        raise Forbidden("Only the sender can cancel this request")
    _require_pending(req, "cancel")
    req.status = CANCELLED
    req.updated_at = _now()
    db.commit()
    db.refresh(req)
    logger.info("Friend request %s cancelled by %s", req.id, user.id)
    return req


def remove_friend(db: Session, user_id: int, friend_id: int) -> None:
    """Delete both directed rows of a friendship in one transaction."""
    rows = db.execute(
        select(Friendship).where(
            or_(
                (Friendship.user_id == user_id) & (Friendship.friend_id == friend_id),
                (Friendship.user_id == friend_id) & (Friendship.friend_id == user_id),
            )
        )
    ).scalars().all()
    if not rows:
        raise NotFound("Not friends with this user")
    for row in rows:
        db.delete(row)
    db.commit()
    logger.info("Friendship removed: %s <-> %s", user_id, friend_id)


def list_friends(db: Session, user_id: int) -> list[Friendship]:
    result = db.execute(
        select(Friendship)
        .where(Friendship.user_id == user_id, Friendship.status == "accepted")
        .order_by(Friendship.friend_name, Friendship.id)
    )
    return list(result.scalars().all())


def list_incoming_requests(db: Session, user_id: int) -> list[FriendRequest]:
    """Pending requests addressed to the user, newest first."""
    result = db.execute(
        select(FriendRequest)
        .where(FriendRequest.to_user_id == user_id, FriendRequest.status == PENDING)
        .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
    )
    return list(result.scalars().all())


def list_outgoing_requests(db: Session, user_id: int) -> list[FriendRequest]:
    """Pending requests the user has sent, newest first."""
    result = db.execute(
        select(FriendRequest)
        .where(FriendRequest.from_user_id == user_id, FriendRequest.status == PENDING)
        .order_by(FriendRequest.created_at.desc(), FriendRequest.id.desc())
    )
    return list(result.scalars().all())
