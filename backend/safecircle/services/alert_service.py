"""Emergency alerts: broadcast to a snapshot of the sender's friends, resolve."""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from safecircle.core.config import settings
from safecircle.core.errors import AlertAlreadyActive, Forbidden, NoFriends, NotFound
from safecircle.core.policies import MIN_FRIENDS_FOR_ALERT
from safecircle.models.alert import ACTIVE, RESOLVED, AlertRecipient, EmergencyAlert
from safecircle.models.user import User
from safecircle.schemas.alert import AlertFriend, AlertResponse
from safecircle.services.friend_service import list_friends

logger = logging.getLogger(__name__)


def get_active_alert(db: Session, user_id: int) -> EmergencyAlert | None:
    """The user's own active alert, if any."""
    return db.execute(
        select(EmergencyAlert).where(EmergencyAlert.user_id == user_id, EmergencyAlert.status == ACTIVE)
    ).scalar_one_or_none()


def send_alert(
    db: Session,
    user: User,
    location: str | None = None,
    latitude: float | None = None,
    longitude: float | None = None,
) -> EmergencyAlert:
    """Create an active alert addressed to the user's current friends."""
    friends = list_friends(db, user.id)
    if len(friends) < MIN_FRIENDS_FOR_ALERT:
        raise NoFriends("Add at least one friend before sending an SOS alert")
    if get_active_alert(db, user.id):
        raise AlertAlreadyActive("You already have an active SOS alert")

    alert = EmergencyAlert(
        user_id=user.id,
        user_name=user.display_name,
        user_username=user.username,
        type="sos",
        status=ACTIVE,
        location=location,
        latitude=latitude,
        longitude=longitude,
    )
    alert.recipients = [
        AlertRecipient(
            friend_id=f.friend_id,
            friend_name=f.friend_name,
            friend_username=f.friend_username,
        )
        for f in friends
    ]
    db.add(alert)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise AlertAlreadyActive("You already have an active SOS alert")
    db.refresh(alert)
    logger.info("SOS alert %s sent by user=%s to %s friends", alert.id, user.id, len(alert.recipients))
    return alert


def _can_see(alert: EmergencyAlert, user_id: int) -> bool:
    return alert.user_id == user_id or user_id in alert.friend_ids


def get_alert(db: Session, alert_id: int, user_id: int) -> EmergencyAlert:
    """Get an alert visible to the user (its owner or a snapshot member)."""
    alert = db.get(EmergencyAlert, alert_id)
    if not alert or not _can_see(alert, user_id):
        raise NotFound("Alert not found")
    return alert


def resolve_alert(db: Session, alert_id: int, resolver: User) -> tuple[EmergencyAlert, bool]:
    """Mark an alert resolved. Returns ``(alert, changed)``.

    Only one of several overlapping resolves reports ``changed=True``. The
    others, and resolving an already resolved alert, are no-ops that keep the
    first resolver.
    """
    alert = db.get(EmergencyAlert, alert_id)
    if not alert:
        raise NotFound("Alert not found")
    if settings.restrict_alert_resolution and not _can_see(alert, resolver.id):
        raise Forbidden("Only the sender or their friends can resolve this alert")
    if alert.status == RESOLVED:
        return alert, False

    result = db.execute(
        update(EmergencyAlert)
        .where(EmergencyAlert.id == alert_id, EmergencyAlert.status == ACTIVE)
        .values(status=RESOLVED, resolved_at=datetime.now(timezone.utc), resolved_by=resolver.id)
        .execution_options(synchronize_session=False)
    )
    db.commit()
    db.refresh(alert)
    changed = result.rowcount == 1
    if not changed:
        return alert, False
    if not _can_see(alert, resolver.id):
        logger.warning("Alert %s resolved by user=%s outside its snapshot", alert.id, resolver.id)
    logger.info("SOS alert %s resolved by user=%s", alert.id, resolver.id)
    return alert, True


def list_my_alerts(db: Session, user_id: int, limit: int = 20) -> list[EmergencyAlert]:
    """Alerts sent by the user, newest first."""
    result = db.execute(
        select(EmergencyAlert)
        .where(EmergencyAlert.user_id == user_id)
        .order_by(EmergencyAlert.created_at.desc(), EmergencyAlert.id.desc())
        .limit(limit)
    )
    return list(result.scalars().all())


def list_incoming_alerts(db: Session, user_id: int, active_only: bool = True) -> list[EmergencyAlert]:
    """Alerts whose friend snapshot includes the user, newest first."""
    stmt = (
        select(EmergencyAlert)
        .join(AlertRecipient, AlertRecipient.alert_id == EmergencyAlert.id)
        .where(AlertRecipient.friend_id == user_id)
        .order_by(EmergencyAlert.created_at.desc(), EmergencyAlert.id.desc())
    )
    if active_only:
        stmt = stmt.where(EmergencyAlert.status == ACTIVE)
    return list(db.execute(stmt).scalars().unique().all())


def to_response(alert: EmergencyAlert) -> AlertResponse:
    return AlertResponse(
        id=alert.id,
        user_id=alert.user_id,
        user_name=alert.user_name,
        user_username=alert.user_username,
        type=alert.type,
        status=alert.status,
        location=alert.location,
        latitude=alert.latitude,
        longitude=alert.longitude,
        created_at=alert.created_at,
        resolved_at=alert.resolved_at,
        resolved_by=alert.resolved_by,
        friends=[
            AlertFriend(id=r.friend_id, name=r.friend_name, username=r.friend_username)
            for r in alert.recipients
        ],
    )
