"""SOS alerts API."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Body, Depends, Query
from sqlalchemy.orm import Session

from safecircle.core.deps import get_current_user
from safecircle.core.ws_manager import ws_manager
from safecircle.db.session import get_db
from safecircle.models.user import User
from safecircle.schemas.alert import AlertCreate, AlertResponse
from safecircle.services import alert_service

router = APIRouter(prefix="/alerts", tags=["alerts"])


@router.post("", response_model=AlertResponse, status_code=201)
def send_alert(
    background_tasks: BackgroundTasks,
    data: AlertCreate | None = Body(default=None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Send an SOS alert to every current friend."""
    d = data or AlertCreate()
    alert = alert_service.send_alert(db, current_user, d.location, d.latitude, d.longitude)
    resp = alert_service.to_response(alert)
    _broadcast_alert_created(background_tasks, resp)
    return resp


@router.get("/me", response_model=list[AlertResponse])
def list_my_alerts(
    limit: int = Query(default=20, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Alerts sent by the current user, newest first."""
    return [alert_service.to_response(a) for a in alert_service.list_my_alerts(db, current_user.id, limit)]


@router.get("/incoming", response_model=list[AlertResponse])
def list_incoming(
    include_resolved: bool = Query(default=False),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Alerts whose friend snapshot includes the current user."""
    alerts = alert_service.list_incoming_alerts(db, current_user.id, active_only=not include_resolved)
    return [alert_service.to_response(a) for a in alerts]


@router.get("/{alert_id}", response_model=AlertResponse)
def get_alert(
    alert_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Only the sender and the friends in the snapshot can view an alert."""
    return alert_service.to_response(alert_service.get_alert(db, alert_id, current_user.id))


@router.post("/{alert_id}/resolve", response_model=AlertResponse)
def resolve_alert(
    alert_id: int,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Mark an alert resolved. Resolving twice is a no-op."""
    alert, changed = alert_service.resolve_alert(db, alert_id, current_user)
    resp = alert_service.to_response(alert)
    if changed:
        _broadcast_alert_resolved(background_tasks, resp)
    return resp


# ---------- WebSocket broadcast helpers ----------


def _broadcast_alert_created(background_tasks: BackgroundTasks, alert: AlertResponse) -> None:
    """Notify every friend in the snapshot about a new alert."""
    data = alert.model_dump(mode="json")
    friend_ids = [f.id for f in alert.friends]
    background_tasks.add_task(ws_manager.send_to_users, friend_ids, "alert.created", data)


def _broadcast_alert_resolved(background_tasks: BackgroundTasks, alert: AlertResponse) -> None:
    """Notify the snapshot and the sender that the alert was resolved."""
    data = alert.model_dump(mode="json")
    all_ids = [f.id for f in alert.friends] + [alert.user_id]
    background_tasks.add_task(ws_manager.send_to_users, all_ids, "alert.resolved", data)
