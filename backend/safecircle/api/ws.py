"""WebSocket endpoint with JWT auth."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from sqlalchemy.orm import Session

from safecircle.core.security import user_id_from_token
from safecircle.core.ws_manager import format_event, ws_manager
from safecircle.db.session import get_db
from safecircle.models.user import User
from safecircle.services.alert_service import list_incoming_alerts, to_response

logger = logging.getLogger(__name__)

router = APIRouter()


def _authenticate_ws(db: Session, token: str) -> int | None:
    """Validate JWT and return user_id, or None."""
    user_id = user_id_from_token(token)
    if user_id is None:
        return None
    user = db.get(User, user_id)
    if not user or not user.is_active:
        return None
    return user.id


@router.websocket("/ws")
async def websocket_endpoint(websocket: WebSocket, db: Session = Depends(get_db)):
    """
    WebSocket endpoint. Client connects with ?token=<jwt>.
    On connect the server sends one alert.active event per active alert that
    names this user, then pushes alert.created and alert.resolved.
    """
    token = websocket.query_params.get("token")
    if not token:
        await websocket.close(code=4001, reason="Missing token")
        return

    user_id = _authenticate_ws(db, token)
    if user_id is None:
        await websocket.close(code=4003, reason="Invalid or expired token")
        return

    await ws_manager.connect(websocket, user_id)
    try:
        for alert in list_incoming_alerts(db, user_id):
            await websocket.send_text(format_event("alert.active", to_response(alert).model_dump(mode="json")))
        db.close()
        while True:
            # Keep connection alive; client can send pings
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text('{"event":"pong"}')
    except WebSocketDisconnect:
        pass
    finally:
        ws_manager.disconnect(websocket, user_id)
