"""Client-side alert listener.

Turns the stream of alert events (WebSocket messages, or a polled list of
active incoming alerts) into ring / stop notifications. An alert rings once,
when it is first seen active, and stops when its resolution is seen. Repeated
deliveries of the same event are ignored.
"""

from __future__ import annotations

import json
import logging
from typing import Callable

from safecircle.client.api_client import SafeCircleClient
from safecircle.client.session import Session

logger = logging.getLogger(__name__)

AlertCallback = Callable[[dict], None]


class AlertListener:
    def __init__(self, on_ring: AlertCallback | None = None, on_stop: AlertCallback | None = None) -> None:
        self._on_ring = on_ring
        self._on_stop = on_stop
        self._ringing: dict[int, dict] = {}
        self._resolved: set[int] = set()

    @property
    def ringing(self) -> list[int]:
        """Ids of alerts currently ringing."""
        return list(self._ringing)

    def handle_message(self, text: str) -> None:
        """Handle one raw WebSocket message."""
        try:
            message = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Ignoring malformed alert message: %r", text)
            return
        self.handle_event(message)

    def handle_event(self, message: dict) -> None:
        event = message.get("event")
        if event in ("alert.created", "alert.active", "alert.resolved"):
            self._observe(message.get("data") or {})

    def sync(self, active_alerts: list[dict]) -> None:
        """Reconcile with the current list of active incoming alerts.

        Anything ringing that is no longer in the list has been resolved.
        """
        for alert in active_alerts:
            self._observe(alert)
        current = {a["id"] for a in active_alerts}
        for alert_id in [i for i in self._ringing if i not in current]:
            self._stop(alert_id)

    def poll(self, client: SafeCircleClient, session: Session) -> None:
        self.sync(client.incoming_alerts(session))

    def stop_all(self) -> None:
        for alert_id in list(self._ringing):
            self._stop(alert_id)

    def _observe(self, alert: dict) -> None:
        alert_id = alert.get("id")
        if alert_id is None:
            return
        if alert.get("status") == "resolved":
            self._stop(alert_id)
            return
        if alert_id in self._ringing or alert_id in self._resolved:
            return
        self._ringing[alert_id] = alert
        logger.info("Alert %s ringing", alert_id)
        if self._on_ring:
            self._on_ring(alert)

    def _stop(self, alert_id: int) -> None:
        self._resolved.add(alert_id)
        alert = self._ringing.pop(alert_id, None)
        if alert is None:
            return
        logger.info("Alert %s stopped", alert_id)
        if self._on_stop:
            self._on_stop(alert)
