"""HTTP client for the SafeCircle API."""

from __future__ import annotations

import logging
from typing import Any

import httpx

from safecircle.client.session import Session

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call. ``message`` is suitable for showing to the user."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message


def _error_message(resp: httpx.Response) -> str:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase
    detail = body.get("detail") if isinstance(body, dict) else body
    if isinstance(detail, list):
        # pydantic validation errors
        return "; ".join(str(item.get("msg", item)) for item in detail)
    return str(detail)


class SafeCircleClient:
    """Thin wrapper over the REST API.

    Pass ``http`` to reuse an existing ``httpx.Client`` (its ``base_url`` is
    used as is); otherwise one is created for ``base_url``. Calls are never
    retried: a failure raises ``ApiError`` and leaves retrying to the caller.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        http: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        self._owns_http = http is None
        self._http = http or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "SafeCircleClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(self, method: str, path: str, session: Session | None = None, **kwargs) -> Any:
        headers = session.auth_headers() if session else {}
        try:
            resp = self._http.request(method, path, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ApiError(0, "Network error, please try again") from e
        if resp.status_code >= 400:
            message = _error_message(resp)
            logger.warning("%s %s -> %s %s", method, path, resp.status_code, message)
            raise ApiError(resp.status_code, message)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    # ---------- session ----------

    def sign_up(
        self,
        email: str,
        password: str,
        username: str,
        name: str | None = None,
        confirm_password: str | None = None,
    ) -> dict:
        payload = {"email": email, "password": password, "username": username}
        if name is not None:
            payload["name"] = name
        if confirm_password is not None:
            payload["confirm_password"] = confirm_password
        return self._request("POST", "/auth/register", json=payload)

    def sign_in(self, email: str, password: str, session: Session | None = None) -> Session:
        session = session or Session()
        session.loading = True
        try:
            data = self._request("POST", "/auth/login", json={"email": email, "password": password})
        finally:
            session.loading = False
        session.user_id = data["user_id"]
        session.access_token = data["access_token"]
        session.email = email
        return session

    def sign_out(self, session: Session) -> None:
        session.clear()

    def me(self, session: Session) -> dict:
        return self._request("GET", "/auth/me", session)

    # ---------- directory ----------

    def search_users(self, session: Session, q: str, limit: int | None = None) -> list[dict]:
        params: dict[str, Any] = {"q": q}
        if limit is not None:
            params["limit"] = limit
        return self._request("GET", "/users/search", session, params=params)

    # ---------- friends ----------

    def friends(self, session: Session) -> list[dict]:
        return self._request("GET", "/friends", session)

    def remove_friend(self, session: Session, friend_id: int) -> None:
        self._request("DELETE", f"/friends/{friend_id}", session)

    def send_friend_request(self, session: Session, to_user_id: int) -> dict:
        return self._request("POST", "/friends/requests", session, json={"to_user_id": to_user_id})

    def incoming_requests(self, session: Session) -> list[dict]:
        return self._request("GET", "/friends/requests/incoming", session)

    def outgoing_requests(self, session: Session) -> list[dict]:
        return self._request("GET", "/friends/requests/outgoing", session)

    def accept_request(self, session: Session, request_id: int) -> dict:
        return self._request("POST", f"/friends/requests/{request_id}/accept", session)

    def reject_request(self, session: Session, request_id: int) -> dict:
        return self._request("POST", f"/friends/requests/{request_id}/reject", session)

    def cancel_request(self, session: Session, request_id: int) -> dict:
        return self._request("POST", f"/friends/requests/{request_id}/cancel", session)

    # ---------- alerts ----------

    def send_alert(
        self,
        session: Session,
        location: str | None = None,
        latitude: float | None = None,
        longitude: float | None = None,
    ) -> dict:
        payload = {"location": location, "latitude": latitude, "longitude": longitude}
        return self._request("POST", "/alerts", session, json=payload)

    def resolve_alert(self, session: Session, alert_id: int) -> dict:
        return self._request("POST", f"/alerts/{alert_id}/resolve", session)

    def incoming_alerts(self, session: Session) -> list[dict]:
        return self._request("GET", "/alerts/incoming", session)

    def my_alerts(self, session: Session, limit: int = 20) -> list[dict]:
        return self._request("GET", "/alerts/me", session, params={"limit": limit})

    # ---------- profile ----------

    def profile(self, session: Session) -> dict:
        return self._request("GET", "/profile/me", session)

    def update_profile(self, session: Session, name: str, phone: str, address: str) -> dict:
        payload = {"name": name, "phone": phone, "address": address}
        return self._request("PUT", "/profile/me", session, json=payload)

    def update_username(self, session: Session, username: str) -> dict:
        return self._request("PUT", "/profile/me/username", session, json={"username": username})

    def send_feedback(self, session: Session, message: str) -> dict:
        return self._request("POST", "/feedback", session, json={"message": message})
