"""Explicit identity value passed to every client call."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Session:
    """Who is signed in. ``loading`` is true while sign-in is in flight."""

    user_id: int | None = None
    access_token: str | None = None
    email: str | None = None
    loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.access_token is not None

    def auth_headers(self) -> dict[str, str]:
        if not self.access_token:
            return {}
        return {"Authorization": f"Bearer {self.access_token}"}

    def clear(self) -> None:
        self.user_id = None
        self.access_token = None
        self.email = None
        self.loading = False
