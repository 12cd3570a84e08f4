"""User directory: prefix search over usernames and names."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from safecircle.core.policies import PREFIX_RANGE_END
from safecircle.models.user import User


def _prefix_range(column, term: str):
    return (column >= term, column <= term + PREFIX_RANGE_END)


def search_users(db: Session, user_id: int, prefix: str, limit: int = 20) -> list[dict]:
    """Find users whose username or name starts with ``prefix``.

    Usernames are stored lower-cased, so the username leg matches the
    lower-cased term. Names are stored as typed and matched against the term
    as typed. Exact matches on either field come first, the rest are ordered
    by display name.
    """
    typed = prefix.strip()
    term = typed.lower()
    if not term:
        return []

    by_username = db.execute(select(User).where(*_prefix_range(User.username, term))).scalars().all()
    by_name = db.execute(select(User).where(*_prefix_range(User.name, typed))).scalars().all()

    results: dict[int, dict] = {}
    for user in [*by_username, *by_name]:
        if user.id in results or user.id == user_id:
            continue
        username = user.username or ""
        results[user.id] = {
            "id": user.id,
            "name": user.name,
            "username": user.username,
            "match_type": "username" if username.startswith(term) else "name",
        }

    def exact(hit: dict) -> bool:
        return (hit["username"] or "").lower() == term or hit["name"].lower() == term

    ranked = sorted(results.values(), key=lambda h: (not exact(h), h["name"].casefold(), h["name"]))
    return ranked[:limit]


def get_user_card(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)
