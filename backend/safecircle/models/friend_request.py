"""Friend request model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, String, func, text
from sqlalchemy.orm import Mapped, mapped_column

from safecircle.db.base import Base

PENDING = "pending"
ACCEPTED = "accepted"
REJECTED = "rejected"
CANCELLED = "cancelled"


class FriendRequest(Base):
    """Proposal to become friends.

    Display fields are copied from both users when the request is sent and are
    not refreshed afterwards.
    """

    __tablename__ = "friend_requests"
    __table_args__ = (
        # At most one pending request per ordered (sender, recipient) pair
        Index(
            "uq_friend_requests_pending_pair",
            "from_user_id",
            "to_user_id",
            unique=True,
            sqlite_where=text("status = 'pending'"),
            postgresql_where=text("status = 'pending'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    from_user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    to_user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    from_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    from_username: Mapped[str | None] = mapped_column(String(50), nullable=True)
    to_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    to_username: Mapped[str | None] = mapped_column(String(50), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=PENDING)  # pending | accepted | rejected | cancelled
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
