"""Emergency alert model and its friend snapshot."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Float, ForeignKey, Index, String, func, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from safecircle.db.base import Base

ACTIVE = "active"
RESOLVED = "resolved"


class EmergencyAlert(Base):
    """SOS alert raised by a user to the friends they had at that moment."""

    __tablename__ = "alerts"
    __table_args__ = (
        # At most one active alert per owner
        Index(
            "uq_alerts_active_owner",
            "user_id",
            unique=True,
            sqlite_where=text("status = 'active'"),
            postgresql_where=text("status = 'active'"),
        ),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    user_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    user_username: Mapped[str | None] = mapped_column(String(50), nullable=True)
    type: Mapped[str] = mapped_column(String(20), nullable=False, default="sos")
    status: Mapped[str] = mapped_column(String(20), nullable=False, default=ACTIVE)  # active | resolved
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    latitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    longitude: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    resolved_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    resolved_by: Mapped[int | None] = mapped_column(ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    recipients: Mapped[list["AlertRecipient"]] = relationship(
        back_populates="alert",
        cascade="all, delete-orphan",
        order_by="AlertRecipient.id",
        lazy="selectin",
    )

    @property
    def friend_ids(self) -> list[int]:
        return [r.friend_id for r in self.recipients]


class AlertRecipient(Base):
    """One friend captured in an alert's snapshot. Never updated."""

    __tablename__ = "alert_recipients"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    alert_id: Mapped[int] = mapped_column(ForeignKey("alerts.id", ondelete="CASCADE"), index=True, nullable=False)
    friend_id: Mapped[int] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), index=True, nullable=False)
    friend_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    friend_username: Mapped[str | None] = mapped_column(String(50), nullable=True)

    alert: Mapped[EmergencyAlert] = relationship(back_populates="recipients")
