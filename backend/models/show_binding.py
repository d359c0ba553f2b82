"""Event type to SquadCast show association."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from backend.models.base import Base


class ShowBinding(Base):
    """Show selected by an organizer for one of their event types."""

    __tablename__ = "show_bindings"
    __table_args__ = (
        UniqueConstraint("event_type_id", "user_id", name="uq_show_binding_event_type_user"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    event_type_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    show_id: Mapped[str] = mapped_column(String(255), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=datetime.utcnow,
        onupdate=datetime.utcnow,
        nullable=False,
    )
