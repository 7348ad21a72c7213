from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticketing.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from ticketing.models.event import Event
    from ticketing.models.session import EventSession


class Room(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "rooms"

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    source: Mapped[str] = mapped_column(String(40), nullable=False, default="manual")
    source_session_id: Mapped[int | None] = mapped_column(Integer, nullable=True)
    not_bookable: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    capacity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    how_to_get_there: Mapped[str] = mapped_column(Text, nullable=False, default="")

    event: Mapped[Event] = relationship(back_populates="rooms")
    sessions: Mapped[list[EventSession]] = relationship(
        back_populates="room",
        cascade="all, delete-orphan",
        order_by="EventSession.start_time",
    )
