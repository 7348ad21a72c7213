from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, Float, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticketing.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from ticketing.models.room import Room


class Event(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "events"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(200), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    date: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    location_lat: Mapped[float | None] = mapped_column(Float, nullable=True)
    location_lng: Mapped[float | None] = mapped_column(Float, nullable=True)

    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # 4 chars of [a-z0-9], typed by attendees to self-register
    event_code: Mapped[str] = mapped_column(String(4), unique=True, nullable=False, index=True)

    rooms: Mapped[list[Room]] = relationship(
        back_populates="event",
        cascade="all, delete-orphan",
        order_by="Room.name",
    )
    # child rows without a back-reference, removed along with the event
    team_members = relationship("EventTeamMember", cascade="all, delete-orphan")
    registrations = relationship("EventRegistration", cascade="all, delete-orphan")
    invitations = relationship("EventInvitation", cascade="all, delete-orphan")
    speakers = relationship("Speaker", cascade="all, delete-orphan")
    tags = relationship("Tag", cascade="all, delete-orphan")
