from __future__ import annotations

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import Column, DateTime, ForeignKey, String, Table, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ticketing.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin

if TYPE_CHECKING:
    from ticketing.models.room import Room
    from ticketing.models.speaker import Speaker
    from ticketing.models.tag import Tag


session_tags = Table(
    "session_tags",
    Base.metadata,
    Column("session_id", Uuid(as_uuid=True), ForeignKey("sessions.id", ondelete="CASCADE"), primary_key=True),
    Column("tag_id", Uuid(as_uuid=True), ForeignKey("tags.id", ondelete="CASCADE"), primary_key=True),
)

session_speakers = Table(
    "session_speakers",
    Base.metadata,
    Column("session_id", Uuid(as_uuid=True), ForeignKey("sessions.id", ondelete="CASCADE"), primary_key=True),
    Column("speaker_id", Uuid(as_uuid=True), ForeignKey("speakers.id", ondelete="CASCADE"), primary_key=True),
)


class EventSession(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A talk or slot on the schedule, placed in exactly one room."""

    __tablename__ = "sessions"

    room_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False, index=True
    )
    source: Mapped[str] = mapped_column(String(40), nullable=False, default="manual")
    source_session_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    start_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_time: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    room: Mapped[Room] = relationship(back_populates="sessions")
    tags: Mapped[list[Tag]] = relationship(secondary=session_tags, order_by="Tag.name")
    speakers: Mapped[list[Speaker]] = relationship(secondary=session_speakers)

    @property
    def speaker_ids(self) -> list[uuid.UUID]:
        return [s.id for s in self.speakers]
