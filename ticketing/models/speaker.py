import uuid

from sqlalchemy import Boolean, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ticketing.models.base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class Speaker(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "speakers"

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    source: Mapped[str] = mapped_column(String(40), nullable=False, default="manual")
    source_speaker_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    first_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    last_name: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    full_name: Mapped[str] = mapped_column(String(400), nullable=False, default="")
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    tag_line: Mapped[str | None] = mapped_column(String(500), nullable=True)
    profile_picture: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    is_top_speaker: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
