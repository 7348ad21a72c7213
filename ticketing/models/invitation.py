import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from ticketing.models.base import Base, UUIDPrimaryKeyMixin, utcnow


class EventInvitation(Base, UUIDPrimaryKeyMixin):
    __tablename__ = "event_invitations"
    __table_args__ = (UniqueConstraint("event_id", "email", name="uq_event_invitation_event_email"),)

    event_id: Mapped[uuid.UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True
    )
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    sent_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
