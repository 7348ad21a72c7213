from datetime import datetime

import sqlalchemy as sa
from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from ticketing.models.base import Base, UUIDPrimaryKeyMixin, utcnow


class LoginCode(Base, UUIDPrimaryKeyMixin):
    __tablename__ = "login_codes"
    __table_args__ = (sa.Index("ix_login_codes_email_code_hash", "email", "code_hash"),)

    email: Mapped[str] = mapped_column(String(320), nullable=False)
    code_hash: Mapped[str] = mapped_column(String(128), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    consumed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
