from __future__ import annotations

from datetime import timedelta

import structlog
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.api.schemas import UserOut
from ticketing.auth.login_codes import generate_login_code, hash_login_code
from ticketing.core.config import settings
from ticketing.models import LoginCode, User, UserRole
from ticketing.services.email_templates import login_code_email
from ticketing.services.error_codes import ErrorCode
from ticketing.services.exceptions import AuthenticationError, UserNotFoundError
from ticketing.services.helpers import now_utc, parse_uuid
from ticketing.services.interfaces import Mailer, TokenIssuer

logger = structlog.get_logger()


class SqlUserService:
    def __init__(
        self,
        db: Session,
        tokens: TokenIssuer,
        mailer: Mailer,
        code_ttl_minutes: int | None = None,
    ) -> None:
        self.db = db
        self.tokens = tokens
        self.mailer = mailer
        self.code_ttl_minutes = code_ttl_minutes or settings.login_code_ttl_minutes

    def _get_user(self, user_id: str) -> User:
        uid = parse_uuid(user_id)
        user = self.db.get(User, uid) if uid else None
        if not user:
            raise UserNotFoundError(message="user not found")
        return user

    def request_login_code(self, email: str) -> None:
        email = email.strip().lower()
        code = generate_login_code()
        now = now_utc()
        self.db.add(
            LoginCode(
                email=email,
                code_hash=hash_login_code(code),
                created_at=now,
                expires_at=now + timedelta(minutes=self.code_ttl_minutes),
            )
        )
        self.db.commit()

        rendered = login_code_email(code, self.code_ttl_minutes)
        self.mailer.send(email, rendered.subject, rendered.html_body, rendered.text_body)
        logger.info("login_code_sent", email=email)

    def verify_login_code(self, email: str, code: str) -> tuple[str, UserOut]:
        email = email.strip().lower()
        now = now_utc()

        # single UPDATE so a code can only ever be consumed once
        result = self.db.execute(
            update(LoginCode)
            .where(
                LoginCode.email == email,
                LoginCode.code_hash == hash_login_code(code),
                LoginCode.consumed_at.is_(None),
                LoginCode.expires_at > now,
            )
            .values(consumed_at=now)
        )
        if not result.rowcount:
            self.db.rollback()
            raise AuthenticationError(ErrorCode.INVALID_LOGIN_CODE, "invalid or expired code")
        self.db.commit()

        user = self.db.scalar(select(User).where(User.email == email))
        if not user:
            user = User(email=email, role=UserRole.ATTENDEE.value)
            self.db.add(user)
            try:
                self.db.commit()
            except IntegrityError:
                # created concurrently by another verification
                self.db.rollback()
                user = self.db.scalar(select(User).where(User.email == email))
                if not user:
                    raise
            else:
                self.db.refresh(user)
                logger.info("user_created_from_login_code", user_id=str(user.id))

        token = self.tokens.issue(str(user.id), user.email, [user.role])
        return token, UserOut.model_validate(user)

    def get_by_id(self, user_id: str) -> UserOut:
        return UserOut.model_validate(self._get_user(user_id))

    def update(self, user_id: str, name: str | None = None, last_name: str | None = None) -> UserOut:
        user = self._get_user(user_id)
        if name is not None:
            user.name = name
        if last_name is not None:
            user.last_name = last_name

        self.db.commit()
        self.db.refresh(user)
        return UserOut.model_validate(user)
