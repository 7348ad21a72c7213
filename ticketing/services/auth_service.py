from __future__ import annotations

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.api.schemas import UserOut
from ticketing.auth.password import hash_password, verify_password
from ticketing.models import User, UserRole
from ticketing.services.error_codes import ErrorCode
from ticketing.services.exceptions import AuthenticationError, DuplicateEmailError
from ticketing.services.interfaces import TokenIssuer

logger = structlog.get_logger()


class SqlAuthService:
    def __init__(self, db: Session, tokens: TokenIssuer) -> None:
        self.db = db
        self.tokens = tokens

    def sign_up(
        self,
        email: str,
        password: str,
        name: str = "",
        last_name: str = "",
        role: str | None = None,
    ) -> UserOut:
        email = email.strip().lower()
        if self.db.scalar(select(User.id).where(User.email == email)):
            raise DuplicateEmailError(message="email already registered")

        user = User(
            email=email,
            name=name,
            last_name=last_name,
            role=role or UserRole.ATTENDEE.value,
            password_hash=hash_password(password),
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise DuplicateEmailError(message="email already registered") from exc

        self.db.refresh(user)
        logger.info("user_signed_up", user_id=str(user.id), role=user.role)
        return UserOut.model_validate(user)

    def login(self, email: str, password: str) -> tuple[str, UserOut]:
        email = email.strip().lower()
        user = self.db.scalar(select(User).where(User.email == email))
        if not user or not verify_password(password, user.password_hash):
            raise AuthenticationError(ErrorCode.INVALID_CREDENTIALS, "invalid credentials")

        token = self.tokens.issue(str(user.id), user.email, [user.role])
        return token, UserOut.model_validate(user)
