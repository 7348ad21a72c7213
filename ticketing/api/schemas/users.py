from __future__ import annotations

import re
from datetime import datetime
from uuid import UUID

from pydantic import field_validator

from ticketing.api.schemas.common import (
    RequestModel,
    SchemaBase,
    is_valid_email,
    normalize_email,
)
from ticketing.models.user import UserRole

MIN_PASSWORD_LENGTH = 8
LOGIN_CODE_PATTERN = re.compile(r"^[0-9]{6}$")

# common misspelling accepted from older clients
_ROLE_ALIASES = {"atendee": UserRole.ATTENDEE.value}
_ROLES = {r.value for r in UserRole}


def _email_violations(email: str) -> list[str]:
    if not email:
        return ["email is required"]
    if not is_valid_email(email):
        return ["invalid email format"]
    return []


class UserOut(SchemaBase):
    id: UUID
    email: str
    name: str
    last_name: str
    role: str
    created_at: datetime
    updated_at: datetime


class SignUpIn(RequestModel):
    email: str = ""
    password: str = ""
    name: str = ""
    last_name: str = ""
    role: str | None = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("name", "last_name")
    @classmethod
    def _trim(cls, value: str) -> str:
        return value.strip()

    @field_validator("role")
    @classmethod
    def _normalize_role(cls, value: str | None) -> str | None:
        if value is None:
            return None
        role = value.strip().lower()
        return _ROLE_ALIASES.get(role, role) or None

    def violations(self) -> list[str]:
        errs = _email_violations(self.email)
        if not self.password:
            errs.append("password is required")
        elif len(self.password) < MIN_PASSWORD_LENGTH:
            errs.append(f"password must be at least {MIN_PASSWORD_LENGTH} characters")
        if self.role is not None and self.role not in _ROLES:
            errs.append('role must be "admin" or "attendee"')
        return errs


class LoginIn(RequestModel):
    email: str = ""
    password: str = ""

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    def violations(self) -> list[str]:
        errs = [] if self.email else ["email is required"]
        if not self.password:
            errs.append("password is required")
        return errs


class LoginCodeRequestIn(RequestModel):
    email: str = ""

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    def violations(self) -> list[str]:
        return _email_violations(self.email)


class LoginCodeVerifyIn(RequestModel):
    email: str = ""
    code: str = ""

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("code")
    @classmethod
    def _trim_code(cls, value: str) -> str:
        return value.strip()

    def violations(self) -> list[str]:
        errs = _email_violations(self.email)
        if not self.code:
            errs.append("code is required")
        elif not LOGIN_CODE_PATTERN.match(self.code):
            errs.append("code must be 6 digits")
        return errs


class TokenOut(SchemaBase):
    token: str
    token_type: str = "Bearer"
    user: UserOut | None = None


class UpdateUserIn(RequestModel):
    """Profile changes; omitted fields are left alone. Email cannot be changed."""

    name: str | None = None
    last_name: str | None = None

    @field_validator("name", "last_name")
    @classmethod
    def _trim(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None
