from __future__ import annotations

import math
import re
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

# One pattern for every email field: sign-up, login, team members, invitations.
EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")


def normalize_email(value: str) -> str:
    return value.strip().lower()


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value))


def parse_email_list(raw: str) -> list[str]:
    """Split a free-text blob of addresses on commas and whitespace.

    Tokens are trimmed and lowercased, anything that is not an email is dropped
    and duplicates keep their first position.
    """
    seen: set[str] = set()
    emails: list[str] = []
    for token in raw.replace(",", " ").split():
        email = normalize_email(token)
        if not email or email in seen or not is_valid_email(email):
            continue
        seen.add(email)
        emails.append(email)
    return emails


def ensure_tzaware(value: datetime | None) -> datetime | None:
    if value is None:
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        raise ValueError("datetime must be timezone-aware")
    return value


class SchemaBase(BaseModel):
    model_config = ConfigDict(from_attributes=True, extra="ignore")


class RequestModel(BaseModel):
    """Base for request bodies: unknown fields are rejected outright.

    Subclasses list rule violations in ``violations()``; all of them are
    reported together, in order, as one bad request.
    """

    model_config = ConfigDict(extra="forbid")

    def violations(self) -> list[str]:
        return []

    @model_validator(mode="after")
    def _check_violations(self):
        problems = self.violations()
        if problems:
            raise ValueError("; ".join(problems))
        return self


class StatusOut(SchemaBase):
    status: str


class PaginationOut(SchemaBase):
    page: int = Field(ge=1)
    page_size: int = Field(ge=1)
    total: int = Field(ge=0)
    total_pages: int = Field(ge=0)

    @classmethod
    def build(cls, page: int, page_size: int, total: int) -> PaginationOut:
        total_pages = math.ceil(total / page_size) if page_size > 0 else 0
        return cls(page=page, page_size=page_size, total=total, total_pages=total_pages)
