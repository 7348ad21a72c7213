from __future__ import annotations

import uuid
from datetime import datetime, timezone


def parse_uuid(value: str | uuid.UUID | None) -> uuid.UUID | None:
    if value is None:
        return None
    if isinstance(value, uuid.UUID):
        return value
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    # some drivers hand back naive datetimes for timestamptz columns
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
