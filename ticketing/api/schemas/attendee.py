from __future__ import annotations

import re
from datetime import datetime
from uuid import UUID

from pydantic import Field, field_validator

from ticketing.api.schemas.common import RequestModel, SchemaBase
from ticketing.api.schemas.events import EventOut, RoomOut, SessionOut

EVENT_CODE_LENGTH = 4
EVENT_CODE_PATTERN = re.compile(r"^[a-z0-9]+$")


class RegistrationOut(SchemaBase):
    id: UUID
    event_id: UUID
    user_id: UUID
    created_at: datetime
    updated_at: datetime


class RegisterByCodeIn(RequestModel):
    event_code: str = ""

    @field_validator("event_code")
    @classmethod
    def _normalize(cls, value: str) -> str:
        return value.strip().lower()

    def violations(self) -> list[str]:
        if not self.event_code:
            return ["event_code is required"]
        errs = []
        if len(self.event_code) != EVENT_CODE_LENGTH:
            errs.append(f"event_code must be exactly {EVENT_CODE_LENGTH} characters")
        if not EVENT_CODE_PATTERN.match(self.event_code):
            errs.append("event_code must contain only lowercase letters and digits")
        return errs


class RegisteredEventOut(SchemaBase):
    event: EventOut
    registration: RegistrationOut


class ScheduleRoomOut(SchemaBase):
    room: RoomOut
    sessions: list[SessionOut] = Field(default_factory=list)


class EventScheduleOut(SchemaBase):
    event: EventOut
    rooms: list[ScheduleRoomOut] = Field(default_factory=list)
