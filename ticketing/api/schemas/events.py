from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ticketing.api.schemas.common import (
    PaginationOut,
    RequestModel,
    SchemaBase,
    ensure_tzaware,
    is_valid_email,
    normalize_email,
)


class TZAwareMixin(BaseModel):
    @field_validator(
        "date",
        "start_time",
        "end_time",
        mode="after",
        check_fields=False,
    )
    @classmethod
    def _validate_tzaware(cls, value: datetime | None) -> datetime | None:
        return ensure_tzaware(value)


def _coordinate_violations(lat: float | None, lng: float | None) -> list[str]:
    errs = []
    if lat is not None and not -90 <= lat <= 90:
        errs.append("location_lat must be between -90 and 90")
    if lng is not None and not -180 <= lng <= 180:
        errs.append("location_lng must be between -180 and 180")
    return errs


# --- events ---


class EventOut(SchemaBase):
    id: UUID
    name: str
    slug: str | None = None
    description: str | None = None
    date: datetime | None = None
    location_lat: float | None = None
    location_lng: float | None = None
    owner_id: UUID
    event_code: str
    created_at: datetime
    updated_at: datetime


class CreateEventIn(RequestModel):
    name: str = ""

    @field_validator("name")
    @classmethod
    def _trim(cls, value: str) -> str:
        return value.strip()

    def violations(self) -> list[str]:
        return [] if self.name else ["name is required"]


class UpdateEventIn(TZAwareMixin, RequestModel):
    """Partial update: a field left out (or sent as null) keeps its value."""

    date: datetime | None = None
    description: str | None = None
    location_lat: float | None = None
    location_lng: float | None = None

    def violations(self) -> list[str]:
        return _coordinate_violations(self.location_lat, self.location_lng)


# --- rooms ---


class RoomOut(SchemaBase):
    id: UUID
    event_id: UUID
    name: str
    source: str
    source_session_id: int | None = None
    not_bookable: bool
    capacity: int
    description: str
    how_to_get_there: str
    created_at: datetime
    updated_at: datetime


class CreateRoomIn(RequestModel):
    name: str = ""
    capacity: int = 0
    description: str = ""
    how_to_get_there: str = ""
    not_bookable: bool = False

    @field_validator("name")
    @classmethod
    def _trim(cls, value: str) -> str:
        return value.strip()

    def violations(self) -> list[str]:
        errs = [] if self.name else ["name is required"]
        if self.capacity < 0:
            errs.append("capacity must be non-negative")
        return errs


class UpdateRoomIn(RequestModel):
    # None means "leave unchanged"; for not_bookable that is distinct from false
    capacity: int | None = None
    description: str | None = None
    how_to_get_there: str | None = None
    not_bookable: bool | None = None

    def violations(self) -> list[str]:
        if self.capacity is not None and self.capacity < 0:
            return ["capacity must be non-negative"]
        return []


# --- sessions ---


class TagOut(SchemaBase):
    id: UUID
    name: str


class SessionOut(SchemaBase):
    id: UUID
    room_id: UUID
    source: str
    source_session_id: str | None = None
    title: str
    description: str | None = None
    start_time: datetime
    end_time: datetime
    tags: list[TagOut] = Field(default_factory=list)
    speaker_ids: list[UUID] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class CreateSessionIn(TZAwareMixin, RequestModel):
    room_id: str = ""
    title: str = ""
    description: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("room_id", "title")
    @classmethod
    def _trim(cls, value: str) -> str:
        return value.strip()

    def violations(self) -> list[str]:
        errs = []
        if not self.room_id:
            errs.append("room_id is required")
        if not self.title:
            errs.append("title is required")
        if self.start_time is None:
            errs.append("start_time is required")
        if self.end_time is None:
            errs.append("end_time is required")
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            errs.append("end_time must be after start_time")
        return errs


class UpdateSessionScheduleIn(TZAwareMixin, RequestModel):
    room_id: str | None = None
    start_time: datetime | None = None
    end_time: datetime | None = None

    @field_validator("room_id")
    @classmethod
    def _trim(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    def violations(self) -> list[str]:
        errs = []
        if self.room_id is not None and not self.room_id:
            errs.append("room_id cannot be empty")
        if self.start_time and self.end_time and self.end_time <= self.start_time:
            errs.append("end_time must be after start_time")
        return errs


class UpdateSessionContentIn(RequestModel):
    title: str | None = None
    description: str | None = None

    @field_validator("title")
    @classmethod
    def _trim(cls, value: str | None) -> str | None:
        return value.strip() if value is not None else None

    def violations(self) -> list[str]:
        if self.title is not None and not self.title:
            return ["title cannot be empty"]
        return []


class EventDetailOut(SchemaBase):
    event: EventOut
    rooms: list[RoomOut] = Field(default_factory=list)
    sessions: list[SessionOut] = Field(default_factory=list)


# --- team members ---


class TeamMemberOut(SchemaBase):
    event_id: UUID
    user_id: UUID
    email: str
    name: str
    last_name: str
    created_at: datetime | None = None


class AddTeamMemberIn(RequestModel):
    email: str = ""

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str) -> str:
        return normalize_email(value)

    def violations(self) -> list[str]:
        if not self.email:
            return ["email is required"]
        if not is_valid_email(self.email):
            return ["email must be a valid email address"]
        return []


# --- invitations ---


class InvitationOut(SchemaBase):
    id: UUID
    event_id: UUID
    email: str
    sent_at: datetime


class InvitationPageOut(SchemaBase):
    items: list[InvitationOut] = Field(default_factory=list)
    pagination: PaginationOut


class SendInvitationsIn(RequestModel):
    emails: str = ""

    def violations(self) -> list[str]:
        return [] if self.emails.strip() else ["emails is required"]


class SendInvitationsOut(SchemaBase):
    sent: int = 0
    failed: list[str] = Field(default_factory=list)
