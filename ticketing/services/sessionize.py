"""Sessionize "view/All" client and payload models."""

from __future__ import annotations

from datetime import datetime

import httpx
import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError as PydanticValidationError

from ticketing.core.config import settings
from ticketing.services.error_codes import ErrorCode
from ticketing.services.exceptions import InternalError

logger = structlog.get_logger()


class _SessionizeModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SessionizeRoom(_SessionizeModel):
    id: int
    name: str


class SessionizeSession(_SessionizeModel):
    id: str
    title: str
    description: str | None = None
    starts_at: datetime | None = Field(default=None, alias="startsAt")
    ends_at: datetime | None = Field(default=None, alias="endsAt")
    room_id: int | None = Field(default=None, alias="roomId")
    speakers: list[str] = Field(default_factory=list)
    category_items: list[int] = Field(default_factory=list, alias="categoryItems")


class SessionizeSpeaker(_SessionizeModel):
    id: str
    first_name: str = Field(default="", alias="firstName")
    last_name: str = Field(default="", alias="lastName")
    full_name: str = Field(default="", alias="fullName")
    bio: str | None = None
    tag_line: str | None = Field(default=None, alias="tagLine")
    profile_picture: str | None = Field(default=None, alias="profilePicture")
    is_top_speaker: bool = Field(default=False, alias="isTopSpeaker")


class SessionizeCategoryItem(_SessionizeModel):
    id: int
    name: str = ""


class SessionizeCategory(_SessionizeModel):
    id: int
    title: str = ""
    items: list[SessionizeCategoryItem] = Field(default_factory=list)


class SessionizeSchedule(_SessionizeModel):
    sessions: list[SessionizeSession] = Field(default_factory=list)
    speakers: list[SessionizeSpeaker] = Field(default_factory=list)
    rooms: list[SessionizeRoom] = Field(default_factory=list)
    categories: list[SessionizeCategory] = Field(default_factory=list)

    def category_names(self) -> dict[int, str]:
        return {item.id: item.name for cat in self.categories for item in cat.items if item.name}

    def tag_names_for(self, session: SessionizeSession) -> list[str]:
        names = self.category_names()
        tags: list[str] = []
        for item_id in session.category_items:
            name = names.get(item_id)
            if name and name not in tags:
                tags.append(name)
        return tags


class HttpScheduleFetcher:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url or settings.sessionize_base_url).rstrip("/")
        self.timeout = timeout or settings.sessionize_timeout_seconds
        self.transport = transport

    def fetch(self, sessionize_id: str) -> SessionizeSchedule:
        url = f"{self.base_url}/{sessionize_id}/view/All"
        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.get(url)
        except httpx.HTTPError as exc:
            raise InternalError(ErrorCode.IMPORT_FAILED, f"failed to fetch from sessionize: {exc}") from exc

        if response.status_code != httpx.codes.OK:
            raise InternalError(
                ErrorCode.IMPORT_FAILED,
                f"sessionize api returned status: {response.status_code}",
            )

        try:
            schedule = SessionizeSchedule.model_validate(response.json())
        except (ValueError, PydanticValidationError) as exc:
            raise InternalError(ErrorCode.IMPORT_FAILED, "failed to decode sessionize response") from exc

        logger.info(
            "sessionize_fetched",
            sessionize_id=sessionize_id,
            rooms=len(schedule.rooms),
            sessions=len(schedule.sessions),
            speakers=len(schedule.speakers),
        )
        return schedule
