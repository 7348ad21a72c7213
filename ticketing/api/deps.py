from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.orm import Session

from ticketing.api.errors import ApiError
from ticketing.auth.deps import get_jwt_tokens
from ticketing.db import get_db
from ticketing.services.attendee_service import SqlAttendeeService
from ticketing.services.auth_service import SqlAuthService
from ticketing.services.events_service import SqlEventService
from ticketing.services.helpers import parse_uuid
from ticketing.services.interfaces import (
    AttendeeService,
    AuthService,
    EventService,
    Mailer,
    ScheduleFetcher,
    UserService,
)
from ticketing.services.mailer import build_mailer
from ticketing.services.sessionize import HttpScheduleFetcher
from ticketing.services.user_service import SqlUserService

DBSession = Annotated[Session, Depends(get_db)]


@lru_cache
def get_mailer() -> Mailer:
    return build_mailer()


def get_schedule_fetcher() -> ScheduleFetcher:
    return HttpScheduleFetcher()


def get_auth_service(db: DBSession) -> AuthService:
    return SqlAuthService(db, tokens=get_jwt_tokens())


def get_user_service(db: DBSession, mailer: Annotated[Mailer, Depends(get_mailer)]) -> UserService:
    return SqlUserService(db, tokens=get_jwt_tokens(), mailer=mailer)


def get_event_service(
    db: DBSession,
    mailer: Annotated[Mailer, Depends(get_mailer)],
    fetcher: Annotated[ScheduleFetcher, Depends(get_schedule_fetcher)],
) -> EventService:
    return SqlEventService(db, mailer=mailer, fetcher=fetcher)


def get_attendee_service(db: DBSession) -> AttendeeService:
    return SqlAttendeeService(db)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
EventServiceDep = Annotated[EventService, Depends(get_event_service)]
AttendeeServiceDep = Annotated[AttendeeService, Depends(get_attendee_service)]


def path_id(value: str, name: str) -> str:
    """Check a path identifier is a UUID; the error names the parameter."""
    value = value.strip()
    if not value:
        raise ApiError.bad_request(f"missing {name}")
    if parse_uuid(value) is None:
        raise ApiError.bad_request(f"invalid {name}")
    return value
