"""Capability interfaces the HTTP layer depends on.

Routers only ever see these Protocols; the SQL-backed implementations are
wired in through FastAPI dependencies and tests swap in in-memory fakes.
Identifiers cross this boundary as strings and results come back as the
response DTOs from ``ticketing.api.schemas``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Protocol

from ticketing.api.pagination import PaginationParams
from ticketing.api.schemas import (
    EventDetailOut,
    EventOut,
    EventScheduleOut,
    InvitationOut,
    RegisteredEventOut,
    RegistrationOut,
    RoomOut,
    SessionOut,
    TagOut,
    TeamMemberOut,
    UserOut,
)
from ticketing.services.sessionize import SessionizeSchedule


class TokenVerifier(Protocol):
    """Returns the user id for a valid token, raises ``AuthenticationError`` otherwise."""

    def verify(self, token: str) -> str: ...


class TokenIssuer(Protocol):
    def issue(self, user_id: str, email: str, roles: list[str], ttl_seconds: int | None = None) -> str: ...


class Mailer(Protocol):
    def send(self, to: str, subject: str, html_body: str, text_body: str) -> None: ...


class ScheduleFetcher(Protocol):
    def fetch(self, sessionize_id: str) -> SessionizeSchedule: ...


class AuthService(Protocol):
    def sign_up(
        self,
        email: str,
        password: str,
        name: str = "",
        last_name: str = "",
        role: str | None = None,
    ) -> UserOut: ...

    def login(self, email: str, password: str) -> tuple[str, UserOut]: ...


class UserService(Protocol):
    def request_login_code(self, email: str) -> None: ...

    def verify_login_code(self, email: str, code: str) -> tuple[str, UserOut]: ...

    def get_by_id(self, user_id: str) -> UserOut: ...

    def update(self, user_id: str, name: str | None = None, last_name: str | None = None) -> UserOut: ...


class EventService(Protocol):
    # events
    def create_event(self, owner_id: str, name: str) -> EventOut: ...

    def get_event(self, event_id: str) -> EventDetailOut: ...

    def update_event(
        self,
        event_id: str,
        owner_id: str,
        date: datetime | None = None,
        description: str | None = None,
        location_lat: float | None = None,
        location_lng: float | None = None,
    ) -> EventOut: ...

    def delete_event(self, event_id: str, owner_id: str) -> None: ...

    def list_events_by_owner(self, owner_id: str) -> list[EventOut]: ...

    def import_sessionize(self, event_id: str, owner_id: str, sessionize_id: str) -> None: ...

    # rooms
    def create_room(
        self,
        event_id: str,
        owner_id: str,
        name: str,
        capacity: int = 0,
        description: str = "",
        how_to_get_there: str = "",
        not_bookable: bool = False,
    ) -> RoomOut: ...

    def list_rooms(self, event_id: str, owner_id: str) -> list[RoomOut]: ...

    def get_room(self, event_id: str, room_id: str, owner_id: str) -> RoomOut: ...

    def update_room(
        self,
        event_id: str,
        room_id: str,
        owner_id: str,
        capacity: int | None = None,
        description: str | None = None,
        how_to_get_there: str | None = None,
        not_bookable: bool | None = None,
    ) -> RoomOut: ...

    def toggle_room_not_bookable(self, event_id: str, room_id: str, owner_id: str) -> RoomOut: ...

    def delete_room(self, event_id: str, room_id: str, owner_id: str) -> None: ...

    # sessions
    def create_session(
        self,
        event_id: str,
        owner_id: str,
        room_id: str,
        title: str,
        start_time: datetime,
        end_time: datetime,
        description: str | None = None,
        tags: list[str] | None = None,
    ) -> SessionOut: ...

    def update_session_schedule(
        self,
        event_id: str,
        session_id: str,
        owner_id: str,
        room_id: str | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> SessionOut: ...

    def update_session_content(
        self,
        event_id: str,
        session_id: str,
        owner_id: str,
        title: str | None = None,
        description: str | None = None,
    ) -> SessionOut: ...

    def delete_session(self, event_id: str, session_id: str, owner_id: str) -> None: ...

    def list_tags(self, event_id: str, caller_id: str) -> list[TagOut]: ...

    # team
    def add_team_member_by_email(self, event_id: str, email: str, owner_id: str) -> TeamMemberOut: ...

    def list_team_members(self, event_id: str, caller_id: str) -> list[TeamMemberOut]: ...

    def remove_team_member(self, event_id: str, user_id: str, owner_id: str) -> None: ...

    # invitations
    def send_invitations(self, event_id: str, owner_id: str, emails: list[str]) -> tuple[int, list[str]]: ...

    def list_invitations(
        self,
        event_id: str,
        caller_id: str,
        search: str,
        params: PaginationParams,
    ) -> tuple[list[InvitationOut], int]: ...


class AttendeeService(Protocol):
    def register_for_event(self, event_id: str, user_id: str) -> tuple[RegistrationOut, bool]:
        """Returns the registration and whether it was created by this call."""
        ...

    def register_for_event_by_code(self, event_code: str, user_id: str) -> tuple[RegistrationOut, bool]: ...

    def list_registered_events(self, user_id: str) -> list[RegisteredEventOut]: ...

    def get_event_schedule(self, event_id: str, user_id: str) -> EventScheduleOut: ...
