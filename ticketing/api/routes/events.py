from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request, status

from ticketing.api.deps import EventServiceDep, path_id
from ticketing.api.envelope import Envelope, ok
from ticketing.api.errors import ApiError, service_errors
from ticketing.api.pagination import Pagination
from ticketing.api.schemas import (
    AddTeamMemberIn,
    CreateEventIn,
    CreateRoomIn,
    CreateSessionIn,
    EventDetailOut,
    EventOut,
    InvitationPageOut,
    PaginationOut,
    RoomOut,
    SendInvitationsIn,
    SendInvitationsOut,
    SessionOut,
    StatusOut,
    TagOut,
    TeamMemberOut,
    UpdateEventIn,
    UpdateRoomIn,
    UpdateSessionContentIn,
    UpdateSessionScheduleIn,
)
from ticketing.api.schemas.common import parse_email_list
from ticketing.auth.deps import Caller, require_auth
from ticketing.services.exceptions import UserNotFoundError

router = APIRouter(prefix="/events", tags=["events"], dependencies=[Depends(require_auth)])

DELETED = StatusOut(status="deleted")


# --- events ---


@router.post("", response_model=Envelope[EventOut], status_code=status.HTTP_201_CREATED)
def create_event(caller: Caller, payload: CreateEventIn, request: Request, service: EventServiceDep):
    with service_errors(request):
        event = service.create_event(caller.user_id, payload.name)
    return ok(event)


@router.get("/me", response_model=Envelope[list[EventOut]])
def list_my_events(caller: Caller, request: Request, service: EventServiceDep):
    with service_errors(request):
        events = service.list_events_by_owner(caller.user_id)
    return ok(events or [])


@router.get("/{event_id}", response_model=Envelope[EventDetailOut])
def get_event(event_id: str, caller: Caller, request: Request, service: EventServiceDep):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        detail = service.get_event(event_id)
    return ok(detail)


@router.patch("/{event_id}", response_model=Envelope[EventOut])
def update_event(
    event_id: str,
    caller: Caller,
    payload: UpdateEventIn,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        event = service.update_event(
            event_id,
            caller.user_id,
            date=payload.date,
            description=payload.description,
            location_lat=payload.location_lat,
            location_lng=payload.location_lng,
        )
    return ok(event)


@router.delete("/{event_id}", response_model=Envelope[StatusOut])
def delete_event(event_id: str, caller: Caller, request: Request, service: EventServiceDep):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        service.delete_event(event_id, caller.user_id)
    return ok(DELETED)


@router.post("/{event_id}/import/sessionize/{sessionize_id}", response_model=Envelope[StatusOut])
def import_sessionize(
    event_id: str,
    sessionize_id: str,
    caller: Caller,
    request: Request,
    service: EventServiceDep,
):
    if not event_id.strip() or not sessionize_id.strip():
        raise ApiError.bad_request("missing eventID or sessionizeID")
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        service.import_sessionize(event_id, caller.user_id, sessionize_id.strip())
    return ok(StatusOut(status="imported successfully"))


# --- rooms ---


@router.post("/{event_id}/rooms", response_model=Envelope[RoomOut], status_code=status.HTTP_201_CREATED)
def create_room(
    event_id: str,
    caller: Caller,
    payload: CreateRoomIn,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        room = service.create_room(
            event_id,
            caller.user_id,
            name=payload.name,
            capacity=payload.capacity,
            description=payload.description,
            how_to_get_there=payload.how_to_get_there,
            not_bookable=payload.not_bookable,
        )
    return ok(room)


@router.get("/{event_id}/rooms", response_model=Envelope[list[RoomOut]])
def list_rooms(event_id: str, caller: Caller, request: Request, service: EventServiceDep):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        rooms = service.list_rooms(event_id, caller.user_id)
    return ok(rooms or [])


@router.get("/{event_id}/rooms/{room_id}", response_model=Envelope[RoomOut])
def get_room(event_id: str, room_id: str, caller: Caller, request: Request, service: EventServiceDep):
    event_id = path_id(event_id, "eventID")
    room_id = path_id(room_id, "roomID")
    with service_errors(request, not_found="event or room not found"):
        room = service.get_room(event_id, room_id, caller.user_id)
    return ok(room)


@router.patch("/{event_id}/rooms/{room_id}", response_model=Envelope[RoomOut])
def update_room(
    event_id: str,
    room_id: str,
    caller: Caller,
    payload: UpdateRoomIn,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    room_id = path_id(room_id, "roomID")
    with service_errors(request, not_found="event or room not found"):
        room = service.update_room(
            event_id,
            room_id,
            caller.user_id,
            capacity=payload.capacity,
            description=payload.description,
            how_to_get_there=payload.how_to_get_there,
            not_bookable=payload.not_bookable,
        )
    return ok(room)


@router.patch("/{event_id}/rooms/{room_id}/not-bookable", response_model=Envelope[RoomOut])
def toggle_room_not_bookable(
    event_id: str,
    room_id: str,
    caller: Caller,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    room_id = path_id(room_id, "roomID")
    with service_errors(request, not_found="event or room not found"):
        room = service.toggle_room_not_bookable(event_id, room_id, caller.user_id)
    return ok(room)


@router.delete("/{event_id}/rooms/{room_id}", response_model=Envelope[StatusOut])
def delete_room(event_id: str, room_id: str, caller: Caller, request: Request, service: EventServiceDep):
    event_id = path_id(event_id, "eventID")
    room_id = path_id(room_id, "roomID")
    with service_errors(request, not_found="event or room not found"):
        service.delete_room(event_id, room_id, caller.user_id)
    return ok(DELETED)


# --- sessions ---


@router.post("/{event_id}/sessions", response_model=Envelope[SessionOut], status_code=status.HTTP_201_CREATED)
def create_session(
    event_id: str,
    caller: Caller,
    payload: CreateSessionIn,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    path_id(payload.room_id, "room_id")
    with service_errors(request, not_found="event or room not found"):
        session = service.create_session(
            event_id,
            caller.user_id,
            room_id=payload.room_id,
            title=payload.title,
            start_time=payload.start_time,
            end_time=payload.end_time,
            description=payload.description,
            tags=payload.tags,
        )
    return ok(session)


@router.patch("/{event_id}/sessions/{session_id}", response_model=Envelope[SessionOut])
def update_session_schedule(
    event_id: str,
    session_id: str,
    caller: Caller,
    payload: UpdateSessionScheduleIn,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    session_id = path_id(session_id, "sessionID")
    with service_errors(request, not_found="event, session, or room not found"):
        session = service.update_session_schedule(
            event_id,
            session_id,
            caller.user_id,
            room_id=payload.room_id,
            start_time=payload.start_time,
            end_time=payload.end_time,
        )
    return ok(session)


@router.patch("/{event_id}/sessions/{session_id}/content", response_model=Envelope[SessionOut])
def update_session_content(
    event_id: str,
    session_id: str,
    caller: Caller,
    payload: UpdateSessionContentIn,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    session_id = path_id(session_id, "sessionID")
    with service_errors(request, not_found="event or session not found"):
        session = service.update_session_content(
            event_id,
            session_id,
            caller.user_id,
            title=payload.title,
            description=payload.description,
        )
    return ok(session)


@router.delete("/{event_id}/sessions/{session_id}", response_model=Envelope[StatusOut])
def delete_session(
    event_id: str,
    session_id: str,
    caller: Caller,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    session_id = path_id(session_id, "sessionID")
    with service_errors(request, not_found="event or session not found"):
        service.delete_session(event_id, session_id, caller.user_id)
    return ok(DELETED)


@router.get("/{event_id}/tags", response_model=Envelope[list[TagOut]])
def list_tags(event_id: str, caller: Caller, request: Request, service: EventServiceDep):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        tags = service.list_tags(event_id, caller.user_id)
    return ok(tags or [])


# --- team members ---


@router.post(
    "/{event_id}/team-members",
    response_model=Envelope[TeamMemberOut],
    status_code=status.HTTP_201_CREATED,
)
def add_team_member(
    event_id: str,
    caller: Caller,
    payload: AddTeamMemberIn,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        try:
            member = service.add_team_member_by_email(event_id, payload.email, caller.user_id)
        except UserNotFoundError:
            raise ApiError.not_found("no user with that email") from None
    return ok(member)


@router.get("/{event_id}/team-members", response_model=Envelope[list[TeamMemberOut]])
def list_team_members(event_id: str, caller: Caller, request: Request, service: EventServiceDep):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        members = service.list_team_members(event_id, caller.user_id)
    return ok(members or [])


@router.delete("/{event_id}/team-members/{user_id}", response_model=Envelope[StatusOut])
def remove_team_member(
    event_id: str,
    user_id: str,
    caller: Caller,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    user_id = path_id(user_id, "userID")
    with service_errors(request, not_found="event or team member not found"):
        service.remove_team_member(event_id, user_id, caller.user_id)
    return ok(StatusOut(status="removed"))


# --- invitations ---


@router.get("/{event_id}/invitations", response_model=Envelope[InvitationPageOut])
def list_invitations(
    event_id: str,
    caller: Caller,
    pagination: Pagination,
    request: Request,
    service: EventServiceDep,
    search: Annotated[str, Query()] = "",
):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        items, total = service.list_invitations(event_id, caller.user_id, search.strip(), pagination)
    return ok(
        InvitationPageOut(
            items=items or [],
            pagination=PaginationOut.build(pagination.page, pagination.page_size, total),
        )
    )


@router.post("/{event_id}/invitations", response_model=Envelope[SendInvitationsOut])
def send_invitations(
    event_id: str,
    caller: Caller,
    payload: SendInvitationsIn,
    request: Request,
    service: EventServiceDep,
):
    event_id = path_id(event_id, "eventID")
    emails = parse_email_list(payload.emails)
    if not emails:
        raise ApiError.bad_request("no valid emails found")
    with service_errors(request, not_found="event not found"):
        sent, failed = service.send_invitations(event_id, caller.user_id, emails)
    return ok(SendInvitationsOut(sent=sent, failed=failed or []))
