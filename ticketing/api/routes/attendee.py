from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response, status

from ticketing.api.deps import AttendeeServiceDep, path_id
from ticketing.api.envelope import Envelope, ok
from ticketing.api.errors import service_errors
from ticketing.api.schemas import (
    EventScheduleOut,
    RegisterByCodeIn,
    RegisteredEventOut,
    RegistrationOut,
)
from ticketing.auth.deps import Caller, require_auth

router = APIRouter(prefix="/attendee", tags=["attendee"], dependencies=[Depends(require_auth)])


def _registration_status(created: bool) -> int:
    # repeat registrations are not errors: the existing record comes back with 200
    return status.HTTP_201_CREATED if created else status.HTTP_200_OK


@router.post("/registrations", response_model=Envelope[RegistrationOut], status_code=status.HTTP_201_CREATED)
def register_by_code(
    caller: Caller,
    payload: RegisterByCodeIn,
    request: Request,
    response: Response,
    service: AttendeeServiceDep,
):
    with service_errors(request, not_found="event not found"):
        registration, created = service.register_for_event_by_code(payload.event_code, caller.user_id)
    response.status_code = _registration_status(created)
    return ok(registration)


@router.post(
    "/events/{event_id}/registrations",
    response_model=Envelope[RegistrationOut],
    status_code=status.HTTP_201_CREATED,
)
def register_for_event(
    event_id: str,
    caller: Caller,
    request: Request,
    response: Response,
    service: AttendeeServiceDep,
):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        registration, created = service.register_for_event(event_id, caller.user_id)
    response.status_code = _registration_status(created)
    return ok(registration)


@router.get("/events", response_model=Envelope[list[RegisteredEventOut]])
def list_my_registered_events(caller: Caller, request: Request, service: AttendeeServiceDep):
    with service_errors(request):
        items = service.list_registered_events(caller.user_id)
    return ok(items or [])


@router.get("/events/{event_id}/schedule", response_model=Envelope[EventScheduleOut])
def get_event_schedule(event_id: str, caller: Caller, request: Request, service: AttendeeServiceDep):
    event_id = path_id(event_id, "eventID")
    with service_errors(request, not_found="event not found"):
        schedule = service.get_event_schedule(event_id, caller.user_id)
    return ok(schedule)
