from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.api.schemas import (
    EventOut,
    EventScheduleOut,
    RegisteredEventOut,
    RegistrationOut,
    RoomOut,
    ScheduleRoomOut,
    SessionOut,
)
from ticketing.models import Event, EventRegistration, Room
from ticketing.services.error_codes import ErrorCode
from ticketing.services.exceptions import AuthorizationError, NotFoundError, UserNotFoundError
from ticketing.services.helpers import parse_uuid

logger = structlog.get_logger()


def _user_uuid(user_id: str) -> uuid.UUID:
    uid = parse_uuid(user_id)
    if uid is None:
        raise UserNotFoundError(message="user not found")
    return uid


class SqlAttendeeService:
    def __init__(self, db: Session) -> None:
        self.db = db

    def _find_registration(self, event_id: uuid.UUID, user_id: uuid.UUID) -> EventRegistration | None:
        return self.db.scalar(
            select(EventRegistration).where(
                EventRegistration.event_id == event_id,
                EventRegistration.user_id == user_id,
            )
        )

    def _register(self, event: Event, user_id: str) -> tuple[RegistrationOut, bool]:
        uid = _user_uuid(user_id)
        existing = self._find_registration(event.id, uid)
        if existing:
            return RegistrationOut.model_validate(existing), False

        registration = EventRegistration(event_id=event.id, user_id=uid)
        self.db.add(registration)
        try:
            self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent registration for the same pair
            self.db.rollback()
            existing = self._find_registration(event.id, uid)
            if existing is None:
                raise
            return RegistrationOut.model_validate(existing), False

        self.db.refresh(registration)
        logger.info("attendee_registered", event_id=str(event.id), user_id=user_id)
        return RegistrationOut.model_validate(registration), True

    def register_for_event(self, event_id: str, user_id: str) -> tuple[RegistrationOut, bool]:
        eid = parse_uuid(event_id)
        event = self.db.get(Event, eid) if eid else None
        if not event:
            raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, "event not found")
        return self._register(event, user_id)

    def register_for_event_by_code(self, event_code: str, user_id: str) -> tuple[RegistrationOut, bool]:
        event = self.db.scalar(select(Event).where(Event.event_code == event_code.strip().lower()))
        if not event:
            raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, "event not found")
        return self._register(event, user_id)

    def list_registered_events(self, user_id: str) -> list[RegisteredEventOut]:
        uid = parse_uuid(user_id)
        if uid is None:
            return []
        # inner join drops registrations whose event is gone
        rows = self.db.execute(
            select(EventRegistration, Event)
            .join(Event, EventRegistration.event_id == Event.id)
            .where(EventRegistration.user_id == uid)
            .order_by(EventRegistration.created_at.desc())
        )
        return [
            RegisteredEventOut(
                event=EventOut.model_validate(event),
                registration=RegistrationOut.model_validate(registration),
            )
            for registration, event in rows
        ]

    def get_event_schedule(self, event_id: str, user_id: str) -> EventScheduleOut:
        eid = parse_uuid(event_id)
        event = self.db.get(Event, eid) if eid else None
        if not event:
            raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, "event not found")

        is_owner = str(event.owner_id) == str(user_id)
        uid = parse_uuid(user_id)
        if not is_owner and (uid is None or self._find_registration(event.id, uid) is None):
            raise AuthorizationError(message="not registered for this event")

        rooms = self.db.scalars(
            select(Room)
            .where(Room.event_id == event.id, Room.not_bookable.is_(False))
            .order_by(Room.name)
        )
        return EventScheduleOut(
            event=EventOut.model_validate(event),
            rooms=[
                ScheduleRoomOut(
                    room=RoomOut.model_validate(room),
                    sessions=[SessionOut.model_validate(s) for s in room.sessions],
                )
                for room in rooms
            ],
        )
