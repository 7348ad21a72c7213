from __future__ import annotations

import secrets
import string
import uuid
from datetime import datetime

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ticketing.api.pagination import PaginationParams
from ticketing.api.schemas import (
    EventDetailOut,
    EventOut,
    InvitationOut,
    RoomOut,
    SessionOut,
    TagOut,
    TeamMemberOut,
)
from ticketing.core.config import settings
from ticketing.models import (
    Event,
    EventInvitation,
    EventSession,
    EventTeamMember,
    Room,
    Speaker,
    Tag,
    User,
)
from ticketing.services.email_templates import invitation_email
from ticketing.services.error_codes import ErrorCode
from ticketing.services.exceptions import (
    AlreadyMemberError,
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    UserNotFoundError,
    ValidationError,
)
from ticketing.services.helpers import as_utc, parse_uuid
from ticketing.services.interfaces import Mailer, ScheduleFetcher

logger = structlog.get_logger()

EVENT_CODE_ALPHABET = string.ascii_lowercase + string.digits
EVENT_CODE_LENGTH = 4
EVENT_CODE_ATTEMPTS = 10
SESSIONIZE_SOURCE = "sessionize"
FALLBACK_INVITER = "Event owner"


def generate_event_code() -> str:
    return "".join(secrets.choice(EVENT_CODE_ALPHABET) for _ in range(EVENT_CODE_LENGTH))


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def _require_owner(event: Event, user_id: str) -> None:
    if str(event.owner_id) != str(user_id):
        raise AuthorizationError(message="not the owner of this event")


def _inviter_name(owner: User | None) -> str:
    if owner is None:
        return FALLBACK_INVITER
    return owner.display_name or FALLBACK_INVITER


def _team_member_out(member: EventTeamMember) -> TeamMemberOut:
    return TeamMemberOut(
        event_id=member.event_id,
        user_id=member.user_id,
        email=member.user.email,
        name=member.user.name,
        last_name=member.user.last_name,
        created_at=member.created_at,
    )


class SqlEventService:
    """Event, room, session, team and invitation management.

    Lookups always resolve the event first, so a missing event is reported as
    not found before ownership is checked.
    """

    def __init__(self, db: Session, mailer: Mailer, fetcher: ScheduleFetcher) -> None:
        self.db = db
        self.mailer = mailer
        self.fetcher = fetcher

    # --- lookups ---

    def _get_event(self, event_id: str) -> Event:
        eid = parse_uuid(event_id)
        event = self.db.get(Event, eid) if eid else None
        if not event:
            raise NotFoundError(ErrorCode.EVENT_NOT_FOUND, "event not found")
        return event

    def _get_owned_event(self, event_id: str, owner_id: str) -> Event:
        event = self._get_event(event_id)
        _require_owner(event, owner_id)
        return event

    def _get_room(self, event: Event, room_id: str) -> Room:
        rid = parse_uuid(room_id)
        room = self.db.get(Room, rid) if rid else None
        if not room or room.event_id != event.id:
            raise NotFoundError(ErrorCode.ROOM_NOT_FOUND, "room not found")
        return room

    def _get_session(self, event: Event, session_id: str) -> EventSession:
        sid = parse_uuid(session_id)
        session = self.db.get(EventSession, sid) if sid else None
        if not session or session.room.event_id != event.id:
            raise NotFoundError(ErrorCode.SESSION_NOT_FOUND, "session not found")
        return session

    def _event_sessions(self, event: Event) -> list[EventSession]:
        return list(
            self.db.scalars(
                select(EventSession)
                .join(Room, EventSession.room_id == Room.id)
                .where(Room.event_id == event.id)
                .order_by(EventSession.start_time, EventSession.title)
            )
        )

    def _ensure_tags(self, event_id: uuid.UUID, names: list[str]) -> list[Tag]:
        tags: list[Tag] = []
        for name in dict.fromkeys(n.strip() for n in names if n and n.strip()):
            tag = self.db.scalar(select(Tag).where(Tag.event_id == event_id, Tag.name == name))
            if tag is None:
                tag = Tag(event_id=event_id, name=name)
                self.db.add(tag)
                self.db.flush()
            tags.append(tag)
        return tags

    # --- events ---

    def create_event(self, owner_id: str, name: str) -> EventOut:
        owner_uuid = parse_uuid(owner_id)
        if owner_uuid is None:
            raise UserNotFoundError(message="user not found")

        for _ in range(EVENT_CODE_ATTEMPTS):
            event = Event(name=name.strip(), owner_id=owner_uuid, event_code=generate_event_code())
            self.db.add(event)
            try:
                self.db.commit()
            except IntegrityError:
                # event_code collision; draw another one
                self.db.rollback()
                continue
            self.db.refresh(event)
            logger.info("event_created", event_id=str(event.id), owner_id=owner_id)
            return EventOut.model_validate(event)

        raise InternalError(ErrorCode.EVENT_CODE_EXHAUSTED, "could not allocate a unique event code")

    def get_event(self, event_id: str) -> EventDetailOut:
        event = self._get_event(event_id)
        return EventDetailOut(
            event=EventOut.model_validate(event),
            rooms=[RoomOut.model_validate(r) for r in event.rooms],
            sessions=[SessionOut.model_validate(s) for s in self._event_sessions(event)],
        )

    def update_event(
        self,
        event_id: str,
        owner_id: str,
        date: datetime | None = None,
        description: str | None = None,
        location_lat: float | None = None,
        location_lng: float | None = None,
    ) -> EventOut:
        event = self._get_owned_event(event_id, owner_id)
        if date is not None:
            event.date = date
        if description is not None:
            event.description = description
        if location_lat is not None:
            event.location_lat = location_lat
        if location_lng is not None:
            event.location_lng = location_lng

        self.db.commit()
        self.db.refresh(event)
        return EventOut.model_validate(event)

    def delete_event(self, event_id: str, owner_id: str) -> None:
        event = self._get_owned_event(event_id, owner_id)
        self.db.delete(event)
        self.db.commit()
        logger.info("event_deleted", event_id=event_id)

    def list_events_by_owner(self, owner_id: str) -> list[EventOut]:
        owner_uuid = parse_uuid(owner_id)
        if owner_uuid is None:
            return []
        events = self.db.scalars(
            select(Event).where(Event.owner_id == owner_uuid).order_by(Event.created_at.desc())
        )
        return [EventOut.model_validate(e) for e in events]

    def import_sessionize(self, event_id: str, owner_id: str, sessionize_id: str) -> None:
        event = self._get_owned_event(event_id, owner_id)
        schedule = self.fetcher.fetch(sessionize_id)

        try:
            # replace the whole schedule: rooms cascade to their sessions
            event.rooms.clear()
            self.db.flush()
            self.db.execute(delete(Speaker).where(Speaker.event_id == event.id))

            rooms: dict[int, Room] = {}
            for src in schedule.rooms:
                room = Room(
                    event_id=event.id,
                    name=src.name,
                    source=SESSIONIZE_SOURCE,
                    source_session_id=src.id,
                )
                event.rooms.append(room)
                rooms[src.id] = room

            speakers: dict[str, Speaker] = {}
            for src in schedule.speakers:
                speaker = Speaker(
                    event_id=event.id,
                    source=SESSIONIZE_SOURCE,
                    source_speaker_id=src.id,
                    first_name=src.first_name,
                    last_name=src.last_name,
                    full_name=src.full_name,
                    bio=src.bio,
                    tag_line=src.tag_line,
                    profile_picture=src.profile_picture,
                    is_top_speaker=src.is_top_speaker,
                )
                self.db.add(speaker)
                speakers[src.id] = speaker
            self.db.flush()

            imported = 0
            for src in schedule.sessions:
                # accepted but not yet placed on the grid
                if src.starts_at is None or src.ends_at is None:
                    continue
                room = rooms.get(src.room_id) if src.room_id is not None else None
                if room is None:
                    continue
                session = EventSession(
                    source=SESSIONIZE_SOURCE,
                    source_session_id=src.id,
                    title=src.title,
                    description=src.description,
                    start_time=src.starts_at,
                    end_time=src.ends_at,
                )
                session.tags = self._ensure_tags(event.id, schedule.tag_names_for(src))
                session.speakers = [speakers[s] for s in src.speakers if s in speakers]
                room.sessions.append(session)
                imported += 1

            self.db.commit()
        except Exception:
            self.db.rollback()
            raise

        logger.info(
            "sessionize_imported",
            event_id=event_id,
            sessionize_id=sessionize_id,
            rooms=len(rooms),
            sessions=imported,
            speakers=len(speakers),
        )

    # --- rooms ---

    def create_room(
        self,
        event_id: str,
        owner_id: str,
        name: str,
        capacity: int = 0,
        description: str = "",
        how_to_get_there: str = "",
        not_bookable: bool = False,
    ) -> RoomOut:
        event = self._get_owned_event(event_id, owner_id)
        if capacity < 0:
            raise ValidationError(message="capacity must be non-negative")
        room = Room(
            event_id=event.id,
            name=name,
            capacity=capacity,
            description=description,
            how_to_get_there=how_to_get_there,
            not_bookable=not_bookable,
        )
        self.db.add(room)
        self.db.commit()
        self.db.refresh(room)
        return RoomOut.model_validate(room)

    def list_rooms(self, event_id: str, owner_id: str) -> list[RoomOut]:
        event = self._get_owned_event(event_id, owner_id)
        return [RoomOut.model_validate(r) for r in event.rooms]

    def get_room(self, event_id: str, room_id: str, owner_id: str) -> RoomOut:
        event = self._get_owned_event(event_id, owner_id)
        return RoomOut.model_validate(self._get_room(event, room_id))

    def update_room(
        self,
        event_id: str,
        room_id: str,
        owner_id: str,
        capacity: int | None = None,
        description: str | None = None,
        how_to_get_there: str | None = None,
        not_bookable: bool | None = None,
    ) -> RoomOut:
        event = self._get_owned_event(event_id, owner_id)
        room = self._get_room(event, room_id)
        if capacity is not None:
            if capacity < 0:
                raise ValidationError(message="capacity must be non-negative")
            room.capacity = capacity
        if description is not None:
            room.description = description
        if how_to_get_there is not None:
            room.how_to_get_there = how_to_get_there
        if not_bookable is not None:
            room.not_bookable = not_bookable

        self.db.commit()
        self.db.refresh(room)
        return RoomOut.model_validate(room)

    def toggle_room_not_bookable(self, event_id: str, room_id: str, owner_id: str) -> RoomOut:
        event = self._get_owned_event(event_id, owner_id)
        room = self._get_room(event, room_id)
        # evaluated inside the UPDATE statement
        room.not_bookable = ~Room.not_bookable
        self.db.commit()
        self.db.refresh(room)
        return RoomOut.model_validate(room)

    def delete_room(self, event_id: str, room_id: str, owner_id: str) -> None:
        event = self._get_owned_event(event_id, owner_id)
        room = self._get_room(event, room_id)
        self.db.delete(room)
        self.db.commit()

    # --- sessions ---

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
    ) -> SessionOut:
        event = self._get_owned_event(event_id, owner_id)
        room = self._get_room(event, room_id)
        if end_time <= start_time:
            raise ValidationError(message="end_time must be after start_time")

        session = EventSession(
            room_id=room.id,
            title=title,
            description=description,
            start_time=start_time,
            end_time=end_time,
        )
        session.tags = self._ensure_tags(event.id, tags or [])
        self.db.add(session)
        self.db.commit()
        self.db.refresh(session)
        return SessionOut.model_validate(session)

    def update_session_schedule(
        self,
        event_id: str,
        session_id: str,
        owner_id: str,
        room_id: str | None = None,
        start_time: datetime | None = None,
        end_time: datetime | None = None,
    ) -> SessionOut:
        event = self._get_owned_event(event_id, owner_id)
        session = self._get_session(event, session_id)

        if room_id is not None:
            if not room_id.strip():
                raise ValidationError(message="room_id cannot be empty")
            session.room_id = self._get_room(event, room_id).id

        new_start = as_utc(start_time or session.start_time)
        new_end = as_utc(end_time or session.end_time)
        if new_end <= new_start:
            raise ValidationError(message="end_time must be after start_time")
        session.start_time = new_start
        session.end_time = new_end

        self.db.commit()
        self.db.refresh(session)
        return SessionOut.model_validate(session)

    def update_session_content(
        self,
        event_id: str,
        session_id: str,
        owner_id: str,
        title: str | None = None,
        description: str | None = None,
    ) -> SessionOut:
        event = self._get_owned_event(event_id, owner_id)
        session = self._get_session(event, session_id)
        if title is not None:
            if not title.strip():
                raise ValidationError(message="title cannot be empty")
            session.title = title.strip()
        if description is not None:
            session.description = description

        self.db.commit()
        self.db.refresh(session)
        return SessionOut.model_validate(session)

    def delete_session(self, event_id: str, session_id: str, owner_id: str) -> None:
        event = self._get_owned_event(event_id, owner_id)
        session = self._get_session(event, session_id)
        self.db.delete(session)
        self.db.commit()

    def list_tags(self, event_id: str, caller_id: str) -> list[TagOut]:
        event = self._get_event(event_id)
        if str(event.owner_id) != str(caller_id) and not self._is_team_member(event, caller_id):
            raise AuthorizationError(message="not allowed to view this event's tags")
        tags = self.db.scalars(select(Tag).where(Tag.event_id == event.id).order_by(Tag.name))
        return [TagOut.model_validate(t) for t in tags]

    # --- team ---

    def _is_team_member(self, event: Event, user_id: str) -> bool:
        uid = parse_uuid(user_id)
        return uid is not None and self.db.get(EventTeamMember, (event.id, uid)) is not None

    def add_team_member_by_email(self, event_id: str, email: str, owner_id: str) -> TeamMemberOut:
        event = self._get_owned_event(event_id, owner_id)
        user = self.db.scalar(select(User).where(User.email == email.strip().lower()))
        if not user:
            raise UserNotFoundError(message="no user with that email")
        if user.id == event.owner_id:
            raise ConflictError(ErrorCode.ALREADY_MEMBER, "the event owner cannot be added as a team member")
        if self.db.get(EventTeamMember, (event.id, user.id)) is not None:
            raise AlreadyMemberError(message="already a team member")

        member = EventTeamMember(event_id=event.id, user_id=user.id)
        self.db.add(member)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise AlreadyMemberError(message="already a team member") from exc

        self.db.refresh(member)
        logger.info("team_member_added", event_id=event_id, user_id=str(user.id))
        return _team_member_out(member)

    def list_team_members(self, event_id: str, caller_id: str) -> list[TeamMemberOut]:
        event = self._get_owned_event(event_id, caller_id)
        members = self.db.scalars(
            select(EventTeamMember)
            .where(EventTeamMember.event_id == event.id)
            .order_by(EventTeamMember.created_at)
        )
        return [_team_member_out(m) for m in members]

    def remove_team_member(self, event_id: str, user_id: str, owner_id: str) -> None:
        event = self._get_owned_event(event_id, owner_id)
        uid = parse_uuid(user_id)
        member = self.db.get(EventTeamMember, (event.id, uid)) if uid else None
        if member is None:
            raise NotFoundError(ErrorCode.TEAM_MEMBER_NOT_FOUND, "team member not found")
        self.db.delete(member)
        self.db.commit()

    # --- invitations ---

    def send_invitations(self, event_id: str, owner_id: str, emails: list[str]) -> tuple[int, list[str]]:
        event = self._get_owned_event(event_id, owner_id)
        inviter = _inviter_name(self.db.get(User, event.owner_id))
        rendered = invitation_email(event.name, inviter, event.event_code, settings.app_base_url)

        sent = 0
        failed: list[str] = []
        for email in emails:
            already = self.db.scalar(
                select(EventInvitation.id).where(
                    EventInvitation.event_id == event.id,
                    EventInvitation.email == email,
                )
            )
            if already:
                continue

            invitation = EventInvitation(event_id=event.id, email=email)
            self.db.add(invitation)
            try:
                self.db.commit()
            except IntegrityError:
                # invited concurrently
                self.db.rollback()
                continue

            try:
                self.mailer.send(email, rendered.subject, rendered.html_body, rendered.text_body)
            except Exception as exc:
                # drop the record so the address can be invited again
                self.db.delete(invitation)
                self.db.commit()
                logger.warning("invitation_send_failed", event_id=event_id, email=email, err=str(exc))
                failed.append(email)
                continue

            sent += 1

        logger.info("invitations_sent", event_id=event_id, sent=sent, failed=len(failed))
        return sent, failed

    def list_invitations(
        self,
        event_id: str,
        caller_id: str,
        search: str,
        params: PaginationParams,
    ) -> tuple[list[InvitationOut], int]:
        event = self._get_owned_event(event_id, caller_id)

        stmt = select(EventInvitation).where(EventInvitation.event_id == event.id)
        search = search.strip()
        if search:
            pattern = f"%{_escape_like(search.lower())}%"
            stmt = stmt.where(EventInvitation.email.ilike(pattern, escape="\\"))

        total = int(self.db.scalar(select(func.count()).select_from(stmt.subquery())) or 0)
        rows = self.db.scalars(
            stmt.order_by(EventInvitation.sent_at.desc(), EventInvitation.email)
            .offset(params.offset)
            .limit(params.limit)
        )
        return [InvitationOut.model_validate(r) for r in rows], total
