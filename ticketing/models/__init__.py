from ticketing.models.base import Base
from ticketing.models.event import Event
from ticketing.models.invitation import EventInvitation
from ticketing.models.login_code import LoginCode
from ticketing.models.registration import EventRegistration
from ticketing.models.room import Room
from ticketing.models.session import EventSession, session_speakers, session_tags
from ticketing.models.speaker import Speaker
from ticketing.models.tag import Tag
from ticketing.models.team_member import EventTeamMember
from ticketing.models.user import User, UserRole

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Event",
    "Room",
    "EventSession",
    "Tag",
    "Speaker",
    "EventTeamMember",
    "EventRegistration",
    "EventInvitation",
    "LoginCode",
    "session_tags",
    "session_speakers",
]
