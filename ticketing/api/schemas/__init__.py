from ticketing.api.schemas.attendee import (
    EventScheduleOut,
    RegisterByCodeIn,
    RegisteredEventOut,
    RegistrationOut,
    ScheduleRoomOut,
)
from ticketing.api.schemas.common import PaginationOut, StatusOut
from ticketing.api.schemas.events import (
    AddTeamMemberIn,
    CreateEventIn,
    CreateRoomIn,
    CreateSessionIn,
    EventDetailOut,
    EventOut,
    InvitationOut,
    InvitationPageOut,
    RoomOut,
    SendInvitationsIn,
    SendInvitationsOut,
    SessionOut,
    TagOut,
    TeamMemberOut,
    UpdateEventIn,
    UpdateRoomIn,
    UpdateSessionContentIn,
    UpdateSessionScheduleIn,
)
from ticketing.api.schemas.users import (
    LoginCodeRequestIn,
    LoginCodeVerifyIn,
    LoginIn,
    SignUpIn,
    TokenOut,
    UpdateUserIn,
    UserOut,
)

__all__ = [
    "AddTeamMemberIn",
    "CreateEventIn",
    "CreateRoomIn",
    "CreateSessionIn",
    "EventDetailOut",
    "EventOut",
    "EventScheduleOut",
    "InvitationOut",
    "InvitationPageOut",
    "LoginCodeRequestIn",
    "LoginCodeVerifyIn",
    "LoginIn",
    "PaginationOut",
    "RegisterByCodeIn",
    "RegisteredEventOut",
    "RegistrationOut",
    "RoomOut",
    "ScheduleRoomOut",
    "SendInvitationsIn",
    "SendInvitationsOut",
    "SessionOut",
    "SignUpIn",
    "StatusOut",
    "TagOut",
    "TeamMemberOut",
    "TokenOut",
    "UpdateEventIn",
    "UpdateRoomIn",
    "UpdateSessionContentIn",
    "UpdateSessionScheduleIn",
    "UpdateUserIn",
    "UserOut",
]
