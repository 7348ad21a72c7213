from enum import Enum


class ErrorCode(str, Enum):
    INVALID_INPUT = "invalid_input"
    INVALID_CREDENTIALS = "invalid_credentials"
    INVALID_TOKEN = "invalid_token"
    INVALID_LOGIN_CODE = "invalid_login_code"
    FORBIDDEN = "forbidden"
    USER_NOT_FOUND = "user_not_found"
    EVENT_NOT_FOUND = "event_not_found"
    ROOM_NOT_FOUND = "room_not_found"
    SESSION_NOT_FOUND = "session_not_found"
    TEAM_MEMBER_NOT_FOUND = "team_member_not_found"
    DUPLICATE_EMAIL = "duplicate_email"
    ALREADY_MEMBER = "already_member"
    EVENT_CODE_EXHAUSTED = "event_code_exhausted"
    IMPORT_FAILED = "import_failed"
