from ticketing.services.error_codes import ErrorCode


class ServiceError(Exception):
    default_code = ErrorCode.INVALID_INPUT

    def __init__(self, code: str | ErrorCode | None = None, message: str | None = None) -> None:
        code = code or self.default_code
        self.code = code.value if isinstance(code, ErrorCode) else code
        self.message = message or self.code
        super().__init__(self.message)


class ValidationError(ServiceError):
    pass


class AuthenticationError(ServiceError):
    default_code = ErrorCode.INVALID_CREDENTIALS


class AuthorizationError(ServiceError):
    default_code = ErrorCode.FORBIDDEN


class NotFoundError(ServiceError):
    default_code = ErrorCode.EVENT_NOT_FOUND


class UserNotFoundError(NotFoundError):
    default_code = ErrorCode.USER_NOT_FOUND


class ConflictError(ServiceError):
    pass


class DuplicateEmailError(ConflictError):
    default_code = ErrorCode.DUPLICATE_EMAIL


class AlreadyMemberError(ConflictError):
    default_code = ErrorCode.ALREADY_MEMBER


class InternalError(ServiceError):
    pass
