from __future__ import annotations

from fastapi import APIRouter, Request, status

from ticketing.api.deps import AuthServiceDep, UserServiceDep
from ticketing.api.envelope import Envelope, ok
from ticketing.api.errors import ApiError, service_errors
from ticketing.api.schemas import (
    LoginCodeRequestIn,
    LoginCodeVerifyIn,
    LoginIn,
    SignUpIn,
    StatusOut,
    TokenOut,
    UserOut,
)
from ticketing.services.exceptions import DuplicateEmailError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup", response_model=Envelope[UserOut], status_code=status.HTTP_201_CREATED)
def sign_up(payload: SignUpIn, request: Request, service: AuthServiceDep):
    with service_errors(request):
        try:
            user = service.sign_up(
                email=payload.email,
                password=payload.password,
                name=payload.name,
                last_name=payload.last_name,
                role=payload.role,
            )
        except DuplicateEmailError:
            raise ApiError.bad_request("email already registered") from None
    return ok(user)


@router.post("/login", response_model=Envelope[TokenOut])
def login(payload: LoginIn, request: Request, service: AuthServiceDep):
    with service_errors(request, unauthorized="invalid credentials"):
        token, user = service.login(payload.email, payload.password)
    return ok(TokenOut(token=token, user=user))


@router.post("/login/request", response_model=Envelope[StatusOut])
def request_login_code(payload: LoginCodeRequestIn, request: Request, service: UserServiceDep):
    with service_errors(request):
        service.request_login_code(payload.email)
    return ok(StatusOut(status="code sent"))


@router.post("/login/verify", response_model=Envelope[TokenOut])
def verify_login_code(payload: LoginCodeVerifyIn, request: Request, service: UserServiceDep):
    with service_errors(request, unauthorized="invalid or expired code"):
        token, user = service.verify_login_code(payload.email, payload.code)
    return ok(TokenOut(token=token, user=user))
