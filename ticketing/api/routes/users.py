from __future__ import annotations

from fastapi import APIRouter, Request

from ticketing.api.deps import UserServiceDep
from ticketing.api.envelope import Envelope, ok
from ticketing.api.errors import service_errors
from ticketing.api.schemas import UpdateUserIn, UserOut
from ticketing.auth.deps import Caller

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=Envelope[UserOut])
def get_me(caller: Caller, request: Request, service: UserServiceDep):
    with service_errors(request, not_found="user not found"):
        user = service.get_by_id(caller.user_id)
    return ok(user)


@router.patch("/me", response_model=Envelope[UserOut])
def update_me(caller: Caller, payload: UpdateUserIn, request: Request, service: UserServiceDep):
    with service_errors(request, not_found="user not found"):
        user = service.update(caller.user_id, name=payload.name, last_name=payload.last_name)
    return ok(user)
