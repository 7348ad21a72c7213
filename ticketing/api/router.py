from fastapi import APIRouter

from ticketing.api.routes.attendee import router as attendee_router
from ticketing.api.routes.auth import router as auth_router
from ticketing.api.routes.events import router as events_router
from ticketing.api.routes.users import router as users_router

router = APIRouter()
router.include_router(auth_router)
router.include_router(users_router)
router.include_router(events_router)
router.include_router(attendee_router)
