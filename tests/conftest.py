from __future__ import annotations

import os

import pytest
from fastapi.testclient import TestClient

# Ensure config is set before app import
os.environ.setdefault("ENV", "test")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("JWT_SECRET", "test_jwt_secret_32_chars_minimum")
os.environ.setdefault("ACCESS_TOKEN_TTL_SECONDS", "900")
os.environ.setdefault("CORS_ALLOW_ORIGINS", "http://localhost:3000, https://app.example.com/")
os.environ.setdefault("MAILER_PROVIDER", "noop")

from ticketing.api.deps import (  # noqa: E402
    get_attendee_service,
    get_auth_service,
    get_event_service,
    get_mailer,
    get_schedule_fetcher,
    get_user_service,
)
from ticketing.auth.deps import get_token_verifier  # noqa: E402
from ticketing.db import SessionLocal, engine, init_db  # noqa: E402
from ticketing.main import app  # noqa: E402
from ticketing.models import Base  # noqa: E402

from tests.fakes import (  # noqa: E402
    FakeAttendeeService,
    FakeAuthService,
    FakeEventService,
    FakeUserService,
    FakeVerifier,
    RecordingMailer,
)


@pytest.fixture
def client():
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(autouse=True)
def clean_db():
    # Ensure a clean slate for each test
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield


@pytest.fixture
def db_session():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def mailer() -> RecordingMailer:
    recording = RecordingMailer()
    app.dependency_overrides[get_mailer] = lambda: recording
    return recording


@pytest.fixture
def verifier() -> FakeVerifier:
    fake = FakeVerifier()
    app.dependency_overrides[get_token_verifier] = lambda: fake
    return fake


@pytest.fixture
def event_service(verifier) -> FakeEventService:
    fake = FakeEventService()
    app.dependency_overrides[get_event_service] = lambda: fake
    return fake


@pytest.fixture
def attendee_service(event_service) -> FakeAttendeeService:
    fake = FakeAttendeeService(event_service)
    app.dependency_overrides[get_attendee_service] = lambda: fake
    return fake


@pytest.fixture
def user_service(verifier) -> FakeUserService:
    fake = FakeUserService()
    app.dependency_overrides[get_user_service] = lambda: fake
    return fake


@pytest.fixture
def auth_service() -> FakeAuthService:
    fake = FakeAuthService()
    app.dependency_overrides[get_auth_service] = lambda: fake
    return fake


@pytest.fixture
def schedule_fetcher_override():
    def install(fetcher):
        app.dependency_overrides[get_schedule_fetcher] = lambda: fetcher
        return fetcher

    return install
