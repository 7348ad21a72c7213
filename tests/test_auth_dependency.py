from __future__ import annotations

import pytest
from fastapi.testclient import TestClient
from starlette.requests import Request

from ticketing.api.errors import ApiError
from ticketing.auth.deps import require_auth
from tests.fakes import OWNER_ID, OWNER_TOKEN, FakeVerifier


def _request(authorization: str | None) -> Request:
    headers = [] if authorization is None else [(b"authorization", authorization.encode())]
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


@pytest.mark.parametrize(
    ("header", "message"),
    [
        (None, "missing authorization header"),
        ("Token abc", "invalid authorization format"),
        ("bearer abc", "invalid authorization format"),
        ("Bearer ", "missing token"),
        ("Bearer    ", "missing token"),
        ("Bearer nope", "invalid or expired token"),
    ],
)
def test_require_auth_rejections(header, message):
    with pytest.raises(ApiError) as info:
        require_auth(_request(header), FakeVerifier())

    assert info.value.status_code == 401
    assert info.value.message == message
    assert info.value.headers == {"WWW-Authenticate": "Bearer"}


def test_require_auth_attaches_context():
    verifier = FakeVerifier()
    request = _request(f"Bearer {OWNER_TOKEN}")

    ctx = require_auth(request, verifier)

    assert ctx.user_id == OWNER_ID
    assert request.state.auth is ctx
    assert verifier.seen == [OWNER_TOKEN]


def test_user_id_from_token_reaches_handler(client: TestClient, user_service, verifier):
    verifier.tokens["t-1"] = OWNER_ID

    resp = client.get("/users/me", headers={"Authorization": "Bearer t-1"})

    assert resp.status_code == 200
    assert user_service.calls == [("get_by_id", OWNER_ID)]


def test_missing_header_stops_before_handler(client: TestClient, user_service):
    resp = client.get("/users/me")

    assert resp.status_code == 401
    assert resp.headers["www-authenticate"] == "Bearer"
    assert resp.json() == {
        "data": None,
        "error": {"code": "unauthorized", "message": "missing authorization header"},
    }
    assert user_service.calls == []


def test_auth_runs_before_body_validation(client: TestClient, event_service):
    resp = client.post("/events", json={"bogus": True}, headers={"Authorization": "Basic xyz"})

    assert resp.status_code == 401
    assert resp.json()["error"]["message"] == "invalid authorization format"
    assert event_service.events == {}


def test_every_event_route_requires_auth(client: TestClient, event_service):
    event = event_service.add_event()

    for method, path in [
        ("get", "/events/me"),
        ("get", f"/events/{event.id}"),
        ("get", f"/events/{event.id}/rooms"),
        ("get", f"/events/{event.id}/invitations"),
        ("get", "/attendee/events"),
    ]:
        resp = client.request(method.upper(), path)
        assert resp.status_code == 401, path
