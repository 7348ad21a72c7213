from __future__ import annotations

import uuid

import pytest
from fastapi.testclient import TestClient

from tests.fakes import OTHER_ID, OTHER_TOKEN, OWNER_TOKEN

OWNER = {"Authorization": f"Bearer {OWNER_TOKEN}"}
ATTENDEE = {"Authorization": f"Bearer {OTHER_TOKEN}"}


@pytest.mark.parametrize(
    ("code", "message"),
    [
        ("", "event_code is required"),
        ("ab", "event_code must be exactly 4 characters"),
        ("ab@d", "event_code must contain only lowercase letters and digits"),
        ("a-b", "event_code must be exactly 4 characters; event_code must contain only lowercase letters and digits"),
    ],
)
def test_register_by_code_validation(client: TestClient, attendee_service, code, message):
    resp = client.post("/attendee/registrations", json={"event_code": code}, headers=ATTENDEE)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == message


def test_register_by_code_is_idempotent(client: TestClient, attendee_service, event_service):
    event = event_service.add_event()

    first = client.post(
        "/attendee/registrations",
        json={"event_code": f" {event.event_code.upper()} "},
        headers=ATTENDEE,
    )
    assert first.status_code == 201
    reg = first.json()["data"]
    assert reg["event_id"] == str(event.id)
    assert reg["user_id"] == OTHER_ID

    second = client.post("/attendee/registrations", json={"event_code": event.event_code}, headers=ATTENDEE)
    assert second.status_code == 200
    assert second.json()["data"]["id"] == reg["id"]


def test_register_by_unknown_code(client: TestClient, attendee_service):
    resp = client.post("/attendee/registrations", json={"event_code": "zz99"}, headers=ATTENDEE)

    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "event not found"


def test_register_by_event_id(client: TestClient, attendee_service, event_service):
    event = event_service.add_event()

    first = client.post(f"/attendee/events/{event.id}/registrations", headers=ATTENDEE)
    second = client.post(f"/attendee/events/{event.id}/registrations", headers=ATTENDEE)

    assert first.status_code == 201
    assert second.status_code == 200
    assert first.json()["data"]["id"] == second.json()["data"]["id"]

    missing = client.post(f"/attendee/events/{uuid.uuid4()}/registrations", headers=ATTENDEE)
    assert missing.status_code == 404

    bad = client.post("/attendee/events/abc/registrations", headers=ATTENDEE)
    assert bad.status_code == 400
    assert bad.json()["error"]["message"] == "invalid eventID"


def test_register_rejects_unknown_fields(client: TestClient, attendee_service):
    resp = client.post(
        "/attendee/registrations",
        json={"event_code": "abc1", "seat": "12A"},
        headers=ATTENDEE,
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == 'unknown field "seat"'


def test_list_registered_events(client: TestClient, attendee_service, event_service):
    empty = client.get("/attendee/events", headers=ATTENDEE)
    assert empty.json() == {"data": [], "error": None}

    event = event_service.add_event()
    attendee_service.register_for_event(str(event.id), OTHER_ID)

    resp = client.get("/attendee/events", headers=ATTENDEE)
    items = resp.json()["data"]
    assert len(items) == 1
    assert items[0]["event"]["id"] == str(event.id)
    assert items[0]["registration"]["user_id"] == OTHER_ID


def test_schedule_requires_registration(client: TestClient, attendee_service, event_service):
    event = event_service.add_event()

    forbidden = client.get(f"/attendee/events/{event.id}/schedule", headers=ATTENDEE)
    assert forbidden.status_code == 403

    missing = client.get(f"/attendee/events/{uuid.uuid4()}/schedule", headers=ATTENDEE)
    assert missing.status_code == 404
    assert missing.json()["error"]["message"] == "event not found"

    owner_view = client.get(f"/attendee/events/{event.id}/schedule", headers=OWNER)
    assert owner_view.status_code == 200


def test_schedule_hides_non_bookable_rooms(client: TestClient, attendee_service, event_service):
    event = event_service.add_event()
    hall = event_service.add_room(str(event.id), name="Hall")
    event_service.add_room(str(event.id), name="Backstage", not_bookable=True)
    session = event_service.add_session(str(event.id), str(hall.id))
    attendee_service.register_for_event(str(event.id), OTHER_ID)

    resp = client.get(f"/attendee/events/{event.id}/schedule", headers=ATTENDEE)

    assert resp.status_code == 200
    rooms = resp.json()["data"]["rooms"]
    assert [r["room"]["name"] for r in rooms] == ["Hall"]
    assert [s["id"] for s in rooms[0]["sessions"]] == [str(session.id)]
