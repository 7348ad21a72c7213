from __future__ import annotations

import uuid

from fastapi.testclient import TestClient

from ticketing.services.exceptions import InternalError, NotFoundError
from tests.fakes import OTHER_TOKEN, OWNER_ID, OWNER_TOKEN

OWNER = {"Authorization": f"Bearer {OWNER_TOKEN}"}
OTHER = {"Authorization": f"Bearer {OTHER_TOKEN}"}


def test_create_event_uses_caller_as_owner(client: TestClient, event_service):
    resp = client.post("/events", json={"name": "  PyCon  "}, headers=OWNER)

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["name"] == "PyCon"
    assert data["owner_id"] == OWNER_ID
    assert len(data["event_code"]) == 4
    assert data["id"] in event_service.events


def test_list_my_events_empty_is_list(client: TestClient, event_service):
    resp = client.get("/events/me", headers=OWNER)

    assert resp.status_code == 200
    assert resp.json() == {"data": [], "error": None}


def test_get_event_is_open_to_any_caller(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.get(f"/events/{event.id}", headers=OTHER)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["event"]["id"] == str(event.id)
    assert data["rooms"] == []
    assert data["sessions"] == []


def test_invalid_event_id_is_bad_request(client: TestClient, event_service):
    resp = client.get("/events/not-a-uuid", headers=OWNER)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "invalid eventID"


def test_update_event_forbidden_for_non_owner(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.patch(f"/events/{event.id}", json={"description": "x"}, headers=OTHER)

    assert resp.status_code == 403
    assert resp.json()["error"] == {"code": "forbidden", "message": "forbidden"}


def test_missing_event_is_404_even_for_non_owner(client: TestClient, event_service):
    resp = client.patch(f"/events/{uuid.uuid4()}", json={"description": "x"}, headers=OTHER)

    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "event not found"


def test_update_event_validates_coordinates(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.patch(
        f"/events/{event.id}",
        json={"location_lat": 91, "location_lng": -181},
        headers=OWNER,
    )

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == (
        "location_lat must be between -90 and 90; location_lng must be between -180 and 180"
    )


def test_update_event_requires_timezone(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.patch(f"/events/{event.id}", json={"date": "2026-05-01T09:00:00"}, headers=OWNER)

    assert resp.status_code == 400
    assert "timezone-aware" in resp.json()["error"]["message"]


def test_delete_event(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.delete(f"/events/{event.id}", headers=OWNER)

    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "deleted"}
    assert event_service.events == {}


def test_import_sessionize_status_mapping(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.post(f"/events/{event.id}/import/sessionize/abc123", headers=OWNER)
    assert resp.status_code == 200
    assert resp.json()["data"] == {"status": "imported successfully"}

    forbidden = client.post(f"/events/{event.id}/import/sessionize/abc123", headers=OTHER)
    assert forbidden.status_code == 403

    event_service.import_error = InternalError(message="sessionize api returned status: 502")
    failed = client.post(f"/events/{event.id}/import/sessionize/abc123", headers=OWNER)
    assert failed.status_code == 500
    assert failed.json()["error"]["message"] == "internal server error"

    missing = client.post(f"/events/{uuid.uuid4()}/import/sessionize/abc123", headers=OWNER)
    assert missing.status_code == 404


def test_import_sessionize_requires_ids(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.post(f"/events/{event.id}/import/sessionize/%20", headers=OWNER)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "missing eventID or sessionizeID"


def test_room_lifecycle(client: TestClient, event_service):
    event = event_service.add_event()

    created = client.post(
        f"/events/{event.id}/rooms",
        json={"name": "Hall A", "capacity": 120},
        headers=OWNER,
    )
    assert created.status_code == 201
    room_id = created.json()["data"]["id"]

    listed = client.get(f"/events/{event.id}/rooms", headers=OWNER)
    assert [r["id"] for r in listed.json()["data"]] == [room_id]

    patched = client.patch(
        f"/events/{event.id}/rooms/{room_id}",
        json={"description": "ground floor"},
        headers=OWNER,
    )
    assert patched.status_code == 200
    assert patched.json()["data"]["capacity"] == 120
    assert patched.json()["data"]["description"] == "ground floor"

    toggled = client.patch(f"/events/{event.id}/rooms/{room_id}/not-bookable", headers=OWNER)
    assert toggled.json()["data"]["not_bookable"] is True
    toggled = client.patch(f"/events/{event.id}/rooms/{room_id}/not-bookable", headers=OWNER)
    assert toggled.json()["data"]["not_bookable"] is False

    deleted = client.delete(f"/events/{event.id}/rooms/{room_id}", headers=OWNER)
    assert deleted.json()["data"] == {"status": "deleted"}

    gone = client.get(f"/events/{event.id}/rooms/{room_id}", headers=OWNER)
    assert gone.status_code == 404
    assert gone.json()["error"]["message"] == "event or room not found"


def test_rooms_are_owner_only(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.get(f"/events/{event.id}/rooms", headers=OTHER)

    assert resp.status_code == 403


def test_update_room_rejects_negative_capacity(client: TestClient, event_service):
    event = event_service.add_event()
    room = event_service.add_room(str(event.id))

    resp = client.patch(f"/events/{event.id}/rooms/{room.id}", json={"capacity": -1}, headers=OWNER)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "capacity must be non-negative"


def test_update_room_invalid_room_id(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.patch(f"/events/{event.id}/rooms/xyz", json={}, headers=OWNER)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "invalid roomID"


def test_session_lifecycle(client: TestClient, event_service):
    event = event_service.add_event()
    room = event_service.add_room(str(event.id))
    other_room = event_service.add_room(str(event.id), name="Hall B")

    created = client.post(
        f"/events/{event.id}/sessions",
        json={
            "room_id": str(room.id),
            "title": "Opening",
            "start_time": "2026-05-01T09:00:00Z",
            "end_time": "2026-05-01T10:00:00Z",
            "tags": ["python", "web"],
        },
        headers=OWNER,
    )
    assert created.status_code == 201
    session_id = created.json()["data"]["id"]
    assert [t["name"] for t in created.json()["data"]["tags"]] == ["python", "web"]

    moved = client.patch(
        f"/events/{event.id}/sessions/{session_id}",
        json={"room_id": str(other_room.id)},
        headers=OWNER,
    )
    assert moved.status_code == 200
    assert moved.json()["data"]["room_id"] == str(other_room.id)

    retitled = client.patch(
        f"/events/{event.id}/sessions/{session_id}/content",
        json={"title": "Welcome"},
        headers=OWNER,
    )
    assert retitled.json()["data"]["title"] == "Welcome"

    tags = client.get(f"/events/{event.id}/tags", headers=OWNER)
    assert [t["name"] for t in tags.json()["data"]] == ["python", "web"]

    deleted = client.delete(f"/events/{event.id}/sessions/{session_id}", headers=OWNER)
    assert deleted.json()["data"] == {"status": "deleted"}


def test_session_time_rules(client: TestClient, event_service):
    event = event_service.add_event()
    room = event_service.add_room(str(event.id))

    backwards = client.post(
        f"/events/{event.id}/sessions",
        json={
            "room_id": str(room.id),
            "title": "Oops",
            "start_time": "2026-05-01T10:00:00Z",
            "end_time": "2026-05-01T09:00:00Z",
        },
        headers=OWNER,
    )
    assert backwards.status_code == 400
    assert backwards.json()["error"]["message"] == "end_time must be after start_time"

    session = event_service.add_session(str(event.id), str(room.id))
    empty_room = client.patch(
        f"/events/{event.id}/sessions/{session.id}",
        json={"room_id": "  "},
        headers=OWNER,
    )
    assert empty_room.status_code == 400
    assert empty_room.json()["error"]["message"] == "room_id cannot be empty"

    empty_title = client.patch(
        f"/events/{event.id}/sessions/{session.id}/content",
        json={"title": ""},
        headers=OWNER,
    )
    assert empty_title.status_code == 400
    assert empty_title.json()["error"]["message"] == "title cannot be empty"


def test_tags_visible_to_team_members_only(client: TestClient, event_service):
    event = event_service.add_event()

    assert client.get(f"/events/{event.id}/tags", headers=OTHER).status_code == 403

    event_service.add_team_member_by_email(str(event.id), "member@example.com", OWNER_ID)
    resp = client.get(f"/events/{event.id}/tags", headers=OTHER)
    assert resp.status_code == 200
    assert resp.json()["data"] == []


def test_team_members(client: TestClient, event_service):
    event = event_service.add_event()

    added = client.post(
        f"/events/{event.id}/team-members",
        json={"email": " Member@Example.com "},
        headers=OWNER,
    )
    assert added.status_code == 201
    member = added.json()["data"]
    assert member["email"] == "member@example.com"

    again = client.post(
        f"/events/{event.id}/team-members",
        json={"email": "member@example.com"},
        headers=OWNER,
    )
    assert again.status_code == 409

    unknown = client.post(
        f"/events/{event.id}/team-members",
        json={"email": "stranger@example.com"},
        headers=OWNER,
    )
    assert unknown.status_code == 404
    assert unknown.json()["error"]["message"] == "no user with that email"

    listed = client.get(f"/events/{event.id}/team-members", headers=OWNER)
    assert [m["user_id"] for m in listed.json()["data"]] == [member["user_id"]]

    removed = client.delete(f"/events/{event.id}/team-members/{member['user_id']}", headers=OWNER)
    assert removed.json()["data"] == {"status": "removed"}

    missing = client.delete(f"/events/{event.id}/team-members/{member['user_id']}", headers=OWNER)
    assert missing.status_code == 404


def test_team_member_email_is_validated(client: TestClient, event_service):
    event = event_service.add_event()

    empty = client.post(f"/events/{event.id}/team-members", json={}, headers=OWNER)
    assert empty.json()["error"]["message"] == "email is required"

    bad = client.post(f"/events/{event.id}/team-members", json={"email": "nope"}, headers=OWNER)
    assert bad.json()["error"]["message"] == "email must be a valid email address"


def test_send_invitations_parses_free_text(client: TestClient, event_service):
    event = event_service.add_event()
    event_service.undeliverable.add("bounce@example.com")

    resp = client.post(
        f"/events/{event.id}/invitations",
        json={"emails": "A@example.com, b@example.com\nnot-an-email a@example.com bounce@example.com"},
        headers=OWNER,
    )

    assert resp.status_code == 200
    assert resp.json()["data"] == {"sent": 2, "failed": ["bounce@example.com"]}


def test_send_invitations_without_valid_emails(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.post(f"/events/{event.id}/invitations", json={"emails": "foo, bar"}, headers=OWNER)

    assert resp.status_code == 400
    assert resp.json()["error"]["message"] == "no valid emails found"


def test_list_invitations_paginates(client: TestClient, event_service):
    event = event_service.add_event()
    emails = [f"guest{i}@example.com" for i in range(10)]
    event_service.send_invitations(str(event.id), OWNER_ID, emails)

    resp = client.get(f"/events/{event.id}/invitations?page=2&page_size=5", headers=OWNER)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert len(data["items"]) == 5
    assert data["pagination"] == {"page": 2, "page_size": 5, "total": 10, "total_pages": 2}


def test_list_invitations_empty(client: TestClient, event_service):
    event = event_service.add_event()

    resp = client.get(f"/events/{event.id}/invitations?page=junk&search=nobody", headers=OWNER)

    assert resp.status_code == 200
    assert resp.json()["data"] == {
        "items": [],
        "pagination": {"page": 1, "page_size": 20, "total": 0, "total_pages": 0},
    }


def test_list_invitations_owner_only(client: TestClient, event_service):
    event = event_service.add_event()

    assert client.get(f"/events/{event.id}/invitations", headers=OTHER).status_code == 403


def test_not_found_message_is_overridden(client: TestClient, event_service, monkeypatch):
    def boom(event_id):
        raise NotFoundError(message="internal detail")

    monkeypatch.setattr(event_service, "get_event", boom)

    resp = client.get(f"/events/{uuid.uuid4()}", headers=OWNER)

    assert resp.status_code == 404
    assert resp.json()["error"]["message"] == "event not found"
