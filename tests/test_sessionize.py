from __future__ import annotations

import httpx
import pytest

from ticketing.services.exceptions import InternalError
from ticketing.services.sessionize import HttpScheduleFetcher, SessionizeSchedule


def _fetcher(handler) -> HttpScheduleFetcher:
    return HttpScheduleFetcher(base_url="https://sessionize.test/api/v2/", transport=httpx.MockTransport(handler))


def test_fetch_parses_view_all():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(str(request.url))
        return httpx.Response(
            200,
            json={
                "rooms": [{"id": 3, "name": "Hall C", "sort": 1}],
                "sessions": [
                    {
                        "id": "9",
                        "title": "Talk",
                        "startsAt": "2026-05-01T09:00:00",
                        "endsAt": "2026-05-01T09:30:00",
                        "roomId": 3,
                        "categoryItems": [1, 2, 1],
                    }
                ],
                "categories": [{"id": 5, "items": [{"id": 1, "name": "AI"}, {"id": 2, "name": ""}]}],
            },
        )

    schedule = _fetcher(handler).fetch("xyz")

    assert seen == ["https://sessionize.test/api/v2/xyz/view/All"]
    assert [r.name for r in schedule.rooms] == ["Hall C"]
    assert schedule.speakers == []
    assert schedule.tag_names_for(schedule.sessions[0]) == ["AI"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(404, json={"message": "not found"}),
        httpx.Response(200, content=b"<html>"),
        httpx.Response(200, json={"sessions": [{"id": "1"}]}),
    ],
)
def test_fetch_failures_are_internal_errors(response):
    with pytest.raises(InternalError) as info:
        _fetcher(lambda request: response).fetch("xyz")

    assert info.value.code == "import_failed"


def test_fetch_transport_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(InternalError) as info:
        _fetcher(handler).fetch("xyz")

    assert "failed to fetch from sessionize" in info.value.message


def test_schedule_ignores_unknown_keys():
    schedule = SessionizeSchedule.model_validate({"rooms": [], "questions": [{"id": 1}]})

    assert schedule.category_names() == {}


def test_unscheduled_session_parses_without_times():
    schedule = SessionizeSchedule.model_validate(
        {"sessions": [{"id": "1", "title": "Backlog", "startsAt": None, "endsAt": None, "roomId": None}]}
    )

    session = schedule.sessions[0]
    assert (session.starts_at, session.ends_at, session.room_id) == (None, None, None)
