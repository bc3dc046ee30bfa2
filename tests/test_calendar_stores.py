"""
Tests for the calendar store adapters.
"""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from zoneinfo import ZoneInfo

import httpx
import pytest

from booking_app.application.exceptions import NotFoundError, StoreUnavailableError
from booking_app.infrastructure.calendar.google_calendar import GoogleCalendarStore
from booking_app.infrastructure.calendar.json_calendar import JsonCalendarStore
from booking_app.infrastructure.calendar.memory_calendar import MemoryCalendarStore

from conftest import at

METADATA = {"appointmentId": "APT-0000000001-AAAA", "customerEmail": "ana@example.com", "notes": "a=b; c"}


def test_memory_store_conditional_create():
    store = MemoryCalendarStore()
    first = store.create_commitment_if_free("A", at(19, 10), at(19, 11), METADATA)
    assert first is not None
    assert store.create_commitment_if_free("B", at(19, 10, 30), at(19, 11, 30), {}) is None
    assert store.create_commitment_if_free("C", at(19, 11), at(19, 12), {}) is not None


def test_memory_store_conditional_update_ignores_self():
    store = MemoryCalendarStore()
    stored_id = store.create_commitment("A", at(19, 10), at(19, 11), METADATA)
    other = store.create_commitment("B", at(19, 12), at(19, 13), {})
    assert store.update_commitment_time_if_free(stored_id, at(19, 10, 30), at(19, 11, 30), {"status": "RESCHEDULED"})
    assert not store.update_commitment_time_if_free(stored_id, at(19, 12, 30), at(19, 13, 30))
    [moved] = store.find_commitments_by_tag("appointmentId", METADATA["appointmentId"], at(19, 0), at(20, 0))
    assert moved.start == at(19, 10, 30)
    assert moved.metadata["status"] == "RESCHEDULED"
    assert moved.metadata["notes"] == METADATA["notes"]
    assert [i.stored_id for i in store.list_busy_intervals(at(19, 0), at(20, 0))] == [stored_id, other]


def test_memory_store_conditional_writes_honor_padding():
    store = MemoryCalendarStore()
    stored_id = store.create_commitment("A", at(19, 10), at(19, 11), METADATA)
    assert store.create_commitment_if_free("B", at(19, 11), at(19, 12), {}, padding_minutes=15) is None
    other = store.create_commitment_if_free("C", at(19, 11, 15), at(19, 12, 15), {}, padding_minutes=15)
    assert other is not None
    assert not store.update_commitment_time_if_free(stored_id, at(19, 9, 30), at(19, 10, 30), padding_minutes=75)
    assert store.update_commitment_time_if_free(stored_id, at(19, 9, 30), at(19, 10, 30), padding_minutes=15)


def test_memory_store_delete_unknown():
    with pytest.raises(NotFoundError):
        MemoryCalendarStore().delete_commitment("evt_missing")


def test_json_store_persists_commitments():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = str(Path(tmpdir) / "calendar.json")
        store = JsonCalendarStore(data_path=path)
        stored_id = store.create_commitment("Standard Appointment - Ana", at(19, 10), at(19, 11), METADATA)

        reloaded = JsonCalendarStore(data_path=path)
        [commitment] = reloaded.find_commitments_by_tag(
            "appointmentId", METADATA["appointmentId"], at(19, 0), at(20, 0)
        )
        assert commitment.stored_id == stored_id
        assert commitment.metadata == METADATA
        assert commitment.start == at(19, 10)

        reloaded.delete_commitment(stored_id)
        assert JsonCalendarStore(data_path=path).all_commitments() == []


def test_json_store_rejects_corrupted_file():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "calendar.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StoreUnavailableError):
            JsonCalendarStore(data_path=str(path))


def test_json_store_failed_write_leaves_store_unchanged(monkeypatch):
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "calendar.json"
        store = JsonCalendarStore(data_path=str(path))
        stored_id = store.create_commitment("A", at(19, 10), at(19, 11), METADATA)
        before = store.all_commitments()
        on_disk = path.read_text(encoding="utf-8")

        def fail_replace(self, target):
            raise OSError("disk full")

        monkeypatch.setattr(Path, "replace", fail_replace)

        with pytest.raises(StoreUnavailableError):
            store.create_commitment("B", at(19, 13), at(19, 14), {})
        with pytest.raises(StoreUnavailableError):
            store.create_commitment_if_free("C", at(19, 15), at(19, 16), {})
        with pytest.raises(StoreUnavailableError):
            store.update_commitment_time(stored_id, at(19, 12), at(19, 13), {"status": "RESCHEDULED"})
        with pytest.raises(StoreUnavailableError):
            store.delete_commitment(stored_id)

        assert store.all_commitments() == before
        assert [i.start for i in store.list_busy_intervals(at(19, 0), at(20, 0))] == [at(19, 10)]
        assert path.read_text(encoding="utf-8") == on_disk
        assert not path.with_suffix(".json.tmp").exists()


def _google_store(handler) -> GoogleCalendarStore:
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return GoogleCalendarStore(
        calendar_id="team@example.com",
        access_token="token",
        timezone=ZoneInfo("UTC"),
        base_url="https://calendar.test/v3",
        client=client,
    )


def test_google_store_lists_busy_events_across_pages():
    pages = {
        None: {
            "items": [
                {"id": "e1", "start": {"dateTime": "2026-10-19T10:00:00Z"}, "end": {"dateTime": "2026-10-19T10:30:00Z"}},
                {"id": "e2", "status": "cancelled", "start": {"dateTime": "2026-10-19T11:00:00Z"}, "end": {"dateTime": "2026-10-19T12:00:00Z"}},
            ],
            "nextPageToken": "p2",
        },
        "p2": {
            "items": [
                {"id": "e3", "transparency": "transparent", "start": {"dateTime": "2026-10-19T13:00:00Z"}, "end": {"dateTime": "2026-10-19T14:00:00Z"}},
                {"id": "e4", "start": {"date": "2026-10-19"}, "end": {"date": "2026-10-20"}},
            ],
        },
    }
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=pages[request.url.params.get("pageToken")])

    intervals = _google_store(handler).list_busy_intervals(at(19, 0), at(20, 0))

    assert [i.stored_id for i in intervals] == ["e1", "e4"]
    assert intervals[0].start == at(19, 10)
    assert intervals[1].end == at(20, 0)
    assert seen[0].headers["Authorization"] == "Bearer token"
    assert seen[0].url.path == "/v3/calendars/team%40example.com/events"
    assert seen[0].url.params["singleEvents"] == "true"


def test_google_store_creates_event_with_private_properties():
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "evt_42"})

    stored_id = _google_store(handler).create_commitment("Standard", at(19, 10), at(19, 11), METADATA)

    assert stored_id == "evt_42"
    assert captured["method"] == "POST"
    assert captured["body"]["extendedProperties"]["private"] == METADATA
    assert captured["body"]["start"]["dateTime"] == at(19, 10).isoformat()


def test_google_store_finds_by_private_property():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["privateExtendedProperty"] == "appointmentId=APT-0000000001-AAAA"
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "id": "evt_42",
                        "summary": "Standard",
                        "start": {"dateTime": "2026-10-19T10:00:00+00:00"},
                        "end": {"dateTime": "2026-10-19T11:00:00+00:00"},
                        "extendedProperties": {"private": METADATA},
                    }
                ]
            },
        )

    [commitment] = _google_store(handler).find_commitments_by_tag(
        "appointmentId", "APT-0000000001-AAAA", at(19, 0), at(20, 0)
    )
    assert commitment.stored_id == "evt_42"
    assert commitment.metadata == METADATA


def test_google_store_patches_time_and_metadata():
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["method"] = request.method
        captured["path"] = request.url.path
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "evt_42"})

    _google_store(handler).update_commitment_time("evt_42", at(19, 13), at(19, 14), {"status": "RESCHEDULED"})

    assert captured["method"] == "PATCH"
    assert captured["path"].endswith("/events/evt_42")
    assert captured["body"]["extendedProperties"]["private"] == {"status": "RESCHEDULED"}


def test_google_store_missing_event_is_not_found():
    store = _google_store(lambda request: httpx.Response(410))
    with pytest.raises(NotFoundError):
        store.delete_commitment("evt_gone")


def test_google_store_transport_failures_become_store_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(StoreUnavailableError):
        _google_store(handler).list_busy_intervals(at(19, 0), at(20, 0))

    with pytest.raises(StoreUnavailableError):
        _google_store(lambda request: httpx.Response(500)).create_commitment("A", at(19, 10), at(19, 11), {})


def test_google_store_non_json_body_becomes_store_unavailable():
    store = _google_store(lambda request: httpx.Response(200, text="<html>not json</html>"))
    with pytest.raises(StoreUnavailableError):
        store.list_busy_intervals(at(19, 0), at(20, 0))


def test_google_store_requires_credentials():
    with pytest.raises(ValueError):
        GoogleCalendarStore(calendar_id="", access_token="token", timezone=ZoneInfo("UTC"))
