from __future__ import annotations

import logging
from datetime import date, datetime, time
from typing import Any
from urllib.parse import quote
from zoneinfo import ZoneInfo

import httpx

from booking_app.application.exceptions import NotFoundError, StoreUnavailableError
from booking_app.application.ports.calendar_store import CalendarStorePort
from booking_app.domain.entities.commitment import Commitment
from booking_app.domain.entities.time_slot import BusyInterval


class GoogleCalendarStore(CalendarStorePort):
    """Calendar store backed by the Google Calendar v3 REST API.

    Metadata is kept in each event's private extended properties and looked up
    with ``privateExtendedProperty`` queries. Google offers no conditional
    insert, so ``supports_conditional_write`` stays False.
    """

    def __init__(
        self,
        calendar_id: str,
        access_token: str,
        timezone: ZoneInfo,
        base_url: str = "https://www.googleapis.com/calendar/v3",
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        if not calendar_id:
            raise ValueError("GOOGLE_CALENDAR_ID is required for the Google calendar store")
        if not access_token:
            raise ValueError("GOOGLE_CALENDAR_ACCESS_TOKEN is required for the Google calendar store")
        self._calendar_id = calendar_id
        self._timezone = timezone
        self._events_url = f"{base_url.rstrip('/')}/calendars/{quote(calendar_id, safe='')}/events"
        self._client = client or httpx.Client(timeout=timeout)
        self._headers = {"Authorization": f"Bearer {access_token}"}
        self._logger = logging.getLogger(__name__)

    def list_busy_intervals(self, day_start: datetime, day_end: datetime) -> list[BusyInterval]:
        events = self._list_events({"timeMin": day_start.isoformat(), "timeMax": day_end.isoformat()})
        intervals: list[BusyInterval] = []
        for event in events:
            if event.get("transparency") == "transparent":
                continue
            start, end = self._event_times(event)
            intervals.append(BusyInterval(start=start, end=end, stored_id=event["id"]))
        return intervals

    def create_commitment(
        self,
        title: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str],
    ) -> str:
        payload = {
            "summary": title,
            "start": {"dateTime": start.isoformat(), "timeZone": str(self._timezone)},
            "end": {"dateTime": end.isoformat(), "timeZone": str(self._timezone)},
            "extendedProperties": {"private": dict(metadata)},
        }
        data = self._request("POST", self._events_url, json=payload)
        event_id = data.get("id")
        if not event_id:
            raise StoreUnavailableError("Google Calendar returned no event id", {"title": title})
        self._logger.info("Calendar event created", extra={"stored_id": event_id})
        return str(event_id)

    def find_commitments_by_tag(
        self,
        tag_key: str,
        tag_value: str,
        search_start: datetime,
        search_end: datetime,
    ) -> list[Commitment]:
        events = self._list_events(
            {
                "timeMin": search_start.isoformat(),
                "timeMax": search_end.isoformat(),
                "privateExtendedProperty": f"{tag_key}={tag_value}",
            }
        )
        commitments: list[Commitment] = []
        for event in events:
            start, end = self._event_times(event)
            private = (event.get("extendedProperties") or {}).get("private") or {}
            commitments.append(
                Commitment(
                    stored_id=event["id"],
                    title=event.get("summary", ""),
                    start=start,
                    end=end,
                    metadata={str(k): str(v) for k, v in private.items()},
                )
            )
        return commitments

    def delete_commitment(self, stored_id: str) -> None:
        self._request("DELETE", f"{self._events_url}/{stored_id}", stored_id=stored_id)
        self._logger.info("Calendar event deleted", extra={"stored_id": stored_id})

    def update_commitment_time(
        self,
        stored_id: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {
            "start": {"dateTime": start.isoformat(), "timeZone": str(self._timezone)},
            "end": {"dateTime": end.isoformat(), "timeZone": str(self._timezone)},
        }
        if metadata:
            # PATCH merges keys into the existing private properties.
            payload["extendedProperties"] = {"private": dict(metadata)}
        self._request("PATCH", f"{self._events_url}/{stored_id}", json=payload, stored_id=stored_id)
        self._logger.info("Calendar event moved", extra={"stored_id": stored_id})

    def _list_events(self, params: dict[str, str]) -> list[dict[str, Any]]:
        query: dict[str, Any] = {
            **params,
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": 250,
        }
        events: list[dict[str, Any]] = []
        while True:
            data = self._request("GET", self._events_url, params=query)
            events.extend(e for e in data.get("items", []) if e.get("status") != "cancelled")
            page_token = data.get("nextPageToken")
            if not page_token:
                return events
            query["pageToken"] = page_token

    def _event_times(self, event: dict[str, Any]) -> tuple[datetime, datetime]:
        return self._parse_event_time(event["start"]), self._parse_event_time(event["end"])

    def _parse_event_time(self, value: dict[str, str]) -> datetime:
        if "dateTime" in value:
            return datetime.fromisoformat(value["dateTime"].replace("Z", "+00:00"))
        # All-day events block the whole day in the business timezone.
        return datetime.combine(date.fromisoformat(value["date"]), time.min, tzinfo=self._timezone)

    def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
        stored_id: str | None = None,
    ) -> dict[str, Any]:
        try:
            response = self._client.request(method, url, params=params, json=json, headers=self._headers)
            if stored_id and response.status_code in (404, 410):
                raise NotFoundError(f"No calendar event {stored_id}", resource="commitment", identifier=stored_id)
            response.raise_for_status()
            if not response.content:
                return {}
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            self._logger.error(
                "Google Calendar request failed",
                extra={"method": method, "error": str(e)},
            )
            raise StoreUnavailableError(
                "Calendar store request failed",
                {"method": method, "error": str(e)},
            ) from e
