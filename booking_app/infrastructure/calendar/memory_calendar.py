from __future__ import annotations

import logging
import threading
import uuid
from dataclasses import replace
from datetime import datetime, timedelta

from booking_app.application.exceptions import NotFoundError
from booking_app.application.ports.calendar_store import CalendarStorePort
from booking_app.application.utils.time_utils import ranges_overlap
from booking_app.domain.entities.commitment import Commitment
from booking_app.domain.entities.time_slot import BusyInterval


class MemoryCalendarStore(CalendarStorePort):
    """In-process calendar. A single lock serializes every read and write.

    Writes build the next state, hand it to ``_persist`` and only then swap it
    in, so a failed persist leaves the store unchanged.
    """

    supports_conditional_write = True

    def __init__(self, commitments: list[Commitment] | None = None) -> None:
        self._commitments: dict[str, Commitment] = {c.stored_id: c for c in commitments or []}
        self._lock = threading.RLock()
        self._logger = logging.getLogger(__name__)

    def list_busy_intervals(self, day_start: datetime, day_end: datetime) -> list[BusyInterval]:
        with self._lock:
            return [
                BusyInterval(start=c.start, end=c.end, stored_id=c.stored_id)
                for c in sorted(self._commitments.values(), key=lambda c: c.start)
                if ranges_overlap(c.start, c.end, day_start, day_end)
            ]

    def create_commitment(
        self,
        title: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str],
    ) -> str:
        with self._lock:
            stored_id = f"evt_{uuid.uuid4().hex[:12]}"
            commitment = Commitment(
                stored_id=stored_id,
                title=title,
                start=start,
                end=end,
                metadata=dict(metadata),
            )
            self._commit({**self._commitments, stored_id: commitment})
        self._logger.debug("Commitment created", extra={"stored_id": stored_id, "start": start.isoformat()})
        return stored_id

    def create_commitment_if_free(
        self,
        title: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str],
        padding_minutes: int = 0,
    ) -> str | None:
        with self._lock:
            if self._overlapping(start, end, padding_minutes=padding_minutes):
                return None
            return self.create_commitment(title, start, end, metadata)

    def find_commitments_by_tag(
        self,
        tag_key: str,
        tag_value: str,
        search_start: datetime,
        search_end: datetime,
    ) -> list[Commitment]:
        with self._lock:
            return [
                replace(c, metadata=dict(c.metadata))
                for c in sorted(self._commitments.values(), key=lambda c: c.start)
                if c.metadata.get(tag_key) == tag_value and ranges_overlap(c.start, c.end, search_start, search_end)
            ]

    def delete_commitment(self, stored_id: str) -> None:
        with self._lock:
            if stored_id not in self._commitments:
                raise NotFoundError(f"No commitment {stored_id}", resource="commitment", identifier=stored_id)
            remaining = dict(self._commitments)
            del remaining[stored_id]
            self._commit(remaining)
        self._logger.debug("Commitment deleted", extra={"stored_id": stored_id})

    def update_commitment_time(
        self,
        stored_id: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str] | None = None,
    ) -> None:
        with self._lock:
            current = self._commitments.get(stored_id)
            if current is None:
                raise NotFoundError(f"No commitment {stored_id}", resource="commitment", identifier=stored_id)
            merged = {**current.metadata, **(metadata or {})}
            moved = replace(current, start=start, end=end, metadata=merged)
            self._commit({**self._commitments, stored_id: moved})

    def update_commitment_time_if_free(
        self,
        stored_id: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str] | None = None,
        padding_minutes: int = 0,
    ) -> bool:
        with self._lock:
            if self._overlapping(start, end, exclude=stored_id, padding_minutes=padding_minutes):
                return False
            self.update_commitment_time(stored_id, start, end, metadata)
            return True

    def all_commitments(self) -> list[Commitment]:
        with self._lock:
            return sorted(self._commitments.values(), key=lambda c: c.start)

    def _overlapping(
        self,
        start: datetime,
        end: datetime,
        exclude: str | None = None,
        padding_minutes: int = 0,
    ) -> bool:
        pad = timedelta(minutes=padding_minutes)
        return any(
            ranges_overlap(start, end, c.start - pad, c.end + pad)
            for c in self._commitments.values()
            if c.stored_id != exclude
        )

    def _commit(self, commitments: dict[str, Commitment]) -> None:
        self._persist(commitments)
        self._commitments = commitments

    def _persist(self, commitments: dict[str, Commitment]) -> None:
        """Hook for subclasses that keep a durable copy. Called with the lock held."""
