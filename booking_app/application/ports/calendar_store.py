from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from booking_app.domain.entities.commitment import Commitment
from booking_app.domain.entities.time_slot import BusyInterval


class CalendarStorePort(ABC):
    """Generic interval store holding every commitment of the shared calendar.

    Implementations raise ``StoreUnavailableError`` when the store itself cannot
    be reached. Metadata maps must round-trip exactly.
    """

    # Stores that can check-and-write atomically set this to True and
    # implement the ``*_if_free`` methods below.
    supports_conditional_write: bool = False

    @abstractmethod
    def list_busy_intervals(self, day_start: datetime, day_end: datetime) -> list[BusyInterval]:
        """Return every commitment overlapping [day_start, day_end)."""
        raise NotImplementedError

    @abstractmethod
    def create_commitment(
        self,
        title: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str],
    ) -> str:
        """Create a commitment. Returns the store's id for it."""
        raise NotImplementedError

    @abstractmethod
    def find_commitments_by_tag(
        self,
        tag_key: str,
        tag_value: str,
        search_start: datetime,
        search_end: datetime,
    ) -> list[Commitment]:
        """Find commitments overlapping the search range whose metadata has tag_key == tag_value."""
        raise NotImplementedError

    @abstractmethod
    def delete_commitment(self, stored_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def update_commitment_time(
        self,
        stored_id: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str] | None = None,
    ) -> None:
        """Move a commitment. Given metadata keys are merged into the stored map."""
        raise NotImplementedError

    def create_commitment_if_free(
        self,
        title: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str],
        padding_minutes: int = 0,
    ) -> str | None:
        """Atomically create the commitment unless [start, end) overlaps another.

        Other commitments are widened by ``padding_minutes`` on both ends before
        the overlap test. Returns the stored id, or None when the interval is taken.
        """
        raise NotImplementedError

    def update_commitment_time_if_free(
        self,
        stored_id: str,
        start: datetime,
        end: datetime,
        metadata: dict[str, str] | None = None,
        padding_minutes: int = 0,
    ) -> bool:
        """Atomically move the commitment unless [start, end) overlaps any other padded one."""
        raise NotImplementedError
