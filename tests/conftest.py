from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from booking_app.application.use_cases.booking import BookingUseCase
from booking_app.application.use_cases.booking_ledger import BookingLedger
from booking_app.domain.entities.booking_policy import BookingWindowPolicy
from booking_app.infrastructure.calendar.memory_calendar import MemoryCalendarStore
from booking_app.infrastructure.catalog.service_catalog_store import ServiceCatalogStore

UTC = ZoneInfo("UTC")

# Friday 2026-10-16 12:00 UTC; the following Monday is 2026-10-19.
NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)


class FixedClock:
    def __init__(self, now: datetime = NOW) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def at(day: int, hour: int, minute: int = 0, month: int = 10) -> datetime:
    return datetime(2026, month, day, hour, minute, tzinfo=UTC)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def policy() -> BookingWindowPolicy:
    return BookingWindowPolicy(
        business_start_hour=9,
        business_end_hour=17,
        working_weekdays=frozenset({0, 1, 2, 3, 4}),
        slot_interval_minutes=30,
        buffer_minutes=15,
        min_notice_hours=1,
        max_advance_days=60,
        timezone=UTC,
    )


@pytest.fixture
def store() -> MemoryCalendarStore:
    return MemoryCalendarStore()


@pytest.fixture
def catalog() -> ServiceCatalogStore:
    return ServiceCatalogStore()


@pytest.fixture
def ledger(store, clock) -> BookingLedger:
    return BookingLedger(store=store, clock=clock)


@pytest.fixture
def use_case(ledger, catalog, policy, clock) -> BookingUseCase:
    return BookingUseCase(ledger=ledger, catalog=catalog, policy=policy, clock=clock)
