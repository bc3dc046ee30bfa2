from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from booking_app.application.utils.time_utils import (
    meets_min_notice,
    ranges_overlap,
    within_booking_window,
)
from booking_app.domain.entities.booking_policy import BookingWindowPolicy
from booking_app.domain.entities.time_slot import BusyInterval, TimeSlot


def pad_busy_intervals(busy: Iterable[BusyInterval], buffer_minutes: int) -> list[BusyInterval]:
    buffer = timedelta(minutes=buffer_minutes)
    return [BusyInterval(start=interval.start - buffer, end=interval.end + buffer) for interval in busy]


def overlaps_any(slot: TimeSlot, padded: Iterable[BusyInterval]) -> bool:
    return any(ranges_overlap(slot.start, slot.end, interval.start, interval.end) for interval in padded)


def filter_available(
    candidates: Iterable[TimeSlot],
    busy_intervals: Iterable[BusyInterval],
    now: datetime,
    policy: BookingWindowPolicy,
) -> list[TimeSlot]:
    """Drop every candidate that breaks the notice, window or buffered-overlap rules.

    Output keeps the candidates' order. This is the single definition of an
    available slot; commit-time checks call into it too.
    """
    padded = pad_busy_intervals(busy_intervals, policy.buffer_minutes)
    available: list[TimeSlot] = []
    for slot in candidates:
        if not meets_min_notice(slot.start, now, policy.min_notice_hours):
            continue
        if not within_booking_window(slot.start, now, policy.max_advance_days):
            continue
        if overlaps_any(slot, padded):
            continue
        available.append(slot)
    return available


def is_slot_available(
    slot: TimeSlot,
    busy_intervals: Iterable[BusyInterval],
    now: datetime,
    policy: BookingWindowPolicy,
) -> bool:
    return bool(filter_available([slot], busy_intervals, now, policy))
