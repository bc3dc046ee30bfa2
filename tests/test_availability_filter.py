"""
Tests for the availability filter: notice, booking window and buffered overlap.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, timedelta

from booking_app.application.use_cases.availability_filter import (
    filter_available,
    is_slot_available,
    pad_busy_intervals,
)
from booking_app.application.use_cases.slot_generator import generate_candidate_slots
from booking_app.domain.entities.service import Service
from booking_app.domain.entities.time_slot import BusyInterval, TimeSlot

from conftest import NOW, at

MONDAY = date(2026, 10, 19)
HALF_HOUR = Service(service_id="consultation", name="Initial Consultation", duration_minutes=30)
ONE_HOUR = Service(service_id="standard", name="Standard Appointment", duration_minutes=60)


def _starts(slots: list[TimeSlot]) -> list[str]:
    return [slot.start.strftime("%H:%M") for slot in slots]


def test_no_busy_intervals_keeps_every_candidate(policy):
    candidates = generate_candidate_slots(MONDAY, ONE_HOUR, policy)
    assert filter_available(candidates, [], NOW, policy) == candidates


def test_buffer_widens_busy_interval(policy):
    """A 10:00-10:30 meeting with a 15 minute buffer blocks 09:45-10:45."""
    busy = [BusyInterval(at(19, 10), at(19, 10, 30))]
    candidates = generate_candidate_slots(MONDAY, HALF_HOUR, policy)

    starts = _starts(filter_available(candidates, busy, NOW, policy))

    assert "09:00" in starts
    for blocked in ("09:30", "10:00", "10:30"):
        assert blocked not in starts
    assert "11:00" in starts


def test_buffer_blocks_hour_long_slots_touching_padding(policy):
    busy = [BusyInterval(at(19, 10), at(19, 10, 30))]
    candidates = generate_candidate_slots(MONDAY, ONE_HOUR, policy)

    starts = _starts(filter_available(candidates, busy, NOW, policy))

    assert starts[0] == "11:00"
    assert len(starts) == 11


def test_returned_slots_never_overlap_padded_busy(policy):
    busy = [
        BusyInterval(at(19, 9, 10), at(19, 9, 40)),
        BusyInterval(at(19, 12), at(19, 13, 15)),
        BusyInterval(at(19, 15, 50), at(19, 16, 5)),
    ]
    padded = pad_busy_intervals(busy, policy.buffer_minutes)
    for service in (HALF_HOUR, ONE_HOUR):
        for slot in filter_available(generate_candidate_slots(MONDAY, service, policy), busy, NOW, policy):
            for interval in padded:
                assert not (slot.start < interval.end and slot.end > interval.start)


def test_zero_buffer_allows_back_to_back(policy):
    no_buffer = replace(policy, buffer_minutes=0)
    busy = [BusyInterval(at(19, 10), at(19, 11))]
    starts = _starts(filter_available(generate_candidate_slots(MONDAY, ONE_HOUR, no_buffer), busy, NOW, no_buffer))
    assert "09:00" in starts
    assert "11:00" in starts
    assert "10:30" not in starts


def test_minimum_notice_drops_early_slots(policy):
    now = at(19, 10, 10)
    starts = _starts(filter_available(generate_candidate_slots(MONDAY, ONE_HOUR, policy), [], now, policy))
    # One hour notice from 10:10 means 11:10 is the earliest start.
    assert starts[0] == "11:30"


def test_past_day_has_no_available_slots(policy):
    later = NOW + timedelta(days=7)
    assert filter_available(generate_candidate_slots(MONDAY, ONE_HOUR, policy), [], later, policy) == []


def test_booking_window_limits_far_future(policy):
    far_day = date(2026, 12, 15)  # 60 days after NOW is 2026-12-15 12:00
    starts = _starts(filter_available(generate_candidate_slots(far_day, ONE_HOUR, policy), [], NOW, policy))
    assert starts[-1] == "12:00"
    assert "12:30" not in starts


def test_order_is_preserved(policy):
    candidates = list(reversed(generate_candidate_slots(MONDAY, ONE_HOUR, policy)))
    result = filter_available(candidates, [], NOW, policy)
    assert result == candidates


def test_is_slot_available_uses_same_rule(policy):
    busy = [BusyInterval(at(19, 10), at(19, 10, 30))]
    assert not is_slot_available(TimeSlot(at(19, 10, 30), at(19, 11)), busy, NOW, policy)
    assert is_slot_available(TimeSlot(at(19, 10, 45), at(19, 11, 15)), busy, NOW, policy)
