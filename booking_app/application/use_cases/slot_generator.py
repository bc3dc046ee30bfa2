from __future__ import annotations

from datetime import date, timedelta

from booking_app.application.utils.time_utils import add_minutes, at_time_of_day
from booking_app.domain.entities.booking_policy import BookingWindowPolicy
from booking_app.domain.entities.service import Service
from booking_app.domain.entities.time_slot import TimeSlot


def generate_candidate_slots(day: date, service: Service, policy: BookingWindowPolicy) -> list[TimeSlot]:
    """Build the full grid of slots for ``service`` inside business hours on ``day``.

    Starts are spaced ``slot_interval_minutes`` apart from the opening hour; a slot
    is kept only if it ends at or before closing. Non-working days yield nothing.
    """
    if not policy.is_working_day(day.weekday()):
        return []

    opening = at_time_of_day(day, policy.business_start_hour, 0, policy.timezone)
    closing = at_time_of_day(day, policy.business_end_hour, 0, policy.timezone)
    step = timedelta(minutes=policy.slot_interval_minutes)

    slots: list[TimeSlot] = []
    current = opening
    while current < closing:
        end = add_minutes(current, service.duration_minutes)
        if end > closing:
            break
        slots.append(TimeSlot(start=current, end=end))
        current += step
    return slots


def fits_business_hours(slot: TimeSlot, policy: BookingWindowPolicy) -> bool:
    """True if the slot starts on a working day and lies within that day's opening hours."""
    local_start = slot.start.astimezone(policy.timezone)
    day = local_start.date()
    if not policy.is_working_day(day.weekday()):
        return False
    opening = at_time_of_day(day, policy.business_start_hour, 0, policy.timezone)
    closing = at_time_of_day(day, policy.business_end_hour, 0, policy.timezone)
    return opening <= slot.start and slot.end <= closing
