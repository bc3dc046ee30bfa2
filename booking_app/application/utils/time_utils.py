from __future__ import annotations

from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo


def add_minutes(moment: datetime, minutes: int) -> datetime:
    return moment + timedelta(minutes=minutes)


def at_time_of_day(day: date, hour: int, minute: int, timezone: ZoneInfo) -> datetime:
    """Return ``day`` at hour:minute local time. Hour 24 means midnight of the next day."""
    if hour == 24:
        return datetime.combine(day + timedelta(days=1), time(0, minute), tzinfo=timezone)
    return datetime.combine(day, time(hour, minute), tzinfo=timezone)


def day_bounds(day: date, timezone: ZoneInfo) -> tuple[datetime, datetime]:
    start = datetime.combine(day, time.min, tzinfo=timezone)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=timezone)
    return start, end


def ranges_overlap(a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime) -> bool:
    """Half-open overlap test: touching intervals do not overlap."""
    return a_start < b_end and a_end > b_start


def is_in_future(moment: datetime, now: datetime) -> bool:
    return moment > now


def meets_min_notice(start: datetime, now: datetime, min_notice_hours: int) -> bool:
    return start >= now + timedelta(hours=min_notice_hours)


def within_booking_window(start: datetime, now: datetime, max_advance_days: int) -> bool:
    return now <= start <= now + timedelta(days=max_advance_days)


def ensure_aware(moment: datetime, timezone: ZoneInfo) -> datetime:
    """Attach ``timezone`` to naive datetimes; aware ones are returned untouched."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone)
    return moment
