from __future__ import annotations

from dataclasses import dataclass, field
from zoneinfo import ZoneInfo


@dataclass(frozen=True)
class BookingWindowPolicy:
    business_start_hour: int = 9
    business_end_hour: int = 17
    working_weekdays: frozenset[int] = frozenset({0, 1, 2, 3, 4})  # Monday=0
    slot_interval_minutes: int = 30
    buffer_minutes: int = 15
    min_notice_hours: int = 2
    max_advance_days: int = 60
    timezone: ZoneInfo = field(default_factory=lambda: ZoneInfo("UTC"))

    def __post_init__(self) -> None:
        if not 0 <= self.business_start_hour < self.business_end_hour <= 24:
            raise ValueError("Business hours must satisfy 0 <= start < end <= 24")
        if self.slot_interval_minutes <= 0:
            raise ValueError("slot_interval_minutes must be positive")
        if self.buffer_minutes < 0 or self.min_notice_hours < 0 or self.max_advance_days < 0:
            raise ValueError("buffer, notice and advance window must not be negative")
        if any(day not in range(7) for day in self.working_weekdays):
            raise ValueError("working_weekdays must contain values between 0 and 6")
        # Accept any iterable of weekdays but store an immutable set.
        object.__setattr__(self, "working_weekdays", frozenset(self.working_weekdays))

    def is_working_day(self, weekday: int) -> bool:
        return weekday in self.working_weekdays
