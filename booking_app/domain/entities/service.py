from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Service:
    service_id: str
    name: str
    duration_minutes: int
    color_tag: str | None = None

    def __post_init__(self) -> None:
        if self.duration_minutes <= 0:
            raise ValueError(f"Service {self.service_id!r} must have a positive duration")
