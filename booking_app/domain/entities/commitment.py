from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Commitment:
    """An entry held by the calendar store, with its free-form tag map."""

    stored_id: str
    title: str
    start: datetime
    end: datetime
    metadata: dict[str, str] = field(default_factory=dict)
