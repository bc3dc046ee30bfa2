from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any


class ReservationStatus(str, Enum):
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    RESCHEDULED = "RESCHEDULED"


@dataclass(frozen=True)
class CustomerDetails:
    name: str
    email: str
    phone: str | None = None


@dataclass(frozen=True)
class Reservation:
    appointment_id: str
    customer_name: str
    customer_email: str
    service_id: str
    start: datetime
    end: datetime
    status: ReservationStatus
    created_at: datetime
    customer_phone: str | None = None
    notes: str | None = None
    rescheduled_at: datetime | None = None

    def moved_to(self, start: datetime, end: datetime, rescheduled_at: datetime) -> Reservation:
        return replace(
            self,
            start=start,
            end=end,
            status=ReservationStatus.RESCHEDULED,
            rescheduled_at=rescheduled_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "appointment_id": self.appointment_id,
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "customer_phone": self.customer_phone,
            "service_id": self.service_id,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "notes": self.notes,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "rescheduled_at": self.rescheduled_at.isoformat() if self.rescheduled_at else None,
        }


@dataclass(frozen=True)
class CancellationResult:
    appointment_id: str
    cancelled_at: datetime
    reservation: Reservation

    def to_dict(self) -> dict[str, Any]:
        return {
            "appointment_id": self.appointment_id,
            "cancelled": True,
            "cancelled_at": self.cancelled_at.isoformat(),
            "reservation": self.reservation.to_dict(),
        }
