from __future__ import annotations

from abc import ABC, abstractmethod

from booking_app.domain.entities.reservation import CancellationResult, Reservation


class NotificationPort(ABC):
    @abstractmethod
    def booking_confirmed(self, reservation: Reservation) -> None:
        raise NotImplementedError

    @abstractmethod
    def booking_rescheduled(self, reservation: Reservation) -> None:
        raise NotImplementedError

    @abstractmethod
    def booking_cancelled(self, cancellation: CancellationResult) -> None:
        raise NotImplementedError
