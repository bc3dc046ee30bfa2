from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from booking_app.application.ports.notifier import NotificationPort
from booking_app.domain.entities.reservation import CancellationResult, Reservation


class NotifyCustomerUseCase:
    """Hands finished bookings to the notification sender.

    Runs after the commit; a failed notification is logged and never changes
    the booking outcome.
    """

    def __init__(self, notifier: NotificationPort) -> None:
        self._notifier = notifier
        self._logger = logging.getLogger(__name__)

    def confirmed(self, reservation: Reservation) -> bool:
        return self._send("confirmed", reservation.appointment_id, self._notifier.booking_confirmed, reservation)

    def rescheduled(self, reservation: Reservation) -> bool:
        return self._send("rescheduled", reservation.appointment_id, self._notifier.booking_rescheduled, reservation)

    def cancelled(self, cancellation: CancellationResult) -> bool:
        return self._send("cancelled", cancellation.appointment_id, self._notifier.booking_cancelled, cancellation)

    def _send(
        self,
        event: str,
        appointment_id: str,
        send: Callable[[Any], None],
        payload: Any,
    ) -> bool:
        try:
            send(payload)
            return True
        except Exception as e:
            self._logger.exception(
                "Notification failed",
                extra={"appointment_id": appointment_id, "reason": event, "error": str(e)},
            )
            return False
