from __future__ import annotations

import logging

from booking_app.application.ports.notifier import NotificationPort
from booking_app.domain.entities.reservation import CancellationResult, Reservation


class LoggingNotifier(NotificationPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def booking_confirmed(self, reservation: Reservation) -> None:
        self._logger.info(
            "WOULD_SEND_CONFIRMATION",
            extra={"appointment_id": reservation.appointment_id, "to": reservation.customer_email},
        )

    def booking_rescheduled(self, reservation: Reservation) -> None:
        self._logger.info(
            "WOULD_SEND_RESCHEDULE_NOTICE",
            extra={"appointment_id": reservation.appointment_id, "to": reservation.customer_email},
        )

    def booking_cancelled(self, cancellation: CancellationResult) -> None:
        self._logger.info(
            "WOULD_SEND_CANCELLATION_NOTICE",
            extra={
                "appointment_id": cancellation.appointment_id,
                "to": cancellation.reservation.customer_email,
            },
        )
